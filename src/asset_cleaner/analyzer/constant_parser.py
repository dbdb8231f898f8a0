"""Asset constant definition parser.

Finds the Dart classes that hold asset paths and extracts two kinds of
single-line declarations from them:

- direct:  ``static const String logo = 'assets/icons/logo.svg';``
- alias:   ``static const String logo = AppIcons.logo;``

This is a tagged scan, not a Dart parser. A class body is located by its
``class Name`` header and brace depth; braces inside quoted strings and
``//`` or ``/* */`` comments are not counted. Fields are matched line-shaped
inside that extent. Multi-line literals, string concatenation and
interpolation are not recognized.
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..config import ScanConfig


@dataclass
class DefinitionParseResult:
    """Extraction output for all definition files."""
    direct: Dict[str, str] = field(default_factory=dict)      # 'AppIcons.logo' -> 'assets/icons/logo.svg'
    aliases: Dict[str, str] = field(default_factory=dict)     # 'AppAssets.logo' -> 'AppIcons.logo'
    definition_files: List[str] = field(default_factory=list)
    block_spans: Dict[str, List[Tuple[int, int]]] = field(default_factory=dict)  # file -> [(start, end)]
    skipped_files: List[Tuple[str, str]] = field(default_factory=list)


class ConstantDefinitionParser:
    """Extract identifier -> path and alias -> identifier mappings."""

    def __init__(self, project_root: str | Path, scan_config: ScanConfig):
        """Initialize the parser.

        Args:
            project_root: Root directory of the Flutter project
            scan_config: Group names, asset prefix and declaration keyword
        """
        self.project_root = Path(project_root).resolve()
        self.scan_config = scan_config

        keyword = re.escape(scan_config.declaration_keyword)
        self._markers = [f"{scan_config.declaration_keyword} {group}" for group in scan_config.all_groups]
        self._headers = {
            group: re.compile(r'\b' + keyword + r'\s+' + re.escape(group) + r'\b[^{]*\{')
            for group in scan_config.all_groups
        }

        self._field_pattern = re.compile(
            r"""static\s+const\s+String\s+(\w+)[ \t]*=[ \t]*(['"])([^'"\r\n]+)\2[ \t]*;"""
        )
        direct_alternatives = "|".join(re.escape(group) for group in scan_config.direct_groups)
        self._alias_pattern = re.compile(
            r"static\s+const\s+String\s+(\w+)[ \t]*=[ \t]*(" + direct_alternatives + r")\.(\w+)[ \t]*;"
        )

    def read_text(self, relative_path: str) -> str:
        return (self.project_root / relative_path).read_text(encoding="utf-8", errors="ignore")

    def find_definition_files(self, code_files: List[str],
                              result: Optional[DefinitionParseResult] = None) -> List[str]:
        """Narrow code files to those that declare at least one known group.

        Textual containment of ``class <Group>`` only, no parsing.
        """
        definition_files = []

        for relative_path in code_files:
            if not relative_path.endswith(self.scan_config.definition_ext):
                continue
            try:
                content = self.read_text(relative_path)
            except OSError as e:
                if result is not None:
                    result.skipped_files.append((relative_path, str(e)))
                continue

            if any(marker in content for marker in self._markers):
                definition_files.append(relative_path)

        return definition_files

    def parse(self, code_files: List[str]) -> DefinitionParseResult:
        """Parse every definition file among code_files.

        Files are processed in list order; a later file overwrites an earlier
        one when both declare the same identifier.

        Returns:
            DefinitionParseResult with direct and alias maps
        """
        result = DefinitionParseResult()
        result.definition_files = self.find_definition_files(code_files, result)

        for relative_path in result.definition_files:
            try:
                content = self.read_text(relative_path)
            except OSError as e:
                result.skipped_files.append((relative_path, str(e)))
                continue

            direct, aliases, spans = self.parse_content(content)
            result.direct.update(direct)
            result.aliases.update(aliases)
            if spans:
                result.block_spans[relative_path] = spans

        return result

    def parse_content(self, content: str) -> Tuple[Dict[str, str], Dict[str, str], List[Tuple[int, int]]]:
        """Extract direct entries, alias entries and block extents from one file's text."""
        direct: Dict[str, str] = {}
        aliases: Dict[str, str] = {}
        spans: List[Tuple[int, int]] = []

        for group in self.scan_config.direct_groups:
            block = self.find_block(content, group)
            if block is None:
                continue
            start, body_start, end = block
            spans.append((start, end))

            for match in self._field_pattern.finditer(content, body_start, end):
                field_name, asset_path = match.group(1), match.group(3)
                if asset_path.startswith(self.scan_config.asset_prefix):
                    direct[f"{group}.{field_name}"] = asset_path

        for group in self.scan_config.alias_groups:
            block = self.find_block(content, group)
            if block is None:
                continue
            start, body_start, end = block
            spans.append((start, end))

            for match in self._alias_pattern.finditer(content, body_start, end):
                alias_name, target_group, target_field = match.groups()
                aliases[f"{group}.{alias_name}"] = f"{target_group}.{target_field}"

        return direct, aliases, sorted(spans)

    def find_block(self, content: str, group: str) -> Optional[Tuple[int, int, int]]:
        """Locate the first ``class <group> ... { ... }`` block.

        Returns:
            (header start, body start, index of the closing brace), or None if
            the class is absent or its braces never balance
        """
        header = self._headers.get(group)
        if header is None:
            return None

        match = header.search(content)
        if match is None:
            return None

        body_start = match.end()
        depth = 1
        quote = None
        index = body_start
        length = len(content)

        while index < length:
            char = content[index]
            if quote is not None:
                if char == "\\":
                    index += 2
                    continue
                if char == quote:
                    quote = None
            elif char in "'\"":
                quote = char
            elif content.startswith("//", index):
                newline = content.find("\n", index)
                if newline == -1:
                    return None
                index = newline
                continue
            elif content.startswith("/*", index):
                close = content.find("*/", index + 2)
                if close == -1:
                    return None
                index = close + 2
                continue
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return match.start(), body_start, index
            index += 1

        return None
