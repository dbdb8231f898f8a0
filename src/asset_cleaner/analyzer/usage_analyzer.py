"""Usage analyzer - counts identifier and literal-path occurrences in code files."""
import re
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import ScanConfig
from .reference_tracker import ReferenceTracker, path_key

# Characters that may continue a Dart identifier
_IDENT_CHARS = r"A-Za-z0-9_$"

ProgressCallback = Callable[[int, int], None]


def identifier_pattern(identifier: str) -> re.Pattern:
    """Match the full dotted identifier, never as part of a longer token.

    ``Images.logo`` matches in ``Image.asset(Images.logo)`` but not in
    ``ImagesV2.logo`` or ``Images.logo2``.
    """
    return re.compile(r"(?<![" + _IDENT_CHARS + r"])" + re.escape(identifier) + r"(?![" + _IDENT_CHARS + r"])")


def mask_spans(content: str, spans: Sequence[Tuple[int, int]]) -> str:
    """Blank out [start, end] ranges, keeping every other offset unchanged."""
    if not spans:
        return content
    pieces = []
    cursor = 0
    for start, end in sorted(spans):
        start = max(start, cursor)
        if start > end:
            continue
        pieces.append(content[cursor:start])
        pieces.append(" " * (end + 1 - start))
        cursor = end + 1
    pieces.append(content[cursor:])
    return "".join(pieces)


class UsageAnalyzer:
    """Scan code files and record usage in a ReferenceTracker."""

    def __init__(self, project_root: str | Path, scan_config: ScanConfig):
        """Initialize the analyzer.

        Args:
            project_root: Root directory of the Flutter project
            scan_config: Group names, asset prefix and progress cadence
        """
        self.project_root = Path(project_root).resolve()
        self.scan_config = scan_config
        self.skipped_files: List[Tuple[str, str]] = []

    def analyze_usage(self, code_files: List[str], tracker: ReferenceTracker,
                      definition_spans: Optional[Dict[str, List[Tuple[int, int]]]] = None,
                      progress: Optional[ProgressCallback] = None):
        """Count every identifier and literal asset path across code_files.

        Args:
            code_files: Relative paths of the files to scan
            tracker: Seeded tracker, mutated in place
            definition_spans: file -> declaration block ranges, excluded only with ignore_definitions
            progress: Called with (processed, total) every few files and at the end
        """
        if not self.scan_config.ignore_definitions:
            definition_spans = None
        definition_spans = definition_spans or {}

        prefixes = self.scan_config.identifier_prefixes
        asset_prefix = self.scan_config.asset_prefix

        identifiers = tracker.identifiers
        identifier_regexes = {identifier: identifier_pattern(identifier) for identifier in identifiers}
        group_names = {identifier: identifier.split(".", 1)[0] for identifier in identifiers}
        literal_paths = tracker.literal_paths

        total = len(code_files)
        every = max(1, self.scan_config.progress_every)

        for processed, code_file in enumerate(code_files, start=1):
            content = self._read(code_file)

            if content is not None:
                content = mask_spans(content, definition_spans.get(code_file, ()))

                if any(prefix in content for prefix in prefixes):
                    for identifier in identifiers:
                        if group_names[identifier] not in content:
                            continue
                        count = len(identifier_regexes[identifier].findall(content))
                        tracker.record_usage(identifier, count, code_file)

                if asset_prefix in content:
                    for asset_path in literal_paths:
                        if asset_path not in content:
                            continue
                        tracker.record_usage(path_key(asset_path), content.count(asset_path), code_file)

            if progress is not None and (processed % every == 0 or processed == total):
                progress(processed, total)

    def _read(self, code_file: str) -> Optional[str]:
        try:
            return (self.project_root / code_file).read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            self.skipped_files.append((code_file, str(e)))
            return None
