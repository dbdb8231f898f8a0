"""Asset reference resolution pipeline.

Phases:
1. Indexing (asset files, code files)
2. Constants (definition parsing, alias resolution)
3. References (usage analysis, classification)
"""
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Set, Tuple

from ..config import ScanConfig
from .constant_parser import ConstantDefinitionParser
from .indexer import FileIndexer
from .reference_tracker import AssetReference, ReferenceTracker
from .resolver import AliasResolver, MissingAsset
from .usage_analyzer import UsageAnalyzer


class ProgressReporter(Protocol):
    """Display hooks; the engine itself never prints."""

    def phase(self, label: str, total: int, unit: str) -> None: ...

    def advance(self, label: str, completed: int) -> None: ...


@dataclass
class ScanResult:
    """Everything the report, script and deletion steps need."""
    project_root: Path
    asset_files: List[str]
    code_files: List[str]
    file_sizes: Dict[str, int]
    identifier_table: Dict[str, str]
    reverse_index: Dict[str, Set[str]]
    references: Dict[str, AssetReference]
    used: Set[str]
    unused: Set[str]
    missing: List[MissingAsset] = field(default_factory=list)
    dangling_aliases: List[Tuple[str, str]] = field(default_factory=list)
    skipped_files: List[Tuple[str, str]] = field(default_factory=list)
    definition_files: List[str] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def used_bytes(self) -> int:
        return sum(self.file_sizes.get(path, 0) for path in self.used)

    @property
    def unused_bytes(self) -> int:
        return sum(self.file_sizes.get(path, 0) for path in self.unused)

    @property
    def total_bytes(self) -> int:
        return self.used_bytes + self.unused_bytes

    @property
    def reclaimable_bytes(self) -> int:
        return self.unused_bytes

    def identifiers_for(self, asset_path: str) -> List[str]:
        return sorted(self.reverse_index.get(asset_path, ()))


def analyze_project(project_root: str | Path, scan_config: ScanConfig,
                    progress: Optional[ProgressReporter] = None) -> ScanResult:
    """Run indexing, constant resolution and usage analysis for a project.

    Args:
        project_root: Root directory of the Flutter project
        scan_config: Fixed scan configuration
        progress: Optional display hooks

    Returns:
        ScanResult with the used/unused partition and diagnostics
    """
    start_time = time.time()
    project_root = Path(project_root).resolve()

    # --- PHASE 1: INDEXING ---
    indexer = FileIndexer(project_root, scan_config)
    asset_files = indexer.scan_asset_files()
    if progress:
        progress.phase("Indexing assets", len(asset_files), "files")
        progress.advance("Indexing assets", len(asset_files))

    code_files = indexer.scan_code_files()
    if progress:
        progress.phase("Indexing code", len(code_files), "files")
        progress.advance("Indexing code", len(code_files))

    file_sizes = {path: indexer.file_size(path) for path in asset_files}

    # --- PHASE 2: CONSTANTS ---
    parser = ConstantDefinitionParser(project_root, scan_config)
    parsed = parser.parse(code_files)
    resolution = AliasResolver().resolve(parsed.direct, parsed.aliases)
    if progress:
        total_ids = len(resolution.identifier_table)
        progress.phase("Parsing constants", total_ids, "identifiers")
        progress.advance("Parsing constants", total_ids)

    # --- PHASE 3: REFERENCES ---
    tracker = ReferenceTracker()
    tracker.seed(asset_files, resolution.reverse_index, file_sizes)

    analyzer = UsageAnalyzer(project_root, scan_config)
    on_progress = None
    if progress:
        progress.phase("Scanning references", len(code_files), "files")
        on_progress = lambda done, _total: progress.advance("Scanning references", done)

    analyzer.analyze_usage(code_files, tracker, parsed.block_spans, progress=on_progress)
    classification = tracker.classify()

    missing = AliasResolver.find_missing(
        resolution.identifier_table,
        lambda asset_path: (project_root / asset_path).is_file(),
    )

    return ScanResult(
        project_root=project_root,
        asset_files=asset_files,
        code_files=code_files,
        file_sizes=file_sizes,
        identifier_table=resolution.identifier_table,
        reverse_index=resolution.reverse_index,
        references=tracker.references,
        used=classification.used,
        unused=classification.unused,
        missing=missing,
        dangling_aliases=resolution.dangling,
        skipped_files=indexer.errors + parsed.skipped_files + analyzer.skipped_files,
        definition_files=parsed.definition_files,
        elapsed=time.time() - start_time,
    )
