"""Filesystem indexer - discovers asset files and code files."""
import os
from pathlib import Path
from typing import Iterable, List, Set, Tuple

from ..config import ScanConfig


class FileIndexer:
    """Walk configured roots and list files by extension allow-list.

    All returned paths are relative to the project root and use forward
    slashes, e.g. ``assets/icons/logo.svg``.
    """

    def __init__(self, project_root: str | Path, scan_config: ScanConfig):
        """Initialize the indexer.

        Args:
            project_root: Root directory of the Flutter project
            scan_config: Directory and extension configuration
        """
        self.project_root = Path(project_root).resolve()
        self.scan_config = scan_config
        self.errors: List[Tuple[str, str]] = []  # (path, error message)
        self._ignore_patterns = [
            tuple(part for part in entry.replace("\\", "/").split("/") if part)
            for entry in scan_config.ignore_dirs
        ]

    def scan_asset_files(self) -> List[str]:
        """List asset files under the asset roots. The ignore-set is not applied."""
        return self._scan(self.scan_config.asset_dirs, self.scan_config.asset_exts,
                          apply_ignore=False)

    def scan_code_files(self) -> List[str]:
        """List source, manifest and documentation files under the code roots."""
        return self._scan(self.scan_config.code_roots, self.scan_config.code_exts,
                          apply_ignore=True)

    def file_size(self, relative_path: str) -> int:
        """Size in bytes of an indexed file, 0 if it cannot be stat'ed."""
        try:
            return (self.project_root / relative_path).stat().st_size
        except OSError as e:
            self.errors.append((relative_path, str(e)))
            return 0

    def is_ignored(self, relative_path: str) -> bool:
        """Check whether any directory segment run of the path is in the ignore-set.

        ``build`` matches ``lib/build/x.dart`` but not ``lib/buildings/x.dart``;
        ``ios/Pods`` matches only the consecutive segments ``ios`` / ``Pods``.
        """
        dir_parts = relative_path.split("/")[:-1]
        for pattern in self._ignore_patterns:
            if not pattern:
                continue
            width = len(pattern)
            for start in range(len(dir_parts) - width + 1):
                if tuple(dir_parts[start:start + width]) == pattern:
                    return True
        return False

    def _scan(self, roots: Iterable[str], extensions: Iterable[str], apply_ignore: bool) -> List[str]:
        found: Set[str] = set()
        allowed = {ext.lower() for ext in extensions}

        for root in roots:
            root_path = self.project_root / root
            if not root_path.is_dir():
                continue

            for relative_path in self._walk(root_path):
                if Path(relative_path).suffix.lower() not in allowed:
                    continue
                if apply_ignore and self.is_ignored(relative_path):
                    continue
                found.add(relative_path)

        return sorted(found)

    def _walk(self, root_path: Path):
        """Yield regular files below root_path, never following symlinks."""
        def on_error(error: OSError):
            # Unreadable directory: record and keep walking siblings
            self.errors.append((str(error.filename), error.strerror or str(error)))

        for dirpath, dirnames, filenames in os.walk(root_path, onerror=on_error, followlinks=False):
            dirnames.sort()
            current = Path(dirpath)
            for filename in filenames:
                file_path = current / filename
                try:
                    if file_path.is_symlink() or not file_path.is_file():
                        continue
                except OSError as e:
                    self.errors.append((str(file_path), str(e)))
                    continue
                yield file_path.relative_to(self.project_root).as_posix()
