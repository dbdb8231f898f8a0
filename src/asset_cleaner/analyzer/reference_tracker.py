"""Reference tracker - usage counts per identifier and per literal asset path."""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

# Literal-path usage keys share the mapping with identifiers
PATH_KEY_PREFIX = "PATH::"


def path_key(asset_path: str) -> str:
    return f"{PATH_KEY_PREFIX}{asset_path}"


@dataclass
class AssetReference:
    """Usage record for one usage key (an identifier or a literal path)."""
    key: str
    asset_path: str
    size_bytes: int = 0
    occurrence_count: int = 0
    referenced_in_files: Set[str] = field(default_factory=set)

    @property
    def is_literal(self) -> bool:
        return self.key.startswith(PATH_KEY_PREFIX)

    @property
    def is_used(self) -> bool:
        return self.occurrence_count > 0


@dataclass
class Classification:
    used: Set[str] = field(default_factory=set)
    unused: Set[str] = field(default_factory=set)


class ReferenceTracker:
    """Holds one AssetReference per usage key.

    Records are seeded before analysis, mutated only through record_usage()
    and never removed.
    """

    def __init__(self):
        self.references: Dict[str, AssetReference] = {}
        self.reverse_index: Dict[str, Set[str]] = {}
        self.asset_files: List[str] = []

    def seed(self, asset_files: Iterable[str], reverse_index: Dict[str, Set[str]],
             file_sizes: Optional[Dict[str, int]] = None):
        """Create zero-count records for every asset and every identifier pointing at it.

        Identifiers whose path is not among asset_files get no record; they
        surface through missing-file detection instead.

        Args:
            asset_files: Discovered asset paths
            reverse_index: asset path -> identifiers
            file_sizes: asset path -> size in bytes
        """
        file_sizes = file_sizes or {}
        self.asset_files = list(asset_files)
        self.reverse_index = reverse_index

        for asset_path in self.asset_files:
            size = file_sizes.get(asset_path, 0)
            key = path_key(asset_path)
            self.references[key] = AssetReference(key, asset_path, size_bytes=size)

            for identifier in reverse_index.get(asset_path, ()):
                self.references[identifier] = AssetReference(identifier, asset_path, size_bytes=size)

    @property
    def identifiers(self) -> List[str]:
        return [key for key, ref in self.references.items() if not ref.is_literal]

    @property
    def literal_paths(self) -> List[str]:
        return [ref.asset_path for ref in self.references.values() if ref.is_literal]

    def record_usage(self, key: str, count: int, file_path: str):
        """Add count occurrences of key found in file_path."""
        if count <= 0:
            return
        reference = self.references[key]
        reference.occurrence_count += count
        reference.referenced_in_files.add(file_path)

    def references_for(self, asset_path: str) -> List[AssetReference]:
        """Literal record plus every identifier record of an asset."""
        related = [self.references[path_key(asset_path)]]
        for identifier in sorted(self.reverse_index.get(asset_path, ())):
            reference = self.references.get(identifier)
            if reference is not None:
                related.append(reference)
        return related

    def is_used(self, asset_path: str) -> bool:
        return any(ref.is_used for ref in self.references_for(asset_path))

    def classify(self) -> Classification:
        """Partition seeded assets into used and unused.

        Only meaningful once every code file has been analyzed.
        """
        classification = Classification()
        for asset_path in self.asset_files:
            target = classification.used if self.is_used(asset_path) else classification.unused
            target.add(asset_path)
        return classification
