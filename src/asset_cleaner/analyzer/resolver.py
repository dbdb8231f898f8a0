from dataclasses import dataclass, field
from typing import Callable, Dict, List, Set, Tuple


@dataclass(frozen=True)
class MissingAsset:
    """An identifier whose resolved path has no file on disk."""
    identifier: str
    asset_path: str


@dataclass
class ResolutionResult:
    identifier_table: Dict[str, str] = field(default_factory=dict)
    reverse_index: Dict[str, Set[str]] = field(default_factory=dict)
    dangling: List[Tuple[str, str]] = field(default_factory=list)  # (alias, target)


class AliasResolver:
    """
    Composes alias declarations with direct path declarations.
    Resolution is exactly one hop: an alias must point at a direct identifier.
    An alias pointing at another alias is treated as dangling.
    """

    def resolve(self, direct: Dict[str, str], aliases: Dict[str, str]) -> ResolutionResult:
        """
        Builds the identifier table and its reverse index.

        Args:
            direct: identifier -> asset path (e.g. 'AppIcons.logo' -> 'assets/icons/logo.svg')
            aliases: alias identifier -> target identifier (e.g. 'AppAssets.logo' -> 'AppIcons.logo')
        """
        result = ResolutionResult()

        for alias, target in aliases.items():
            target_path = direct.get(target)
            if target_path is None:
                result.dangling.append((alias, target))
                continue
            result.identifier_table[alias] = target_path

        # Direct declarations win over a resolved alias with the same key
        result.identifier_table.update(direct)

        result.reverse_index = self.build_reverse_index(result.identifier_table)
        return result

    @staticmethod
    def build_reverse_index(identifier_table: Dict[str, str]) -> Dict[str, Set[str]]:
        reverse_index: Dict[str, Set[str]] = {}
        for identifier, asset_path in identifier_table.items():
            reverse_index.setdefault(asset_path, set()).add(identifier)
        return reverse_index

    @staticmethod
    def find_missing(identifier_table: Dict[str, str], exists: Callable[[str], bool]) -> List[MissingAsset]:
        """
        Lists identifiers whose resolved path does not exist.
        One entry per identifier, sorted by identifier.
        """
        return [
            MissingAsset(identifier, asset_path)
            for identifier, asset_path in sorted(identifier_table.items())
            if not exists(asset_path)
        ]
