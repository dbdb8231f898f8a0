"""Configuration management for Flutter Asset Cleaner.

Loads environment overrides and provides the immutable scan configuration
that every analyzer component receives explicitly.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from dotenv import load_dotenv

__version__ = "1.0.0"
PACKAGE_NAME = "Flutter Asset Cleaner"

ENV_PREFIX = "ASSET_CLEANER_"

DEFAULT_ASSET_DIRS = ("assets",)
DEFAULT_CODE_ROOTS = ("lib", "test", "integration_test", "bin")
DEFAULT_IGNORE_DIRS = frozenset({
    ".git",
    ".dart_tool",
    "build",
    "ios/Pods",
    "android/.gradle",
    "android/build",
})
DEFAULT_ASSET_EXTS = frozenset({".png", ".jpg", ".jpeg", ".webp", ".svg", ".json", ".gif"})
DEFAULT_CODE_EXTS = frozenset({".dart", ".yaml", ".md"})
DEFAULT_DIRECT_GROUPS = ("AppIcons", "Images", "LottieAnimations")
DEFAULT_ALIAS_GROUPS = ("AppAssets",)
DEFAULT_ASSET_PREFIX = "assets/"


@dataclass(frozen=True)
class ScanConfig:
    """Fixed scan configuration.

    Defaults describe a conventional Flutter project: assets under
    ``assets/`` and constant holders such as ``class AppIcons`` in ``lib/``.
    """
    asset_dirs: Tuple[str, ...] = DEFAULT_ASSET_DIRS
    code_roots: Tuple[str, ...] = DEFAULT_CODE_ROOTS
    ignore_dirs: FrozenSet[str] = DEFAULT_IGNORE_DIRS
    asset_exts: FrozenSet[str] = DEFAULT_ASSET_EXTS
    code_exts: FrozenSet[str] = DEFAULT_CODE_EXTS
    direct_groups: Tuple[str, ...] = DEFAULT_DIRECT_GROUPS
    alias_groups: Tuple[str, ...] = DEFAULT_ALIAS_GROUPS
    asset_prefix: str = DEFAULT_ASSET_PREFIX
    definition_ext: str = ".dart"
    declaration_keyword: str = "class"
    ignore_definitions: bool = False
    progress_every: int = 50

    @property
    def all_groups(self) -> Tuple[str, ...]:
        return self.direct_groups + self.alias_groups

    @property
    def identifier_prefixes(self) -> Tuple[str, ...]:
        """Prefixes (``Group.``) used as a cheap pre-filter for identifier matching."""
        return tuple(f"{group}." for group in self.all_groups)


def _split_list(raw: str) -> Tuple[str, ...]:
    """Split a comma-separated environment value, dropping blanks."""
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _normalize_ext(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


class Config:
    """Configuration loader with environment variable support."""

    def __init__(self, project_root: Optional[str | Path] = None):
        """Initialize config by loading the project's .env file.

        Args:
            project_root: Project being scanned (default: current directory)
        """
        self.project_root = Path(project_root or ".").resolve()
        load_dotenv(self.project_root / ".env")

        self._validate()

    def _validate(self):
        """Validate the values that the analyzer cannot work without.

        Raises:
            ValueError: If no direct group or no asset prefix is configured
        """
        if not self.direct_groups:
            raise ValueError(
                f"{ENV_PREFIX}DIRECT_GROUPS is empty. "
                "At least one asset holder class name is required."
            )
        if not self.asset_prefix:
            raise ValueError(f"{ENV_PREFIX}ASSET_PREFIX must not be empty.")

    def _get_list(self, name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
        raw = os.getenv(ENV_PREFIX + name)
        if raw is None:
            return default
        return _split_list(raw)

    @property
    def asset_dirs(self) -> Tuple[str, ...]:
        return self._get_list("ASSET_DIRS", DEFAULT_ASSET_DIRS)

    @property
    def code_roots(self) -> Tuple[str, ...]:
        return self._get_list("CODE_ROOTS", DEFAULT_CODE_ROOTS)

    @property
    def ignore_dirs(self) -> FrozenSet[str]:
        return frozenset(self._get_list("IGNORE_DIRS", tuple(DEFAULT_IGNORE_DIRS)))

    @property
    def asset_exts(self) -> FrozenSet[str]:
        exts = self._get_list("ASSET_EXTS", tuple(DEFAULT_ASSET_EXTS))
        return frozenset(_normalize_ext(ext) for ext in exts)

    @property
    def code_exts(self) -> FrozenSet[str]:
        exts = self._get_list("CODE_EXTS", tuple(DEFAULT_CODE_EXTS))
        return frozenset(_normalize_ext(ext) for ext in exts)

    @property
    def direct_groups(self) -> Tuple[str, ...]:
        """Classes declaring ``static const String x = 'assets/...';`` fields."""
        return self._get_list("DIRECT_GROUPS", DEFAULT_DIRECT_GROUPS)

    @property
    def alias_groups(self) -> Tuple[str, ...]:
        """Classes declaring ``static const String x = AppIcons.y;`` fields."""
        return self._get_list("ALIAS_GROUPS", DEFAULT_ALIAS_GROUPS)

    @property
    def asset_prefix(self) -> str:
        return os.getenv(ENV_PREFIX + "ASSET_PREFIX", DEFAULT_ASSET_PREFIX)

    @property
    def ignore_definitions(self) -> bool:
        """Skip the asset class blocks themselves when counting usage."""
        value = os.getenv(ENV_PREFIX + "IGNORE_DEFINITIONS", "")
        return value.strip().lower() in ("1", "true", "yes", "on")

    def scan_config(self, ignore_definitions: Optional[bool] = None) -> ScanConfig:
        """Build the immutable scan configuration.

        Args:
            ignore_definitions: Override for the environment setting

        Returns:
            ScanConfig instance
        """
        if ignore_definitions is None:
            ignore_definitions = self.ignore_definitions

        return ScanConfig(
            asset_dirs=self.asset_dirs,
            code_roots=self.code_roots,
            ignore_dirs=self.ignore_dirs,
            asset_exts=self.asset_exts,
            code_exts=self.code_exts,
            direct_groups=self.direct_groups,
            alias_groups=self.alias_groups,
            asset_prefix=self.asset_prefix,
            ignore_definitions=ignore_definitions,
        )


# Singleton instance
_config = None


def get_config(project_root: Optional[str | Path] = None) -> Config:
    """Get or create the Config instance for a project.

    A new instance is created when a different project root is requested.

    Returns:
        Config instance
    """
    global _config
    requested = Path(project_root or ".").resolve()
    if _config is None or _config.project_root != requested:
        _config = Config(requested)
    return _config
