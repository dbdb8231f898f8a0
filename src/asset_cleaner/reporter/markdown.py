"""Markdown cleanup report."""
from pathlib import Path
from typing import Dict, List

from ..analyzer.engine import ScanResult
from ..config import PACKAGE_NAME, ScanConfig, __version__
from ..reaper.delete_script import DEFAULT_SCRIPT_NAME
from ..utils.formatting import extension_of, format_bytes

DEFAULT_REPORT_PATH = Path("build") / "unused_assets_report.md"
HEAVIEST_LIMIT = 20


class ReportGenerator:
    """Render a ScanResult as a Markdown document."""

    def __init__(self, scan_config: ScanConfig):
        self.scan_config = scan_config

    def breakdown_by_extension(self, result: ScanResult) -> Dict[str, Dict[str, int]]:
        """Count and bytes of all discovered assets per extension."""
        by_extension: Dict[str, Dict[str, int]] = {}
        for path in sorted(result.used | result.unused):
            entry = by_extension.setdefault(extension_of(path), {"count": 0, "bytes": 0})
            entry["count"] += 1
            entry["bytes"] += result.file_sizes.get(path, 0)
        return by_extension

    def heaviest_unused(self, result: ScanResult, limit: int = HEAVIEST_LIMIT) -> List[str]:
        ranked = sorted(result.unused, key=lambda path: (-result.file_sizes.get(path, 0), path))
        return ranked[:limit]

    def render(self, result: ScanResult) -> str:
        lines = [
            "# 🧹 Asset Cleanup Report",
            "",
            f"Generated by **{PACKAGE_NAME} v{__version__}**",
            "",
            "## 📊 Overview",
            "",
            "| Metric | Value |",
            "|:---|---:|",
            f"| Total Assets | {len(result.used) + len(result.unused)} |",
            f"| ✅ Used | {len(result.used)} |",
            f"| ❌ Unused | {len(result.unused)} |",
            f"| 💾 Total Size | {format_bytes(result.total_bytes)} |",
            f"| ✓ Used Size | {format_bytes(result.used_bytes)} |",
            f"| 🎯 **Potential Savings** | **{format_bytes(result.reclaimable_bytes)}** |",
            "",
            "## 📁 Breakdown by Extension",
            "",
            "| Extension | Files | Size |",
            "|:---|---:|---:|",
        ]

        by_extension = self.breakdown_by_extension(result)
        for ext in sorted(by_extension):
            data = by_extension[ext]
            lines.append(f"| `{ext}` | {data['count']} | {format_bytes(data['bytes'])} |")

        lines.extend([
            "",
            f"## 🏋️ Top {HEAVIEST_LIMIT} Heaviest Unused Files",
            "",
            "| File | Size | Identifiers |",
            "|:---|---:|:---|",
        ])
        for path in self.heaviest_unused(result):
            identifiers = ", ".join(result.identifiers_for(path)) or "—"
            lines.append(f"| `{path}` | {format_bytes(result.file_sizes.get(path, 0))} | {identifiers} |")

        lines.extend([
            "",
            "## 📝 Complete Unused Files List",
            "",
            f"> Total: **{len(result.unused)}** files",
            "",
        ])
        for path in sorted(result.unused):
            identifiers = result.identifiers_for(path)
            note = f" _({', '.join(identifiers)})_" if identifiers else ""
            lines.append(f"- `{path}`{note}")

        if result.missing or result.dangling_aliases:
            lines.extend(["", "## ⚠️ Diagnostics", ""])
            for missing in result.missing:
                lines.append(f"- `{missing.identifier}` points to missing file `{missing.asset_path}`")
            for alias, target in result.dangling_aliases:
                lines.append(f"- `{alias}` aliases unknown identifier `{target}`")

        groups = "/".join(self.scan_config.alias_groups + self.scan_config.direct_groups)
        definitions_note = (
            "- Asset class definitions are not counted as usage."
            if self.scan_config.ignore_definitions
            else "- Any textual occurrence counts as usage, including asset class definitions and comments."
        )
        lines.extend([
            "",
            "## ℹ️ Notes",
            "",
            f"- **Used** assets are referenced via identifiers ({groups}) or literal `{self.scan_config.asset_prefix}...` paths in your codebase.",
            definitions_note,
            "- If you reference assets from native code (Android/iOS), manage them manually.",
            f"- Review the delete script before execution: `./{DEFAULT_SCRIPT_NAME}`",
        ])

        return "\n".join(lines) + "\n"

    def write(self, result: ScanResult, output_path: str | Path = DEFAULT_REPORT_PATH) -> Path:
        """Render and write the report, creating parent directories.

        Raises:
            OSError: If the report cannot be written
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render(result), encoding="utf-8")
        return output_path
