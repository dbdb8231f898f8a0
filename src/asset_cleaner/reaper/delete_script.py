"""Shell script generation for reviewing deletions before running them."""
import os
import stat
from pathlib import Path
from typing import Dict, Iterable

from ..config import PACKAGE_NAME, __version__
from ..utils.formatting import format_bytes

DEFAULT_SCRIPT_NAME = "delete_unused_assets.sh"


def escape_shell_arg(arg: str) -> str:
    """Quote arg for a POSIX shell using single quotes."""
    return "'" + arg.replace("'", "'\\''") + "'"


def generate_delete_script(unused_files: Iterable[str], file_sizes: Dict[str, int]) -> str:
    """Build a bash script that removes unused files, largest first.

    Args:
        unused_files: Relative paths of unused assets
        file_sizes: path -> size in bytes

    Returns:
        Script text
    """
    unused = sorted(unused_files, key=lambda path: (-file_sizes.get(path, 0), path))

    lines = [
        "#!/usr/bin/env bash",
        "set -euo pipefail",
        "#",
        "# Asset Cleanup Script",
        f"# Generated by {PACKAGE_NAME} v{__version__}",
        "#",
        "# ⚠️  REVIEW BEFORE RUNNING",
        "# Run from project root directory",
        "#",
        "",
        f'echo "🧹 Deleting {len(unused)} unused asset files..."',
        'echo ""',
    ]

    for path in unused:
        size = format_bytes(file_sizes.get(path, 0)).rjust(10)
        lines.append(f"echo {escape_shell_arg(f'  {size}  {path}')}")
        lines.append(f"rm -f {escape_shell_arg(path)}")

    lines.extend([
        "",
        'echo ""',
        'echo "✓ Cleanup complete!"',
    ])

    return "\n".join(lines) + "\n"


def write_delete_script(script: str, output_path: str | Path = DEFAULT_SCRIPT_NAME) -> Path:
    """Write the script and mark it executable.

    Raises:
        OSError: If the script cannot be written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(script, encoding="utf-8")

    try:
        mode = os.stat(output_path).st_mode
        os.chmod(output_path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError:
        # Filesystems without permission bits (e.g. some network mounts)
        pass

    return output_path
