"""Safe asset deletion with trash and restoration capabilities."""
import shutil
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from .manifest import Manifest

DEFAULT_TRASH_DIR = ".asset_cleaner_trash"


@dataclass
class DeletionOutcome:
    batch_id: str
    deletion_ids: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)  # (path, error)


class SafeDeleter:
    """Deleter that moves files to a trash directory instead of removing them."""

    def __init__(self, project_root: str | Path, trash_dir: str | Path = DEFAULT_TRASH_DIR):
        """Initialize safe deleter.

        Args:
            project_root: Project the relative asset paths are resolved against
            trash_dir: Trash directory, relative to project_root unless absolute
        """
        self.project_root = Path(project_root).resolve()
        self.trash_dir = self.project_root / trash_dir
        self.trash_dir.mkdir(parents=True, exist_ok=True)
        self.manifest = Manifest(self.trash_dir)

    def delete(self, file_path: str | Path, reason: str = "unused-asset",
               batch_id: Optional[str] = None) -> str:
        """Move file to trash and record it in the manifest.

        Never uses os.remove() - files always go to the trash.

        Args:
            file_path: File to delete, relative to the project root or absolute
            reason: Reason for deletion
            batch_id: Scan run this deletion belongs to

        Returns:
            Deletion ID for restoration

        Raises:
            FileNotFoundError: If file doesn't exist
            OSError: If move operation fails
        """
        file_path = self.project_root / file_path

        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        deletion_id = self._generate_deletion_id()
        deletion_dir = self.trash_dir / deletion_id
        deletion_dir.mkdir(parents=True, exist_ok=True)

        file_hash = self.manifest.calculate_file_hash(file_path)
        size_bytes = file_path.stat().st_size
        trash_path = deletion_dir / file_path.name

        shutil.move(str(file_path), str(trash_path))

        self.manifest.add_deletion(
            deletion_id=deletion_id,
            original_path=str(file_path.resolve()),
            trash_path=str(trash_path),
            reason=reason,
            file_hash=file_hash,
            size_bytes=size_bytes,
            batch_id=batch_id
        )

        return deletion_id

    def delete_multiple(self, file_paths: Iterable[str | Path], reason: str = "unused-asset") -> DeletionOutcome:
        """Delete several files as one batch, continuing past individual failures.

        Args:
            file_paths: Files to delete
            reason: Reason for deletion

        Returns:
            DeletionOutcome with the batch id, deletion ids and failures
        """
        outcome = DeletionOutcome(batch_id=self._generate_deletion_id())

        for file_path in file_paths:
            try:
                outcome.deletion_ids.append(self.delete(file_path, reason, batch_id=outcome.batch_id))
            except OSError as e:
                outcome.failures.append((str(file_path), str(e)))

        return outcome

    def restore(self, deletion_id: str):
        """Restore file from trash to its original location.

        Args:
            deletion_id: Deletion identifier

        Raises:
            ValueError: If deletion ID not found
            IOError: If the trashed file is gone
        """
        record = self.manifest.get_deletion(deletion_id)

        if not record:
            raise ValueError(f"Deletion ID not found: {deletion_id}")

        # Already restored
        if record.get("restored", False):
            return

        trash_path = Path(record["trash_path"])
        original_path = Path(record["original_path"])

        if not trash_path.exists():
            raise IOError(f"File not found in trash: {trash_path}")

        original_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(trash_path), str(original_path))

        self.manifest.mark_restored(deletion_id)

    def restore_all(self, deletion_ids: Iterable[str]) -> int:
        """Restore multiple files from trash.

        Returns:
            Number of files restored

        Raises:
            IOError: If any restoration fails (all others are still attempted)
        """
        errors = []
        restored = 0

        for deletion_id in deletion_ids:
            try:
                self.restore(deletion_id)
                restored += 1
            except (ValueError, IOError) as e:
                errors.append(f"{deletion_id}: {e}")

        if errors:
            raise IOError("Failed to restore some files:\n" + "\n".join(errors))

        return restored

    def restore_batch(self, batch_id: str) -> int:
        """Restore every unrestored file of one scan run."""
        ids = [d["id"] for d in self.manifest.get_batch(batch_id) if not d.get("restored", False)]
        return self.restore_all(ids)

    def get_trash_info(self) -> dict:
        all_deletions = self.manifest.get_all_deletions()
        unrestored = self.manifest.get_unrestored_deletions()

        return {
            "total_deletions": len(all_deletions),
            "unrestored_count": len(unrestored),
            "restored_count": len(all_deletions) - len(unrestored),
            "trash_dir": str(self.trash_dir),
            "unrestored_files": [d["original_path"] for d in unrestored]
        }

    def _generate_deletion_id(self) -> str:
        """Generate unique deletion ID with timestamp.

        Returns:
            Deletion ID in format: YYYYMMDD_HHMMSS_randomhex
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        random_suffix = secrets.token_hex(3)
        return f"{timestamp}_{random_suffix}"
