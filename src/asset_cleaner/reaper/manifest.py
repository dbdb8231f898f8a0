"""Trash manifest for restoring deleted asset files."""
import json
from pathlib import Path
from datetime import datetime
from typing import List, Dict, Optional
import hashlib

MANIFEST_VERSION = "1.0"


class Manifest:
    """Manage the JSON manifest that tracks trashed assets."""

    def __init__(self, trash_dir: str | Path):
        """Initialize manifest.

        Args:
            trash_dir: Path to trash directory
        """
        self.trash_dir = Path(trash_dir)
        self.manifest_path = self.trash_dir / "manifest.json"
        self._ensure_manifest_exists()

    def _ensure_manifest_exists(self):
        """Create manifest file if it doesn't exist."""
        self.trash_dir.mkdir(parents=True, exist_ok=True)

        if not self.manifest_path.exists():
            self._write_manifest({"version": MANIFEST_VERSION, "deletions": []})

    def _read_manifest(self) -> Dict:
        try:
            with open(self.manifest_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (IOError, json.JSONDecodeError):
            return {"version": MANIFEST_VERSION, "deletions": []}

    def _write_manifest(self, data: Dict):
        """Write manifest to disk atomically."""
        temp_path = self.manifest_path.with_suffix('.tmp')
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        temp_path.replace(self.manifest_path)

    def add_deletion(self, deletion_id: str, original_path: str, trash_path: str,
                     reason: str, file_hash: str, size_bytes: int = 0,
                     batch_id: Optional[str] = None):
        """Add deletion record to manifest.

        Args:
            deletion_id: Unique deletion identifier
            original_path: Absolute original file path
            trash_path: Path in trash directory
            reason: Reason for deletion (e.g., 'unused-asset')
            file_hash: SHA256 hash of file for verification
            size_bytes: File size at deletion time
            batch_id: Scan run that produced the deletion
        """
        manifest = self._read_manifest()

        manifest["deletions"].append({
            "id": deletion_id,
            "batch_id": batch_id,
            "original_path": str(original_path),
            "trash_path": str(trash_path),
            "deleted_at": datetime.now().isoformat(),
            "reason": reason,
            "file_hash": file_hash,
            "size_bytes": size_bytes,
            "restored": False
        })
        self._write_manifest(manifest)

    def get_deletion(self, deletion_id: str) -> Optional[Dict]:
        for deletion in self._read_manifest()["deletions"]:
            if deletion["id"] == deletion_id:
                return deletion
        return None

    def mark_restored(self, deletion_id: str):
        manifest = self._read_manifest()

        for deletion in manifest["deletions"]:
            if deletion["id"] == deletion_id:
                deletion["restored"] = True
                break

        self._write_manifest(manifest)

    def get_all_deletions(self) -> List[Dict]:
        return self._read_manifest().get("deletions", [])

    def get_unrestored_deletions(self) -> List[Dict]:
        return [d for d in self.get_all_deletions() if not d.get("restored", False)]

    def get_batch(self, batch_id: str) -> List[Dict]:
        """All deletion records of one scan run."""
        return [d for d in self.get_all_deletions() if d.get("batch_id") == batch_id]

    def latest_batch_id(self) -> Optional[str]:
        """Batch of the most recent unrestored deletion, if any."""
        unrestored = [d for d in self.get_unrestored_deletions() if d.get("batch_id")]
        if not unrestored:
            return None
        return max(unrestored, key=lambda d: d["deleted_at"])["batch_id"]

    @staticmethod
    def calculate_file_hash(file_path: str | Path) -> str:
        """Calculate SHA256 hash of file.

        Args:
            file_path: Path to file

        Returns:
            SHA256 hash as hex string
        """
        sha256_hash = hashlib.sha256()

        with open(file_path, "rb") as f:
            for byte_block in iter(lambda: f.read(4096), b""):
                sha256_hash.update(byte_block)

        return sha256_hash.hexdigest()
