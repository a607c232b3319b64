"""
Backup manager for exported record files.
"""

import logging
import os
import shutil
import threading
from datetime import datetime
from typing import List, Optional, Tuple

from ..config import AppConfig
from ..core.exceptions import IOFailure

logger = logging.getLogger(__name__)


def format_file_size(size_bytes: int) -> str:
    """Human readable size, e.g. ``512 B`` or ``1.5 KB``."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    exponent = 0
    while size >= 1024 and exponent < 6:
        size /= 1024
        exponent += 1
    return f"{size:.1f} {'KMGTPE'[exponent - 1]}B"


class BackupManager:
    """Creates timestamped copies of a data directory and inspects them."""

    def __init__(self, config: AppConfig):
        self._config = config
        self._lock = threading.RLock()

    def create_backup(self, source_dir: Optional[str] = None, now: Optional[datetime] = None) -> str:
        """Copy ``source_dir`` (default: export folder) into a new backup folder."""
        source = source_dir or self._config.export_folder
        with self._lock:
            if not os.path.isdir(source):
                raise IOFailure(f"Backup source not found: {source}", details={"source": source})

            target = self._config.backup_folder_name(now)
            try:
                os.makedirs(self._config.backup_folder, exist_ok=True)
                shutil.copytree(source, target)
            except (OSError, shutil.Error) as e:
                raise IOFailure(f"Failed to create backup {target}: {str(e)}")

            logger.info("Backup created: %s (%s)", target, format_file_size(self.directory_size(target)))
            return target

    def directory_size(self, path: str) -> int:
        """Total size in bytes of every file below ``path``."""
        total = 0
        with os.scandir(path) as entries:
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        total += self.directory_size(entry.path)
                    elif entry.is_file(follow_symlinks=False):
                        total += entry.stat().st_size
                except OSError as e:
                    logger.warning("Failed to visit file: %s (%s)", entry.path, e)
        return total

    def list_files(self, path: str, max_depth: int = 10) -> List[Tuple[int, str, bool]]:
        """Walk ``path`` returning ``(depth, relative path, is_dir)`` entries."""
        results: List[Tuple[int, str, bool]] = []
        self._list_files(path, path, 0, max_depth, results)
        return results

    def _list_files(self, root: str, directory: str, depth: int, max_depth: int,
                    results: List[Tuple[int, str, bool]]) -> None:
        if depth > max_depth:
            return
        try:
            names = sorted(os.listdir(directory))
        except OSError as e:
            logger.warning("Error listing directory: %s (%s)", directory, e)
            return
        for name in names:
            full_path = os.path.join(directory, name)
            is_dir = os.path.isdir(full_path)
            results.append((depth, os.path.relpath(full_path, root), is_dir))
            if is_dir:
                self._list_files(root, full_path, depth + 1, max_depth, results)

    def list_backups(self) -> List[str]:
        """Backup folders, newest first."""
        folder = self._config.backup_folder
        if not os.path.isdir(folder):
            return []
        backups = [
            os.path.join(folder, name) for name in os.listdir(folder)
            if name.startswith("backup_") and os.path.isdir(os.path.join(folder, name))
        ]
        return sorted(backups, reverse=True)
