# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Union

from initledger.core.storage.atomic import atomic_write
from initledger.core.storage.directories import ensure_instance_directory

from .codec import decode_history, encode_history
from .errors import HistoryDecodeError, HistoryDirectoryError, HistoryLoadError, HistorySaveError
from .types import HISTORY_VERSION, History, ModuleHistory, ModuleOutcome

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILENAME = "history.json"


class HistoryManager:
    """
    Manages persistence of per-instance execution history.

    Layout on disk is ``{history_path}/{instance_id}/{history_filename}``,
    one file per instance. Writes are atomic: a history file is either the
    previous complete record or the new complete record.

    No locking is done; only one process may save a given instance at a time.
    """

    def __init__(self, history_path: Union[str, Path], history_filename: str = DEFAULT_HISTORY_FILENAME):
        """
        Args:
            history_path: Root directory holding one sub-directory per instance.
            history_filename: Name of the history file inside each sub-directory.
        """
        self.history_path = Path(history_path)
        self.history_filename = history_filename

    @classmethod
    def from_config(cls, config) -> "HistoryManager":
        """Build a manager from a ``HistoryConfig``."""
        return cls(config.get_history_path(), config.get_history_filename())

    def history_file_path(self, instance_id: str) -> Path:
        return self.history_path / instance_id / self.history_filename

    def _read_history_file(self, history_file: Path) -> History:
        try:
            data = history_file.read_bytes()
            return decode_history(data)
        except (OSError, HistoryDecodeError) as e:
            logger.error(f"[HistoryManager] Failed to read history file {history_file}: {e}")
            raise HistoryLoadError(
                f"error while reading history file at {history_file}: {e}", path=str(history_file)
            ) from e

    def load_history(self) -> List[History]:
        """
        Load the history of every instance under the history path.

        Sub-directories without a history file are skipped. A history file
        that cannot be read or decoded aborts the whole load, since dropping
        it could rerun a module that must only run once.

        Returns:
            One History per instance directory, ordered by directory name.

        Raises:
            HistoryLoadError: The history path or any history file is unreadable.
        """
        try:
            with os.scandir(self.history_path) as it:
                # Symlinked instance directories are not followed
                dirs = sorted(
                    (entry for entry in it if entry.is_dir(follow_symlinks=False)),
                    key=lambda entry: entry.name,
                )
        except OSError as e:
            logger.error(f"[HistoryManager] Unable to read history directory {self.history_path}: {e}")
            raise HistoryLoadError(
                f"unable to read instance history directory {self.history_path}: {e}",
                path=str(self.history_path),
            ) from e

        histories = []
        for entry in dirs:
            history_file = Path(entry.path) / self.history_filename
            if not history_file.exists():
                logger.debug(f"[HistoryManager] No history yet for '{entry.name}'")
                continue
            histories.append(self._read_history_file(history_file))

        logger.info(f"[HistoryManager] Loaded {len(histories)} instance history record(s) from {self.history_path}")
        return histories

    def get_instance_history(self, instance_id: str) -> Optional[History]:
        """Read the history of a single instance, or None if it has none yet."""
        _validate_instance_id(instance_id)
        history_file = self.history_file_path(instance_id)
        if not history_file.exists():
            return None
        return self._read_history_file(history_file)

    def build_record(
        self,
        instance_id: str,
        modules: Iterable[Union[ModuleOutcome, ModuleHistory]],
        run_time: Optional[datetime] = None,
    ) -> History:
        """
        Build the History of the current run, keeping the execution order of ``modules``.

        ``run_time`` is stored in UTC; a naive value is taken as local time.
        """
        entries = []
        for module in modules:
            if isinstance(module, ModuleHistory):
                entries.append(module)
            else:
                entries.append(ModuleHistory.from_outcome(module))

        return History(
            instance_id=instance_id,
            run_time=(run_time or datetime.now(timezone.utc)).astimezone(timezone.utc),
            module_histories=entries,
            version=HISTORY_VERSION,
        )

    def save_history(
        self,
        instance_id: str,
        modules: Iterable[Union[ModuleOutcome, ModuleHistory]],
        run_time: Optional[datetime] = None,
    ) -> History:
        """
        Write the history of the current run, replacing any previous record.

        Args:
            instance_id: Logical instance identity; also its directory name.
            modules: Modules executed this run, in execution order.
            run_time: Defaults to now (UTC).

        Returns:
            The History that was written.

        Raises:
            ValueError: ``instance_id`` is not a usable directory name.
            HistorySaveError: Encoding, directory creation or the write failed.
                The previous record, if any, is left intact.
        """
        _validate_instance_id(instance_id)
        history = self.build_record(instance_id, modules, run_time)
        history_file = self.history_file_path(instance_id)

        try:
            data = encode_history(history)
        except (TypeError, ValueError) as e:
            logger.error(f"[HistoryManager] Unable to encode history for '{instance_id}': {e}")
            raise HistorySaveError(f"unable to encode history: {e}", path=str(history_file)) from e

        try:
            ensure_instance_directory(self.history_path, instance_id)
        except HistoryDirectoryError as e:
            raise HistorySaveError(f"unable to write history file: {e}", path=str(history_file)) from e

        try:
            atomic_write(history_file, data)
        except OSError as e:
            logger.error(
                f"[HistoryManager] Failed to save history record:\n"
                f"  Path: {history_file}\n"
                f"  Error: {e}"
            )
            raise HistorySaveError(
                f"unable to write history file {history_file}: {e}", path=str(history_file)
            ) from e

        logger.info(
            f"[HistoryManager] Saved history for '{instance_id}' "
            f"({len(history.module_histories)} module(s)) to {history_file}"
        )
        return history


def _validate_instance_id(instance_id: str) -> None:
    if not isinstance(instance_id, str) or not instance_id:
        raise ValueError("instance ID must be a non-empty string")
    if instance_id in (".", "..") or "/" in instance_id or (os.sep in instance_id) or (
        os.altsep and os.altsep in instance_id
    ):
        raise ValueError(f"instance ID is not a valid directory name: {instance_id!r}")
