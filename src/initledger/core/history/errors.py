# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

from typing import Optional


class HistoryError(Exception):
    """Base class for all instance history failures."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class HistoryDecodeError(HistoryError):
    """Raised when a history document is not valid JSON or has the wrong shape."""
    pass


class HistoryLoadError(HistoryError):
    """Raised when the history directory or a history file cannot be read."""
    pass


class HistorySaveError(HistoryError):
    """Raised when a history record cannot be committed."""
    pass


class HistoryDirectoryError(HistoryError):
    """Raised when an instance directory cannot be created."""
    pass
