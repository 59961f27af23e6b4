# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
Default locations for history data.

Callers normally pass explicit paths through ``HistoryConfig``; these are
the fallbacks used when the configuration leaves them out.
"""

import os
from pathlib import Path

APP_DIR_NAME = 'initledger'


def is_windows():
    """Check if running on Windows."""
    return os.name == 'nt'


def get_data_root() -> Path:
    """
    Get the root directory for persistent application data.

    Returns:
        Absolute Path object.

    Example:
        >>> get_data_root()
        # POSIX: /var/lib/initledger
        # Windows: C:/ProgramData/initledger
    """
    if is_windows():
        base = Path(os.environ.get('PROGRAMDATA', 'C:/ProgramData'))
        return base / APP_DIR_NAME
    return Path('/var/lib') / APP_DIR_NAME


def get_default_history_path() -> Path:
    """Directory holding one sub-directory per instance."""
    return get_data_root() / 'instances'
