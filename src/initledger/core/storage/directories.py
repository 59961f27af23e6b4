# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

import logging
from pathlib import Path
from typing import Union

from initledger.core.history.errors import HistoryDirectoryError

logger = logging.getLogger(__name__)

INSTANCE_DIR_MODE = 0o755


def ensure_instance_directory(root: Union[str, Path], instance_id: str) -> Path:
    """
    Make sure ``{root}/{instance_id}`` exists and return it.

    The directory (and the root, if missing) is created with exist_ok, so a
    concurrent creator is never an error. Calling this twice is harmless.

    Raises:
        HistoryDirectoryError: The directory could not be created, e.g.
            permission denied or a regular file already uses the name.
    """
    directory = Path(root) / instance_id
    try:
        directory.mkdir(mode=INSTANCE_DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"[Directories] Unable to create {directory}: {e}")
        raise HistoryDirectoryError(
            f"unable to create instance directory {directory}: {e}", path=str(directory)
        ) from e
    return directory
