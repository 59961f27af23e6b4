# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
Crash-safe file replacement.

The payload goes to a temporary file in the target's own directory, is
fsynced, and is then renamed over the target. A reader of the target path
sees either the previous file or the complete new one, never a partial or
empty file, even if the process dies or the machine loses power mid-write.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


def temp_prefix(path: Path) -> str:
    """Dot-prefixed name stem of temp files for ``path``."""
    return f".{path.name}."


def _fsync_directory(directory: Path) -> None:
    # Makes the rename itself durable. Not available on Windows.
    if not hasattr(os, "O_DIRECTORY"):
        return
    try:
        fd = os.open(str(directory), os.O_RDONLY | os.O_DIRECTORY)
    except OSError as e:
        logger.warning(f"[AtomicWrite] Could not open {directory} for fsync: {e}")
        return
    try:
        os.fsync(fd)
    except OSError as e:
        logger.warning(f"[AtomicWrite] Directory fsync failed for {directory}: {e}")
    finally:
        os.close(fd)


def atomic_write(path: Union[str, Path], data: bytes) -> None:
    """
    Replace the contents of ``path`` with ``data`` atomically.

    Args:
        path: Target file. Its directory must already exist.
        data: Complete new contents.

    Raises:
        OSError: Any filesystem failure. The target is left as it was and
            the temporary file is removed.
    """
    target = Path(path)
    fd, temp_path = tempfile.mkstemp(
        dir=str(target.parent),
        prefix=temp_prefix(target),
        suffix=TEMP_SUFFIX,
    )

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, str(target))

    except BaseException:
        # Clean up temp file; the target was never touched
        try:
            os.remove(temp_path)
        except FileNotFoundError:
            pass
        raise

    _fsync_directory(target.parent)
    logger.debug(f"[AtomicWrite] Wrote {len(data)} bytes to {target}")
