"""File system helpers: existence checks, listing, copying and stderr capture."""

from __future__ import annotations

import json
import logging
import os
import shutil
import stat
from typing import Any, BinaryIO

_log = logging.getLogger(__name__)

_STDERR_FD = 2
_DUMP_PREFIX = "stderr_"
_DUMP_MODE = 0o777


def exists(path: str) -> bool:
    """Return False only when path does not exist."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def is_link(path: str) -> bool:
    """Return True when path is a symbolic link."""
    return stat.S_ISLNK(os.lstat(path).st_mode)


def is_empty(directory: str) -> bool:
    """Return True when directory holds no entries."""
    with os.scandir(directory) as entries:
        return next(entries, None) is None


def list_dir(directory: str) -> list[str]:
    """List files under directory recursively, following links, skipping hidden directories."""
    result: list[str] = []
    for name in sorted(os.listdir(directory)):
        path = os.path.join(directory, name)
        info = os.stat(path)
        if stat.S_ISDIR(info.st_mode):
            if name.startswith("."):
                continue
            result.extend(list_dir(path))
        else:
            result.append(path)
    return result


def dup2(src_fd: int, dst_fd: int) -> None:
    """Make dst_fd refer to the same open file as src_fd."""
    os.dup2(src_fd, dst_fd)


def _open_for_dump(path: str, _flags: int) -> int:
    return os.open(path, os.O_CREAT | os.O_WRONLY, _DUMP_MODE)


def dump(file_dir: str, name: str) -> BinaryIO:
    """Open stderr_<name>.log and redirect the process's stderr into it."""
    filename = f"{_DUMP_PREFIX}{name}.log"
    if file_dir:
        filename = f"{file_dir}/{filename}"
    file = open(filename, "wb", opener=_open_for_dump)
    try:
        dup2(file.fileno(), _STDERR_FD)
    except OSError:
        file.close()
        raise
    return file


def review_dump_panic(file: BinaryIO) -> None:
    """Close and remove a dump file that nothing was written to."""
    if os.fstat(file.fileno()).st_size == 0:
        file.close()
        os.remove(file.name)


def load_json(filename: str) -> Any:
    """Read and decode a JSON file."""
    with open(filename, "rb") as handle:
        return json.loads(handle.read())


def copy_file(src: str, dst: str) -> None:
    """Copy the contents of a regular file; do nothing if src and dst are the same file."""
    src_info = os.stat(src)
    if not stat.S_ISREG(src_info.st_mode):
        raise ValueError(
            f"CopyFile: non-regular source file {os.path.basename(src)} "
            f"({stat.filemode(src_info.st_mode)!r})"
        )
    try:
        dst_info = os.stat(dst)
    except FileNotFoundError:
        pass
    else:
        if not stat.S_ISREG(dst_info.st_mode):
            raise ValueError(
                f"CopyFile: non-regular destination file {os.path.basename(dst)} "
                f"({stat.filemode(dst_info.st_mode)!r})"
            )
        if os.path.samestat(src_info, dst_info):
            return
    with open(src, "rb") as source, open(dst, "wb") as target:
        shutil.copyfileobj(source, target)
        target.flush()
        os.fsync(target.fileno())


def ensure_dir(directory: str) -> None:
    """Create directory and its parents if they are missing."""
    os.makedirs(directory, 0o755, exist_ok=True)


def path_exists(path: str) -> bool:
    """Return True when path can be stat'ed."""
    return os.path.exists(path)


def store_to_file(path: str, content: str) -> None:
    """Write content to path, creating parent directories."""
    if content == "":
        _log.error("write empty to file? file=%s,content=%s", path, content)
    os.makedirs(os.path.dirname(os.path.abspath(path)), 0o755, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(content)