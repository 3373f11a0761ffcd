"""Line-indexed, memory-mapped access to large text files."""

from __future__ import annotations

import mmap
import os
from typing import Callable, Optional, Sequence, Union

ProgressCallback = Callable[[float, str], None]
Buffer = Union[bytes, bytearray, memoryview, mmap.mmap]

_PROGRESS_STEPS = 20  # report roughly every 5%


def _index_lines(data: Buffer, progress_callback: Optional[ProgressCallback]) -> list[int]:
    """Return the byte offset at which every line of ``data`` starts."""
    starts = [0]
    total = len(data)
    interval = total // _PROGRESS_STEPS
    last_reported = 0

    if progress_callback:
        progress_callback(0.0, "Indexing file...")

    pos = data.find(b"\n")
    while pos != -1:
        starts.append(pos + 1)
        if progress_callback and pos > last_reported + interval:
            progress_callback(pos / total, "Indexing file...")
            last_reported = pos
        pos = data.find(b"\n", pos + 1)

    if progress_callback:
        progress_callback(1.0, "File indexing complete")
    return starts


class SearchContext:
    """Read-only view of file data and its line index, usable from another thread."""

    def __init__(self, data: Buffer, line_starts: Sequence[int]):
        self._data = data
        self._line_starts = line_starts

    def get_line(self, line_num: int) -> Optional[str]:
        """Return line ``line_num`` without its newline, or None if absent or not UTF-8."""
        starts = self._line_starts
        if line_num < 0 or line_num >= len(starts):
            return None
        start = starts[line_num]
        if line_num + 1 < len(starts):
            end = max(starts[line_num + 1] - 1, 0)
        else:
            end = len(self._data)
        if start > end or start >= len(self._data):
            return None
        try:
            return bytes(self._data[start:end]).decode("utf-8")
        except UnicodeDecodeError:
            return None

    def search(
        self, needle: str, progress_callback: Optional[ProgressCallback] = None
    ) -> list[int]:
        """Return the numbers of all lines containing ``needle``."""
        matches: list[int] = []
        total = len(self._line_starts)
        interval = total // _PROGRESS_STEPS
        last_reported = 0

        if progress_callback:
            progress_callback(0.0, "Searching...")

        for line_num in range(total):
            line = self.get_line(line_num)
            if line is not None and needle in line:
                matches.append(line_num)
            if progress_callback and line_num > last_reported + interval:
                progress_callback(line_num / total, "Searching...")
                last_reported = line_num

        if progress_callback:
            progress_callback(1.0, "Search complete")
        return matches


class FileReader:
    """Indexes the lines of a byte buffer and serves them by line number."""

    def __init__(self, data: Buffer, progress_callback: Optional[ProgressCallback] = None):
        self._data = data
        self._line_starts = _index_lines(data, progress_callback)
        self._context = SearchContext(data, self._line_starts)
        self._mapping: Optional[mmap.mmap] = None

    def line_count(self) -> int:
        """Number of indexed lines; a trailing newline counts as starting an empty line."""
        return len(self._line_starts)

    def get_line(self, line_num: int) -> Optional[str]:
        """Return line ``line_num`` without its newline, or None if absent or not UTF-8."""
        return self._context.get_line(line_num)

    def get_lines(self, start: int, count: int) -> list[str]:
        """Return up to ``count`` lines from ``start``, stopping at the first missing one."""
        result: list[str] = []
        for line_num in range(start, start + count):
            line = self.get_line(line_num)
            if line is None:
                break
            result.append(line)
        return result

    def search(
        self, needle: str, progress_callback: Optional[ProgressCallback] = None
    ) -> list[int]:
        """Return the numbers of all lines containing ``needle``."""
        return self._context.search(needle, progress_callback)

    def search_context(self) -> SearchContext:
        """Return a context that can search the same data on another thread."""
        return SearchContext(self._data, self._line_starts)

    def close(self) -> None:
        """Release the memory map, if this reader owns one."""
        if self._mapping is not None:
            self._mapping.close()
            self._mapping = None

    def __enter__(self) -> "FileReader":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def open_file(
    path: Union[str, os.PathLike], progress_callback: Optional[ProgressCallback] = None
) -> FileReader:
    """Memory-map the file at ``path`` and index its lines."""
    with open(path, "rb") as handle:
        size = os.fstat(handle.fileno()).st_size
        data: Buffer = (
            mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ) if size else b""
        )
    try:
        reader = FileReader(data, progress_callback)
    except BaseException:
        if isinstance(data, mmap.mmap):
            data.close()
        raise
    if isinstance(data, mmap.mmap):
        reader._mapping = data
    return reader


def empty_reader() -> FileReader:
    """Return a reader with no content."""
    return FileReader(b"")