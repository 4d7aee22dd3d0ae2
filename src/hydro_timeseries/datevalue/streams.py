"""
File access for DateValue input and output.

Input files ending in .gz or .zip (with a single member) are decompressed
transparently.
"""

import gzip
import io
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO, Union

from ..exceptions import TimeSeriesIOError

PathLike = Union[str, Path]


@contextmanager
def open_text_input(path: PathLike) -> Iterator[TextIO]:
    """
    Open a text file for reading, decompressing by extension.

    Args:
        path: File path

    Yields:
        Text stream

    Raises:
        TimeSeriesIOError: If the file cannot be opened
    """
    path_str = str(path)
    lower = path_str.lower()
    archive = None

    try:
        if lower.endswith(".gz"):
            handle = gzip.open(path_str, "rt", encoding="utf-8", errors="replace")
        elif lower.endswith(".zip"):
            archive = zipfile.ZipFile(path_str)
            members = [name for name in archive.namelist() if not name.endswith("/")]
            if len(members) != 1:
                archive.close()
                raise TimeSeriesIOError(
                    f"Zip file \"{path_str}\" must contain exactly one file "
                    f"(found {len(members)})",
                    path=path_str,
                )
            handle = io.TextIOWrapper(
                archive.open(members[0]), encoding="utf-8", errors="replace"
            )
        else:
            handle = open(path_str, "r", encoding="utf-8", errors="replace")
    except (OSError, zipfile.BadZipFile) as e:
        if archive is not None:
            archive.close()
        raise TimeSeriesIOError(f"Unable to open file \"{path_str}\": {e}", path=path_str) from e

    try:
        yield handle
    except OSError as e:
        raise TimeSeriesIOError(f"Error reading file \"{path_str}\": {e}", path=path_str) from e
    finally:
        handle.close()
        if archive is not None:
            archive.close()


@contextmanager
def open_text_output(path: PathLike) -> Iterator[TextIO]:
    """
    Open a text file for writing, creating parent directories.

    Raises:
        TimeSeriesIOError: If the file cannot be opened or written
    """
    path_obj = Path(path)
    try:
        path_obj.parent.mkdir(parents=True, exist_ok=True)
        handle = open(path_obj, "w", encoding="utf-8", newline="\n")
    except OSError as e:
        raise TimeSeriesIOError(f"Unable to open file \"{path}\" for writing: {e}", path=str(path)) from e

    try:
        try:
            yield handle
        finally:
            handle.close()
    except OSError as e:
        raise TimeSeriesIOError(f"Error writing file \"{path}\": {e}", path=str(path)) from e
