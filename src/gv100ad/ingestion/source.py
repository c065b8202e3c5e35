"""
Line sources for GV100AD data.

The database is built from an iterable of lines. A file path, an in-memory
byte buffer or any iterable of str/bytes lines can serve as the source; byte
lines are decoded one at a time so that a decoding error names its line.
Locating the file and unpacking the Destatis ZIP archive is left to the
caller.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from gv100ad.errors import LineParseError
from gv100ad.utils.logging import get_logger

log = get_logger(__name__)

_BOM = "\ufeff"


def decode_line(line: str | bytes, line_number: int, encoding: str = "utf-8") -> str:
    """
    Decode one raw line and strip its terminator.

    Args:
        line: Line as str, or as bytes in `encoding`.
        line_number: 1-based line number; a byte order mark on line 1 is dropped.
        encoding: Encoding for byte lines.

    Returns:
        Decoded line without trailing CR/LF.

    Raises:
        LineParseError: If a byte line cannot be decoded.
    """
    if isinstance(line, bytes):
        try:
            line = line.decode(encoding)
        except UnicodeDecodeError as e:
            msg = f"cannot decode line as {encoding}: {e.reason} at byte {e.start}"
            raise LineParseError(line_number, "encoding", msg) from e
    line = line.rstrip("\r\n")
    if line_number == 1 and line.startswith(_BOM):
        line = line[len(_BOM) :]
    return line


def iter_lines(
    lines: Iterable[str | bytes],
    encoding: str = "utf-8",
) -> Iterator[str]:
    """
    Decode an iterable of raw lines.

    Args:
        lines: Lines as str, or as bytes in `encoding`.
        encoding: Encoding for byte lines.

    Yields:
        Decoded lines without terminators.
    """
    for line_number, line in enumerate(lines, start=1):
        yield decode_line(line, line_number, encoding)


def lines_from_bytes(data: bytes) -> list[bytes]:
    """
    Split an in-memory buffer into raw lines.

    Args:
        data: Raw file content.

    Returns:
        Undecoded lines without terminators.
    """
    return data.splitlines()


def lines_from_path(path: Path | str) -> Iterator[bytes]:
    """
    Read raw lines from a GV100AD text file.

    Args:
        path: Path to the extracted `GV100AD_DDMMYY.txt` file.

    Returns:
        Iterator over undecoded lines. The file is closed once exhausted.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        msg = f"GV100AD file not found: {path}"
        raise FileNotFoundError(msg)

    log.info("Reading GV100AD file", path=str(path))
    return _read_lines(path)


def _read_lines(path: Path) -> Iterator[bytes]:
    with path.open("rb") as f:
        yield from f
