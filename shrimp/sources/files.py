"""
File source adapter.

Reads integer values exposed as small text files, typically under /sys.
"""
from pathlib import Path
from typing import Union

from ..exceptions import SourceError


def read_file_int(path: Union[str, Path]) -> int:
    """
    Read a file and parse its trimmed content as an integer.

    Args:
        path: File to read.

    Returns:
        The integer value.

    Raises:
        SourceError: If the file cannot be read or does not hold an integer.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"cannot read file '{path}'", source=str(path)) from e

    try:
        return int(raw.strip())
    except ValueError as e:
        raise SourceError(
            f"cannot parse raw value '{raw.strip()}' as integer",
            source=str(path),
            raw_value=raw,
        ) from e
