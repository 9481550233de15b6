"""Pick a parser from a CDL file's extension."""

import re
from enum import Enum
from pathlib import Path

from cdl_import.decisions import UnsupportedFormat

# Text after the last dot of the file name, so ".ccc" counts as a CCC file
EXTENSION_RE = re.compile(r'\.([^.]+)$')


class CdlFormat(Enum):
    CCC = "ccc"
    EDL = "edl"


def detect_format(path) -> CdlFormat:
    """
    Return the CdlFormat for ``path`` based on its extension (case-insensitive).

    Raises:
        UnsupportedFormat: if the extension is missing or not .ccc/.edl
    """
    match = EXTENSION_RE.search(Path(str(path)).name)
    if not match:
        raise UnsupportedFormat(path)
    try:
        return CdlFormat(match.group(1).lower())
    except ValueError:
        raise UnsupportedFormat(path) from None
