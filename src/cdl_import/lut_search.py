"""
Locate LUT files referenced by CCC entries.

Resolve accepts a LUT either by its path relative to one of its LUT roots
or by absolute path, so both are returned.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, NamedTuple, Optional

logger = logging.getLogger(__name__)

MAX_LUT_SEARCH_DEPTH = 10


class LutLocation(NamedTuple):
    absolute_path: str
    relative_path: str


def find_lut_file(lut_name: str, search_root, max_depth: int = MAX_LUT_SEARCH_DEPTH,
                  _depth: int = 0) -> Optional[Path]:
    """
    Recursively search ``search_root`` for a file named ``lut_name``.

    Entries are visited in sorted order; a directory's own files and
    subdirectories are checked in that order, depth first. Directories that
    cannot be listed are skipped. Returns the path or None.
    """
    if _depth > max_depth:
        return None

    try:
        entries = sorted(os.scandir(search_root), key=lambda e: e.name)
    except OSError:
        return None

    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError:
            continue
        if not is_dir and entry.name == lut_name:
            return Path(entry.path)
        if is_dir:
            found = find_lut_file(lut_name, entry.path, max_depth, _depth + 1)
            if found:
                return found

    return None


def search_for_lut(lut_name: Optional[str], search_paths: Iterable,
                   max_depth: int = MAX_LUT_SEARCH_DEPTH) -> Optional[LutLocation]:
    """Search each root in order and return the first LutLocation found."""
    if not lut_name:
        return None

    logger.info(f"Searching for LUT: {lut_name}")
    for root in search_paths:
        logger.debug(f"Searching in: {root}")
        found = find_lut_file(lut_name, root, max_depth)
        if found:
            relative = found.relative_to(Path(root)).as_posix()
            return LutLocation(str(found), relative)

    logger.warning(f"LUT not found in any search location: {lut_name}")
    return None
