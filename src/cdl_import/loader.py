"""Load a CDL file of any supported format into a DecisionTable."""

import logging
from typing import Tuple

from cdl_import.ccc_parser import read_ccc_file
from cdl_import.decisions import DecisionTable
from cdl_import.edl_parser import read_edl_file
from cdl_import.formats import CdlFormat, detect_format

logger = logging.getLogger(__name__)

# Each reader returns (table, skipped_count)
READERS = {
    CdlFormat.CCC: read_ccc_file,
    CdlFormat.EDL: read_edl_file,
}


def load_decisions_with_stats(path) -> Tuple[DecisionTable, int]:
    """
    Detect the format of ``path`` and parse it.

    Returns ``(table, skipped)`` where skipped counts the CCC blocks without
    an id, or the EDL ASC directives whose values could not be read.

    Raises:
        UnsupportedFormat: before any read, if the extension is not supported
        ParseError: if the file cannot be read
    """
    cdl_format = detect_format(path)
    table, skipped = READERS[cdl_format](path)
    logger.info(f"Loaded {len(table)} CDL entries from {path} ({cdl_format.name}, {skipped} skipped)")
    return table, skipped


def load_decisions(path) -> DecisionTable:
    """Like load_decisions_with_stats, without the skipped count."""
    table, _ = load_decisions_with_stats(path)
    return table
