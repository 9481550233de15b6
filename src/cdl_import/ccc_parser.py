"""
Parser for Color Correction Collection (.ccc) files.

CCC exports seen in practice are not always valid XML (line-wrapped
attributes, stray or unterminated tags), so blocks are located by plain
substring search and the fields inside each block are pulled out with
regular expressions instead of an XML parser.
"""

import logging
import re
from typing import Iterator, Optional, Tuple

from cdl_import.decisions import ColorDecision, DecisionTable, ParseError, clean_value

logger = logging.getLogger(__name__)

BLOCK_START = '<ColorCorrection'
BLOCK_END = '</ColorCorrection>'

ID_RE = re.compile(r'id\s*=\s*"([^"]+)"')
SOP_NODE_RE = re.compile(r'<SOPNode>(.*?)</SOPNode>', re.DOTALL)
SAT_NODE_RE = re.compile(r'<SATNode>(.*?)</SATNode>', re.DOTALL)
WHITESPACE_RE = re.compile(r'\s+')

METADATA_TAGS = {
    'episode': 'Episode',
    'scene': 'Scene',
    'shot': 'Shot',
    'take': 'Take',
    'camera': 'Camera',
}


def _tag_body(text: str, tag: str) -> Optional[str]:
    """Return the raw body of the first <tag>...</tag> in text, or None."""
    match = re.search(rf'<{tag}>([^<]+)</{tag}>', text)
    return match.group(1) if match else None


def iter_blocks(content: str) -> Iterator[str]:
    """
    Yield each ``<ColorCorrection ... </ColorCorrection>`` block in order.

    The start marker also matches ``<ColorCorrectionRef``. A start marker
    with no closing tag after it ends the scan.
    """
    position = 0
    while True:
        start = content.find(BLOCK_START, position)
        if start == -1:
            return
        close = content.find(BLOCK_END, start + len(BLOCK_START))
        if close == -1:
            return
        end = close + len(BLOCK_END)
        yield content[start:end]
        position = end


def parse_block(block: str) -> Optional[ColorDecision]:
    """Build a ColorDecision from one block, or None if it carries no id."""
    id_match = ID_RE.search(block)
    if not id_match:
        return None

    fields = {}

    sop_match = SOP_NODE_RE.search(block)
    if sop_match:
        sop = sop_match.group(1)
        fields['slope'] = clean_value(_tag_body(sop, 'Slope'))
        fields['offset'] = clean_value(_tag_body(sop, 'Offset'))
        fields['power'] = clean_value(_tag_body(sop, 'Power'))

    sat_match = SAT_NODE_RE.search(block)
    if sat_match:
        fields['saturation'] = clean_value(_tag_body(sat_match.group(1), 'Saturation'))

    lut = _tag_body(block, 'LUT')
    if lut is not None:
        # LUT names are looked up as filenames, so no whitespace may survive
        fields['lut'] = WHITESPACE_RE.sub('', lut) or None

    for field_name, tag in METADATA_TAGS.items():
        fields[field_name] = clean_value(_tag_body(block, tag))

    return ColorDecision(name=id_match.group(1), **fields)


def parse_ccc_with_stats(content: str) -> Tuple[DecisionTable, int]:
    """Parse CCC text and return ``(table, skipped_block_count)``."""
    table: DecisionTable = {}
    block_count = 0
    skipped = 0

    for block in iter_blocks(content):
        block_count += 1
        decision = parse_block(block)
        if decision is None:
            skipped += 1
            logger.warning(f"ColorCorrection block #{block_count} has no id attribute; skipping")
            continue
        if decision.name in table:
            logger.debug(f"Duplicate ColorCorrection id '{decision.name}' overwrites earlier entry")
        table[decision.name] = decision

    logger.info(f"Parsed {len(table)} CCC entries from {block_count} blocks ({skipped} skipped)")
    return table, skipped


def parse_ccc_text(content: str) -> DecisionTable:
    """Parse the full text of a CCC file into a DecisionTable."""
    table, _ = parse_ccc_with_stats(content)
    return table


def read_ccc_file(path) -> Tuple[DecisionTable, int]:
    """
    Read and parse a CCC file, returning ``(table, skipped_block_count)``.

    Raises:
        ParseError: if the file cannot be opened or read
    """
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            content = f.read()
    except OSError as e:
        raise ParseError(path, e.strerror or str(e)) from e

    logger.info(f"Parsing CCC file {path} ({len(content)} characters)")
    return parse_ccc_with_stats(content)


def parse_ccc(path) -> DecisionTable:
    """
    Read and parse a CCC file.

    Raises:
        ParseError: if the file cannot be opened or read
    """
    table, _ = read_ccc_file(path)
    return table
