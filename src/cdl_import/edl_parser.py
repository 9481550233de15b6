"""
Parser for ASC CDL values embedded in Edit Decision List comments.

An event header line (``010<TAB>A001C002<TAB>V<TAB>C ...``) names the clip;
``* ASC_SOP`` and ``* ASC_SAT`` comment lines that follow it attach grading
values to that clip until the next header appears.

Each line is read by ``read_edl_line``, a pure function of the current clip
name and the line, so any single line can be tested in isolation. The scan
folds those results into a table that it owns.
"""

import dataclasses
import logging
import re
from typing import Iterable, NamedTuple, Optional, Tuple

from cdl_import.decisions import ColorDecision, DecisionTable, ParseError

logger = logging.getLogger(__name__)

EVENT_HEADER_RE = re.compile(r'^\d+\s+')
SOP_MARKER_RE = re.compile(r'\*\s*ASC_SOP')
SOP_VALUES_RE = re.compile(r'\*\s*ASC_SOP\s+((?:\([^)]*\)\s*)+)')
SOP_GROUP_RE = re.compile(r'\(([^)]*)\)')
SAT_MARKER_RE = re.compile(r'\*\s*ASC_SAT')
SAT_VALUE_RE = re.compile(r'\*\s*ASC_SAT\s+([\d.]+)')


class EdlState(NamedTuple):
    current_clip: Optional[str]
    table: DecisionTable
    skipped: int = 0


EMPTY_STATE = EdlState(None, {})


class LineEffect(NamedTuple):
    """
    What one EDL line does.

    ``changes`` is None when no entry is touched; an empty dict still
    creates the entry for ``current_clip``. ``skipped`` counts ASC
    directives whose values could not be read.
    """
    current_clip: Optional[str]
    changes: Optional[dict]
    skipped: int


def _event_clip_name(line: str) -> Optional[str]:
    """Second tab-delimited field of an event header (empty fields skipped)."""
    fields = [f for f in line.split('\t') if f]
    if len(fields) < 2:
        return None
    return fields[1].strip()


def parse_sop_values(line: str):
    """
    Return ``(slope, offset, power)`` strings from an ASC_SOP line, or None.

    Accepts both a single 9-value group and the three-group
    ``(s s s)(o o o)(p p p)`` form. Fewer than 9 values yields None.
    """
    match = SOP_VALUES_RE.search(line)
    if not match:
        return None
    values = []
    for group in SOP_GROUP_RE.findall(match.group(1)):
        values.extend(group.split())
    if len(values) < 9:
        return None
    return (
        ' '.join(values[0:3]),
        ' '.join(values[3:6]),
        ' '.join(values[6:9]),
    )


def read_edl_line(current: Optional[str], line: str) -> LineEffect:
    """Interpret one line given the clip name in effect before it."""
    if EVENT_HEADER_RE.match(line):
        name = _event_clip_name(line)
        if name is not None:
            # A blank clip field clears the clip rather than naming an entry ""
            current = name or None

    if current is None:
        return LineEffect(current, None, 0)

    changes = None
    skipped = 0

    if SOP_MARKER_RE.search(line):
        changes = {}
        sop = parse_sop_values(line)
        if sop is None:
            skipped += 1
        else:
            changes.update(zip(('slope', 'offset', 'power'), sop))

    if SAT_MARKER_RE.search(line):
        changes = changes if changes is not None else {}
        sat_match = SAT_VALUE_RE.search(line)
        if sat_match:
            changes['saturation'] = sat_match.group(1)
        else:
            skipped += 1

    return LineEffect(current, changes, skipped)


def _apply_changes(table: DecisionTable, name: str, changes: dict) -> None:
    """Create or update the entry for name in place."""
    decision = table.get(name) or ColorDecision(name=name)
    if changes:
        decision = dataclasses.replace(decision, **changes)
    table[name] = decision


def step_edl_line(state: EdlState, line: str) -> EdlState:
    """Advance the scan by one line without modifying ``state``."""
    effect = read_edl_line(state.current_clip, line)
    table = state.table
    if effect.changes is not None:
        table = dict(table)
        _apply_changes(table, effect.current_clip, effect.changes)
    return EdlState(effect.current_clip, table, state.skipped + effect.skipped)


def parse_edl_with_stats(lines: Iterable[str]) -> Tuple[DecisionTable, int]:
    """Parse EDL lines and return ``(table, skipped_directive_count)``."""
    table: DecisionTable = {}
    current = None
    skipped = 0

    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip('\r\n')
        effect = read_edl_line(current, line)
        current = effect.current_clip
        if effect.changes is not None:
            _apply_changes(table, current, effect.changes)
        if effect.skipped:
            skipped += effect.skipped
            logger.debug(f"Line {line_number}: unreadable ASC values for '{current}': {line.strip()}")

    logger.info(f"Parsed {len(table)} EDL entries ({skipped} ASC directives skipped)")
    return table, skipped


def parse_edl_lines(lines: Iterable[str]) -> DecisionTable:
    """Parse an iterable of EDL lines into a DecisionTable."""
    table, _ = parse_edl_with_stats(lines)
    return table


def read_edl_file(path) -> Tuple[DecisionTable, int]:
    """
    Read and parse an EDL file line by line, returning the skipped count too.

    Raises:
        ParseError: if the file cannot be opened or read
    """
    logger.info(f"Parsing EDL file {path}")
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return parse_edl_with_stats(f)
    except OSError as e:
        raise ParseError(path, e.strerror or str(e)) from e


def parse_edl(path) -> DecisionTable:
    """
    Read and parse an EDL file line by line.

    Raises:
        ParseError: if the file cannot be opened or read
    """
    table, _ = read_edl_file(path)
    return table
