"""
Match timeline clip names to parsed CDL entries.

Camera-original clip names often differ from CDL ids by a file extension
or by truncation in the grading software, so matching is tiered:

1. exact key
2. clip name with its extension stripped
3. substring containment in either direction (raw name, then stripped name)

Substring candidates are tried longest key first, then alphabetically,
so the most specific id wins and results do not depend on dict order.
"""

from enum import Enum
from typing import Dict, Iterable, NamedTuple, Optional

from cdl_import.decisions import ColorDecision, DecisionTable


class MatchTier(Enum):
    EXACT = 1
    EXTENSION_STRIPPED = 2
    SUBSTRING = 3


class ClipMatch(NamedTuple):
    key: str
    decision: ColorDecision
    tier: MatchTier


def strip_extension(name: str) -> str:
    """Drop a trailing ``.ext``; names without one (or like ``.hidden``) are returned unchanged."""
    dot = name.rfind('.')
    if dot <= 0 or dot == len(name) - 1:
        return name
    return name[:dot]


def _substring_candidates(table: DecisionTable):
    return sorted((k for k in table if k), key=lambda k: (-len(k), k))


def match_clip(table: DecisionTable, clip_name: str) -> Optional[ClipMatch]:
    """Return the best ClipMatch for clip_name, or None if nothing matches."""
    if not clip_name:
        return None

    if clip_name in table:
        return ClipMatch(clip_name, table[clip_name], MatchTier.EXACT)

    stripped = strip_extension(clip_name)
    if stripped in table:
        return ClipMatch(stripped, table[stripped], MatchTier.EXTENSION_STRIPPED)

    for key in _substring_candidates(table):
        if (key in clip_name or clip_name in key
                or key in stripped or stripped in key):
            return ClipMatch(key, table[key], MatchTier.SUBSTRING)

    return None


def match_clips(table: DecisionTable, clip_names: Iterable[str]) -> Dict[str, Optional[ClipMatch]]:
    """Match each clip name; unmatched names map to None."""
    return {name: match_clip(table, name) for name in clip_names}
