"""
Data model shared by the CCC/EDL parsers, the clip matcher and the Resolve applicator.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional

GRADE_FIELDS = ('slope', 'offset', 'power', 'saturation')
METADATA_FIELDS = ('episode', 'scene', 'shot', 'take', 'camera')


class CdlImportError(Exception):
    """Base class for errors raised by cdl_import."""


class UnsupportedFormat(CdlImportError):
    """The file extension is not one of the supported CDL formats."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Unsupported CDL format: {path}")


class ParseError(CdlImportError):
    """The CDL source file could not be opened or read."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read {path}: {reason}")


class ConfigError(CdlImportError):
    """A configuration value is present but invalid."""


class ResolveUnavailable(CdlImportError):
    """The DaVinci Resolve scripting API could not be reached."""


@dataclass(frozen=True)
class ColorDecision:
    """
    One parsed color correction.

    Every field except ``name`` is optional. A field set to None means
    "leave that channel alone", never zero.
    """
    name: str
    slope: Optional[str] = None
    offset: Optional[str] = None
    power: Optional[str] = None
    saturation: Optional[str] = None
    lut: Optional[str] = None
    episode: Optional[str] = None
    scene: Optional[str] = None
    shot: Optional[str] = None
    take: Optional[str] = None
    camera: Optional[str] = None

    def has_grade(self) -> bool:
        return any(getattr(self, f) is not None for f in GRADE_FIELDS)

    def has_metadata(self) -> bool:
        return any(getattr(self, f) is not None for f in METADATA_FIELDS)

    def to_dict(self) -> dict:
        """Return the name and every field that is set."""
        return {k: v for k, v in asdict(self).items() if v is not None}


# Keyed by ColorDecision.name
DecisionTable = Dict[str, ColorDecision]


def clean_value(text: Optional[str]) -> Optional[str]:
    """Trim a tag body; whitespace-only bodies become None."""
    if text is None:
        return None
    text = text.strip()
    return text or None
