# resolve_applicator.py
#
# INSTRUCTIONS:
# 1. Install this package into the Python environment Resolve uses for scripting.
# 2. Open the project and timeline you want to grade in DaVinci Resolve.
# 3. Run `python -m cdl_import apply /path/to/grades.ccc` with the Resolve scripting
#    environment configured (RESOLVE_SCRIPT_API / PYTHONPATH pointing at
#    DaVinciResolveScript), or call run_import() from Resolve's Python console.
#
# The Resolve objects (timeline, timeline items, media pool items) are used
# duck-typed; nothing here is needed to parse or match CDL files.

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from cdl_import.config import Settings, load_settings
from cdl_import.decisions import ColorDecision, DecisionTable, ResolveUnavailable
from cdl_import.loader import load_decisions_with_stats
from cdl_import.lut_search import search_for_lut
from cdl_import.matcher import match_clip

logger = logging.getLogger(__name__)

# CCC metadata field -> Resolve clip metadata key
RESOLVE_METADATA_KEYS = {
    'episode': 'Episode #',
    'scene': 'Scene',
    'shot': 'Shot',
    'take': 'Take',
    'camera': 'Camera #',
}


@dataclass
class ImportSummary:
    entries: int = 0
    skipped: int = 0
    clips: int = 0
    matched: int = 0
    applied: int = 0
    metadata_applied: int = 0
    luts_applied: int = 0
    unmatched: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def format(self) -> str:
        return (
            "Import Complete!\n\n"
            f"CDL entries found in file: {self.entries}\n"
            f"Unreadable entries skipped in file: {self.skipped}\n"
            f"Clips found in timeline: {self.clips}\n"
            f"Clips matched to a CDL entry: {self.matched}\n"
            f"CDLs successfully applied: {self.applied}\n"
            f"Clips without a matching entry: {len(self.unmatched)}\n"
            f"Clips where applying the CDL failed: {len(self.failed)}"
        )


def get_resolve():
    """
    Return the running Resolve application object.

    Raises:
        ResolveUnavailable: if the scripting module is missing or Resolve is not running
    """
    try:
        import DaVinciResolveScript as dvr_script
    except ImportError as e:
        raise ResolveUnavailable(
            "DaVinciResolveScript module not found. Set RESOLVE_SCRIPT_API and add its "
            "Modules directory to PYTHONPATH."
        ) from e

    resolve = dvr_script.scriptapp("Resolve")
    if not resolve:
        raise ResolveUnavailable("Could not connect to DaVinci Resolve. Is it running?")
    return resolve


def build_cdl_map(decision: ColorDecision, node_index: int = 1) -> dict:
    """Arguments for TimelineItem.SetCDL; channels that are not set are left out."""
    cdl_map = {"NodeIndex": str(node_index)}
    if decision.slope is not None:
        cdl_map["Slope"] = decision.slope
    if decision.offset is not None:
        cdl_map["Offset"] = decision.offset
    if decision.power is not None:
        cdl_map["Power"] = decision.power
    if decision.saturation is not None:
        cdl_map["Saturation"] = decision.saturation
    return cdl_map


def apply_cdl(clip, decision: ColorDecision, node_index: int = 1) -> bool:
    """Apply slope/offset/power/saturation to one timeline item."""
    success = bool(clip.SetCDL(build_cdl_map(decision, node_index)))
    if success:
        logger.debug(f"CDL applied to '{clip.GetName()}' on node {node_index}")
    return success


def apply_metadata(clip, decision: ColorDecision) -> bool:
    """
    Copy Episode/Scene/Shot/Take/Camera onto the clip's media pool item.

    Returns True if at least one field was written.
    """
    if not decision.has_metadata():
        return False

    media_pool_item = clip.GetMediaPoolItem()
    if not media_pool_item:
        logger.warning(f"Could not get MediaPoolItem for '{clip.GetName()}'; metadata not applied")
        return False

    applied_count = 0
    for field_name, resolve_key in RESOLVE_METADATA_KEYS.items():
        value = getattr(decision, field_name)
        if value is None:
            continue
        if media_pool_item.SetMetadata(resolve_key, value):
            applied_count += 1
        else:
            logger.warning(f"Failed to set {resolve_key} metadata on '{clip.GetName()}'")

    if applied_count:
        logger.info(
            "Metadata applied: Ep:%s Sc:%s Sh:%s Tk:%s Cam:%s",
            decision.episode or "-", decision.scene or "-", decision.shot or "-",
            decision.take or "-", decision.camera or "-",
        )
    return applied_count > 0


def apply_lut(clip, lut_name: Optional[str], settings: Settings) -> bool:
    """
    Find ``lut_name`` under the configured LUT roots and set it on the LUT node.

    The relative path is tried first since that is how Resolve lists LUTs;
    the absolute path is the fallback.
    """
    if not lut_name:
        return False

    location = search_for_lut(lut_name, settings.lut_search_paths, settings.max_lut_search_depth)
    if location is None:
        return False

    node_graph = clip.GetNodeGraph()
    num_nodes = node_graph.GetNumNodes() if node_graph else 0
    if num_nodes < settings.lut_node_index:
        logger.warning(
            f"'{clip.GetName()}' has {num_nodes} node(s); LUT needs node {settings.lut_node_index}"
        )
        return False

    if clip.SetLUT(settings.lut_node_index, location.relative_path):
        return True
    return bool(clip.SetLUT(settings.lut_node_index, location.absolute_path))


def iter_timeline_clips(timeline) -> Iterator:
    """Yield every item on every video track of the timeline."""
    track_count = timeline.GetTrackCount("video") or 0
    for track_index in range(1, track_count + 1):
        items = timeline.GetItemListInTrack("video", track_index) or []
        logger.debug(f"Track {track_index} has {len(items)} items")
        yield from items


def apply_decisions_to_timeline(timeline, table: DecisionTable,
                                settings: Optional[Settings] = None) -> ImportSummary:
    """Match every video clip on the timeline against the table and apply what matches."""
    settings = settings or load_settings()
    summary = ImportSummary(entries=len(table))

    for clip in iter_timeline_clips(timeline):
        summary.clips += 1
        clip_name = clip.GetName()
        match = match_clip(table, clip_name)

        if match is None:
            logger.info(f"No CDL match found for clip '{clip_name}'")
            summary.unmatched.append(clip_name)
            continue

        summary.matched += 1
        logger.info(f"Matching clip '{clip_name}' to CDL entry '{match.key}' ({match.tier.name})")
        decision = match.decision

        if decision.has_grade():
            if apply_cdl(clip, decision, settings.cdl_node_index):
                summary.applied += 1
            else:
                logger.warning(f"Failed to apply CDL to clip '{clip_name}'")
                summary.failed.append(clip_name)

        if apply_metadata(clip, decision):
            summary.metadata_applied += 1

        if decision.lut and apply_lut(clip, decision.lut, settings):
            summary.luts_applied += 1

    logger.info(f"CDLs applied to {summary.applied} of {summary.clips} clips")
    return summary


def run_import(path, settings: Optional[Settings] = None, resolve=None) -> ImportSummary:
    """
    Load a .ccc/.edl file and apply it to the current timeline in Resolve.

    Raises:
        UnsupportedFormat, ParseError: if the CDL file cannot be used
        ResolveUnavailable: if Resolve, a project or a timeline is not available
    """
    settings = settings or load_settings()

    # 1. Parse first so a bad file fails before touching the project
    table, skipped = load_decisions_with_stats(path)

    # 2. Find the current project and timeline
    resolve = resolve or get_resolve()
    project_manager = resolve.GetProjectManager()
    project = project_manager.GetCurrentProject() if project_manager else None
    if not project:
        raise ResolveUnavailable("No project is currently open")

    timeline = project.GetCurrentTimeline()
    if not timeline:
        raise ResolveUnavailable("No timeline is currently open")

    # 3. Apply on the Color page so node graphs are available
    if any(d.lut for d in table.values()):
        project.RefreshLUTList()
    resolve.OpenPage("color")

    summary = apply_decisions_to_timeline(timeline, table, settings)
    summary.skipped = skipped
    logger.info(summary.format())
    return summary
