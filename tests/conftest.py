"""Shared pytest fixtures and configuration."""
import pytest
from pathlib import Path
import sys

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


SAMPLE_CCC = """<?xml version="1.0" encoding="UTF-8"?>
<ColorDecisionList xmlns="urn:ASC:CDL:v1.01">
<ColorCorrectionCollection>
  <ColorCorrection id="A001C002">
    <SOPNode>
      <Slope>1.1 1.0 0.9</Slope>
      <Offset>0.01 0.0 -0.01</Offset>
      <Power>1.0 1.0 1.0</Power>
    </SOPNode>
    <SATNode>
      <Saturation>1.05</Saturation>
    </SATNode>
    <LUT>show_lut.cube</LUT>
    <Episode>101</Episode>
    <Scene>12A</Scene>
    <Shot>3</Shot>
    <Take>2</Take>
    <Camera>A</Camera>
  </ColorCorrection>
  <ColorCorrection
      id="B002C010">
    <SOPNode>
      <Slope>0.95 0.95 0.95</Slope>
    </SOPNode>
  </ColorCorrection>
</ColorCorrectionCollection>
</ColorDecisionList>
"""

SAMPLE_EDL = "\n".join([
    "TITLE: DAY_01",
    "FCM: NON-DROP FRAME",
    "",
    "001\tA001C002\tV\tC\t01:00:00:00 01:00:05:00 00:00:00:00 00:00:05:00",
    "* FROM CLIP NAME: A001C002.mov",
    "* ASC_SOP (1.1 1.0 0.9 0.01 0.0 -0.01 1.0 1.0 1.0)",
    "* ASC_SAT 1.05",
    "002\tB002C010\tV\tC\t01:00:05:00 01:00:09:00 00:00:05:00 00:00:09:00",
    "*ASC_SOP (0.95 0.95 0.95)(0.0 0.0 0.0)(1.0 1.0 1.0)",
    "",
])


@pytest.fixture
def ccc_file(tmp_path):
    """Write the sample CCC to a temporary file."""
    path = tmp_path / "grades.ccc"
    path.write_text(SAMPLE_CCC)
    return path


@pytest.fixture
def edl_file(tmp_path):
    """Write the sample EDL to a temporary file."""
    path = tmp_path / "grades.edl"
    path.write_text(SAMPLE_EDL)
    return path


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Clear every cdl_import environment variable and hide user config files."""
    for name in ("CDL_IMPORT_CONFIG", "CDL_LUT_SEARCH_PATHS", "CDL_MAX_LUT_SEARCH_DEPTH",
                 "CDL_NODE_INDEX", "CDL_LUT_NODE_INDEX"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return monkeypatch


@pytest.fixture
def ccc_text():
    return SAMPLE_CCC


@pytest.fixture
def edl_text():
    return SAMPLE_EDL
