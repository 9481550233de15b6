"""Tests for the command line entry point."""
import json
from unittest.mock import patch

import pytest

from cdl_import.__main__ import build_parser, main
from cdl_import.decisions import ResolveUnavailable
from cdl_import.resolve_applicator import ImportSummary


class TestPreviewCommand:
    """Test `cdl_import preview`."""

    def test_text_output(self, ccc_file, capsys):
        assert main(['preview', str(ccc_file), '--clip', 'A001C002.mov', '--clip', 'Z999']) == 0
        out = capsys.readouterr().out
        assert "CDL entries found in file: 2" in out
        assert "CDL Entry: 'A001C002'" in out
        assert "Slope: 1.1 1.0 0.9" in out
        assert "Clip 'A001C002.mov': matched 'A001C002' (EXTENSION_STRIPPED)" in out
        assert "Clip 'Z999': no matching CDL entry" in out
        assert "Unreadable entries skipped in file: 0" in out

    def test_json_output(self, edl_file, capsys):
        assert main(['preview', str(edl_file), '--json', '--clip', 'B002C010_proxy']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['skipped'] == 0
        assert data['entries']['A001C002']['saturation'] == '1.05'
        assert data['matches']['B002C010_proxy'] == {'key': 'B002C010', 'tier': 'SUBSTRING'}

    def test_unsupported_format_exit_code(self, tmp_path):
        path = tmp_path / "grades.txt"
        path.write_text("")
        assert main(['preview', str(path)]) == 1

    def test_missing_file_exit_code(self, tmp_path):
        assert main(['preview', str(tmp_path / "missing.edl")]) == 1


class TestApplyCommand:
    """Test `cdl_import apply`."""

    def test_apply_prints_summary(self, ccc_file, capsys):
        summary = ImportSummary(entries=2, clips=5, matched=2, applied=2)
        with patch('cdl_import.resolve_applicator.run_import', return_value=summary) as run:
            assert main(['apply', str(ccc_file)]) == 0
        run.assert_called_once_with(str(ccc_file))
        assert "Clips found in timeline: 5" in capsys.readouterr().out

    def test_apply_without_resolve(self, ccc_file):
        with patch('cdl_import.resolve_applicator.run_import', side_effect=ResolveUnavailable("not running")):
            assert main(['apply', str(ccc_file)]) == 1


class TestParser:
    """Test argument parsing."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_web_defaults(self):
        args = build_parser().parse_args(['web'])
        assert args.port == 5434
        assert args.debug is False
