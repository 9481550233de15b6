"""
Small web API for previewing how a CCC/EDL file will match a list of clip names.
"""

import logging

from flask import Flask, jsonify, request
from werkzeug.utils import secure_filename

from cdl_import.ccc_parser import parse_ccc_with_stats
from cdl_import.config import load_settings
from cdl_import.decisions import CdlImportError, UnsupportedFormat
from cdl_import.edl_parser import parse_edl_with_stats
from cdl_import.formats import CdlFormat, detect_format
from cdl_import.matcher import match_clips

# --- Flask App Initialization ---
app = Flask(__name__)

# Configure logging only if not already configured
if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_uploaded_text(cdl_format: CdlFormat, text: str):
    """Return (table, skipped_count) for the uploaded text."""
    if cdl_format is CdlFormat.CCC:
        return parse_ccc_with_stats(text)
    return parse_edl_with_stats(text.splitlines())


@app.route('/api/settings', methods=['GET'])
def get_settings():
    """Returns the effective settings (config file plus environment)."""
    try:
        settings = load_settings()
    except CdlImportError as e:
        return jsonify({'success': False, 'message': str(e)}), 500
    return jsonify({'success': True, 'settings': settings.to_dict()})


@app.route('/api/preview', methods=['POST'])
def preview():
    """
    Parses an uploaded .ccc/.edl file and matches it against clip names.

    Form fields:
        file: the CDL file
        clip_names: optional, one clip name per line
    """
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        return jsonify({'success': False, 'message': 'A .ccc or .edl file is required'}), 400

    # The raw name is only inspected, never used as a path
    try:
        cdl_format = detect_format(upload.filename)
    except UnsupportedFormat as e:
        return jsonify({'success': False, 'message': str(e)}), 400

    text = upload.read().decode('utf-8', errors='replace')
    table, skipped = parse_uploaded_text(cdl_format, text)
    logger.info(f"Preview of {secure_filename(upload.filename) or 'upload'}: {len(table)} entries")

    clip_names = [
        line.strip() for line in request.form.get('clip_names', '').splitlines() if line.strip()
    ]
    matches = {}
    for name, match in match_clips(table, clip_names).items():
        matches[name] = None if match is None else {
            'key': match.key,
            'tier': match.tier.name,
        }

    return jsonify({
        'success': True,
        'format': cdl_format.name,
        'skipped': skipped,
        'entries': {name: decision.to_dict() for name, decision in sorted(table.items())},
        'matches': matches,
    })
