"""Command line entry point: preview a CDL file, apply it in Resolve, or run the preview web API."""
import argparse
import json
import logging
import sys

from cdl_import.decisions import CdlImportError
from cdl_import.loader import load_decisions_with_stats
from cdl_import.matcher import match_clips

logger = logging.getLogger("cdl_import")


def cmd_preview(args):
    table, skipped = load_decisions_with_stats(args.file)
    matches = match_clips(table, args.clip or [])

    if args.json:
        print(json.dumps({
            'skipped': skipped,
            'entries': {name: d.to_dict() for name, d in sorted(table.items())},
            'matches': {
                name: None if m is None else {'key': m.key, 'tier': m.tier.name}
                for name, m in matches.items()
            },
        }, indent=2))
        return 0

    print(f"CDL entries found in file: {len(table)}")
    print(f"Unreadable entries skipped in file: {skipped}")
    for name, decision in sorted(table.items()):
        print(f"CDL Entry: '{name}'")
        for key, value in decision.to_dict().items():
            if key != 'name':
                print(f"  {key.capitalize()}: {value}")

    for clip_name, match in matches.items():
        if match is None:
            print(f"Clip '{clip_name}': no matching CDL entry")
        else:
            print(f"Clip '{clip_name}': matched '{match.key}' ({match.tier.name})")
    return 0


def cmd_apply(args):
    from cdl_import.resolve_applicator import run_import

    summary = run_import(args.file)
    print(summary.format())
    return 0


def cmd_web(args):
    from cdl_import.web import app

    app.run(debug=args.debug, port=args.port)
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog='cdl_import', description='Import ASC CDL values from CCC/EDL files')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    preview = subparsers.add_parser('preview', help='Parse a file and show entries and clip matches')
    preview.add_argument('file', help='Path to a .ccc or .edl file')
    preview.add_argument('--clip', action='append', help='Clip name to match (repeatable)')
    preview.add_argument('--json', action='store_true', help='Print JSON instead of text')
    preview.set_defaults(func=cmd_preview)

    apply = subparsers.add_parser('apply', help='Apply a file to the current timeline in DaVinci Resolve')
    apply.add_argument('file', help='Path to a .ccc or .edl file')
    apply.set_defaults(func=cmd_apply)

    web = subparsers.add_parser('web', help='Run the preview web API')
    web.add_argument('--port', type=int, default=5434, help='Port to run the server on (default: 5434)')
    web.add_argument('--debug', action='store_true', help='Enable debug mode')
    web.set_defaults(func=cmd_web)

    return parser


def main(argv=None):
    """Parse arguments and run the selected command; returns the exit code."""
    args = build_parser().parse_args(argv)

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        return args.func(args)
    except CdlImportError as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
