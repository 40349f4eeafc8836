#!/usr/bin/env python3
"""
CLI for the graze drawing language.

Usage:
    graze check FILE [--json]
    graze tokens FILE
    graze ast FILE
    graze run FILE [-o OUT] [-f svg|dxf] [--dpi N]

Examples:
    # Check syntax
    graze check drawing.gz

    # Render to SVG on stdout
    graze run drawing.gz

    # Render to a DXF file (format taken from the suffix)
    graze run drawing.gz -o drawing.dxf

The default output format is svg; set GRAZE_OUTPUT_FORMAT=dxf to change
it. Diagnostics go to stderr and the exit status is 1 on any error.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional


def _read_source(path_str: str) -> Optional[str]:
    source_path = Path(path_str)
    if not source_path.exists():
        print(f"Error: File not found: {source_path}", file=sys.stderr)
        return None
    try:
        return source_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        print(f"Error: {source_path} is not valid UTF-8: {e}", file=sys.stderr)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
    return None


def cmd_check(args):
    """Check a graze file for lexical and syntax errors."""
    from . import Tokenizer, Parser, GrazeError

    source = _read_source(args.file)
    if source is None:
        return 1

    try:
        program = Parser(Tokenizer(source), source=source).parse_file()
    except GrazeError as e:
        if args.json:
            print(json.dumps({"ok": False, "diagnostics": [e.diagnostic.to_json()]}, indent=2))
        else:
            print(str(e), file=sys.stderr)
        return 1

    count = len(program.instructions)
    if args.json:
        print(json.dumps({"ok": True, "instructions": count}, indent=2))
    else:
        print(f"OK: {Path(args.file).name} - {count} instruction(s), no errors")
    return 0


def cmd_tokens(args):
    """Dump the token stream with positions."""
    from . import Tokenizer, GrazeError

    source = _read_source(args.file)
    if source is None:
        return 1

    try:
        for token in Tokenizer(source):
            print(f"{str(token.position):>8}  {token.type.name:<12} {token.lexeme!r}")
    except GrazeError as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


def cmd_ast(args):
    """Print the parsed tree."""
    from . import Tokenizer, Parser, GrazeError, format_ast

    source = _read_source(args.file)
    if source is None:
        return 1

    try:
        program = Parser(Tokenizer(source), source=source).parse_file()
    except GrazeError as e:
        print(str(e), file=sys.stderr)
        return 1
    print(format_ast(program))
    return 0


def _output_format(args) -> str:
    from .output import default_output_format

    if args.format:
        return args.format
    if args.output:
        suffix = Path(args.output).suffix.lower()
        if suffix in ('.svg', '.dxf'):
            return suffix[1:]
    return default_output_format()


def cmd_run(args):
    """Execute a graze file and render the drawing."""
    from . import Tokenizer, Parser, Runtime, GrazeError
    from .output import create_output

    source = _read_source(args.file)
    if source is None:
        return 1

    try:
        fmt = _output_format(args)
        output = create_output(fmt, args.output, dpi=args.dpi)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        program = Parser(Tokenizer(source), source=source).parse_file()
        runtime = Runtime(output)
        runtime.execute(program)
    except GrazeError as e:
        print(str(e), file=sys.stderr)
        return 1

    runtime.finish()
    if args.output:
        print(f"Exported to: {args.output} ({fmt})", file=sys.stderr)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='graze',
        description='graze 2D drawing language interpreter',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug output to stderr')
    subparsers = parser.add_subparsers(dest='action', required=True)

    # check command
    check_parser = subparsers.add_parser('check', help='Check a file for errors')
    check_parser.add_argument('file', help='graze source file')
    check_parser.add_argument('--json', action='store_true',
                              help='Report the result as JSON')

    # tokens command
    tokens_parser = subparsers.add_parser('tokens', help='Dump the token stream')
    tokens_parser.add_argument('file', help='graze source file')

    # ast command
    ast_parser = subparsers.add_parser('ast', help='Print the parsed tree')
    ast_parser.add_argument('file', help='graze source file')

    # run command
    run_parser = subparsers.add_parser('run', help='Run a file and render the drawing')
    run_parser.add_argument('file', help='graze source file')
    run_parser.add_argument('-o', '--output', metavar='FILE',
                            help='Output file (stdout if omitted)')
    run_parser.add_argument('-f', '--format', choices=('svg', 'dxf'),
                            help='Output format (default: from the output suffix or GRAZE_OUTPUT_FORMAT)')
    run_parser.add_argument('--dpi', type=float, default=96.0,
                            help='Resolution for SVG output (default: 96)')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format='%(levelname)s %(name)s: %(message)s',
        )

    if args.action == 'check':
        return cmd_check(args)
    elif args.action == 'tokens':
        return cmd_tokens(args)
    elif args.action == 'ast':
        return cmd_ast(args)
    elif args.action == 'run':
        return cmd_run(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
