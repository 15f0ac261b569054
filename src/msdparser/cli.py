#!/usr/bin/env python3
"""
Command line interface for dumping the parameters of an MSD file.

This is a thin wrapper around `parse_msd`: it opens the input, applies the
parser settings from a YAML config file and/or the command line, and prints
every parameter either as text or as JSON lines.
"""

import argparse
import logging
import os
import sys
import typing

from msdparser.errors import MSDParserError
from msdparser.main.config import ParserSettings, load_settings
from msdparser.parameter import MSDParameter
from msdparser.parser import parse_msd
from msdparser.tools.log_utils import setup_logger


def format_parameter(parameter: MSDParameter, output_format: str) -> str:
    if output_format == "json":
        return parameter.to_json(ensure_ascii=False)
    return str(parameter)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        description='Dump the parameters of an MSD file (.sm, .ssc, .dwi, .msd)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print every parameter of a chart
  msdparser song.sm

  # Only the title and artist, as JSON lines
  msdparser song.sm --key TITLE --key ARTIST --format json

  # Legacy files without escapes, skipping junk between parameters
  msdparser old.dwi --no-escapes --ignore-stray-text

  # Read settings from a YAML file (command line flags take precedence)
  msdparser song.sm --config msd.yaml

Config file format:
  parser_settings:
    escapes: true
    ignore_stray_text: false
    encoding: utf-8
    buffer_size: 4096
        """
    )

    parser.add_argument(
        'file',
        type=str,
        help='Path to the MSD file, or "-" to read from stdin'
    )

    # Parser settings
    parser.add_argument(
        '--config',
        '-c',
        type=str,
        help='YAML file with a parser_settings section'
    )
    parser.add_argument(
        '--no-escapes',
        action='store_true',
        default=None,
        help='Treat backslashes as ordinary characters'
    )
    parser.add_argument(
        '--ignore-stray-text',
        action='store_true',
        default=None,
        help='Discard text outside of parameters instead of failing'
    )
    parser.add_argument(
        '--encoding',
        type=str,
        help='Text encoding of the input (default: utf-8)'
    )

    # Output
    parser.add_argument(
        '--format',
        '-f',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )
    parser.add_argument(
        '--key',
        '-k',
        action='append',
        default=[],
        help='Only print parameters with this key (case-insensitive, repeatable)'
    )
    parser.add_argument(
        '--output',
        '-o',
        type=str,
        help='Write the parameters to this file instead of stdout'
    )

    # Logging
    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Log every parsed parameter'
    )
    parser.add_argument(
        '--quiet',
        '-q',
        action='store_true',
        help='Suppress all log output'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        help='Save logs to file'
    )

    return parser


def resolve_settings(args: argparse.Namespace) -> ParserSettings:
    settings = load_settings(args.config)
    if args.no_escapes:
        settings.escapes = False
    if args.ignore_stray_text:
        settings.ignore_stray_text = True
    if args.encoding:
        settings.encoding = args.encoding
    return settings


def dump_parameters(
    stream: typing.IO,
    out: typing.TextIO,
    settings: ParserSettings,
    output_format: str = "text",
    keys: typing.Optional[typing.List[str]] = None,
    logger: typing.Optional[logging.Logger] = None) -> int:
    """
    Parse `stream` and write the selected parameters to `out`.

    Returns the number of parameters written; parse errors propagate
    after everything before them has been written.
    """
    wanted = set(key.upper() for key in keys) if keys else None
    written = 0
    for parameter in parse_msd(file=stream, settings=settings, logger=logger):
        key = parameter.key() or ""
        if wanted is not None and key.upper() not in wanted:
            continue
        out.write(format_parameter(parameter, output_format))
        out.write("\n")
        written += 1
    return written


def main():
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    if args.file != "-" and not os.path.isfile(args.file):
        print(f"Error: File does not exist: {args.file}", file=sys.stderr)
        sys.exit(1)
    if args.config is not None and not os.path.isfile(args.config):
        print(f"Error: Config file does not exist: {args.config}", file=sys.stderr)
        sys.exit(1)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    if args.log_file:
        logger = setup_logger("MSDParserCLI", args.log_file, level)
    else:
        logger = logging.getLogger("MSDParserCLI")
        logger.setLevel(level)
        if args.quiet:
            logger.addHandler(logging.NullHandler())
        else:
            logger = setup_logger("MSDParserCLI", None, level, '%(asctime)s - %(levelname)s - %(message)s')
    logger.propagate = False

    try:
        settings = resolve_settings(args)
        logger.debug(f"Parser settings: {settings.to_json()}")
        out = open(args.output, 'w', encoding='utf-8') if args.output else sys.stdout
        try:
            if args.file == "-":
                written = dump_parameters(sys.stdin.buffer, out, settings, args.format, args.key, logger)
            else:
                with open(args.file, 'rb') as f:
                    written = dump_parameters(f, out, settings, args.format, args.key, logger)
        finally:
            if out is not sys.stdout:
                out.close()
        logger.info(f"Wrote {written} parameter(s) from {args.file}")
        if args.output:
            print(f"Parameters saved to: {args.output}")
        sys.exit(0)

    except MSDParserError as e:
        logger.error(f"Failed to parse {args.file}: {e.msg}")
        print(f"\nParse error: {e.msg}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        print(f"\nFatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
