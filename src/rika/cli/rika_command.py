"""CLI entrypoint: extract text and metadata from files and URLs."""

from __future__ import annotations

import argparse
import logging
import platform
import sys
from typing import Sequence

from dotenv import load_dotenv

from rika.config import OPTIONS_ENV_VAR, RikaSettings
from rika.formatters import DEFAULT_FORMAT_SPEC, FormatError, parse_format_spec
from rika.ingestion.extractor import DocumentExtractor
from rika.ingestion.language_detection import default_detector
from rika.ingestion.runner import ExtractionRunner, RunOptions
from rika.version import PROJECT_URL, VERSION


load_dotenv()

LOGGER = logging.getLogger(__name__)

# short flag -> long option name
BOOLEAN_OPTIONS: dict[str, str] = {
    "m": "metadata",
    "t": "text",
    "k": "key-sort",
    "s": "source",
    "a": "as-array",
}
_LONG_BOOLEAN_NAMES = frozenset(BOOLEAN_OPTIONS.values())
_TRUE_WORDS = frozenset({"+", "true", "yes"})
_FALSE_WORDS = frozenset({"-", "false", "no"})

_DESCRIPTION = f"""\
Rika v{VERSION} - {PROJECT_URL}

Output formats are: [a]wesome print, [t]o_s, [i]nspect, [j]son, [J] for pretty json, and [y]aml.
If a format contains two letters, the first will be used for metadata, the second for text.
Values for the boolean options may be specified as follows:
  Enable:  +, true,  yes, [empty]
  Disable: -, false, no, [long form option with no- prefix, e.g. --no-metadata]
"""


def _flag_word(word: str) -> bool | None:
    lowered = word.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    return None


def _boolean_option(arg: str) -> tuple[str | None, str | None]:
    """Return (long name, inline value) when *arg* names a boolean option."""

    if arg.startswith("--"):
        name, sep, value = arg[2:].partition("=")
        if name in _LONG_BOOLEAN_NAMES:
            return name, value if sep else None
        return None, None
    if len(arg) >= 2 and arg[0] == "-" and arg[1] in BOOLEAN_OPTIONS:
        return BOOLEAN_OPTIONS[arg[1]], arg[2:] or None
    return None, None


def normalize_boolean_args(args: Sequence[str]) -> list[str]:
    """Rewrite every boolean flag spelling to ``--name`` or ``--no-name``.

    Unrecognized inline values are left untouched so the parser rejects them.
    """

    normalized: list[str] = []
    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--":
            normalized.extend(args[index:])
            break

        name, inline = _boolean_option(arg)
        if name is None:
            normalized.append(arg)
            index += 1
            continue

        if inline is None and index + 1 < len(args) and _flag_word(args[index + 1]) is not None:
            index += 1
            inline = args[index]

        value = True if inline is None else _flag_word(inline)
        if value is None:
            normalized.append(arg)
        else:
            normalized.append(f"--{name}" if value else f"--no-{name}")
        index += 1
    return normalized


def versions_string() -> str:
    import pymupdf

    return f"Versions: Rika: {VERSION}, Python: {platform.python_version()}, PyMuPDF: {pymupdf.VersionBind}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rika",
        usage="rika [options] <file or url> [...file or url...]",
        description=_DESCRIPTION,
        epilog=f"Default options may be set in the {OPTIONS_ENV_VAR} environment variable.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("targets", nargs="*", help="Files, glob patterns, or HTTP(S) URLs")
    parser.add_argument("-f", "--format", default=DEFAULT_FORMAT_SPEC, help="Output format (default: at)")
    parser.add_argument(
        "-m", "--metadata", action=argparse.BooleanOptionalAction, default=True, help="Output metadata"
    )
    parser.add_argument("-t", "--text", action=argparse.BooleanOptionalAction, default=True, help="Output text")
    parser.add_argument(
        "-k",
        "--key-sort",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Sort metadata keys case insensitively",
    )
    parser.add_argument(
        "-s",
        "--source",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Output document source file or URL",
    )
    parser.add_argument(
        "-a",
        "--as-array",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Output all parsed results as an array",
    )
    parser.add_argument(
        "-l",
        "--max-content-length",
        type=int,
        default=-1,
        help="Maximum number of text characters to extract per document (default: -1, unlimited)",
    )
    parser.add_argument("-v", "--version", action="version", version=versions_string())
    return parser


def _parse_args(parser: argparse.ArgumentParser, args: Sequence[str]) -> argparse.Namespace:
    namespace = parser.parse_intermixed_args(normalize_boolean_args(args))
    if namespace.max_content_length < -1:
        parser.error("--max-content-length must be -1 (unlimited), 0, or positive")
    return namespace


def main(argv: list[str] | None = None) -> int:
    try:
        settings = RikaSettings.from_env()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(message)s")

    cli_args = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()
    args = _parse_args(parser, [*settings.default_args, *cli_args])

    try:
        metadata_format, text_format = parse_format_spec(args.format)
    except FormatError as exc:
        print(f"{exc}\n", file=sys.stderr)
        print(parser.format_help(), file=sys.stderr)
        return 1

    options = RunOptions(
        metadata_format=metadata_format,
        text_format=text_format,
        metadata=args.metadata,
        text=args.text,
        source=args.source,
        key_sort=args.key_sort,
        as_array=args.as_array,
        max_content_length=args.max_content_length if args.text else 0,
    )
    LOGGER.debug("Run options: %s", options)

    with DocumentExtractor(
        timeout_seconds=settings.http_timeout_seconds,
        user_agent=settings.user_agent,
    ) as extractor:
        runner = ExtractionRunner(options, extractor=extractor, detector=default_detector())
        report = runner.run(args.targets)
    return report.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
