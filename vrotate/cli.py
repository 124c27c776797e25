"""
Command-line interface for vrotate.

Any argument the parser does not recognise is passed to ffmpeg verbatim and
replaces the codec-based encoder arguments, for example::

    vrotate -i ~/Videos --rotate here -c:v libx265 -crf 28

Arguments that could be mistaken for ours (``-itsoffset`` starts like ``-i``)
must follow a ``--`` separator::

    vrotate -i ~/Videos -- -itsoffset 1 -c:v libx264
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from . import __version__
from .config.common import DEFAULT_LOG_LEVEL, LOG_LEVELS
from .domain.placement import PlacementMode

PASSTHROUGH_SEPARATOR = "--"


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vrotate",
        description=(
            "Re-encode the video files of a directory (or a single file) with ffmpeg, "
            "skipping files that were already converted. Unrecognised arguments are "
            "passed to ffmpeg and replace the codec-based encoder arguments; "
            "put them after '--' when they start like one of ours (e.g. -itsoffset)."
        ),
        allow_abbrev=False,
    )
    parser.add_argument(
        "-i", "--input", required=True, type=Path, metavar="FILE",
        help="Input file, or directory whose files are converted (sub-directories are ignored).",
    )
    parser.add_argument(
        "--vf", default=None, metavar="FILTER", help="FFmpeg video filter (passed as -vf)."
    )
    parser.add_argument(
        "--rotate",
        choices=[m.value for m in PlacementMode],
        default=PlacementMode.DIRECTORY.value,
        help=(
            "Where converted files go: 'here' writes <name>-rotated.<ext> next to the source, "
            "'dir' writes into a 'rotated' sub-directory (default: %(default)s)."
        ),
    )
    parser.add_argument(
        "--config", type=Path, default=None, metavar="YAML",
        help="User configuration file (default: config.user.yaml in the working directory, if present).",
    )
    parser.add_argument(
        "--timeout", type=_positive_float, default=None, metavar="SECONDS",
        help="Kill an ffmpeg encode that takes longer than this (the file counts as failed).",
    )
    parser.add_argument(
        "--report", type=Path, default=None, metavar="YAML",
        help="Write a YAML report of converted, skipped and failed files.",
    )
    parser.add_argument(
        "--log-level", type=str.upper, default=DEFAULT_LOG_LEVEL, choices=LOG_LEVELS,
        help="Set the logging level (default: %(default)s).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _split_passthrough(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    argv = list(argv)
    if PASSTHROUGH_SEPARATOR in argv:
        at = argv.index(PASSTHROUGH_SEPARATOR)
        return argv[:at], argv[at + 1:]
    return argv, []


def get_args(argv: Optional[Sequence[str]] = None) -> Tuple[argparse.Namespace, List[str]]:
    """
    Parses the command line.

    Everything after ``--`` goes to ffmpeg untouched. Before it, a token that
    merely starts with one of our short options (``-itsoffset`` against ``-i``)
    is rejected, since argparse would read it as that option with an attached
    value.

    Returns:
        The parsed options and the list of unrecognised arguments, in the
        order they were given.
    """
    if argv is None:
        argv = sys.argv[1:]
    own, after_separator = _split_passthrough(argv)
    parser = build_parser()
    short_options = [
        flag for action in parser._actions for flag in action.option_strings
        if len(flag) == 2 and flag[0] == "-" and flag[1] != "-"
    ]
    for token in own:
        if token.startswith("--"):
            continue
        for flag in short_options:
            if token.startswith(flag) and token != flag:
                parser.error(
                    f"ambiguous argument {token!r} (read as {flag} {token[len(flag):]!r}); "
                    f"put ffmpeg arguments after '{PASSTHROUGH_SEPARATOR}'"
                )
    args, passthrough = parser.parse_known_args(own)
    return args, passthrough + after_separator
