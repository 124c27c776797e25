"""
Read-only values constructed once at startup and handed to every component.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .placement import Placement


@dataclass(frozen=True)
class ToolPaths:
    """Absolute paths of the two external tools."""

    probe_binary: Path
    encode_binary: Path


@dataclass(frozen=True)
class ConversionOptions:
    """
    Settings for one run.

    Attributes:
        input_root: A directory whose direct children are converted, or a single file.
        placement: Where converted output is written.
        video_filter: Passed to ffmpeg as ``-vf`` when set.
        extra_encode_args: When non-empty, replaces the codec-based encoder arguments.
        timeout: Upper bound in seconds for each ffmpeg encode. None waits forever.
        report_path: Where to write the YAML run report, if anywhere.
    """

    input_root: Path
    placement: Placement
    video_filter: Optional[str] = None
    extra_encode_args: Tuple[str, ...] = ()
    timeout: Optional[float] = None
    report_path: Optional[Path] = None
