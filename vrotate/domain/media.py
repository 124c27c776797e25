"""
Probe results and the function that produces them.

``probe_media`` runs ffprobe through ffmpeg-python, restricted to video
streams, and converts the JSON document into a ``ContainerInfo``. Only the
fields the argument selection needs are kept.
"""
from dataclasses import dataclass
from pathlib import Path
from pprint import pformat
from typing import Any, Tuple

import ffmpeg
from loguru import logger

from ..config.video import PROBE_OPTIONS
from .exceptions import NoStreamsFoundException, ProbeFailureException


@dataclass(frozen=True)
class StreamInfo:
    """One stream as reported by ffprobe."""

    index: int
    codec_name: str
    codec_type: str


@dataclass(frozen=True)
class ContainerInfo:
    """
    The probe result for one input file.

    Attributes:
        path: The probed file.
        streams: The reported streams, in ffprobe order. May be empty.
    """

    path: Path
    streams: Tuple[StreamInfo, ...] = ()

    @property
    def primary_stream(self) -> StreamInfo:
        """
        The first detected video stream.

        Raises:
            NoStreamsFoundException: If ffprobe reported no streams at all.
        """
        if not self.streams:
            raise NoStreamsFoundException(
                self.path, f"No video stream found in '{self.path}'"
            )
        return self.streams[0]

    @property
    def vcodec(self) -> str:
        return self.primary_stream.codec_name


def _parse_stream(path: Path, raw: Any) -> StreamInfo:
    if not isinstance(raw, dict):
        raise ProbeFailureException(path, f"Unexpected stream entry in probe output for '{path}': {raw!r}")
    try:
        index = int(raw.get("index", 0))
    except (TypeError, ValueError):
        raise ProbeFailureException(
            path, f"Stream index {raw.get('index')!r} of '{path}' is not an integer"
        ) from None
    return StreamInfo(
        index=index,
        codec_name=str(raw.get("codec_name") or "").lower(),
        codec_type=str(raw.get("codec_type") or ""),
    )


def parse_probe_output(path: Path, data: Any) -> ContainerInfo:
    """
    Converts ffprobe's decoded JSON output into a ``ContainerInfo``.

    A missing ``streams`` key means ffprobe found nothing and yields an empty
    container. Anything that is not the expected shape is a probe failure.

    Raises:
        ProbeFailureException: If ``data`` does not look like ffprobe output.
    """
    if not isinstance(data, dict):
        raise ProbeFailureException(path, f"Probe output for '{path}' is not a JSON object")
    raw_streams = data.get("streams", [])
    if not isinstance(raw_streams, list):
        raise ProbeFailureException(path, f"'streams' in probe output for '{path}' is not a list")
    return ContainerInfo(path=path, streams=tuple(_parse_stream(path, s) for s in raw_streams))


def probe_media(path: Path, probe_binary: Path) -> ContainerInfo:
    """
    Probes the video streams of a file with ffprobe.

    Args:
        path: The file to probe.
        probe_binary: Absolute path of the ffprobe executable.

    Returns:
        The parsed ``ContainerInfo``.

    Raises:
        ProbeFailureException: If ffprobe cannot be run or exits non-zero, or
            prints something other than the expected JSON document.
    """
    try:
        data = ffmpeg.probe(str(path), cmd=str(probe_binary), **PROBE_OPTIONS)
    except ffmpeg.Error as e:
        stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
        raise ProbeFailureException(
            path, f"ffprobe does not recognize file '{path}'" + (f": {stderr}" if stderr else "")
        ) from e
    except OSError as e:
        raise ProbeFailureException(path, f"Could not run ffprobe on '{path}': {e}") from e
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError both derive from ValueError.
        raise ProbeFailureException(path, f"Malformed ffprobe output for '{path}': {e}") from e

    logger.debug(f"Probe data for {path.name}:\n{pformat(data)}")
    container = parse_probe_output(path, data)
    logger.debug(f"Probed {path.name}: {container.streams}")
    return container
