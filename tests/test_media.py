import json
from pathlib import Path

import ffmpeg
import pytest

from conftest import needs_posix_shell, write_tool
from vrotate.domain import media
from vrotate.domain.exceptions import NoStreamsFoundException, ProbeFailureException
from vrotate.domain.media import ContainerInfo, StreamInfo, parse_probe_output, probe_media

CLIP = Path("/videos/clip.mp4")


def test_parse_probe_output():
    data = {
        "streams": [
            {"index": 0, "codec_name": "H264", "codec_type": "video", "width": 1920},
            {"index": "2", "codec_name": "mjpeg", "codec_type": "video"},
        ]
    }

    container = parse_probe_output(CLIP, data)

    assert container.streams == (
        StreamInfo(index=0, codec_name="h264", codec_type="video"),
        StreamInfo(index=2, codec_name="mjpeg", codec_type="video"),
    )
    assert container.vcodec == "h264"


def test_missing_streams_key_gives_empty_container():
    container = parse_probe_output(CLIP, {})
    assert container.streams == ()
    with pytest.raises(NoStreamsFoundException):
        container.primary_stream


@pytest.mark.parametrize(
    "data",
    [
        [],
        "streams",
        {"streams": {"index": 0}},
        {"streams": ["h264"]},
        {"streams": [{"index": "first", "codec_name": "h264"}]},
    ],
)
def test_malformed_probe_output(data):
    with pytest.raises(ProbeFailureException):
        parse_probe_output(CLIP, data)


def test_empty_container_is_a_probe_failure():
    assert issubclass(NoStreamsFoundException, ProbeFailureException)
    with pytest.raises(ProbeFailureException):
        ContainerInfo(CLIP).vcodec


def test_probe_media_passes_binary_and_options(monkeypatch):
    calls = []

    def fake_probe(filename, cmd="ffprobe", **kwargs):
        calls.append((filename, cmd, kwargs))
        return {"streams": [{"index": 0, "codec_name": "hevc", "codec_type": "video"}]}

    monkeypatch.setattr(media.ffmpeg, "probe", fake_probe)

    container = probe_media(CLIP, Path("/opt/bin/ffprobe"))

    assert calls == [
        (str(CLIP), "/opt/bin/ffprobe", {"loglevel": "quiet", "select_streams": "v"})
    ]
    assert container.path == CLIP
    assert container.vcodec == "hevc"


@pytest.mark.parametrize(
    "error",
    [
        ffmpeg.Error("ffprobe", b"", b"Invalid data found when processing input"),
        FileNotFoundError(2, "No such file or directory"),
        json.JSONDecodeError("Expecting value", "", 0),
    ],
)
def test_probe_media_failures(monkeypatch, error):
    def fake_probe(*args, **kwargs):
        raise error

    monkeypatch.setattr(media.ffmpeg, "probe", fake_probe)

    with pytest.raises(ProbeFailureException) as exc_info:
        probe_media(CLIP, Path("ffprobe"))

    assert exc_info.value.path == CLIP
    assert exc_info.value.__cause__ is error


@needs_posix_shell
def test_probe_media_runs_the_tool(fake_tools, video_dir):
    clip = video_dir / "clip.mp4"
    clip.write_text("HEVC payload")
    notes = video_dir / "notes.txt"
    notes.write_text("NOTMEDIA")

    assert probe_media(clip, fake_tools.probe_binary).vcodec == "hevc"
    with pytest.raises(ProbeFailureException):
        probe_media(notes, fake_tools.probe_binary)


@needs_posix_shell
def test_stream_inspection_passes_input_as_last_argument(tmp_path, video_dir):
    argv_log = tmp_path / "inspector-argv.log"
    recorder = write_tool(
        tmp_path / "bin" / "inspector",
        "#!/bin/sh\n"
        f"for arg; do printf '%s\\n' \"$arg\" >> '{argv_log}'; done\n"
        "echo '{\"streams\": [{\"index\": 0, \"codec_name\": \"h264\", \"codec_type\": \"video\"}]}'\n",
    )
    clip = video_dir / "clip.mp4"
    clip.write_text("payload")

    assert probe_media(clip, recorder).vcodec == "h264"

    argv = argv_log.read_text().splitlines()
    assert argv == [
        "-show_format", "-show_streams", "-of", "json",
        "-loglevel", "quiet", "-select_streams", "v",
        str(clip),
    ]
