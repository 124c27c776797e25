import stat
import sys
from pathlib import Path

import pytest
from loguru import logger

from vrotate.domain.options import ConversionOptions, ToolPaths
from vrotate.domain.placement import DirectoryPlacement

needs_posix_shell = pytest.mark.skipif(sys.platform == "win32", reason="stand-in tools are /bin/sh scripts")

FAKE_FFPROBE = """#!/bin/sh
for last; do :; done
if grep -q NOTMEDIA "$last"; then
    exit 1
fi
if grep -q NOSTREAMS "$last"; then
    echo '{"streams": []}'
    exit 0
fi
codec=h264
if grep -q HEVC "$last"; then
    codec=hevc
fi
echo "{\\"streams\\": [{\\"index\\": 0, \\"codec_name\\": \\"$codec\\", \\"codec_type\\": \\"video\\"}]}"
"""

FAKE_FFMPEG = """#!/bin/sh
in=""
prev=""
for arg; do
    if [ "$prev" = "-i" ]; then
        in="$arg"
    fi
    prev="$arg"
    last="$arg"
done
echo "$*" >> "{arglog}"
echo "stdout line for $in"
echo "stderr line for $in" >&2
cp "$in" "$last"
if grep -q FAIL "$in"; then
    exit 3
fi
exit 0
"""


def write_tool(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()


@pytest.fixture
def arglog(tmp_path) -> Path:
    return tmp_path / "tools" / "ffmpeg-args.log"


@pytest.fixture
def fake_tools(tmp_path, arglog) -> ToolPaths:
    tools_dir = tmp_path / "tools"
    return ToolPaths(
        probe_binary=write_tool(tools_dir / "ffprobe", FAKE_FFPROBE),
        encode_binary=write_tool(tools_dir / "ffmpeg", FAKE_FFMPEG.replace("{arglog}", str(arglog))),
    )


@pytest.fixture
def video_dir(tmp_path) -> Path:
    root = tmp_path / "videos"
    root.mkdir()
    return root


@pytest.fixture
def options(video_dir) -> ConversionOptions:
    return ConversionOptions(input_root=video_dir, placement=DirectoryPlacement())
