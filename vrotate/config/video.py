"""
Configuration settings for probing and encoding video files.
"""

PROBE_TOOL_NAME = "ffprobe"
ENCODE_TOOL_NAME = "ffmpeg"

# Extra ffprobe options, passed as ffmpeg-python keyword arguments. ffmpeg.probe
# always adds "-show_format -show_streams -of json" in front of them.
PROBE_OPTIONS = {
    "loglevel": "quiet",
    "select_streams": "v",
}

# Leading ffmpeg flags: progress statistics, and never overwrite (non-interactive).
ENCODE_BASE_FLAGS = ("-stats", "-n")

# Key of the mandatory fallback entry in the codec table.
DEFAULT_CODEC_KEY = "default"

# Encoder arguments per detected video codec name.
CODEC_ARGS = {
    "h264": ("-c:v", "libx264", "-preset", "ultrafast", "-crf", "30"),
    DEFAULT_CODEC_KEY: ("-c:v", "libx264", "-preset", "ultrafast", "-crf", "30"),
}
