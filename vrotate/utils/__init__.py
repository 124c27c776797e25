"""
Utilities package for vrotate.

Modules:
    - tool_locator.py: Finds the ffprobe and ffmpeg executables at startup.
    - format_utils.py: Human-readable durations and file sizes for log messages.
"""
