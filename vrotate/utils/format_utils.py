"""
Helpers for formatting durations and sizes in log messages.
"""

from datetime import timedelta


def format_timedelta(td_object: timedelta) -> str:
    """
    Formats a timedelta as "HH:MM:SS".

    Hours are not wrapped at 24, so 26 hours is "26:00:00". Anything that is
    not a timedelta gives "00:00:00".
    """
    if not isinstance(td_object, timedelta):
        return "00:00:00"

    total_seconds = max(0, int(td_object.total_seconds()))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def formatted_size(size_bytes: int) -> str:
    """
    Converts a byte count into a string such as "512 B", "1.50 KB" or "2 MB".
    """
    size = float(max(0, size_bytes))
    units = ["B", "KB", "MB", "GB", "TB"]

    for unit in units:
        if size < 1024.0 or unit == units[-1]:
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.2f} {unit}".replace(".00", "")
        size /= 1024.0
