"""
Common configuration settings used throughout vrotate.

Everything here is a constant. Values that can change per run (the input root,
placement, user tool directories, codec overrides) are carried by
``ConversionOptions`` and ``UserConfig`` instead of being stored globally.
"""
from pathlib import Path

# --- Logging Configuration ---

# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR")


# --- Naming Conventions ---

# Literal token marking rotation output. Used both as a file-name suffix
# ("clip-rotated.mp4") and as the name of the output sub-directory.
ROTATION_MARKER = "rotated"

# Separator placed between the original stem and the marker.
MARKER_SEPARATOR = "-"


# --- Tool Lookup ---

# Directories searched, in order, after the system PATH fails to find a tool.
# Relative entries are resolved against the working directory at lookup time.
FALLBACK_TOOL_DIRS = (Path("."), Path("bin"))


# --- User Configuration ---

# Looked up in the working directory when --config is not given.
USER_CONFIG_FILE_NAME = "config.user.yaml"
