"""
Loads the optional YAML user configuration.

Example ``config.user.yaml``::

    paths:
      tool_dirs:
        - /opt/ffmpeg/bin
    codecs:
      hevc: [-c:v, libx264, -preset, fast, -crf, 23]
    encode:
      timeout: 3600

All sections are optional. A missing file gives the defaults.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml
from loguru import logger

from ..domain.exceptions import ConfigurationException


@dataclass(frozen=True)
class UserConfig:
    tool_dirs: Tuple[Path, ...] = ()
    codec_args: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    timeout: Optional[float] = None


def _section(data: dict, name: str) -> dict:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationException(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def parse_user_config(data) -> UserConfig:
    """Validates an already-decoded YAML document and builds a ``UserConfig``."""
    if data is None:
        return UserConfig()
    if not isinstance(data, dict):
        raise ConfigurationException("The user configuration must be a mapping at the top level")

    tool_dirs = _section(data, "paths").get("tool_dirs") or []
    if isinstance(tool_dirs, str):
        tool_dirs = [tool_dirs]
    if not isinstance(tool_dirs, list):
        raise ConfigurationException("'paths.tool_dirs' must be a list of directories")

    codec_args = {}
    for codec, args in _section(data, "codecs").items():
        if not isinstance(args, list) or not all(isinstance(a, (str, int, float)) for a in args):
            raise ConfigurationException(f"'codecs.{codec}' must be a list of arguments")
        # YAML reads "-crf 30" items such as 30 as numbers.
        codec_args[str(codec).lower()] = tuple(str(a) for a in args)

    timeout = _section(data, "encode").get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigurationException(f"'encode.timeout' must be a number, got {timeout!r}") from None
        if timeout <= 0:
            raise ConfigurationException("'encode.timeout' must be positive")

    return UserConfig(
        tool_dirs=tuple(Path(str(d)).expanduser() for d in tool_dirs),
        codec_args=codec_args,
        timeout=timeout,
    )


def load_user_config(path: Path, required: bool = False) -> UserConfig:
    """
    Reads and validates the user configuration file at ``path``.

    Args:
        path: The YAML file.
        required: When True a missing file is an error (the user asked for it
            explicitly); otherwise the defaults are returned.

    Raises:
        ConfigurationException: If the file cannot be read or parsed, or its
            content is invalid.
    """
    if not path.is_file():
        if required:
            raise ConfigurationException(f"Configuration file '{path}' not found")
        logger.debug(f"User config '{path}' not found. Using built-in settings.")
        return UserConfig()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationException(f"Could not load or parse '{path}': {e}") from e

    user_config = parse_user_config(data)
    logger.debug(f"Loaded user config from '{path}': {user_config}")
    return user_config
