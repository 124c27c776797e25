"""
This module provides the ToolLocator class, which finds the external
executables vrotate depends on (ffprobe and ffmpeg).

The system PATH is searched first. When that fails, a list of fallback
directories is tried in order: directories from the user configuration, the
working directory, and its ``bin`` sub-directory.
"""
import shutil
import stat
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from ..config.common import FALLBACK_TOOL_DIRS
from ..config.video import ENCODE_TOOL_NAME, PROBE_TOOL_NAME
from ..domain.exceptions import ToolNotFoundException
from ..domain.options import ToolPaths

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def is_windows() -> bool:
    return sys.platform == "win32"


class ToolLocator:
    """
    Resolves executable names to absolute paths.

    Args:
        extra_dirs: Directories tried, in order, before the built-in fallbacks.
        fallback_dirs: The built-in fallbacks; relative entries are resolved
            against the working directory when ``resolve`` is called.
    """

    def __init__(
        self,
        extra_dirs: Iterable[Path] = (),
        fallback_dirs: Iterable[Path] = FALLBACK_TOOL_DIRS,
    ):
        self.extra_dirs: Tuple[Path, ...] = tuple(Path(d) for d in extra_dirs)
        self.fallback_dirs: Tuple[Path, ...] = tuple(Path(d) for d in fallback_dirs)

    def candidate_dirs(self) -> List[Path]:
        cwd = Path.cwd()
        return [d if d.is_absolute() else (cwd / d) for d in (*self.extra_dirs, *self.fallback_dirs)]

    @staticmethod
    def candidate_names(name: str) -> List[str]:
        if is_windows() and not name.lower().endswith(".exe"):
            return [name, f"{name}.exe"]
        return [name]

    @staticmethod
    def is_executable(path: Path) -> bool:
        """
        A candidate must be an existing regular file. Outside Windows it also
        needs at least one execute permission bit; Windows decides by extension.
        """
        try:
            st = path.stat()
        except OSError:
            return False
        if not stat.S_ISREG(st.st_mode):
            return False
        if is_windows():
            return True
        return bool(st.st_mode & _EXECUTE_BITS)

    def _search_path(self, name: str) -> Optional[Path]:
        found = shutil.which(name)
        if found:
            return Path(found).resolve()
        return None

    def resolve(self, name: str) -> Path:
        """
        Returns the absolute path of the executable ``name``.

        Raises:
            ToolNotFoundException: If neither PATH nor any fallback directory
                holds a matching executable.
        """
        found = self._search_path(name)
        if found:
            logger.debug(f"Found '{name}' in PATH: {found}")
            return found

        logger.debug(f"'{name}' is not in PATH, trying fallback directories")
        dirs = self.candidate_dirs()
        for directory in dirs:
            for candidate_name in self.candidate_names(name):
                candidate = directory / candidate_name
                if self.is_executable(candidate):
                    logger.debug(f"Found '{name}' at {candidate}")
                    return candidate.resolve()
                logger.trace(f"No executable '{candidate_name}' in {directory}")

        raise ToolNotFoundException(name, dirs)


def locate_tools(locator: ToolLocator) -> ToolPaths:
    """
    Resolves both ffprobe and ffmpeg. Called once at startup; a missing tool
    ends the run before any file is looked at.
    """
    tools = ToolPaths(
        probe_binary=locator.resolve(PROBE_TOOL_NAME),
        encode_binary=locator.resolve(ENCODE_TOOL_NAME),
    )
    logger.info(f"Using {PROBE_TOOL_NAME}: {tools.probe_binary}")
    logger.info(f"Using {ENCODE_TOOL_NAME}: {tools.encode_binary}")
    return tools
