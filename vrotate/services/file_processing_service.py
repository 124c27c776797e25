"""
Discovers the files to convert under the input root.

Only the direct children of the root are considered. Sub-directories, which
include the output directory of ``DirectoryPlacement``, are reported once and
never descended into.
"""
from pathlib import Path
from typing import Tuple

from loguru import logger

from ..domain.exceptions import RootPathUnreadableException


class ProcessVideoFiles:
    """
    Lists the candidate files of a root directory.

    The listing is done once, in the constructor, so an unreadable root fails
    the run before any file is touched.

    Attributes:
        source_dir (Path): The directory being scanned.
        files (Tuple[Path, ...]): The candidate files, sorted by name.
        skipped_dirs (Tuple[Path, ...]): The sub-directories that were not entered.
    """

    def __init__(self, source_dir: Path):
        self.source_dir = source_dir
        self.files: Tuple[Path, ...] = tuple()
        self.skipped_dirs: Tuple[Path, ...] = tuple()
        self.set_files_to_process()

    def set_files_to_process(self):
        """
        Scans ``source_dir`` one level deep and populates ``files``.

        Raises:
            RootPathUnreadableException: If the directory cannot be listed.
        """
        logger.debug(f"Considering '{self.source_dir}'")
        try:
            entries = sorted(self.source_dir.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise RootPathUnreadableException(f"Cannot list directory '{self.source_dir}': {e}") from e

        files, dirs = [], []
        for entry in entries:
            logger.debug(f"Considering '{entry}'")
            if entry.is_dir():
                logger.info(f"Ignore sub-directory '{entry}'")
                dirs.append(entry)
            elif entry.is_file():
                files.append(entry)
            else:
                logger.debug(f"Ignore '{entry}': not a regular file")

        self.files = tuple(files)
        self.skipped_dirs = tuple(dirs)
        logger.debug(
            f"Found {len(self.files)} file(s) and skipped {len(self.skipped_dirs)} sub-directory(ies) in {self.source_dir}"
        )

    def __iter__(self):
        return iter(self.files)

    def __len__(self):
        return len(self.files)
