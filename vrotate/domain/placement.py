"""
Decides where converted output is written and whether an input is skipped.

Two placements exist, one class each, both exposing ``derive``:

- ``HerePlacement`` writes next to the source with a marker suffix:
  ``clip.mp4`` -> ``clip-rotated.mp4``.
- ``DirectoryPlacement`` keeps the file name and writes into a marker-named
  sibling directory: ``clip.mp4`` -> ``rotated/clip.mp4``.

Running twice over the same tree must not convert anything again, so both
recognise their own output and report an existing destination as a skip.
"""
import os
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Set

from loguru import logger

from ..config.common import MARKER_SEPARATOR, ROTATION_MARKER
from .exceptions import DirectoryCreateException


class PlacementMode(str, Enum):
    HERE = "here"
    DIRECTORY = "dir"


class Destination(NamedTuple):
    path: Path
    skip: bool


class Placement:
    """
    Base class for output placements.

    Subclasses implement ``target`` (pure path computation) and may override
    ``prepare`` to set up the filesystem before the existence check.
    """

    mode: PlacementMode

    def __init__(self, marker: str = ROTATION_MARKER):
        self.marker = marker

    def target(self, input_path: Path) -> Path:
        raise NotImplementedError("Subclasses must implement target().")

    def is_rotation_result(self, input_path: Path) -> bool:
        return self.target(input_path) == input_path

    def prepare(self, output_path: Path) -> None:
        pass

    def derive(self, input_path: Path) -> Destination:
        """
        Computes the output path for ``input_path`` and whether to skip it.

        The input is skipped when it is itself a rotation result, or when the
        output already exists (converted by an earlier run).

        Raises:
            DirectoryCreateException: If the output directory cannot be created.
            OSError: If checking for an existing output fails for any reason
                other than the file not existing.
        """
        if self.is_rotation_result(input_path):
            logger.info(f"File '{input_path}' is rotation result, skip")
            return Destination(input_path, True)

        output_path = self.target(input_path)
        self.prepare(output_path)

        try:
            os.stat(output_path)
        except FileNotFoundError:
            return Destination(output_path, False)

        logger.info(f"File '{input_path}' is already rotated as '{output_path}', skip")
        return Destination(output_path, True)

    def __repr__(self):
        return f"{self.__class__.__name__}(marker={self.marker!r})"

    def __eq__(self, other):
        return type(self) is type(other) and self.marker == other.marker

    def __hash__(self):
        return hash((type(self), self.marker))


class HerePlacement(Placement):
    """Output beside the source: ``<stem>-<marker><ext>``."""

    mode = PlacementMode.HERE

    @property
    def suffix(self) -> str:
        return f"{MARKER_SEPARATOR}{self.marker}"

    def target(self, input_path: Path) -> Path:
        stem, ext = input_path.stem, input_path.suffix
        # Strip an existing marker so that re-runs map a result onto itself.
        if stem.endswith(self.suffix):
            stem = stem[: -len(self.suffix)]
        return input_path.with_name(f"{stem}{self.suffix}{ext}")


class DirectoryPlacement(Placement):
    """Output in a sibling directory: ``<parent>/<marker>/<name>``."""

    mode = PlacementMode.DIRECTORY

    def __init__(self, marker: str = ROTATION_MARKER):
        super().__init__(marker)
        self._created_dirs: Set[Path] = set()

    def target(self, input_path: Path) -> Path:
        return input_path.parent / self.marker / input_path.name

    def prepare(self, output_path: Path) -> None:
        out_dir = output_path.parent
        if out_dir in self._created_dirs:
            return
        try:
            out_dir.mkdir()
            logger.debug(f"Created output directory '{out_dir}'")
        except FileExistsError:
            if not out_dir.is_dir():
                raise DirectoryCreateException(
                    output_path, f"Cannot create directory '{out_dir}': a file with that name exists"
                ) from None
        except OSError as e:
            raise DirectoryCreateException(
                output_path, f"Cannot create directory '{out_dir}': {e}"
            ) from e
        self._created_dirs.add(out_dir)


def make_placement(mode, marker: str = ROTATION_MARKER) -> Placement:
    """Builds the placement for a ``PlacementMode`` (or its string value)."""
    mode = PlacementMode(mode)
    if mode is PlacementMode.HERE:
        return HerePlacement(marker)
    return DirectoryPlacement(marker)
