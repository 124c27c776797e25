"""
Selects the encoder arguments for a file and supervises the ffmpeg run.

``CodecArgumentTable`` maps a probed codec name to encoder flags, with a
mandatory ``"default"`` entry. ``select_encode_args`` applies that table, or
the user's passthrough arguments when any were given. ``Encoder`` builds the
ffmpeg command line, runs it while two threads copy its stdout/stderr to ours,
and removes the partial output when ffmpeg fails.
"""
from collections.abc import Mapping
import os
import shlex
import subprocess
import sys
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from ..config.video import CODEC_ARGS, DEFAULT_CODEC_KEY, ENCODE_BASE_FLAGS
from ..domain.exceptions import (
    ConfigurationException,
    EncodeRuntimeException,
    SpawnFailureException,
)
from ..domain.media import ContainerInfo
from ..domain.options import ConversionOptions, ToolPaths
from ..utils.format_utils import format_timedelta, formatted_size


class CodecArgumentTable(Mapping):
    """
    Read-only mapping of codec name -> encoder arguments.

    Lookups of unknown codecs fall back to the ``"default"`` entry, which must
    be present.
    """

    def __init__(self, entries: Mapping[str, Iterable[str]]):
        table: Dict[str, Tuple[str, ...]] = {}
        for codec, args in entries.items():
            if isinstance(args, str) or not all(isinstance(a, str) for a in args):
                raise ConfigurationException(
                    f"Encoder arguments for codec '{codec}' must be a list of strings, got {args!r}"
                )
            table[str(codec).lower()] = tuple(args)
        if DEFAULT_CODEC_KEY not in table:
            raise ConfigurationException(f"Codec argument table has no '{DEFAULT_CODEC_KEY}' entry")
        self._table = table

    @classmethod
    def builtin(cls, overrides: Optional[Mapping[str, Iterable[str]]] = None) -> "CodecArgumentTable":
        """The built-in table, with user entries added or replacing built-in ones."""
        entries = dict(CODEC_ARGS)
        entries.update(overrides or {})
        return cls(entries)

    def __getitem__(self, codec: str) -> Tuple[str, ...]:
        return self._table[codec]

    def __iter__(self):
        return iter(self._table)

    def __len__(self):
        return len(self._table)

    def args_for(self, codec_name: str) -> List[str]:
        args = self._table.get(codec_name.lower())
        if args is None:
            logger.debug(f"No encoder arguments for codec '{codec_name}', using '{DEFAULT_CODEC_KEY}'")
            args = self._table[DEFAULT_CODEC_KEY]
        return list(args)


def select_encode_args(
    container: ContainerInfo,
    table: CodecArgumentTable,
    user_override: Sequence[str] = (),
) -> List[str]:
    """
    Picks the encoder arguments for a probed file.

    User arguments, when given, are used as-is and the codec is not looked at.
    Otherwise the codec of the first video stream selects the table entry.

    Raises:
        NoStreamsFoundException: If no override is given and the probe found
            no video stream.
    """
    if user_override:
        return list(user_override)
    return table.args_for(container.vcodec)


def display_command(cmd: Sequence[str]) -> str:
    """Quotes a command list for log output, the way the current platform's shell expects."""
    if os.name == "nt":
        return subprocess.list2cmdline(cmd)
    return shlex.join(cmd)


class EncodeOutcome(str, Enum):
    CONVERTED = "converted"
    SPAWN_FAILED = "spawn_failed"
    FAILED = "failed"


def _drain(name: str, source: BinaryIO, target) -> None:
    """Copies ``source`` to ``target`` line by line until EOF or a read/write error."""
    sink = getattr(target, "buffer", None)
    try:
        for line in iter(source.readline, b""):
            if sink is not None:
                sink.write(line)
            else:
                target.write(line.decode("utf-8", errors="replace"))
            target.flush()
    except (OSError, ValueError) as e:
        logger.error(f"Reading ffmpeg {name} failed: {e}")
    finally:
        source.close()


class Encoder:
    """
    Runs ffmpeg for one file at a time.

    Args:
        tools: Resolved tool paths; only ``encode_binary`` is used here.
        options: Run options supplying the video filter and timeout.
        stdout: Where the child's stdout is copied (defaults to ``sys.stdout``
            at the time of the run).
        stderr: Where the child's stderr is copied (defaults to ``sys.stderr``).
    """

    def __init__(self, tools: ToolPaths, options: ConversionOptions, stdout=None, stderr=None):
        self.tools = tools
        self.options = options
        self._stdout = stdout
        self._stderr = stderr

    def build_command(self, input_path: Path, output_path: Path, args: Sequence[str]) -> List[str]:
        cmd = [str(self.tools.encode_binary), *ENCODE_BASE_FLAGS, "-i", str(input_path)]
        if self.options.video_filter:
            cmd += ["-vf", self.options.video_filter]
        cmd += list(args)
        cmd.append(str(output_path))
        return cmd

    def convert(self, input_path: Path, output_path: Path, args: Sequence[str]) -> EncodeOutcome:
        """
        Encodes ``input_path`` into ``output_path``.

        Failures are logged and reported through the returned outcome, so the
        caller can go on with the next file. An interruption such as Ctrl-C
        kills ffmpeg, removes the partial output and propagates.

        Returns:
            ``CONVERTED`` when ffmpeg exited with status 0,
            ``SPAWN_FAILED`` when it could not be started (nothing to clean up),
            ``FAILED`` when it exited non-zero or timed out (output removed).
        """
        cmd = self.build_command(input_path, output_path, args)
        logger.debug(f"Calling {display_command(cmd)}")

        started = datetime.now()
        try:
            process = self._spawn(input_path, cmd)
        except SpawnFailureException as e:
            logger.error(f"{e}, skip")
            return EncodeOutcome.SPAWN_FAILED

        try:
            self._supervise(input_path, process)
        except EncodeRuntimeException as e:
            logger.error(f"{e}, skip")
            self._remove_partial_output(output_path)
            return EncodeOutcome.FAILED
        except BaseException:
            # A half-written output would pass the next run's existence check.
            self._remove_partial_output(output_path)
            raise

        elapsed = datetime.now() - started
        size = output_path.stat().st_size if output_path.exists() else 0
        logger.success(
            f"Converted '{input_path.name}' -> '{output_path}' "
            f"in {format_timedelta(elapsed)} ({formatted_size(size)})"
        )
        return EncodeOutcome.CONVERTED

    def _spawn(self, input_path: Path, cmd: List[str]) -> subprocess.Popen:
        try:
            return subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except (OSError, ValueError) as e:
            raise SpawnFailureException(input_path, f"ffmpeg could not be started: {e}") from e

    def _supervise(self, input_path: Path, process: subprocess.Popen) -> None:
        """
        Drains both output pipes concurrently and waits for ffmpeg to exit.

        The drain threads are started before waiting so that a full pipe can
        never block the child, and both are joined before returning so that
        no trailing output is lost.
        """
        drains = [
            threading.Thread(
                target=_drain,
                args=("stdout", process.stdout, self._stdout or sys.stdout),
                name=f"drain-stdout-{process.pid}",
                daemon=True,
            ),
            threading.Thread(
                target=_drain,
                args=("stderr", process.stderr, self._stderr or sys.stderr),
                name=f"drain-stderr-{process.pid}",
                daemon=True,
            ),
        ]
        for thread in drains:
            thread.start()

        timed_out = False
        try:
            returncode = process.wait(timeout=self.options.timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            logger.warning(f"ffmpeg exceeded {self.options.timeout}s on '{input_path.name}', killing it")
            process.kill()
            returncode = process.wait()
        except BaseException:
            process.kill()
            process.wait()
            raise
        finally:
            for thread in drains:
                thread.join()

        if timed_out:
            raise EncodeRuntimeException(
                input_path, f"ffmpeg timed out after {self.options.timeout}s", returncode
            )
        if returncode != 0:
            raise EncodeRuntimeException(
                input_path, f"ffmpeg exited with error = exit status {returncode}", returncode
            )

    @staticmethod
    def _remove_partial_output(output_path: Path) -> None:
        try:
            output_path.unlink(missing_ok=True)
            logger.debug(f"Removed partial output '{output_path}'")
        except OSError as e:
            logger.warning(f"Could not remove partial output '{output_path}': {e}")
