"""
The per-file flow of a rotation run.

``RotatePipeline`` lists the candidates (or takes the single input file), and
for each one derives the output path, probes the video stream, picks the
encoder arguments and runs ffmpeg. Every outcome goes into a
``ConversionReport``, which is logged and optionally written as YAML at the
end of the run.
"""
import os
import stat
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from ..domain.exceptions import (
    FileProcessingException,
    ProbeFailureException,
    RootPathUnreadableException,
)
from ..domain.media import probe_media
from ..domain.options import ConversionOptions, ToolPaths
from ..services.encoding_service import (
    CodecArgumentTable,
    EncodeOutcome,
    Encoder,
    select_encode_args,
)
from ..services.file_processing_service import ProcessVideoFiles
from ..services.logging_service import ConversionReport


class RotatePipeline:
    """
    Converts every candidate under ``options.input_root``, strictly one file
    after another.

    Per-file problems (unrecognized media, encoder failures, an output
    directory that cannot be created) are logged, recorded in the report and
    do not stop the run. An unreadable root or a failing existence check of an
    output path propagates to the caller.
    """

    def __init__(
        self,
        options: ConversionOptions,
        tools: ToolPaths,
        codec_table: CodecArgumentTable,
        encoder: Optional[Encoder] = None,
    ):
        self.options = options
        self.tools = tools
        self.codec_table = codec_table
        self.encoder = encoder or Encoder(tools, options)
        self.report = ConversionReport(options.input_root)

    def discover(self) -> Iterable[Path]:
        root = self.options.input_root
        try:
            root_stat = os.stat(root)
        except OSError as e:
            raise RootPathUnreadableException(f"Cannot access input path '{root}': {e}") from e

        if stat.S_ISDIR(root_stat.st_mode):
            logger.info(f"Rotate all files in directory: {root}")
            return ProcessVideoFiles(root).files
        logger.info(f"Run command for SINGLE file {root}")
        return (root,)

    def run(self) -> ConversionReport:
        if self.options.extra_encode_args:
            logger.info(f"ffmpeg extra arguments: {list(self.options.extra_encode_args)}")

        for path in self.discover():
            self.process_single_file(path)

        self.report.log_summary()
        if self.options.report_path:
            self.report.write_yaml(self.options.report_path)
        return self.report

    def process_single_file(self, path: Path) -> None:
        logger.debug(f"Considering '{path}'")
        try:
            destination = self.options.placement.derive(path)
            if destination.skip:
                self.report.add_skipped(path, "already rotated", destination.path)
                return

            container = probe_media(path, self.tools.probe_binary)
            args = select_encode_args(container, self.codec_table, self.options.extra_encode_args)
        except ProbeFailureException as e:
            logger.info(f"{e}, skip")
            self.report.add_skipped(path, str(e))
            return
        except FileProcessingException as e:
            logger.error(f"{e}, skip")
            self.report.add_failed(path, str(e))
            return

        outcome = self.encoder.convert(path, destination.path, args)
        if outcome is EncodeOutcome.CONVERTED:
            self.report.add_converted(path, destination.path)
        else:
            self.report.add_failed(path, f"ffmpeg {outcome.value}", destination.path)
