"""
Entry point of vrotate.

Parses the command line, configures the logger, loads the user configuration,
locates ffprobe/ffmpeg and runs the rotation pipeline. Fatal errors are logged
and turned into exit status 1; problems with individual files are not.
"""
import sys
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from .cli import get_args
from .config.common import LOGGER_FORMAT, ROTATION_MARKER, USER_CONFIG_FILE_NAME
from .config.user import load_user_config
from .domain.exceptions import RotateException
from .domain.options import ConversionOptions
from .pipeline.rotate_pipeline import RotatePipeline
from .services.encoding_service import CodecArgumentTable
from .domain.placement import make_placement
from .utils.tool_locator import ToolLocator, locate_tools


def configure_logger(level: str):
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args, passthrough = get_args(argv)
    configure_logger(args.log_level)
    logger.debug(f"Parsed arguments: {args}, passthrough: {passthrough}")

    config_path = args.config or Path.cwd() / USER_CONFIG_FILE_NAME
    try:
        user_config = load_user_config(config_path, required=args.config is not None)
        codec_table = CodecArgumentTable.builtin(user_config.codec_args)
        options = ConversionOptions(
            input_root=args.input.expanduser(),
            placement=make_placement(args.rotate, ROTATION_MARKER),
            video_filter=args.vf or None,
            extra_encode_args=tuple(passthrough),
            timeout=args.timeout if args.timeout is not None else user_config.timeout,
            report_path=args.report,
        )
        tools = locate_tools(ToolLocator(user_config.tool_dirs))
        RotatePipeline(options, tools, codec_table).run()
    except RotateException as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Aborting: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
