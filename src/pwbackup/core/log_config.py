"""Logging setup.

Library modules log through ``logging.getLogger(__name__)``. Applications
call ``configure_logging`` once to render those records through structlog
(JSON for machines, console for people), optionally also to a file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import structlog

_HANDLER_MARK = "_pwbackup_handler"


def _shared_processors():
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_logging(
    level: Union[int, str] = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Route ``pwbackup`` logging through structlog.

    Args:
        level: Log level name or number.
        json_output: Render JSON lines instead of console output.
        log_file: Optional path; records are also appended there as JSON.

    Returns:
        The configured ``pwbackup`` package logger.

    Calling again replaces the handlers installed by a previous call.
    """
    structlog.configure(
        processors=_shared_processors() + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer = (
        structlog.processors.JSONRenderer() if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    package_logger = logging.getLogger("pwbackup")
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            package_logger.removeHandler(handler)
            handler.close()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_shared_processors(),
    ))
    setattr(stream_handler, _HANDLER_MARK, True)
    package_logger.addHandler(stream_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        ))
        setattr(file_handler, _HANDLER_MARK, True)
        package_logger.addHandler(file_handler)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger
