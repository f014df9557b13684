"""
Logging utilities
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from grid_nav.config.models import LoggingConfig

# 第三方库只输出 WARNING 以上，grid_nav 模块按配置级别输出
PACKAGE_NAME = "grid_nav"
OTHER_LEVEL = "WARNING"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{thread.name}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"


def SetupLogger(cfg: Optional[LoggingConfig] = None, level: Optional[str] = None):
    """
    Setup logger with console and file output for the planner

    Args:
        cfg: Logging section of the app config
        level: Level override (e.g. from the command line)

    Returns:
        The configured loguru logger
    """
    cfg = cfg or LoggingConfig()
    level = (level or cfg.level).upper()
    level_filter = {"": OTHER_LEVEL, PACKAGE_NAME: level}

    # Remove default handler
    logger.remove()

    if cfg.console:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=level,
            filter=level_filter,
            colorize=True,
        )

    # File handler, planner modules only
    log_path = Path(cfg.log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_path / "grid_nav_{time:YYYY-MM-DD}.log",
        rotation=cfg.rotation,
        retention=cfg.retention,
        level=level,
        filter=PACKAGE_NAME,
        format=FILE_FORMAT,
        encoding="utf-8",
    )

    logger.debug(f"日志初始化完成: level={level}, log_dir={log_path}")
    return logger
