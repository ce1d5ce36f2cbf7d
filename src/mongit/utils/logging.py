"""
loguru sinks for the terminal and the optional log file
"""
import os
from pathlib import Path
from typing import Optional

import click
from loguru import logger

CONSOLE_FORMAT = '<level>{level}</level>: {message}'
FILE_FORMAT = '{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}'


def setup_logging(console_level: str, log_dir: Optional[Path] = None,
                  log_level: str = 'INFO'):
    """
    Replace the default loguru handler.
    :param console_level: level of messages shown on stderr
    :param log_dir: write mongit.log into this dir, rotated daily. no file if None
    :param log_level: level of the log file
    """
    logger.remove()
    # resolve stderr at write time, click swaps it while testing
    logger.add(lambda message: click.echo(message, err=True, nl=False),
               format=CONSOLE_FORMAT,
               level=console_level,
               colorize=False)
    if not log_dir:
        return
    if not os.path.isdir(log_dir):
        os.makedirs(log_dir, exist_ok=True)
    logger.add(Path(log_dir) / 'mongit.log',
               format=FILE_FORMAT,
               rotation='00:00',
               retention='14 days',
               level=log_level,
               backtrace=True,
               diagnose=True)
