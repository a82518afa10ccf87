"""Utility functions for execop"""

import logging
import os
import shlex
from typing import Optional, Sequence


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Configure logging for execop"""
    handlers = [logging.StreamHandler()]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def format_command(args: Sequence[str]) -> str:
    """Render a command vector as a single display line"""
    return shlex.join(args)
