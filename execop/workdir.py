"""Working directory resolution"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from execop.errors import ConfigurationError, InvalidWorkingDirectoryError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def _is_blank(value: Optional[PathLike]) -> bool:
    return value is None or not os.fspath(value).strip()


def resolve_work_dir(override: Optional[PathLike], default: Optional[PathLike]) -> Path:
    """
    Pick the effective working directory

    The override wins when present and non-blank, otherwise the project
    default is used. The chosen path must be an existing directory.

    Raises:
        ConfigurationError: neither an override nor a default was given
        InvalidWorkingDirectoryError: the chosen path is not a directory
    """
    if not _is_blank(override):
        chosen = override
    elif not _is_blank(default):
        chosen = default
    else:
        raise ConfigurationError("A project or working directory must be specified.")

    path = Path(os.fspath(chosen)).expanduser()
    if not path.is_dir():
        raise InvalidWorkingDirectoryError(
            f"Invalid working directory: {os.path.abspath(path)}",
            detail=str(path)
        )

    logger.debug(f"Resolved working directory: {path}")
    return path
