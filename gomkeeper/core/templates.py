"""Static files gomkeeper can generate for a project."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from gomkeeper.utils import get_logger, write_new_file
from gomkeeper.constants import TRAVIS_YML_CONTENT, TRAVIS_YML_NAME

logger = get_logger("core.templates")


def write_travis_yml(directory: Optional[Union[str, Path]] = None) -> Path:
    """Write the stock ``.travis.yml`` into ``directory`` (default: cwd).

    Raises:
        AlreadyExistsError: The file is already there.
    """
    target = Path(directory or ".") / TRAVIS_YML_NAME
    write_new_file(target, TRAVIS_YML_CONTENT)
    logger.info("Wrote %s", target)
    return target
