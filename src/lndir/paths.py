"""paths.py"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from lndir.errors import ConfigurationError


@dataclass(frozen=True)
class LinkingRequest:
    """Validated input for one mirror run"""

    __slots__ = (
        "source_root",
        "destination_root",
        "suffix",
    )

    source_root: Path
    destination_root: Path
    suffix: Optional[str]


def is_valid_directory(directory: Union[str, Path]) -> bool:
    """True when `directory` exists and is a directory (symlinks to directories count)"""
    return os.path.isdir(directory)


def normalize_path(path: Union[str, Path]) -> Path:
    """Lexically resolve `.` and `..` and drop any trailing separator"""
    return Path(os.path.normpath(path))


def build_request(
    from_dir: Union[str, Path],
    to_dir: Union[str, Path, None] = None,
    suffix: Optional[str] = None,
) -> LinkingRequest:
    """
    Validate the roots and assemble a LinkingRequest. Nothing is written to disk.

    Raises
    ------
    ConfigurationError
        A root is missing or not a directory, or both roots are the same directory
    """

    if from_dir is None or str(from_dir) == "":
        raise ConfigurationError("Missing <from-dir>, a mandatory argument.")

    if to_dir is None or str(to_dir) == "":
        to_dir = Path.cwd()

    for directory in (from_dir, to_dir):
        if not is_valid_directory(directory):
            raise ConfigurationError(f"{str(directory)!r} is not a valid directory!")

    if os.path.samefile(from_dir, to_dir):
        raise ConfigurationError("from-dir and to-dir are the same directory!")

    return LinkingRequest(
        source_root=normalize_path(from_dir),
        destination_root=normalize_path(to_dir),
        suffix=suffix or None,
    )
