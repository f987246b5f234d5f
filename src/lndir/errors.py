"""errors.py"""

from dataclasses import dataclass
from pathlib import Path


class LndirError(Exception):
    """Base for lndir errors"""


class ConfigurationError(LndirError):
    """Bad arguments or roots, detected before anything is written"""


class CaseFileError(LndirError):
    """A testcase file could not be found, read or parsed"""


@dataclass(frozen=True)
class SourceUnreadable:
    """A directory in the source tree could not be listed"""

    path: Path

    def __str__(self) -> str:
        return f"unable to read {self.path}"


@dataclass(frozen=True)
class DestinationWriteFailed:
    """A directory or link could not be created in the destination tree"""

    path: Path
    cause: OSError

    def __str__(self) -> str:
        return f"unable to create {self.path}: {self.cause.strerror or self.cause}"
