import os
import json
from typing import Dict, Any, Optional
from dataclasses import dataclass
from pathlib import Path


def _resolve_path(path: str) -> Path:
    return Path(os.path.expanduser(path=path))


def _user_config_dir() -> Path:
    return Path.home().joinpath(".config")


def _lndir_dir() -> Path:
    return _user_config_dir().joinpath("lndir")


def _conf_path() -> Path:
    return _lndir_dir().joinpath("lndir.json")


@dataclass
class Config:
    """lndir runtime config object"""

    __slots__ = (
        "suffix",
        "indent",
        "quiet",
        "fail_on_partial",
        "testcase_dir",
    )

    suffix: Optional[str]
    indent: int
    quiet: bool
    fail_on_partial: bool
    testcase_dir: Path

    __annotations__ = {
        "suffix": Optional[str],
        "indent": int,
        "quiet": bool,
        "fail_on_partial": bool,
        "testcase_dir": Path,
    }

    def _overrides(self, conf: dict) -> None:
        """apply overrides from conf"""

        _suffix = conf.get("suffix")
        if _suffix is not None:
            setattr(self, "suffix", str(_suffix) or None)

        _indent = conf.get("indent")
        if _indent is not None:
            setattr(self, "indent", int(_indent))

        _quiet = conf.get("quiet")
        if _quiet is not None:
            setattr(self, "quiet", bool(_quiet))

        _fail_on_partial = conf.get("fail_on_partial")
        if _fail_on_partial is not None:
            setattr(self, "fail_on_partial", bool(_fail_on_partial))

        _testcase_dir = conf.get("testcase_dir")
        if _testcase_dir is not None:
            setattr(self, "testcase_dir", _resolve_path(_testcase_dir))

    def __init__(self, load: bool = True) -> None:
        self.suffix = None
        self.indent = 4
        self.quiet = False
        self.fail_on_partial = True
        self.testcase_dir = Path(".")

        if load:
            conf_path = _conf_path()
            if conf_path.exists():
                with conf_path.open("r") as f:
                    conf = json.load(f)
                self._overrides(conf=conf)

    def __repr__(self) -> str:
        attributes = [k for k in self.__slots__]
        width = max([len(i) for i in attributes])
        s = f"Config: {str(_conf_path())}\n"
        s += "-" * len(s) + "\n"
        for k in attributes:
            v = self.__getattribute__(k)
            space = " " * (width - len(str(k)) + 2)
            s += f"  {k}{space}{str(v)}\n"
        return s

    def dict(self) -> Dict[str, Any]:
        """Returns a dict representation of the object"""
        return {
            "suffix": self.suffix,
            "indent": self.indent,
            "quiet": self.quiet,
            "fail_on_partial": self.fail_on_partial,
            "testcase_dir": str(self.testcase_dir),
        }

    @staticmethod
    def data_directory() -> Path:
        """Returns the data directory for lndir"""
        return _lndir_dir()

    def save(self) -> None:
        """Write the config out to disk"""

        _lndir_dir().mkdir(parents=True, exist_ok=True)
        with open(_conf_path(), "w") as f:
            f.write(json.dumps(self.dict(), indent=4))
