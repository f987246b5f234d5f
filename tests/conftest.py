from pathlib import Path

import pytest

from lndir import cli
from lndir.config import Config

RESOURCES = Path(__file__).parent.joinpath("resources")


@pytest.fixture(autouse=True)
def default_config(monkeypatch: pytest.MonkeyPatch) -> Config:
    """keep the user's ~/.config/lndir out of the tests"""

    conf = Config(load=False)
    monkeypatch.setattr(cli, "CONFIG", conf)
    return conf


@pytest.fixture
def testcase_dir() -> Path:
    """directory holding the sample .test files"""
    return RESOURCES.joinpath("testcases")


@pytest.fixture
def src(tmp_path: Path) -> Path:
    """source tree: sub/leaf.txt, a.txt, b"""

    root = tmp_path.joinpath("src")
    root.joinpath("sub").mkdir(parents=True)
    root.joinpath("sub", "leaf.txt").write_text("leaf")
    root.joinpath("a.txt").write_text("a")
    root.joinpath("b").write_text("b")
    return root


@pytest.fixture
def dst(tmp_path: Path) -> Path:
    """empty destination"""

    root = tmp_path.joinpath("dst")
    root.mkdir()
    return root
