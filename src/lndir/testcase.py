"""
Testcase files describe a source tree and a suffix. Each case builds the tree, mirrors it with lndir and checks
the shadow against the source.

A testcase file is a whitespace separated list of `keyword path` pairs:

    dir:    sub
    file:   sub/leaf.txt
    suffix: -v7

`suffix: ""` means no suffix.
"""
from __future__ import annotations

import random
import shutil
import subprocess
import sys
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import click
from pydantic import BaseModel

from lndir.errors import CaseFileError, ConfigurationError
from lndir.paths import build_request
from lndir.snapshot import equivalent
from lndir.symlinkmirror import link_mirror

TESTCASE_EXTENSION = ".test"
EMPTY_SUFFIX = '""'


class PathType(str, Enum):
    DIR = "dir"
    FILE = "file"


class CaseStatus(str, Enum):
    FAILED = "failed"
    PASSED = "passed"

    @property
    def styled(self) -> str:
        return click.style(self.value, fg="green" if self == CaseStatus.PASSED else "red")


class FixturePath(BaseModel):
    """One entry of a fixture tree"""

    kind: PathType
    path: Path


class LinkTestCase(BaseModel):
    """Parsed testcase file"""

    name: str
    paths: List[FixturePath] = []
    suffix: Optional[str] = None

    @classmethod
    def parse(cls, name: str, text: str, source: str = "<string>") -> LinkTestCase:
        """
        Parse the body of a testcase file

        Raises
        ------
        CaseFileError
            Unknown keyword or a keyword without a path
        """

        chunks = text.split()
        if len(chunks) % 2 != 0:
            raise CaseFileError(f"Incorrect file format: {source}")

        paths: List[FixturePath] = []
        suffix = None
        for keyword, value in zip(chunks[::2], chunks[1::2]):
            if keyword == "file:":
                paths.append(FixturePath(kind=PathType.FILE, path=Path(value)))
            elif keyword == "dir:":
                paths.append(FixturePath(kind=PathType.DIR, path=Path(value)))
            elif keyword == "suffix:":
                if value != EMPTY_SUFFIX:
                    suffix = value
            else:
                raise CaseFileError(f"Invalid file format: {source}")

        return cls(name=name, paths=paths, suffix=suffix)

    @classmethod
    def from_file(cls, filename: Path) -> LinkTestCase:
        try:
            text = filename.read_text()
        except OSError as err:
            raise CaseFileError(f"Could not open testcase file {filename}") from err
        except UnicodeDecodeError as err:
            raise CaseFileError(f"Unable to read {filename}") from err
        return cls.parse(filename.stem, text, source=str(filename))


def _testcase_filenames(filenames: Sequence[Union[str, Path]], directory: Path) -> List[Path]:
    if len(filenames) == 0:
        return sorted(
            f for f in directory.iterdir() if f.is_file() and f.suffix == TESTCASE_EXTENSION
        )

    _filenames = []
    for filename in map(Path, filenames):
        if filename.suffix == "":
            filename = filename.with_suffix(TESTCASE_EXTENSION)
        elif filename.suffix != TESTCASE_EXTENSION:
            raise CaseFileError(f"Testcase file doesn't have \"{TESTCASE_EXTENSION}\" extension: {filename}")
        _filenames.append(filename)
    return _filenames


def load_test_suite(
    filenames: Sequence[Union[str, Path]] = (), directory: Union[str, Path] = "."
) -> Dict[str, LinkTestCase]:
    """
    Load testcases by name. With no filenames, every `.test` file in `directory` is loaded.
    """

    _filenames = _testcase_filenames(filenames, Path(directory))
    if len(_filenames) == 0:
        raise CaseFileError("No testcase files found")

    suite: Dict[str, LinkTestCase] = {}
    for filename in _filenames:
        case = LinkTestCase.from_file(filename)
        if case.name in suite:
            raise CaseFileError(f"More than one testcase with same name: {case.name}")
        suite[case.name] = case

    return suite


def create_dir_tree(tree_root: Path, paths: Sequence[FixturePath]) -> None:
    """Create the fixture tree. Files are created empty."""

    if tree_root.exists():
        raise FileExistsError(f"<from-dir> exists: {tree_root}")

    tree_root.mkdir(parents=True)
    for p in paths:
        target = tree_root.joinpath(p.path)
        if p.kind == PathType.DIR:
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.touch()


def call_lndir(from_tree_root: Path, to_tree_root: Path, suffix: Optional[str]) -> bool:
    """Run lndir as a separate process, True on a zero return code"""

    cmd = [sys.executable, "-m", "lndir", "--quiet", f"--suffix={suffix or ''}"]
    cmd += [str(from_tree_root), str(to_tree_root)]

    proc_out = subprocess.run(cmd, capture_output=True, text=True)
    if proc_out.returncode != 0:
        click.secho(f'\nERROR: "{" ".join(cmd)}" failed with rc={proc_out.returncode}', fg="red", err=True)
        click.echo(proc_out.stdout + proc_out.stderr, err=True)
        return False
    return True


def mirror_in_process(from_tree_root: Path, to_tree_root: Path, suffix: Optional[str]) -> bool:
    """Run the mirror engine directly, True when every entry was linked"""

    try:
        request = build_request(from_tree_root, to_tree_root, suffix)
    except ConfigurationError as err:
        click.secho(f"\nERROR: {err}", fg="red", err=True)
        return False
    return link_mirror(request, quiet=True).ok


def run_test(case: LinkTestCase, workdir: Union[str, Path] = ".", use_subprocess: bool = False) -> CaseStatus:
    """Build, mirror and verify one testcase. Both trees are removed afterwards."""

    _workdir = Path(workdir)
    random_prefix = str(random.getrandbits(32))
    from_tree_root = _workdir.joinpath(f"{random_prefix}_from_dir")
    to_tree_root = _workdir.joinpath(f"{random_prefix}_to_dir")
    mirror = call_lndir if use_subprocess else mirror_in_process

    status = CaseStatus.FAILED
    try:
        create_dir_tree(from_tree_root, case.paths)
        to_tree_root.mkdir()
        if not mirror(from_tree_root, to_tree_root, case.suffix):
            click.secho("\nERROR: Could not run lndir command!", fg="red", err=True)
        elif not equivalent(from_tree_root, to_tree_root, case.suffix, prefix=random_prefix, parent=_workdir):
            click.secho("\nERROR: <to-dir> tree != <from-dir> tree!", fg="red", err=True)
        else:
            status = CaseStatus.PASSED
    except OSError as err:
        click.secho(f"\nERROR: Could not create <from-dir> tree: {err}", fg="red", err=True)
    finally:
        for tree in (from_tree_root, to_tree_root):
            if tree.exists() and not tree.is_symlink():
                shutil.rmtree(tree)

    return status


def run_test_suite(
    suite: Dict[str, LinkTestCase], workdir: Union[str, Path] = ".", use_subprocess: bool = False
) -> int:
    """Run testcases in name order, stopping at the first failure. Returns a process exit code."""

    for name in sorted(suite):
        status = run_test(suite[name], workdir=workdir, use_subprocess=use_subprocess)
        click.echo(f'Test: "{name}", status={status.styled}')
        if status == CaseStatus.FAILED:
            return 1

    return 0
