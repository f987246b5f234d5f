import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

import click

from lndir.errors import DestinationWriteFailed, SourceUnreadable
from lndir.namer import splice
from lndir.paths import LinkingRequest

MirrorFailure = Union[SourceUnreadable, DestinationWriteFailed]


@dataclass
class MirrorResult:
    """What a mirror run created, and what it could not"""

    directories: List[Path] = field(default_factory=list)
    links: List[Path] = field(default_factory=list)
    failures: List[MirrorFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return len(self.failures) == 0

    def summary(self) -> str:
        return f"{len(self.directories)} directories, {len(self.links)} links, {len(self.failures)} failures"


def link_mirror(request: LinkingRequest, indent: int = 4, quiet: bool = False) -> MirrorResult:
    """
    Creates a mirror of the source directory filled with symbolic links to the files. Every entry is attempted;
    a failed directory or link is recorded in the result and the walk carries on. Nothing under `dst` is removed
    or replaced.

    Parameters
    ----------
    request : LinkingRequest
        The validated source root, destination root and optional filename suffix
    indent : int
        Left margin of the progress listing
    quiet : bool
        Suppress progress output

    Returns
    -------
    MirrorResult
    """

    src = Path(os.path.abspath(request.source_root))
    dst = Path(request.destination_root)
    dst_abs = Path(os.path.abspath(dst))
    result = MirrorResult()

    def echo(message: str, **styles) -> None:
        if not quiet:
            click.secho(message, **styles)

    def make_directory(rel: Path) -> None:
        directory = dst.joinpath(rel)
        try:
            directory.mkdir(exist_ok=True)
        except OSError as err:
            failure = DestinationWriteFailed(directory, err)
            result.failures.append(failure)
            echo(f"[!] {failure}", fg="red", err=True)
            return
        result.directories.append(directory)
        echo(" " * (indent + len(rel.parts) * 2) + rel.name)

    def unreadable(err: OSError) -> None:
        path = Path(err.filename or src)
        failure = SourceUnreadable(path)
        result.failures.append(failure)
        echo(f"[!] {failure}", fg="red", err=True)
        # listed by its parent but never entered, still recreated
        if path != src and src in path.parents:
            make_directory(path.relative_to(src))

    echo("Linking:")
    echo(f"  from dir: {src}")
    echo(f"  to dir:   {dst}")
    if request.suffix:
        echo(f"  suffix:   {request.suffix}")
    echo("  directories linked:")
    echo(" " * indent + src.name)

    # os.walk yields directories in pre-order, so each one is created and listed as it is entered
    for r, d, f in os.walk(src, onerror=unreadable):
        root = Path(r)
        rel_root = root.relative_to(src)
        if rel_root.parts:
            make_directory(rel_root)

        # directory symlinks are leaves, os.walk reports them alongside real directories
        leaves = [dd for dd in d if root.joinpath(dd).is_symlink()] + f
        # a destination nested in the source must not be walked into
        d[:] = sorted(dd for dd in d if dd not in leaves and root.joinpath(dd) != dst_abs)

        for ff in sorted(leaves):
            file = root.joinpath(ff)
            link = dst.joinpath(splice(rel_root.joinpath(ff), request.suffix))
            try:
                link.symlink_to(file)
            except OSError as err:
                failure = DestinationWriteFailed(link, err)
                result.failures.append(failure)
                echo(f"[!] {failure}", fg="red", err=True)
                continue
            result.links.append(link)

    echo(f"  {result.summary()}", fg="green" if result.ok else "yellow")
    return result
