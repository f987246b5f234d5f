"""
Canonical snapshots of directory trees, used to check that a shadow tree has the same shape as its source.

Both trees are walked through a temporary symlink with a fixed name so every captured path starts with that
name instead of wherever the tree really lives. Comparison is map equality; walk order never matters.
"""
from __future__ import annotations

import os
import shutil
import tempfile
import uuid
from contextlib import contextmanager
from enum import Enum
from pathlib import Path, PurePath
from typing import Dict, Iterator, Optional, Tuple, Union

from lndir.namer import unsplice


class EntryKind(str, Enum):
    """Kind of a tree entry. Files and symlinks are both leaves."""

    DIRECTORY = "dir"
    LEAF = "file"


@contextmanager
def alias(root: Union[str, Path], token: str, parent: Union[str, Path, None] = None) -> Iterator[Path]:
    """
    Expose `root` as `parent/token` for the duration of the block. The link is always removed afterwards.

    Raises
    ------
    FileExistsError
        Something already lives at `parent/token`
    """

    link = Path(parent if parent is not None else os.curdir).joinpath(token)
    link.symlink_to(os.path.abspath(root), target_is_directory=True)
    try:
        yield link
    finally:
        link.unlink()


class Snapshot:
    """
    Mapping of token-prefixed relative path to EntryKind. Equality ignores the token, so snapshots taken through
    different aliases are comparable.
    """

    token: str
    entries: Dict[PurePath, EntryKind]

    def __init__(self, token: str, entries: Dict[PurePath, EntryKind]) -> None:
        self.token = token
        self.entries = entries

    def relative(self) -> Dict[PurePath, EntryKind]:
        """entries with the token prefix removed"""
        return {k.relative_to(self.token): v for k, v in self.entries.items()}

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, Snapshot):
            return NotImplemented
        return self.relative() == o.relative()

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        lines = [f"Snapshot({self.token})"]
        lines += [f"  {v.value:<4} {k}" for k, v in sorted(self.entries.items())]
        return "\n".join(lines)

    def diff(self, o: Snapshot) -> Dict[PurePath, Tuple[Optional[EntryKind], Optional[EntryKind]]]:
        """Keys whose kind differs between the two snapshots, with (self, other) kinds. None means missing."""
        mine, theirs = self.relative(), o.relative()
        return {
            k: (mine.get(k), theirs.get(k))
            for k in sorted(set(mine) | set(theirs))
            if mine.get(k) != theirs.get(k)
        }


def _raise(err: OSError) -> None:
    raise err


def snapshot(
    root: Union[str, Path],
    token: str,
    reverse_suffix: Optional[str] = None,
    parent: Union[str, Path, None] = None,
) -> Snapshot:
    """
    Walk `root` through an alias named `token` and record the kind of every entry.

    When `reverse_suffix` is set, symlink leaves are keyed by the name they had before the suffix was spliced in,
    and symlinks that do not carry the suffix are left out, which makes the snapshot unequal to its source.

    The alias is created in `parent`, or in a temporary directory removed afterwards when `parent` is None. It never
    appears among the entries, even when `parent` lies inside `root`.
    """

    entries: Dict[PurePath, EntryKind] = {}
    workdir = tempfile.mkdtemp(prefix="lndir-") if parent is None else None

    try:
        with alias(root, token, workdir or parent) as link:
            base = link.parent
            real_base = os.path.realpath(base)

            for r, d, f in os.walk(link, onerror=_raise):
                root_path = Path(r)
                key_root = PurePath(os.path.relpath(r, base))

                # the alias is visible from inside when its parent lies in the walked tree
                if os.path.realpath(r) == real_base:
                    d[:] = [dd for dd in d if dd != token]
                    f = [ff for ff in f if ff != token]

                linked_dirs = [dd for dd in d if root_path.joinpath(dd).is_symlink()]
                d[:] = [dd for dd in d if dd not in linked_dirs]

                for dd in d:
                    entries[key_root.joinpath(dd)] = EntryKind.DIRECTORY

                for ff in f + linked_dirs:
                    name: Optional[str] = ff
                    if reverse_suffix and root_path.joinpath(ff).is_symlink():
                        name = unsplice(ff, reverse_suffix)
                    if name is not None:
                        entries[key_root.joinpath(name)] = EntryKind.LEAF
    finally:
        if workdir is not None:
            shutil.rmtree(workdir)

    return Snapshot(token, entries)


def equivalent(
    source_root: Union[str, Path],
    shadow_root: Union[str, Path],
    suffix: Optional[str] = None,
    prefix: Optional[str] = None,
    parent: Union[str, Path, None] = None,
) -> bool:
    """
    True when `shadow_root` has exactly the shape of `source_root` once `suffix` is taken out of link names.
    Aliases go in `parent`, or in a private temporary directory when it is not given.
    """

    if prefix is None:
        prefix = uuid.uuid4().hex

    source = snapshot(source_root, f"{prefix}_from", parent=parent)
    shadow = snapshot(shadow_root, f"{prefix}_to", reverse_suffix=suffix, parent=parent)
    return source == shadow
