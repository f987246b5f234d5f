"""
Filename suffix splicing. A suffix is inserted in front of the last extension of a leaf name, or appended when
the name has none. Directory components are never touched.
"""
import os
from pathlib import PurePath
from typing import Optional, Tuple, Union


def split_extension(name: str) -> Tuple[str, str]:
    """
    Split a filename into stem and extension. Leading dots belong to the stem, so ".bashrc" has no extension
    while ".bashrc.bak" has ".bak". A trailing dot is an extension of its own ("foo." -> ("foo", ".")).
    """

    body = name.lstrip(".")
    idx = body.rfind(".")
    if idx < 0:
        return name, ""

    idx += len(name) - len(body)
    return name[:idx], name[idx:]


def splice(relative_path: Union[str, PurePath], suffix: Optional[str]) -> PurePath:
    """
    Returns `relative_path` with `suffix` spliced into its final component.

    Parameters
    ----------
    relative_path : str | PurePath
        Path of a leaf, relative to the tree root
    suffix : str, optional
        Text to insert. Taken literally, even when it holds dots or separators.
    """

    path = PurePath(relative_path)
    if not suffix:
        return path

    head, name = os.path.split(str(path))
    stem, ext = split_extension(name)
    return PurePath(os.path.join(head, stem + suffix + ext))


def unsplice(name: str, suffix: Optional[str]) -> Optional[str]:
    """
    Recover the original filename from a spliced one. Returns None when `suffix` is not where `splice` would
    have put it.
    """

    if not suffix:
        return name

    stem, ext = split_extension(name)
    pos = stem.rfind(suffix)
    if pos >= 0 and pos + len(suffix) == len(stem):
        return stem[:pos] + ext

    # a suffix carrying a dot becomes the extension of an extension-less name
    if "." in suffix and name.endswith(suffix) and len(name) > len(suffix):
        original = name[: -len(suffix)]
        if not split_extension(original)[1]:
            return original

    return None
