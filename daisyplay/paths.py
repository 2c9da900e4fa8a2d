"""Locating a DAISY book's index files on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import unquote


@dataclass
class IndexNames:
    """Index files found below a book's mount point."""

    mount_point: str
    ncc_html: str | None = None
    ncx_name: str | None = None
    opf_name: str | None = None


def convert_url_name(name: str) -> str:
    """Decode the ``%XX`` escapes of a file reference taken from a URL."""
    return unquote(name)


def _sorted_entries(directory: str) -> list[os.DirEntry]:
    with os.scandir(directory) as entries:
        return sorted(entries, key=lambda entry: entry.name)


def find_realpath_name(directory, search: str) -> str | None:
    """Find a file whose name equals the base name of *search*, ignoring case.

    The tree below *directory* is walked depth first in alphabetical order.
    Returns the path of the first match, or ``None``.
    """
    directory = os.fspath(directory)
    target = os.path.basename(search).lower()
    for entry in _sorted_entries(directory):
        if entry.name.lower() == target:
            return os.path.join(directory, entry.name)
        if entry.is_dir(follow_symlinks=False):
            found = find_realpath_name(entry.path, search)
            if found is not None:
                return found
    return None


def find_dir_content(directory, search: str) -> str | None:
    """Find the first path below *directory* whose name contains *search*.

    Matching ignores case.  A directory whose own path already contains
    *search* is returned as it is.  An empty *search* never matches.
    """
    directory = os.fspath(directory)
    needle = search.lower()
    if not needle:
        return None
    if needle in directory.lower():
        return directory
    for entry in _sorted_entries(directory):
        if needle in entry.name.lower():
            return os.path.join(directory, entry.name)
        if entry.is_dir(follow_symlinks=False):
            found = find_dir_content(entry.path, search)
            if found is not None and needle in found.lower():
                return found
    return None


def find_index_names(mount_point) -> IndexNames:
    """Look for ``ncc.html``, an NCX and an OPF file below *mount_point*.

    When an OPF file is found the book's mount point becomes its directory.
    """
    mount_point = os.fspath(mount_point)
    ncc_html = find_realpath_name(mount_point, "ncc.html")
    ncx_name = find_dir_content(mount_point, ".ncx")
    opf_name = find_dir_content(mount_point, ".opf")
    if opf_name:
        mount_point = os.path.dirname(opf_name)
    return IndexNames(
        mount_point=mount_point,
        ncc_html=ncc_html,
        ncx_name=ncx_name,
        opf_name=opf_name,
    )