"""
Site assets: discover the files under the site root and describe each one.

``crawl_directory`` walks the tree depth-first and hands every regular file to
a callback; ``collect_site_files`` uses it to build one ``SiteFile`` per file
with its bucket key and media type. Nothing here creates Pulumi resources or
reads file contents: the StaticSite component turns each ``SiteFile`` into a
``BucketObject`` whose ``FileAsset`` source is read by the engine.

Traversal rules:

- Sub-directories are entered before the remaining siblings; siblings are
  visited in name order so two runs over the same tree agree.
- Symlinked files are published (the link target's content under the link's
  key). Symlinked directories are skipped so a link cycle cannot recurse
  forever.
- Sockets, FIFOs, devices and dangling links are skipped with a warning.
- Any directory that cannot be listed (missing root, permission denied, I/O
  error) raises ``AssetDirectoryError``; there is no partial result.
"""

import mimetypes
import os
from dataclasses import dataclass
from typing import Callable

import pulumi

# Built-in table only: MimeTypes() does not merge the host's /etc/mime.types,
# so the same file gets the same type on every machine.
_MEDIA_TYPES = mimetypes.MimeTypes()
for _media_type, _extension in [
    ("application/manifest+json", ".webmanifest"),
    ("font/woff", ".woff"),
    ("font/woff2", ".woff2"),
    ("image/webp", ".webp"),
    ("image/avif", ".avif"),
    ("image/x-icon", ".ico"),
    ("application/wasm", ".wasm"),
]:
    _MEDIA_TYPES.add_type(_media_type, _extension)


class AssetDirectoryError(pulumi.RunError):
    """Raised when the site root or one of its directories cannot be read."""


@dataclass(frozen=True)
class SiteFile:
    """
    One file to publish.

    Attributes:
        path: Absolute path on local disk.
        key: Bucket object key; path relative to the site root with ``/``
            separators and no leading separator.
        content_type: Media type from the file extension, or None when the
            extension is unknown (S3/CloudFront then apply their default).
    """

    path: str
    key: str
    content_type: str | None


def relative_key(
    root: str,
    path: str,
) -> str:
    """
    Return the bucket key for path: relative to root, forward slashes.

    ``<root>/img/logo.png`` becomes ``img/logo.png``.
    """
    return os.path.relpath(path, root).replace(os.sep, "/")


def content_type_for(
    path: str,
) -> str | None:
    """Return the registered media type for path's extension, or None."""
    content_type, _ = _MEDIA_TYPES.guess_type(path, strict=True)
    return content_type


def crawl_directory(
    directory: str,
    callback: Callable[[str], None],
) -> None:
    """
    Call callback with the path of every regular file under directory.

    Depth-first: each sub-directory is fully visited before its next sibling.
    Paths passed to callback are absolute when directory is absolute.

    Raises:
        AssetDirectoryError: If directory (or any directory below it) cannot
            be listed or an entry cannot be inspected.
    """
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as err:
        raise AssetDirectoryError(
            f"cannot read asset directory {directory}: {err.strerror or err}"
        ) from err

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                crawl_directory(entry.path, callback)
            elif entry.is_symlink() and entry.is_dir():
                pulumi.log.warn(f"skipping symlinked directory {entry.path}")
            elif entry.is_file():
                callback(entry.path)
            else:
                pulumi.log.warn(f"skipping {entry.path}: not a regular file")
        except OSError as err:
            raise AssetDirectoryError(
                f"cannot inspect {entry.path}: {err.strerror or err}"
            ) from err


def collect_site_files(
    root: str,
) -> list[SiteFile]:
    """
    Enumerate every regular file under root as a SiteFile.

    Args:
        root: Site root directory; made absolute before the walk.

    Returns:
        One SiteFile per file, in traversal order.

    Raises:
        AssetDirectoryError: If root is missing, not a directory, or any part
            of the tree cannot be read.
    """
    root = os.path.abspath(root)
    if not os.path.isdir(root):
        raise AssetDirectoryError(f"asset directory {root} does not exist")

    files: list[SiteFile] = []

    def add(path: str) -> None:
        key = relative_key(root, path)
        # S3 keys and Pulumi resource names are UTF-8; undecodable bytes in a
        # file name survive os.scandir only as lone surrogates.
        try:
            key.encode("utf-8")
        except UnicodeEncodeError as err:
            raise AssetDirectoryError(
                f"cannot publish {os.fsencode(path)!r}: file name is not valid UTF-8"
            ) from err
        files.append(
            SiteFile(
                path=path,
                key=key,
                content_type=content_type_for(path),
            )
        )

    crawl_directory(root, add)
    return files
