"""
Filesystem helpers for item payloads.

An item payload always travels with its thumbnail, a PNG with the same stem
next to it. The thumbnail is optional; the payload is not.
"""

import shutil
from pathlib import Path
from typing import List, Optional, Union

from cxfer.constants import ITEM_FILE_EXTENSION, THUMBNAIL_FILE_EXTENSION
from cxfer.exceptions import PayloadCopyError

PathLike = Union[str, Path]


def ensure_directory(path: PathLike) -> Path:
    """Create a directory (and parents) if it does not exist"""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def copy_file(src: PathLike, dst: PathLike, overwrite: bool = True) -> Path:
    """
    Copy one file.

    Raises:
        PayloadCopyError: If the source is missing, the destination exists and
            overwrite is off, or the copy fails
    """
    src, dst = Path(src), Path(dst)
    if not src.is_file():
        raise PayloadCopyError(f"File not found: {src}", src)
    if dst.exists() and not overwrite:
        raise PayloadCopyError(f"File already exists: {dst}", dst)
    try:
        shutil.copy2(src, dst)
    except (OSError, shutil.Error) as e:
        raise PayloadCopyError(f"Failed to copy {src.name}: {e}", src)
    return dst


def thumbnail_path(payload: PathLike) -> Path:
    return Path(payload).with_suffix(THUMBNAIL_FILE_EXTENSION)


def copy_payload_with_thumbnail(src: PathLike, dest_folder: PathLike) -> Path:
    """
    Copy a payload and its thumbnail (if any) into a folder, overwriting.

    Returns:
        Path of the copied payload
    """
    src = Path(src)
    dest_folder = Path(dest_folder)
    copied = copy_file(src, dest_folder / src.name)

    thumbnail = thumbnail_path(src)
    if thumbnail.is_file():
        copy_file(thumbnail, dest_folder / thumbnail.name)
    return copied


def list_item_files(folder: PathLike, recursive: bool = False) -> List[Path]:
    """Item payloads in a folder, sorted. Missing folders have none."""
    folder = Path(folder)
    if not folder.is_dir():
        return []
    pattern = f"**/*{ITEM_FILE_EXTENSION}" if recursive else f"*{ITEM_FILE_EXTENSION}"
    return sorted(p for p in folder.glob(pattern) if p.is_file())


def relative_folder(path: PathLike, root: Optional[PathLike]) -> str:
    """A file's folder relative to root when inside it, else absolute"""
    folder = Path(path).resolve().parent
    if root is not None:
        try:
            relative = folder.relative_to(Path(root).resolve())
            return relative.as_posix() if relative.parts else "."
        except ValueError:
            pass
    return str(folder)
