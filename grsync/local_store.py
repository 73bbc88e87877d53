import os
from pathlib import Path
from typing import Set


def ensure_local_dir(dest_dir: Path, dir_name: str) -> Path:
    """
    Create the local counterpart of a camera directory (no-op if present).
    """
    path = Path(dest_dir) / dir_name
    path.mkdir(parents=True, exist_ok=True)
    return path


def list_local_files(dest_dir: Path) -> Set[str]:
    """
    Every regular file under dest_dir, as a "dir/file" style relative path.
    """
    dest_dir = Path(dest_dir)
    found = set()
    for root, dirs, files in os.walk(dest_dir):
        for fname in files:
            file_path = Path(root) / fname
            if file_path.is_file():
                found.add(file_path.relative_to(dest_dir).as_posix())
    return found


def compute_local_path(dest_dir: Path, photo_uri: str) -> Path:
    return Path(dest_dir).joinpath(*photo_uri.split("/"))


def write_photo(dest_dir: Path, photo_uri: str, content: bytes) -> Path:
    """
    Write downloaded bytes to their local path. The parent directory
    is expected to exist already.

    Bytes land in a ".tmp" sibling and are moved into place once complete.
    """
    local_path = compute_local_path(dest_dir, photo_uri)
    tmp_path = local_path.with_name(local_path.name + ".tmp")
    try:
        with open(tmp_path, "wb") as f:
            f.write(content)
        os.replace(tmp_path, local_path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()
    return local_path
