"""
Filesystem gateway - every disk touch of the build goes through here.

Relative paths are resolved against the gateway's root, so nothing
depends on the process working directory. OSErrors come back out
as FilesystemFailure.
"""

import shutil
from pathlib import Path
from typing import Union

from errors import FilesystemFailure


PathLike = Union[str, Path]


class FileSystem:
    """
    Thin wrapper around pathlib/shutil.
    Copying is idempotent: re-copying over an existing tree overwrites in place.
    """

    def __init__(self, root: PathLike = "."):
        self.root = Path(root)

    def resolve(self, path: PathLike) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root / path

    def exists(self, path: PathLike) -> bool:
        return self.resolve(path).exists()

    def read(self, path: PathLike) -> str:
        target = self.resolve(path)
        try:
            return target.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise FilesystemFailure("read", target, e) from e

    def write(self, path: PathLike, text: str):
        """Write UTF-8 text, creating parent dirs as needed"""
        target = self.resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding='utf-8')
        except OSError as e:
            raise FilesystemFailure("write", target, e) from e

    def copy(self, src: PathLike, dst: PathLike):
        source, dest = self.resolve(src), self.resolve(dst)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, dest)
        except OSError as e:
            raise FilesystemFailure("copy", f"{source} -> {dest}", e) from e

    def copy_tree(self, src_dir: PathLike, dst_dir: PathLike):
        source, dest = self.resolve(src_dir), self.resolve(dst_dir)
        try:
            shutil.copytree(source, dest, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            raise FilesystemFailure("copy", f"{source}/ -> {dest}/", e) from e

    def make_dirs(self, path: PathLike):
        target = self.resolve(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemFailure("create directory", target, e) from e

    def remove_tree(self, path: PathLike):
        """Delete a directory tree; a missing tree is fine"""
        target = self.resolve(path)
        if not target.exists():
            return
        try:
            shutil.rmtree(target)
        except OSError as e:
            raise FilesystemFailure("remove", target, e) from e

