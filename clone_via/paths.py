from dataclasses import dataclass
import os
from typing import ClassVar, Self

from .constants import DOT_GIT, GIT_SUFFIX, PATH_EXISTS_EXITCODE
from .typed_path import AbsDir
from .types import ExitCode


@dataclass
class PathExistsError(Exception):
    path: AbsDir
    exitcode: ClassVar[ExitCode] = PATH_EXISTS_EXITCODE

    def __str__(self) -> str:
        return f"{self.path} already exists."


def normalize_dest(dest: AbsDir, *, mirror: bool) -> AbsDir:
    if mirror:
        return dest if dest.has_extension(GIT_SUFFIX) else dest + GIT_SUFFIX
    while dest.has_extension(GIT_SUFFIX):
        dest -= GIT_SUFFIX
    return dest


@dataclass(frozen=True, slots=True)
class PathPair:
    source: AbsDir
    dest: AbsDir
    mirror: bool

    @classmethod
    def resolve(cls, source: str | os.PathLike[str], dest: str | None, *, mirror: bool) -> Self:
        source_dir = AbsDir.absolute(source)
        if dest is None:
            dest = source_dir.name
        dest_dir = normalize_dest(AbsDir.absolute(dest), mirror=mirror)
        if dest_dir.exists():
            raise PathExistsError(dest_dir)
        return cls(source=source_dir, dest=dest_dir, mirror=mirror)

    @property
    def dest_git_dir(self) -> AbsDir:
        return self.dest if self.mirror else self.dest / DOT_GIT

    @property
    def dest_work_tree(self) -> AbsDir | None:
        return None if self.mirror else self.dest
