from __future__ import annotations

from dataclasses import dataclass
import os.path
from pathlib import Path
from typing import Self, overload


@dataclass(frozen=True, slots=True)
class TypedPath:
    path: Path

    def __init__(self, path: Path | str | Self) -> None:
        if type(self) is TypedPath:
            raise TypeError()
        object.__setattr__(self, "path", Path(path))

    def _join[T: TypedPath](self, other: TypedPath, type_: type[T]) -> T:
        return type_(self.path / other.path)

    def exists(self) -> bool:
        # Dangling symlinks still occupy the name.
        return self.path.exists() or self.path.is_symlink()

    def is_file(self) -> bool:
        return self.path.is_file()

    def is_folder(self) -> bool:
        return self.path.is_dir()

    @property
    def name(self) -> str:
        return self.path.name

    def __fspath__(self) -> str:
        return self.path.__fspath__()

    def __str__(self) -> str:
        return repr(str(self.path))


@dataclass(frozen=True, slots=True, init=False)
class RelFile(TypedPath):
    def __add__(self, extension: Ext) -> RelFile:
        return RelFile(f"{self.path}{extension.extension}")


@dataclass(frozen=True, slots=True, init=False)
class AbsFile(TypedPath):
    def __add__(self, extension: Ext) -> AbsFile:
        return AbsFile(f"{self.path}{extension.extension}")


@dataclass(frozen=True, slots=True, init=False)
class RelDir(TypedPath):
    @overload
    def __truediv__(self, other: RelFile) -> RelFile: ...
    @overload
    def __truediv__(self, other: RelDir) -> RelDir: ...
    def __truediv__(self, other: TypedPath) -> TypedPath:
        match other:
            case RelFile():
                ret_type: type[TypedPath] = RelFile
            case RelDir():
                ret_type = RelDir
            case _:
                raise TypeError()
        return self._join(other, ret_type)


@dataclass(frozen=True, slots=True, init=False)
class AbsDir(TypedPath):
    @overload
    def __truediv__(self, other: RelFile) -> AbsFile: ...
    @overload
    def __truediv__(self, other: RelDir) -> AbsDir: ...
    def __truediv__(self, other: TypedPath) -> TypedPath:
        match other:
            case RelFile():
                ret_type: type[TypedPath] = AbsFile
            case RelDir():
                ret_type = AbsDir
            case _:
                raise TypeError()
        return self._join(other, ret_type)

    def __add__(self, extension: Ext) -> AbsDir:
        return AbsDir(f"{self.path}{extension.extension}")

    def __sub__(self, extension: Ext) -> AbsDir:
        if not self.has_extension(extension):
            return self
        return AbsDir(os.fspath(self)[: -len(extension.extension)])

    def has_extension(self, extension: Ext) -> bool:
        return os.fspath(self).endswith(extension.extension)

    @classmethod
    def absolute(cls, path: Path | str) -> Self:
        return cls(os.path.normpath(Path(path).absolute()))


@dataclass(frozen=True, slots=True)
class Ext:
    extension: str
