from dataclasses import dataclass
from typing import ClassVar, Self

from .constants import MISSING_REMOTE_EXITCODE
from .githelper import GitContext, GitHelper
from .typed_path import AbsDir
from .types import ExitCode


@dataclass
class MissingRemoteError(Exception):
    source: AbsDir
    name: str
    exitcode: ClassVar[ExitCode] = MISSING_REMOTE_EXITCODE

    def __str__(self) -> str:
        return f"{self.source} has no url for remote {self.name!r}."


@dataclass(frozen=True, slots=True)
class RemoteDescriptor:
    name: str
    url: str
    fetch_refspec: str | None = None

    @classmethod
    def read(cls, git_dir: AbsDir, name: str) -> Self:
        context = GitContext(git_dir)
        url = GitHelper.config_get(context, f"remote.{name}.url")
        if url is None:
            raise MissingRemoteError(git_dir, name)
        return cls(
            name=name, url=url, fetch_refspec=GitHelper.config_get(context, f"remote.{name}.fetch")
        )
