from collections.abc import Sequence
from dataclasses import dataclass
import functools
import os
from subprocess import Popen
from typing import Any, Never, cast

import git
from git import GitCommandError
from git import Repo as GitRepo
from git.cmd import _AutoInterrupt as GitCmd
from git.compat import safe_decode
from loguru import logger

from .constants import AMBIENT_GIT_VARIABLES
from .typed_path import AbsDir
from .types import Refspec
from .utils import remove_environment_variables, strict_not_none


@dataclass(frozen=True, slots=True, kw_only=True)
class ProcessResult:
    stdout: str
    stderr: str
    returncode: int
    args: Sequence[str]

    def log(self, level: str) -> None:
        logger.log(level, f"Running: {self.args}")
        logger.log(level, f"stdout:\n{self.stdout}")
        logger.log(level, f"stderr:\n{self.stderr}")
        logger.log(level, f"returncode = {self.returncode}")


@dataclass(frozen=True, slots=True)
class GitContext:
    """Location of the repository a git command operates on.

    Passed to every command instead of exporting GIT_DIR for the whole process.
    """

    git_dir: AbsDir
    work_tree: AbsDir | None = None

    @property
    def bare(self) -> bool:
        return self.work_tree is None

    @property
    def working_dir(self) -> AbsDir:
        return self.git_dir if self.work_tree is None else self.work_tree

    @property
    def environment(self) -> dict[str, str]:
        environment = {"GIT_DIR": os.fspath(self.git_dir)}
        if self.work_tree is not None:
            environment["GIT_WORK_TREE"] = os.fspath(self.work_tree)
        return environment


class GitHelper:
    @classmethod
    @functools.cache
    def repo(cls, local: AbsDir) -> GitRepo:
        # Convert to string explicitly to gitpython-developers/GitPython#2085
        return GitRepo(os.fspath(local))

    @classmethod
    def git_dir(cls, local: AbsDir) -> AbsDir:
        return AbsDir(cls.repo(local).git_dir)

    @classmethod
    def clear_ambient_environment(cls) -> None:
        for name in remove_environment_variables(AMBIENT_GIT_VARIABLES):
            logger.debug(f"Ignoring {name} from the environment.")

    @classmethod
    def run_command(
        cls,
        context: GitContext,
        command: str,
        *args: Any,
        allowed_returncodes: Sequence[int] = (0,),
        as_process: Never = cast(Never, None),
        env: Never = cast(Never, None),
        **kwargs: Any,
    ) -> ProcessResult:
        cmd: GitCmd = getattr(git.Git(os.fspath(context.working_dir)), command)(
            *args, **kwargs, env=context.environment, as_process=True
        )
        return cls.wait(cmd, allowed_returncodes=allowed_returncodes)

    @classmethod
    def wait(
        cls, process: Popen | GitCmd, *, allowed_returncodes: Sequence[int] = (0,)
    ) -> ProcessResult:
        if isinstance(process, GitCmd):
            process = strict_not_none(process.proc)
        stdout, stderr = process.communicate()
        result = ProcessResult(
            stdout=strict_not_none(safe_decode(stdout)),
            stderr=strict_not_none(safe_decode(stderr)),
            returncode=process.returncode,
            args=tuple(cast(Sequence[str], process.args)),
        )
        if result.returncode in allowed_returncodes:
            result.log(level="TRACE")
        else:
            result.log(level="DEBUG")
            raise GitCommandError(
                tuple(result.args),
                status=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    @classmethod
    def init(cls, local: AbsDir, *, bare: bool) -> None:
        local.path.mkdir(parents=True)
        # No GIT_DIR here: git would record the work tree in the new config.
        cmd: GitCmd = git.Git(os.fspath(local)).init(
            *(["--bare"] if bare else []), "--quiet", os.fspath(local), as_process=True
        )
        cls.wait(cmd)

    @classmethod
    def config_get(cls, context: GitContext, key: str) -> str | None:
        # git config exits with 1 when the key is not set.
        result = cls.run_command(context, "config", "--get", key, allowed_returncodes=(0, 1))
        return result.stdout.strip() or None

    @classmethod
    def config_set(cls, context: GitContext, key: str, value: str) -> None:
        cls.run_command(context, "config", key, value)

    @classmethod
    def fetch(cls, context: GitContext, source: AbsDir, *refspecs: Refspec) -> None:
        cls.run_command(
            context,
            "fetch",
            "--quiet",
            "--no-tags",
            os.fspath(source),
            *(str(refspec) for refspec in refspecs),
        )

    @classmethod
    def refs(cls, context: GitContext, pattern: str) -> list[str]:
        result = cls.run_command(context, "for_each_ref", "--format=%(refname)", pattern)
        return result.stdout.split()

    @classmethod
    def current_branch(cls, context: GitContext) -> str | None:
        # Exits with 1 on a detached HEAD.
        result = cls.run_command(
            context, "symbolic_ref", "--quiet", "--short", "HEAD", allowed_returncodes=(0, 1)
        )
        return result.stdout.strip() or None

    @classmethod
    def checkout_branch(cls, context: GitContext, branch: str, start_point: str) -> None:
        cls.run_command(context, "checkout", "--quiet", "-b", branch, "--track", start_point)

    @classmethod
    def gc(cls, context: GitContext) -> None:
        cls.run_command(context, "gc", "--quiet")
