from dataclasses import dataclass
import functools
import os
from typing import Self

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from loguru import logger

from .config import CloneConfig
from .constants import (
    DEST_REMOTE,
    MIRROR_FETCH_REFSPEC,
    MIRROR_HEADS_TARGET,
    TAGS_TARGET,
    TRACKING_FETCH_REFSPEC,
    TRACKING_HEADS_TARGET,
)
from .githelper import GitContext, GitHelper
from .logger import describe
from .objects import TransferStrategy, link_objects, object_store, share_objects
from .paths import PathPair
from .remote import RemoteDescriptor
from .typed_path import AbsDir
from .types import Refspec


@dataclass(frozen=True)
class Cloner:
    config: CloneConfig
    paths: PathPair

    @classmethod
    def from_args(
        cls, config: CloneConfig, source: str | os.PathLike[str], dest: str | None
    ) -> Self:
        return cls(config, PathPair.resolve(source, dest, mirror=config.mirror))

    def clone(self) -> None:
        if self.config.mirror and self.config.checkout_branch is not None:
            logger.warning(
                f"Ignoring branch {self.config.checkout_branch!r}, a mirror has no working tree."
            )
        upstream = self.read_source_remote()
        self.init_dest()
        self.populate_objects()
        self.fetch_from_source()
        self.rewire_remote(upstream)
        if not self.config.mirror:
            # The result is still a usable repository when this fails.
            _ = self.checkout()
        self.finalize()

    @functools.cached_property
    def source_git_dir(self) -> AbsDir:
        try:
            return GitHelper.git_dir(self.paths.source)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise InvalidGitRepositoryError(
                f"{self.paths.source} is not a git repository."
            ) from e

    @property
    def source(self) -> GitContext:
        return GitContext(self.source_git_dir)

    @property
    def dest(self) -> GitContext:
        return GitContext(self.paths.dest_git_dir, self.paths.dest_work_tree)

    def read_source_remote(self) -> RemoteDescriptor:
        with describe(f"Reading remote {self.config.source_remote!r} of {self.paths.source}"):
            remote = RemoteDescriptor.read(self.source_git_dir, self.config.source_remote)
        logger.debug(f"Upstream url = {remote.url!r}, fetch = {remote.fetch_refspec!r}")
        return remote

    def init_dest(self) -> None:
        kind = "bare repository" if self.config.mirror else "repository"
        with describe(f"Creating {kind} {self.paths.dest}", level="INFO"):
            GitHelper.init(self.paths.dest, bare=self.config.mirror)

    def populate_objects(self) -> None:
        source = object_store(self.source_git_dir)
        target = object_store(self.paths.dest_git_dir)
        if self.config.link:
            with describe(f"Linking objects from {source}", level="INFO") as step:
                transferred = link_objects(source, target)
                step.note(f"{transferred[TransferStrategy.LINK]} linked")
                step.note(f"{transferred[TransferStrategy.COPY]} copied")
        elif self.config.shared:
            with describe(f"Sharing objects with {source}", level="INFO"):
                share_objects(source, target)

    @property
    def heads_refspec(self) -> Refspec:
        return Refspec(self.config.source_heads, self.heads_target)

    @property
    def heads_target(self) -> str:
        return MIRROR_HEADS_TARGET if self.config.mirror else TRACKING_HEADS_TARGET

    @property
    def tags_refspec(self) -> Refspec:
        return Refspec(self.config.tags_refspec, TAGS_TARGET)

    def fetch_from_source(self) -> None:
        with describe(f"Fetching from {self.paths.source}", level="INFO") as step:
            GitHelper.fetch(self.dest, self.source_git_dir, self.heads_refspec)
            GitHelper.fetch(self.dest, self.source_git_dir, self.tags_refspec)
            heads = GitHelper.refs(self.dest, self.heads_target.removesuffix("/*"))
            tags = GitHelper.refs(self.dest, TAGS_TARGET.removesuffix("/*"))
            step.note(f"{len(heads)} heads")
            step.note(f"{len(tags)} tags")
        if not heads:
            logger.warning(f"No refs matching {self.config.source_heads!r} in {self.paths.source}.")

    def rewire_remote(self, upstream: RemoteDescriptor) -> None:
        with describe(f"Pointing {DEST_REMOTE!r} at {upstream.url!r}", level="INFO"):
            GitHelper.config_set(self.dest, f"remote.{DEST_REMOTE}.url", upstream.url)
            if self.config.mirror:
                GitHelper.config_set(self.dest, f"remote.{DEST_REMOTE}.mirror", "true")
                GitHelper.config_set(self.dest, f"remote.{DEST_REMOTE}.fetch", MIRROR_FETCH_REFSPEC)
            else:
                GitHelper.config_set(
                    self.dest, f"remote.{DEST_REMOTE}.fetch", TRACKING_FETCH_REFSPEC
                )

    @functools.cached_property
    def checkout_branch(self) -> str | None:
        if self.config.checkout_branch is not None:
            return self.config.checkout_branch
        return GitHelper.current_branch(self.source)

    def checkout(self) -> bool:
        branch = self.checkout_branch
        if branch is None:
            logger.info(f"{self.paths.source} has no current branch, skipping checkout.")
            return False
        start_point = f"{DEST_REMOTE}/{branch}"
        try:
            with describe(f"Checking out {branch!r}", level="INFO", error_level="DEBUG"):
                GitHelper.checkout_branch(self.dest, branch, start_point)
        except GitCommandError as e:
            logger.debug(e)
            logger.warning(f"Unable to check out {start_point!r}, leaving the working tree empty.")
            return False
        return True

    @describe("Compacting repository", level="INFO")
    def finalize(self) -> None:
        GitHelper.gc(self.dest)
