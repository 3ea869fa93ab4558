from dataclasses import dataclass

from .constants import DEFAULT_SOURCE_REMOTE, DEFAULT_TAGS_REFSPEC


@dataclass(frozen=True, kw_only=True, slots=True)
class CloneConfig:
    """Options for a single clone.

    `heads_refspec` and `tags_refspec` only select which refs of the source are
    fetched; under `mirror` they still land in `refs/heads/*` and `refs/tags/*`.
    """

    mirror: bool = False
    link: bool = False
    shared: bool = False
    source_remote: str = DEFAULT_SOURCE_REMOTE
    tags_refspec: str = DEFAULT_TAGS_REFSPEC
    heads_refspec: str | None = None
    checkout_branch: str | None = None

    @property
    def source_heads(self) -> str:
        if self.heads_refspec is None:
            # Empty when the source has never fetched from this remote.
            return f"refs/remotes/{self.source_remote}/*"
        return self.heads_refspec
