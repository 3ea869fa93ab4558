from pathlib import Path

from .typed_path import Ext, RelDir, RelFile
from .types import ExitCode

CLONE_VIA_NAME: str = "clone-via"

DEFAULT_SOURCE_REMOTE: str = "origin"
DEFAULT_TAGS_REFSPEC: str = "refs/tags/*"
DEST_REMOTE: str = "origin"

MIRROR_HEADS_TARGET: str = "refs/heads/*"
TRACKING_HEADS_TARGET: str = f"refs/remotes/{DEST_REMOTE}/*"
TAGS_TARGET: str = "refs/tags/*"
MIRROR_FETCH_REFSPEC: str = "refs/*:refs/*"
TRACKING_FETCH_REFSPEC: str = f"refs/heads/*:{TRACKING_HEADS_TARGET}"

GIT_SUFFIX: Ext = Ext(".git")
DOT_GIT: RelDir = RelDir(Path(".git"))
OBJECTS_DIR: RelDir = RelDir(Path("objects"))
PACK_DIR: RelDir = RelDir(Path("pack"))
INFO_DIR: RelDir = RelDir(Path("info"))
ALTERNATES_FILE: RelFile = RelFile(Path("info/alternates"))

# Variables that would point git somewhere other than the repository we pass explicitly.
AMBIENT_GIT_VARIABLES: tuple[str, ...] = (
    "GIT_DIR",
    "GIT_WORK_TREE",
    "GIT_INDEX_FILE",
    "GIT_OBJECT_DIRECTORY",
    "GIT_ALTERNATE_OBJECT_DIRECTORIES",
    "GIT_NAMESPACE",
    "GIT_COMMON_DIR",
    "GIT_CEILING_DIRECTORIES",
    "GIT_DISCOVERY_ACROSS_FILESYSTEM",
)

MISSING_REMOTE_EXITCODE: ExitCode = 1
UNKNOWN_ERROR_EXITCODE: ExitCode = 1
PATH_EXISTS_EXITCODE: ExitCode = 3

LOADING_SUFFIX: str = "..."
DONE_SUFFIX: str = "[done]"
FAILURE_SUFFIX: str = "[failed]"
