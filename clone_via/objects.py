from collections import Counter
from collections.abc import Callable
import enum
import os
import shutil

from loguru import logger

from .constants import ALTERNATES_FILE, INFO_DIR, OBJECTS_DIR, PACK_DIR
from .typed_path import AbsDir, AbsFile, RelDir, RelFile

# Loose objects live in 256 fan-out directories named by the first byte of their hash.
FANOUT_DIRS: tuple[RelDir, ...] = tuple(RelDir(f"{byte:02x}") for byte in range(256))
OBJECT_SUBDIRS: tuple[RelDir, ...] = (*FANOUT_DIRS, PACK_DIR, INFO_DIR)


class TransferStrategy(enum.Enum):
    LINK = "link"
    COPY = "copy"


type Transfer = Callable[[AbsFile, AbsFile], TransferStrategy]


def object_store(git_dir: AbsDir) -> AbsDir:
    return git_dir / OBJECTS_DIR


def link_or_copy(source: AbsFile, target: AbsFile) -> TransferStrategy:
    try:
        os.link(source, target)
    except FileExistsError:
        raise
    except OSError as e:
        # Cross-device links and filesystems without hard links.
        logger.trace(f"Unable to link {source} ({e}), copying instead.")
        shutil.copy2(source, target)
        return TransferStrategy.COPY
    return TransferStrategy.LINK


def link_objects(
    source: AbsDir, target: AbsDir, *, transfer: Transfer = link_or_copy
) -> Counter[TransferStrategy]:
    """Populate the object store `target` from `source`, one file at a time.

    Directories that are missing or empty in `source` are not created in `target`.
    Returns how many files were transferred with each strategy.
    """
    transferred: Counter[TransferStrategy] = Counter()
    for subdir in OBJECT_SUBDIRS:
        source_dir = source / subdir
        if not source_dir.is_folder():
            continue
        filenames = sorted(entry.name for entry in os.scandir(source_dir) if entry.is_file())
        if not filenames:
            continue
        target_dir = target / subdir
        target_dir.path.mkdir(parents=True, exist_ok=True)
        for filename in filenames:
            transferred[transfer(source_dir / RelFile(filename), target_dir / RelFile(filename))] += 1
    return transferred


def share_objects(source: AbsDir, target: AbsDir) -> None:
    alternates = target / ALTERNATES_FILE
    alternates.path.parent.mkdir(parents=True, exist_ok=True)
    with open(alternates, "a") as f:
        f.write(f"{os.fspath(source)}\n")
