from collections.abc import Callable
from dataclasses import KW_ONLY, dataclass, field
import functools
import sys
from types import TracebackType
from typing import Self

from loguru import logger

from .constants import DONE_SUFFIX, FAILURE_SUFFIX, LOADING_SUFFIX

# Indexed by `verbose - quiet`, offset so that no flags means INFO.
LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "TRACE")
DEFAULT_VERBOSITY: int = LOG_LEVELS.index("INFO")
# Above CRITICAL, so nothing is logged.
SILENT_LEVEL: int = 60
# Below TRACE, so everything is logged.
EVERYTHING_LEVEL: int = 0


@dataclass(slots=True)
class describe:  # noqa: N801
    """Log one step of a clone as `<message> ...` then `<message> [done]` or `<message> [failed]`.

    Works as a context manager or a decorator. Details noted while the step runs,
    such as how many objects were linked, are appended to the `[done]` line.
    """

    message: str
    _: KW_ONLY
    level: str = "TRACE"
    error_level: str = "ERROR"
    notes: list[str] = field(default_factory=list, init=False)

    def note(self, detail: str, /) -> None:
        self.notes.append(detail)

    @property
    def done_message(self) -> str:
        if not self.notes:
            return f"{self.message} {DONE_SUFFIX}"
        return f"{self.message} {DONE_SUFFIX} ({', '.join(self.notes)})"

    def __enter__(self) -> Self:
        self.notes.clear()
        logger.log(self.level, f"{self.message} {LOADING_SUFFIX}")
        return self

    def __exit__(
        self,
        type_: type[BaseException] | None,
        value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        if type_ is None:
            logger.log(self.level, self.done_message)
        else:
            logger.log(self.error_level, f"{self.message} {FAILURE_SUFFIX}")

    def __call__[**P, R](self, fn: Callable[P, R]) -> Callable[P, R]:
        @functools.wraps(fn)
        def logging_fn(*args: P.args, **kwargs: P.kwargs) -> R:
            with self:
                return fn(*args, **kwargs)

        return logging_fn


def log_level_name(quiet: int, verbose: int) -> str | int:
    verbosity = DEFAULT_VERBOSITY + verbose - quiet
    if verbosity < 0:
        return SILENT_LEVEL
    if verbosity >= len(LOG_LEVELS):
        return EVERYTHING_LEVEL
    return LOG_LEVELS[verbosity]


def setup_logger(quiet: int, verbose: int) -> None:
    logger.remove()
    logger.add(sys.stdout, level=log_level_name(quiet, verbose), format="<level>{message}</level>")
