from collections.abc import Iterable
import os


def strict_not_none[T](not_none: T | None, /) -> T:
    if not_none is None:
        raise TypeError()
    return not_none


def remove_environment_variables(names: Iterable[str]) -> list[str]:
    removed = []
    for name in names:
        if os.environ.pop(name, None) is not None:
            removed.append(name)
    return removed
