from __future__ import annotations

from collections.abc import Callable
import functools
import sys
import traceback

import click
from git import GitCommandError
from loguru import logger

from .cloner import Cloner
from .config import CloneConfig
from .constants import DEFAULT_SOURCE_REMOTE, DEFAULT_TAGS_REFSPEC, UNKNOWN_ERROR_EXITCODE
from .githelper import GitHelper
from .logger import setup_logger
from .types import ExitCode


def exitcode_for(e: BaseException) -> ExitCode:
    if isinstance(e, GitCommandError):
        if isinstance(e.status, int) and e.status > 0:
            return e.status
        return UNKNOWN_ERROR_EXITCODE
    exitcode = getattr(e, "exitcode", UNKNOWN_ERROR_EXITCODE)
    return exitcode if isinstance(exitcode, int) else UNKNOWN_ERROR_EXITCODE


def check_for_errors[**P](fn: Callable[P, ExitCode | None]) -> Callable[P, None]:
    @functools.wraps(fn)
    def main(*args: P.args, **kwargs: P.kwargs) -> None:
        try:
            exitcode = fn(*args, **kwargs)
        except BaseException as e:
            logger.debug(f"Threw {type(e)}!")
            logger.trace(traceback.format_exc())
            logger.error(f"{type(e).__name__}: {e}")
            sys.exit(exitcode_for(e))
        if exitcode is not None:
            sys.exit(exitcode)

    return main


@click.command(context_settings=dict(show_default=True))
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Display more output (repeat up to 2 times).",
    show_default=False,
)
@click.option(
    "-q",
    "--quiet",
    count=True,
    help="Display less output (repeat up to 3 times).",
    show_default=False,
)
@click.option("-m", "--mirror", is_flag=True, help="Create a bare mirror of the upstream.")
@click.option("-l", "--link", is_flag=True, help="Hard link objects from SOURCE.")
@click.option(
    "-s", "--shared", is_flag=True, help="Borrow objects from SOURCE through alternates."
)
@click.option("-b", "--branch", default=None, help="Branch to check out (default: SOURCE's).")
@click.option(
    "-r", "--remote", default=DEFAULT_SOURCE_REMOTE, help="Remote of SOURCE to clone from."
)
@click.option(
    "-t", "--tags", default=DEFAULT_TAGS_REFSPEC, help="Refs of SOURCE to fetch as tags."
)
@click.option(
    "-h",
    "--heads",
    default=None,
    help="Refs of SOURCE to fetch as branches (default: refs/remotes/REMOTE/*).",
)
@click.argument("source", type=click.Path(file_okay=False, path_type=str))
@click.argument("dest", required=False, default=None)
@check_for_errors
def main(
    verbose: int,
    quiet: int,
    mirror: bool,
    link: bool,
    shared: bool,
    branch: str | None,
    remote: str,
    tags: str,
    heads: str | None,
    source: str,
    dest: str | None,
) -> None:
    """Clone SOURCE into DEST with the origin of SOURCE as the new origin.

    Objects already present in SOURCE are reused, so only what SOURCE lacks is
    ever downloaded from the upstream.

    \b
    Examples:
    # Clone ~/src/project into ./project.
    clone-via ~/src/project

    \b
    # Create project.git as a bare mirror, hard linking objects.
    clone-via -m -l ~/src/project

    \b
    # Check out develop, borrowing objects through alternates.
    clone-via -s -b develop ~/src/project work
    """
    setup_logger(quiet, verbose)
    GitHelper.clear_ambient_environment()
    config = CloneConfig(
        mirror=mirror,
        link=link,
        shared=shared,
        source_remote=remote,
        tags_refspec=tags,
        heads_refspec=heads,
        checkout_branch=branch,
    )
    cloner = Cloner.from_args(config, source, dest)
    cloner.clone()
