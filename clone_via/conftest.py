from collections.abc import Generator
import os
from pathlib import Path
import sys

from loguru import logger
import pytest
from pytest import FixtureRequest, LogCaptureFixture, MonkeyPatch

from .constants import AMBIENT_GIT_VARIABLES
from .typed_path import AbsDir, RelDir


@pytest.fixture
def typed_tmp_path(tmp_path: Path) -> AbsDir:
    return AbsDir(tmp_path)


@pytest.fixture
def in_tmp_path(typed_tmp_path: AbsDir, request: FixtureRequest) -> Generator[AbsDir]:
    os.chdir(typed_tmp_path)
    yield typed_tmp_path
    os.chdir(request.config.invocation_params.dir)


@pytest.fixture
def workspace(typed_tmp_path: AbsDir, request: FixtureRequest) -> Generator[AbsDir]:
    path = typed_tmp_path / RelDir("workspace")
    path.path.mkdir()
    os.chdir(path)
    yield path
    os.chdir(request.config.invocation_params.dir)


@pytest.fixture(autouse=True)
def clean_git_environment(monkeypatch: MonkeyPatch) -> None:
    for name in AMBIENT_GIT_VARIABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def log_everything() -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="TRACE",
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{file.path}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )


@pytest.fixture
def log_cleanly(caplog: LogCaptureFixture, log_level: str) -> None:
    logger.remove()
    logger.add(caplog.handler, level=log_level, colorize=False, format="{message}")
