import os

from git import GitCommandError
import pytest

from .githelper import GitContext, GitHelper
from .test_utils import add_commit, config, make_upstream, refs
from .typed_path import AbsDir, RelDir, RelFile
from .types import Refspec


@pytest.mark.parametrize(
    "work_tree, environment",
    [
        (None, {"GIT_DIR": "/repo.git"}),
        ("/repo", {"GIT_DIR": "/repo.git", "GIT_WORK_TREE": "/repo"}),
    ],
)
def test_context_environment(work_tree: str | None, environment: dict[str, str]) -> None:
    context = GitContext(AbsDir("/repo.git"), None if work_tree is None else AbsDir(work_tree))
    assert context.environment == environment
    assert context.bare == (work_tree is None)
    assert context.working_dir == AbsDir(work_tree or "/repo.git")


@pytest.mark.parametrize("bare", [True, False])
def test_init(typed_tmp_path: AbsDir, bare: bool) -> None:
    local = typed_tmp_path / RelDir("nested/repo")
    GitHelper.init(local, bare=bare)
    assert (local / RelFile("HEAD")).exists() == bare
    assert (local / RelDir(".git")).exists() != bare
    assert config(local, "core.bare") == str(bare).lower()


def test_init_existing_folder(typed_tmp_path: AbsDir) -> None:
    with pytest.raises(FileExistsError):
        GitHelper.init(typed_tmp_path, bare=True)


def test_config_get_and_set(typed_tmp_path: AbsDir) -> None:
    GitHelper.init(typed_tmp_path / RelDir("repo"), bare=True)
    context = GitContext(typed_tmp_path / RelDir("repo"))
    assert GitHelper.config_get(context, "remote.origin.url") is None
    GitHelper.config_set(context, "remote.origin.url", "https://example.com/repo.git")
    assert GitHelper.config_get(context, "remote.origin.url") == "https://example.com/repo.git"


def test_git_dir(typed_tmp_path: AbsDir) -> None:
    add_commit(typed_tmp_path, {"file": "contents"})
    assert GitHelper.git_dir(typed_tmp_path) == typed_tmp_path / RelDir(".git")


def test_run_command_failure_raises(typed_tmp_path: AbsDir) -> None:
    GitHelper.init(typed_tmp_path / RelDir("repo"), bare=True)
    context = GitContext(typed_tmp_path / RelDir("repo"))
    with pytest.raises(GitCommandError) as e:
        GitHelper.run_command(context, "rev_parse", "--verify", "doesnotexist")
    assert e.value.status == 128


def test_run_command_ignores_ambient_git_dir(
    typed_tmp_path: AbsDir, monkeypatch: pytest.MonkeyPatch
) -> None:
    GitHelper.init(typed_tmp_path / RelDir("target"), bare=True)
    GitHelper.init(typed_tmp_path / RelDir("other"), bare=True)
    monkeypatch.setenv("GIT_DIR", os.fspath(typed_tmp_path / RelDir("other")))
    target = GitContext(typed_tmp_path / RelDir("target"))
    GitHelper.config_set(target, "user.name", "target")
    assert GitHelper.config_get(target, "user.name") == "target"
    assert GitHelper.config_get(GitContext(typed_tmp_path / RelDir("other")), "user.name") is None


def test_clear_ambient_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIT_DIR", "/somewhere")
    monkeypatch.setenv("GIT_WORK_TREE", "/elsewhere")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "kept")
    GitHelper.clear_ambient_environment()
    assert "GIT_DIR" not in os.environ
    assert "GIT_WORK_TREE" not in os.environ
    assert os.environ["GIT_AUTHOR_NAME"] == "kept"


def test_fetch_and_refs(typed_tmp_path: AbsDir) -> None:
    upstream = typed_tmp_path / RelDir("upstream")
    make_upstream(upstream)
    target = typed_tmp_path / RelDir("target")
    GitHelper.init(target, bare=True)
    context = GitContext(target)
    GitHelper.fetch(
        context, upstream / RelDir(".git"), Refspec("refs/heads/*", "refs/remotes/origin/*")
    )
    assert refs(target) == ["refs/remotes/origin/feature", "refs/remotes/origin/main"]
    assert GitHelper.refs(context, "refs/remotes/origin") == [
        "refs/remotes/origin/feature",
        "refs/remotes/origin/main",
    ]
    assert GitHelper.refs(context, "refs/tags") == []


def test_current_branch(typed_tmp_path: AbsDir) -> None:
    make_upstream(typed_tmp_path)
    context = GitContext(typed_tmp_path / RelDir(".git"), typed_tmp_path)
    assert GitHelper.current_branch(context) == "main"
    GitHelper.run_command(context, "checkout", "--quiet", "--detach")
    assert GitHelper.current_branch(context) is None


def test_checkout_missing_branch_raises(typed_tmp_path: AbsDir) -> None:
    GitHelper.init(typed_tmp_path / RelDir("repo"), bare=False)
    context = GitContext(
        typed_tmp_path / RelDir("repo/.git"), typed_tmp_path / RelDir("repo")
    )
    with pytest.raises(GitCommandError):
        GitHelper.checkout_branch(context, "develop", "origin/develop")
