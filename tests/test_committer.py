"""Tests for the GitPython committer."""

from pathlib import Path

import pytest
from git import Repo

from ghostcommits import committer as committer_module
from ghostcommits.committer import ACTIVITY_FILE, GitCommitter
from ghostcommits.errors import CommitFailedError
from ghostcommits.models.config import ScheduleConfig


@pytest.fixture
def temp_git_repo(tmp_path):
    """Create a basic temporary Git repository."""
    repo_path = tmp_path / "activity_repo"
    repo_path.mkdir()
    return Repo.init(repo_path)


@pytest.fixture
def remote_repo(tmp_path):
    """Bare repository acting as the push target."""
    return Repo.init(tmp_path / "remote.git", bare=True)


def make_config(repo: Repo, /, **overrides) -> ScheduleConfig:
    values = dict(
        enabled=True,
        email="ghost@example.com",
        author_name="Ghost",
        repo_path=repo.working_dir,
    )
    values.update(overrides)
    return ScheduleConfig(**values)


@pytest.mark.asyncio
async def test_create_commit_in_empty_repo(temp_git_repo):
    result = await GitCommitter().create_commit(make_config(temp_git_repo))

    head = temp_git_repo.head.commit
    assert result.sha == head.hexsha
    assert head.author.name == "Ghost"
    assert head.author.email == "ghost@example.com"
    assert head.committer.email == "ghost@example.com"
    assert ACTIVITY_FILE in [item.path for item in head.tree.traverse()]


@pytest.mark.asyncio
async def test_each_commit_appends_activity(temp_git_repo):
    committer = GitCommitter()
    first = await committer.create_commit(make_config(temp_git_repo))
    second = await committer.create_commit(make_config(temp_git_repo))

    assert first.sha != second.sha
    assert len(list(temp_git_repo.iter_commits())) == 2
    lines = (Path(temp_git_repo.working_dir) / ACTIVITY_FILE).read_text().splitlines()
    assert len(lines) == 2


@pytest.mark.asyncio
async def test_missing_repository_fails(tmp_path):
    config = ScheduleConfig(enabled=True, repo_path=str(tmp_path / "nowhere"))

    with pytest.raises(CommitFailedError, match="Not a git repository"):
        await GitCommitter().create_commit(config)


@pytest.mark.asyncio
async def test_unconfigured_repository_fails():
    with pytest.raises(CommitFailedError, match="No repository path"):
        await GitCommitter().create_commit(ScheduleConfig(enabled=True))


@pytest.mark.asyncio
async def test_push_to_named_remote(temp_git_repo, remote_repo):
    temp_git_repo.create_remote("origin", remote_repo.git_dir)
    config = make_config(temp_git_repo, push=True, branch="main")

    result = await GitCommitter().create_commit(config)

    assert remote_repo.commit("main").hexsha == result.sha


@pytest.mark.asyncio
async def test_push_to_missing_remote_fails(temp_git_repo):
    config = make_config(temp_git_repo, push=True, remote="upstream")

    with pytest.raises(CommitFailedError, match="Push failed"):
        await GitCommitter().create_commit(config)


@pytest.mark.asyncio
async def test_push_prefers_committer_token(temp_git_repo, remote_repo, monkeypatch):
    temp_git_repo.create_remote("origin", remote_repo.git_dir)
    config = make_config(temp_git_repo, push=True, owner="ghost", repo="activity", token="stored-token")
    tokens = []

    def fake_push_url(config, token):
        tokens.append(token)
        return None

    monkeypatch.setattr(committer_module, "_push_url", fake_push_url)

    await GitCommitter(token="env-token").create_commit(config)
    await GitCommitter().create_commit(config)

    assert tokens == ["env-token", "stored-token"]
    assert config.token == "stored-token"
