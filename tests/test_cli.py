"""End-to-end tests for the command line interface."""

import json

import pytest
from git import Repo

from ghostcommits.cli import main


@pytest.fixture
def state_file(tmp_path, monkeypatch):
    path = tmp_path / "state.json"
    monkeypatch.setenv("GHOST_COMMITS_STATE_FILE", str(path))
    monkeypatch.delenv("GHOST_COMMITS_TOKEN", raising=False)
    return path


@pytest.fixture
def activity_repo(tmp_path):
    repo_path = tmp_path / "activity"
    repo_path.mkdir()
    return Repo.init(repo_path)


def run(*argv) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    return exc_info.value.code


def test_configure_writes_config(state_file, activity_repo):
    code = run(
        "configure",
        "--repo-path",
        activity_repo.working_dir,
        "--email",
        "ghost@example.com",
        "--author-name",
        "Ghost",
        "--mode",
        "fixed",
        "--fixed-times",
        "9:00,15:00",
        "--commits-per-day",
        "40",
    )

    assert code == 0
    config = json.loads(state_file.read_text())["config"]
    assert config["enabled"] is True
    assert config["scheduleMode"] == "fixed"
    assert config["fixedTimes"] == ["09:00", "15:00"]
    assert config["commitsPerDay"] == 20


def test_configure_rejects_bad_slot(state_file):
    assert run("configure", "--mode", "fixed", "--fixed-times", "noon") == 1
    assert not state_file.exists()


def test_force_and_status(state_file, activity_repo, capsys):
    run("configure", "--repo-path", activity_repo.working_dir, "--email", "ghost@example.com", "--author-name", "Ghost")

    assert run("force") == 0
    assert len(list(activity_repo.iter_commits())) == 1

    assert run("status") == 0
    out = capsys.readouterr().out
    assert "active" in out
    assert "1 / 3 commits" in out
    assert activity_repo.head.commit.hexsha[:7] in out


def test_disable_and_enable(state_file, activity_repo):
    run("configure", "--repo-path", activity_repo.working_dir)

    assert run("disable") == 0
    assert json.loads(state_file.read_text())["config"]["enabled"] is False
    assert run("enable") == 0
    assert json.loads(state_file.read_text())["config"]["enabled"] is True


def test_commands_need_configuration(state_file):
    assert run("status") == 1
    assert run("enable") == 1
    assert run("force") == 1


def test_tick_without_configuration_is_quiet(state_file):
    assert run("tick") == 0


def test_environment_token_is_not_persisted(state_file, activity_repo, monkeypatch):
    monkeypatch.setenv("GHOST_COMMITS_TOKEN", "ghp_secret")
    run("configure", "--repo-path", activity_repo.working_dir, "--owner", "ghost", "--repo", "activity")

    assert run("disable") == 0
    assert run("enable") == 0

    assert "ghp_secret" not in state_file.read_text()
    assert json.loads(state_file.read_text())["config"]["token"] is None


def test_disconnect_forgets_everything(state_file, activity_repo):
    run("configure", "--repo-path", activity_repo.working_dir, "--email", "ghost@example.com", "--author-name", "Ghost")
    run("force")

    assert run("disconnect") == 0
    assert json.loads(state_file.read_text()) == {}
    assert run("status") == 1


def test_corrupt_state_file_fails_cleanly(state_file):
    state_file.write_text("{not json")

    assert run("status") == 1
