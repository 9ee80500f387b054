"""Tests for schedule configuration parsing."""

import pytest

from ghostcommits.errors import InvalidConfigError
from ghostcommits.models.config import MODE_FIXED, MODE_RANDOM, ScheduleConfig, normalize_slot, parse_slot


def test_parse_slot():
    assert parse_slot("00:00") == 0
    assert parse_slot("09:05") == 545
    assert parse_slot("23:59") == 1439


@pytest.mark.parametrize("slot", ["24:00", "12:60", "noon", "1230", "", "12:5"])
def test_parse_slot_rejects_invalid(slot):
    with pytest.raises(InvalidConfigError):
        parse_slot(slot)


def test_normalize_slot_pads_hours():
    assert normalize_slot("9:00") == "09:00"
    assert normalize_slot(" 15:30 ") == "15:30"


def test_commits_per_day_is_clamped():
    assert ScheduleConfig(commits_per_day=0).commits_per_day == 1
    assert ScheduleConfig(commits_per_day=50).commits_per_day == 20
    assert ScheduleConfig(commits_per_day=7).commits_per_day == 7


def test_from_dict_reads_camel_case_keys():
    config = ScheduleConfig.from_dict(
        {
            "enabled": True,
            "scheduleMode": "fixed",
            "commitsPerDay": 4,
            "fixedTimes": ["9:00", "15:00"],
            "email": "ghost@example.com",
            "authorName": "Ghost",
            "token": "secret",
            "owner": "ghost",
            "repo": "activity",
        }
    )

    assert config.enabled is True
    assert config.schedule_mode == MODE_FIXED
    assert config.commits_per_day == 4
    assert config.fixed_times == ["09:00", "15:00"]
    assert config.author_name == "Ghost"
    assert config.token == "secret"
    assert config.branch == "main"


def test_from_dict_defaults():
    config = ScheduleConfig.from_dict({"enabled": True})

    assert config.schedule_mode == MODE_RANDOM
    assert config.commits_per_day == 3
    assert config.fixed_times == []


def test_from_dict_rejects_bad_values():
    with pytest.raises(InvalidConfigError):
        ScheduleConfig.from_dict({"commitsPerDay": "many"})
    with pytest.raises(InvalidConfigError):
        ScheduleConfig.from_dict({"fixedTimes": "09:00"})
    with pytest.raises(InvalidConfigError):
        ScheduleConfig.from_dict({"fixedTimes": ["25:00"]})


def test_to_dict_round_trips():
    config = ScheduleConfig(enabled=True, schedule_mode=MODE_FIXED, fixed_times=["08:30"], push=True)
    assert ScheduleConfig.from_dict(config.to_dict()) == config


def test_from_dict_clamps_zero_commits_per_day():
    assert ScheduleConfig.from_dict({"commitsPerDay": 0}).commits_per_day == 1
    assert ScheduleConfig.from_dict({"commitsPerDay": None}).commits_per_day == 3
