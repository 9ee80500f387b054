"""Shared fixtures for the scheduler tests."""

import asyncio
from datetime import datetime
from typing import Optional

import pytest

from ghostcommits.committer import Committer
from ghostcommits.executor import CommitExecutor
from ghostcommits.models.config import ScheduleConfig
from ghostcommits.models.state import CommitResult, SchedulerState
from ghostcommits.storage import Storage
from ghostcommits.store import MemoryStore


class FakeCommitter(Committer):
    """Records calls instead of touching git.

    Set ``gate`` to an unset event to hold a commit in flight, or ``error`` to
    make the next commits fail.
    """

    def __init__(self):
        self.calls = 0
        self.gate: Optional[asyncio.Event] = None
        self.error: Optional[Exception] = None

    async def create_commit(self, config: ScheduleConfig) -> CommitResult:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return CommitResult(sha=f"{self.calls:040x}", date=datetime(2024, 5, 1, 12, 0))


@pytest.fixture
def committer():
    return FakeCommitter()


@pytest.fixture
def scheduler_state():
    return SchedulerState()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def storage(store):
    return Storage(store)


@pytest.fixture
def executor(committer, scheduler_state):
    return CommitExecutor(committer, scheduler_state)


@pytest.fixture
def config():
    return ScheduleConfig(
        enabled=True,
        commits_per_day=3,
        email="ghost@example.com",
        author_name="Ghost",
        repo_path="/tmp/unused",
    )
