"""Single-flight guard around the commit operation."""

from ghostcommits.committer import Committer
from ghostcommits.errors import BusyError, CommitFailedError, GhostCommitError
from ghostcommits.models.config import ScheduleConfig
from ghostcommits.models.state import CommitResult, SchedulerState


class CommitExecutor:
    """Runs at most one commit at a time.

    Policies and the force path go through ``execute`` and never talk to the
    committer directly.
    """

    def __init__(self, committer: Committer, state: SchedulerState):
        self.committer = committer
        self.state = state

    async def execute(self, config: ScheduleConfig) -> CommitResult:
        # No await between the check and the set
        if self.state.commit_in_flight:
            raise BusyError()
        self.state.commit_in_flight = True

        try:
            return await self.committer.create_commit(config)
        except GhostCommitError:
            raise
        except Exception as e:
            raise CommitFailedError(str(e) or e.__class__.__name__) from e
        finally:
            self.state.commit_in_flight = False
