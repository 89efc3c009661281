import pytest

from ledger.dal import InMemoryGameRepository
from ledger.session.manager import SessionManager


@pytest.fixture
def repository():
    return InMemoryGameRepository()


@pytest.fixture
async def manager(repository):
    session_manager = SessionManager(repository, refill_delay_seconds=0.01)
    yield session_manager
    session_manager.shutdown()
