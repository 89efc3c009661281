"""Unit tests for PotRefillScheduler in isolation."""

import asyncio

import pytest

from ledger.session.refill_scheduler import PotRefillScheduler


@pytest.fixture
def fired():
    return []


@pytest.fixture
def scheduler(fired):
    async def on_refill(game_id: str) -> None:
        fired.append(game_id)

    return PotRefillScheduler(on_refill=on_refill, delay_seconds=0.01)


class TestSchedule:
    async def test_fires_after_delay(self, scheduler, fired):
        scheduler.schedule("g1")
        assert scheduler.has_pending("g1")
        assert fired == []

        await asyncio.sleep(0.05)
        assert fired == ["g1"]
        assert not scheduler.has_pending("g1")

    async def test_rescheduling_replaces_pending_task(self, scheduler, fired):
        scheduler.schedule("g1", delay_seconds=10)
        scheduler.schedule("g1")
        assert scheduler.pending_count == 1

        await asyncio.sleep(0.05)
        assert fired == ["g1"]

    async def test_games_are_independent(self, scheduler, fired):
        scheduler.schedule("g1")
        scheduler.schedule("g2", delay_seconds=10)
        await asyncio.sleep(0.05)
        assert fired == ["g1"]
        assert scheduler.has_pending("g2")
        scheduler.cancel_all()


class TestCancel:
    async def test_cancel_prevents_callback(self, scheduler, fired):
        scheduler.schedule("g1")
        assert scheduler.cancel("g1") is True
        await asyncio.sleep(0.05)
        assert fired == []

    def test_cancel_without_pending(self, scheduler):
        assert scheduler.cancel("g1") is False

    async def test_cancel_all(self, scheduler, fired):
        scheduler.schedule("g1")
        scheduler.schedule("g2")
        scheduler.cancel_all()
        assert scheduler.pending_count == 0
        await asyncio.sleep(0.05)
        assert fired == []


class TestCallbackFailure:
    async def test_failure_is_logged_not_raised(self, caplog):
        async def on_refill(_game_id: str) -> None:
            raise RuntimeError("boom")

        scheduler = PotRefillScheduler(on_refill=on_refill, delay_seconds=0)
        scheduler.schedule("g1")
        await asyncio.sleep(0.02)

        assert not scheduler.has_pending("g1")
        assert "pot refill callback failed" in caplog.text
        (failure,) = [
            r.msg
            for r in caplog.records
            if isinstance(r.msg, dict) and r.msg.get("event") == "pot refill callback failed"
        ]
        assert failure["game_id"] == "g1"
        assert failure["task"] == "pot_refill"
