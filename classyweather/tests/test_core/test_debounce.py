"""Tests for the trailing-edge debouncer."""

import asyncio

import pytest

from classyweather.core.debounce import Debouncer

WAIT = 0.02


@pytest.fixture
def committed() -> list[str]:
    return []


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_coalesces_rapid_pushes(self, committed: list[str]):
        debouncer = Debouncer(committed.append, wait_seconds=WAIT)
        for value in ["T", "To", "Tok", "Toky", "Tokyo"]:
            debouncer.push(value)
        await asyncio.sleep(WAIT * 5)
        assert committed == ["Tokyo"]

    @pytest.mark.asyncio
    async def test_last_value_always_commits(self, committed: list[str]):
        debouncer = Debouncer(committed.append, wait_seconds=WAIT)
        debouncer.push("Tokyo")
        await asyncio.sleep(WAIT / 4)
        debouncer.push("Oslo")
        assert committed == []
        await asyncio.sleep(WAIT * 5)
        assert committed == ["Oslo"]
        assert debouncer.pending is None

    @pytest.mark.asyncio
    async def test_separate_windows_commit_separately(self, committed: list[str]):
        debouncer = Debouncer(committed.append, wait_seconds=WAIT)
        debouncer.push("Paris")
        await asyncio.sleep(WAIT * 5)
        debouncer.push("Rome")
        await asyncio.sleep(WAIT * 5)
        assert committed == ["Paris", "Rome"]

    @pytest.mark.asyncio
    async def test_flush_commits_immediately(self, committed: list[str]):
        debouncer = Debouncer(committed.append, wait_seconds=10)
        debouncer.push("Lima")
        assert debouncer.pending == "Lima"
        assert debouncer.flush() is True
        assert committed == ["Lima"]
        assert debouncer.flush() is False

    @pytest.mark.asyncio
    async def test_flush_does_not_double_commit(self, committed: list[str]):
        debouncer = Debouncer(committed.append, wait_seconds=WAIT)
        debouncer.push("Lima")
        debouncer.flush()
        await asyncio.sleep(WAIT * 5)
        assert committed == ["Lima"]

    @pytest.mark.asyncio
    async def test_cancel_drops_pending(self, committed: list[str]):
        debouncer = Debouncer(committed.append, wait_seconds=WAIT)
        debouncer.push("Lima")
        debouncer.cancel()
        await asyncio.sleep(WAIT * 5)
        assert committed == []

    @pytest.mark.asyncio
    async def test_blank_value_still_commits(self, committed: list[str]):
        debouncer = Debouncer(committed.append, wait_seconds=WAIT)
        debouncer.push("Lima")
        debouncer.push("")
        await asyncio.sleep(WAIT * 5)
        assert committed == [""]

    def test_negative_wait_rejected(self):
        with pytest.raises(ValueError):
            Debouncer(print, wait_seconds=-1)
