# tests/test_realtime_poller.py
from __future__ import annotations

import asyncio

import pytest

from dataco_admin.services.realtime_poller import RealtimePoller


async def _wait_for(predicate, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached")
        await asyncio.sleep(0.005)


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        RealtimePoller(lambda: None, interval=0)


@pytest.mark.asyncio
async def test_immediate_poller_fires_right_away():
    calls = []

    async def cb():
        calls.append(1)

    poller = RealtimePoller(cb, interval=60, immediate=True)
    poller.start()
    await _wait_for(lambda: calls)
    assert poller.running
    poller.stop()
    assert not poller.running


@pytest.mark.asyncio
async def test_deferred_poller_waits_for_first_interval():
    calls = []

    async def cb():
        calls.append(1)

    poller = RealtimePoller(cb, interval=60, immediate=False)
    poller.start()
    await asyncio.sleep(0.02)
    poller.stop()
    assert calls == []


@pytest.mark.asyncio
async def test_callback_errors_do_not_stop_polling():
    calls = []

    async def cb():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("backend hiccup")

    poller = RealtimePoller(cb, interval=0.01, immediate=True)
    poller.start()
    await _wait_for(lambda: len(calls) >= 3)
    poller.stop()
    assert len(calls) >= 3
