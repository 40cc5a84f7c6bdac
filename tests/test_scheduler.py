"""Tests for the repeating refresh timer."""

import asyncio
import logging

from scheduler import REFRESH_INTERVAL_SEC, RefreshTimer


def test_default_interval_is_two_minutes():
    assert REFRESH_INTERVAL_SEC == 120
    assert RefreshTimer(lambda: None).interval == 120


class TestRefreshTimer:

    def test_fires_immediately(self):
        calls = []

        async def callback():
            calls.append(1)

        async def run():
            timer = RefreshTimer(callback, interval=10)
            timer.start()
            await asyncio.sleep(0.02)
            timer.stop()

        asyncio.run(run())
        assert calls == [1]

    def test_repeats_on_interval(self):
        calls = []

        async def callback():
            calls.append(1)

        async def run():
            timer = RefreshTimer(callback, interval=0.01)
            timer.start()
            await asyncio.sleep(0.1)
            timer.stop()

        asyncio.run(run())
        assert len(calls) >= 3

    def test_survives_callback_error(self, caplog):
        caplog.set_level(logging.ERROR, logger="pricetrack")
        calls = []

        async def callback():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first cycle blew up")

        async def run():
            timer = RefreshTimer(callback, interval=0.01)
            timer.start()
            await asyncio.sleep(0.08)
            timer.stop()

        asyncio.run(run())
        assert len(calls) >= 2
        assert "first cycle blew up" in caplog.text

    def test_stop_cancels(self):
        calls = []

        async def callback():
            calls.append(1)

        async def run():
            timer = RefreshTimer(callback, interval=0.01)
            timer.start()
            assert timer.running
            await asyncio.sleep(0.03)
            timer.stop()
            assert not timer.running
            seen = len(calls)
            await asyncio.sleep(0.05)
            return seen

        seen = asyncio.run(run())
        assert len(calls) == seen

    def test_stop_is_idempotent(self):
        timer = RefreshTimer(lambda: None, interval=1)
        timer.stop()
        timer.stop()
        assert not timer.running

    def test_start_twice_keeps_one_loop(self):
        calls = []

        async def callback():
            calls.append(1)

        async def run():
            timer = RefreshTimer(callback, interval=10)
            timer.start()
            first = timer.task
            timer.start()
            assert timer.task is first
            await asyncio.sleep(0.02)
            timer.stop()

        asyncio.run(run())
        assert calls == [1]

    def test_cycles_do_not_overlap(self):
        active = 0
        peak = 0

        async def callback():
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.02)
            active -= 1

        async def run():
            timer = RefreshTimer(callback, interval=0.001)
            timer.start()
            await asyncio.sleep(0.1)
            timer.stop()

        asyncio.run(run())
        assert peak == 1
