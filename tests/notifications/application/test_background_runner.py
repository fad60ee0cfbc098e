"""Application tests for detached notification work."""

import asyncio

from notifications.dispatch.background import BackgroundNotifications, get_background, reset_background


class TestInlineRun:
    """Without a running loop, work is run to completion before submit returns."""

    def setup_method(self):
        self.runner = BackgroundNotifications()

    def test_runs_coroutine(self):
        calls = []

        async def work():
            calls.append("done")

        assert self.runner.submit(work(), name="inline") is None
        assert calls == ["done"]

    def test_failure_is_not_raised(self):
        async def work():
            raise RuntimeError("provider exploded")

        assert self.runner.submit(work(), name="inline-failure") is None
        assert self.runner.pending == 0


class TestOnRunningLoop:
    def setup_method(self):
        self.runner = BackgroundNotifications()

    def test_submit_does_not_wait(self):
        async def scenario():
            release = asyncio.Event()
            finished = []

            async def work():
                await release.wait()
                finished.append(True)

            task = self.runner.submit(work(), name="detached")
            assert task is not None
            assert self.runner.pending == 1
            assert finished == []

            release.set()
            await self.runner.drain()
            return finished

        assert asyncio.run(scenario()) == [True]
        assert self.runner.pending == 0

    def test_failed_task_is_contained(self):
        async def scenario():
            async def work():
                raise ValueError("bad payload")

            task = self.runner.submit(work(), name="detached-failure")
            await self.runner.drain()
            return task

        task = asyncio.run(scenario())
        assert isinstance(task.exception(), ValueError)
        assert self.runner.pending == 0

    def test_drain_gives_up_after_timeout(self):
        async def scenario():
            task = self.runner.submit(asyncio.sleep(5), name="slow")
            await self.runner.drain(timeout=0.05)
            pending = self.runner.pending
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            return pending

        assert asyncio.run(scenario()) == 1
        assert self.runner.pending == 0

    def test_drain_waits_for_follow_up_work(self):
        async def scenario():
            results = []

            async def follow_up():
                results.append("follow-up")

            async def first():
                self.runner.submit(follow_up(), name="follow-up")
                results.append("first")

            self.runner.submit(first(), name="first")
            await self.runner.drain()
            return results

        assert asyncio.run(scenario()) == ["first", "follow-up"]


class TestSingleton:
    def test_get_background_is_shared(self):
        assert get_background() is get_background()

    def test_reset(self):
        first = get_background()
        reset_background()
        assert get_background() is not first
