"""Tests for EventEmitter."""

import asyncio

import pytest

from splitfetch.events import BaseEmitter, EventEmitter, NullEmitter


class TestEventEmitterSubscription:
    @pytest.mark.asyncio
    async def test_sync_handler_receives_event(self, real_emitter):
        received = []
        real_emitter.on("part.completed", received.append)

        await real_emitter.emit("part.completed", {"index": 0})

        assert received == [{"index": 0}]

    @pytest.mark.asyncio
    async def test_async_handler_awaited(self, real_emitter):
        received = []

        async def handler(data):
            await asyncio.sleep(0)
            received.append(data)

        real_emitter.on("job.started", handler)
        await real_emitter.emit("job.started", "payload")

        assert received == ["payload"]

    @pytest.mark.asyncio
    async def test_handlers_called_in_subscription_order(self, real_emitter):
        calls = []
        real_emitter.on("evt", lambda _: calls.append("first"))
        real_emitter.on("evt", lambda _: calls.append("second"))

        await real_emitter.emit("evt", None)

        assert calls == ["first", "second"]

    @pytest.mark.asyncio
    async def test_off_removes_handler(self, real_emitter):
        received = []
        real_emitter.on("evt", received.append)
        real_emitter.off("evt", received.append)

        await real_emitter.emit("evt", 1)

        assert received == []
        assert real_emitter.has_listeners("evt") is False

    def test_off_unknown_handler_logs_warning(self, real_emitter, mock_logger):
        def handler(_):
            pass

        real_emitter.off("evt", handler)

        mock_logger.warning.assert_called_once()

    def test_has_listeners(self, real_emitter):
        assert real_emitter.has_listeners("part.progress") is False
        real_emitter.on("part.progress", lambda _: None)
        assert real_emitter.has_listeners("part.progress") is True

    @pytest.mark.asyncio
    async def test_emit_without_handlers_is_noop(self, real_emitter):
        await real_emitter.emit("nobody.listens", object())


class TestEventEmitterErrorIsolation:
    @pytest.mark.asyncio
    async def test_failing_sync_handler_does_not_stop_others(
        self, real_emitter, mock_logger
    ):
        received = []

        def broken(_):
            raise RuntimeError("boom")

        real_emitter.on("evt", broken)
        real_emitter.on("evt", received.append)

        await real_emitter.emit("evt", 1)

        assert received == [1]
        mock_logger.exception.assert_called_once()

    @pytest.mark.asyncio
    async def test_failing_async_handler_is_logged(self, real_emitter, mock_logger):
        received = []

        async def broken(_):
            raise RuntimeError("boom")

        async def healthy(data):
            received.append(data)

        real_emitter.on("evt", broken)
        real_emitter.on("evt", healthy)

        await real_emitter.emit("evt", 2)

        assert received == [2]
        mock_logger.opt.assert_called_once()
        mock_logger.opt.return_value.error.assert_called_once()


class TestNullEmitter:
    @pytest.mark.asyncio
    async def test_null_emitter_drops_everything(self):
        emitter = NullEmitter()
        received = []

        emitter.on("evt", received.append)
        await emitter.emit("evt", 1)
        emitter.off("evt", received.append)

        assert isinstance(emitter, BaseEmitter)
        assert received == []
        assert emitter.has_listeners("evt") is False


def test_default_logger_used_when_none_given():
    emitter = EventEmitter()
    assert emitter._logger is not None
