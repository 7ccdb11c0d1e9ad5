"""Uncaught-error hooks."""

import asyncio
import sys
import threading

import pytest

from devpulse.integrations.hooks import UNHANDLED_REJECTION, install_asyncio_handler, install_excepthooks


class RecordingClient:
    def __init__(self, fail: bool = False):
        self.captured = []
        self.fail = fail

    def capture(self, error, extra=None):
        if self.fail:
            raise RuntimeError("capture broke")
        self.captured.append((error, extra))


def _raise_and_get_info():
    try:
        raise ValueError("uncaught")
    except ValueError:
        return sys.exc_info()


class TestExcepthooks:
    def test_captures_and_chains(self, monkeypatch):
        chained = []
        monkeypatch.setattr(sys, "excepthook", lambda *args: chained.append(args))
        client = RecordingClient()
        uninstall = install_excepthooks(client)
        try:
            exc_type, exc, tb = _raise_and_get_info()
            sys.excepthook(exc_type, exc, tb)
        finally:
            uninstall()

        assert len(chained) == 1
        error, extra = client.captured[0]
        assert error is exc
        assert extra["context"]["filename"].endswith("test_hooks.py")
        assert extra["context"]["line"] == tb.tb_lineno
        assert extra["context"]["column"] is None

    def test_keyboard_interrupt_not_captured(self, monkeypatch):
        monkeypatch.setattr(sys, "excepthook", lambda *args: None)
        client = RecordingClient()
        uninstall = install_excepthooks(client)
        try:
            sys.excepthook(KeyboardInterrupt, KeyboardInterrupt(), None)
        finally:
            uninstall()
        assert client.captured == []

    def test_capture_failure_does_not_break_previous_hook(self, monkeypatch):
        chained = []
        monkeypatch.setattr(sys, "excepthook", lambda *args: chained.append(args))
        uninstall = install_excepthooks(RecordingClient(fail=True))
        try:
            sys.excepthook(*_raise_and_get_info())
        finally:
            uninstall()
        assert len(chained) == 1

    def test_thread_exceptions(self, monkeypatch):
        monkeypatch.setattr(threading, "excepthook", lambda args: None)
        client = RecordingClient()
        uninstall = install_excepthooks(client)
        try:
            def boom():
                raise RuntimeError("in thread")

            t = threading.Thread(target=boom)
            t.start()
            t.join()
        finally:
            uninstall()

        error, extra = client.captured[0]
        assert str(error) == "in thread"
        assert "filename" in extra["context"]

    def test_uninstall_restores(self):
        before_sys, before_threading = sys.excepthook, threading.excepthook
        uninstall = install_excepthooks(RecordingClient())
        uninstall()
        assert sys.excepthook is before_sys
        assert threading.excepthook is before_threading


class TestAsyncioHandler:
    @pytest.mark.asyncio
    async def test_captures_loop_exceptions(self):
        loop = asyncio.get_running_loop()
        reported = []
        loop.set_exception_handler(lambda lp, ctx: reported.append(ctx))
        client = RecordingClient()
        uninstall = install_asyncio_handler(client, loop)
        try:
            error = ValueError("never retrieved")
            loop.call_exception_handler({"message": "Task exception was never retrieved", "exception": error})
        finally:
            uninstall()
            loop.set_exception_handler(None)

        assert client.captured == [(error, {"context": {"type": UNHANDLED_REJECTION}})]
        assert len(reported) == 1

    @pytest.mark.asyncio
    async def test_context_without_exception_is_wrapped(self):
        loop = asyncio.get_running_loop()
        client = RecordingClient()
        uninstall = install_asyncio_handler(client, loop)
        try:
            loop.call_exception_handler({"message": "something went sideways"})
        finally:
            uninstall()

        error, _ = client.captured[0]
        assert isinstance(error, RuntimeError)
        assert str(error) == "something went sideways"
