"""
Tests for signal forwarding to the child process.
"""

import os
import signal
import threading
from unittest.mock import Mock

import pytest

from nettune_launcher.process.signals import FORWARDED_SIGNALS, SignalRelay


@pytest.fixture
def child():
    process = Mock()
    process.pid = 4242
    return process


class TestSignalRelay:
    """Tests for SignalRelay."""

    def test_default_signals(self, child):
        relay = SignalRelay(child)

        assert signal.SIGINT in relay.signals
        assert relay.signals == FORWARDED_SIGNALS

    def test_installs_and_restores_handlers(self, child):
        before = signal.getsignal(signal.SIGINT)

        with SignalRelay(child, [signal.SIGINT]) as relay:
            assert relay.active
            assert signal.getsignal(signal.SIGINT) == relay._forward

        assert not relay.active
        assert signal.getsignal(signal.SIGINT) == before

    def test_restores_on_error(self, child):
        before = signal.getsignal(signal.SIGINT)

        with pytest.raises(RuntimeError):
            with SignalRelay(child, [signal.SIGINT]):
                raise RuntimeError("boom")

        assert signal.getsignal(signal.SIGINT) == before

    def test_forward_sends_signal(self, child):
        relay = SignalRelay(child, [signal.SIGINT])

        relay._forward(signal.SIGINT, None)

        child.send_signal.assert_called_once_with(signal.SIGINT)
        assert relay.forwarded == [signal.SIGINT]

    def test_forward_after_child_exit(self, child):
        child.send_signal.side_effect = ProcessLookupError()
        relay = SignalRelay(child, [signal.SIGINT])

        relay._forward(signal.SIGINT, None)

        assert relay.forwarded == [signal.SIGINT]

    def test_forward_falls_back_to_terminate(self, child):
        child.send_signal.side_effect = ValueError("Unsupported signal")
        relay = SignalRelay(child, [signal.SIGINT])

        relay._forward(signal.SIGINT, None)

        child.terminate.assert_called_once_with()

    def test_no_handlers_outside_main_thread(self, child):
        before = signal.getsignal(signal.SIGINT)
        result = {}

        def worker():
            with SignalRelay(child, [signal.SIGINT]) as relay:
                result["active"] = relay.active

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert result["active"] is False
        assert signal.getsignal(signal.SIGINT) == before

    @pytest.mark.posix
    def test_delivered_signal_reaches_child(self, child):
        with SignalRelay(child, [signal.SIGTERM]) as relay:
            os.kill(os.getpid(), signal.SIGTERM)

        child.send_signal.assert_called_once_with(signal.SIGTERM)
        assert relay.forwarded == [signal.SIGTERM]

    def test_signals_before_attach_are_held(self, child):
        relay = SignalRelay(signals=[signal.SIGTERM])

        relay._forward(signal.SIGTERM, None)

        assert relay.pending == [signal.SIGTERM]
        child.send_signal.assert_not_called()

        relay.attach(child)

        child.send_signal.assert_called_once_with(signal.SIGTERM)
        assert relay.pending == []

    def test_attach_without_pending_signals(self, child):
        relay = SignalRelay(signals=[signal.SIGTERM])

        relay.attach(child)
        relay._forward(signal.SIGTERM, None)

        child.send_signal.assert_called_once_with(signal.SIGTERM)

    @pytest.mark.posix
    def test_signal_before_child_exists_is_delivered(self, child):
        with SignalRelay(signals=[signal.SIGTERM]) as relay:
            os.kill(os.getpid(), signal.SIGTERM)
            relay.attach(child)

        child.send_signal.assert_called_once_with(signal.SIGTERM)
