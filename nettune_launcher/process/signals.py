"""
Forwarding of shutdown signals from the launcher to its child process.

The launcher's own process receives SIGINT/SIGTERM/SIGHUP from the terminal
or the supervising client. Those signals are relayed, unchanged, to the
running nettune child so it can shut down the way it was asked to.

Handlers are process-wide state, so they are installed only for the
lifetime of one child and restored afterwards. The relay is entered before
the child is started; signals that arrive before attach() are held and
delivered as soon as the child exists:

    with SignalRelay() as relay:
        process = subprocess.Popen(command)
        relay.attach(process)
        process.wait()
"""

import logging
import signal
import subprocess
import threading
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

FORWARDED_SIGNALS = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGHUP")
    if hasattr(signal, name)
)


class SignalRelay:
    """
    Scoped signal handlers that forward signals to a child process.

    Attributes:
        process: Child process receiving forwarded signals (None until attached)
        signals: Signals being relayed
        forwarded: Signals relayed so far, in order
    """

    def __init__(
        self,
        process: Optional[subprocess.Popen] = None,
        signals: Optional[Iterable[int]] = None,
    ):
        self.process = process
        self.signals = tuple(FORWARDED_SIGNALS if signals is None else signals)
        self.forwarded: List[int] = []
        self._previous = {}
        self._pending: List[int] = []

    @property
    def active(self) -> bool:
        return bool(self._previous)

    @property
    def pending(self) -> List[int]:
        """Signals received before a child was attached."""
        return list(self._pending)

    def __enter__(self) -> "SignalRelay":
        if threading.current_thread() is not threading.main_thread():
            # signal.signal() only works in the main thread
            logger.debug("Not in main thread, signals will not be forwarded")
            return self

        for signum in self.signals:
            self._previous[signum] = signal.getsignal(signum)
            signal.signal(signum, self._forward)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.restore()
        return False

    def restore(self) -> None:
        """Reinstall the handlers that were active before __enter__."""
        for signum, previous in self._previous.items():
            # None means the handler was not installed from Python
            signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
        self._previous.clear()

    def attach(self, process: subprocess.Popen) -> None:
        """Start forwarding to `process`, delivering any held signals first."""
        self.process = process
        pending, self._pending = self._pending, []
        for signum in pending:
            self._deliver(signum)

    def _forward(self, signum, frame) -> None:
        self.forwarded.append(signum)
        if self.process is None:
            logger.debug(f"Holding {signal.Signals(signum).name} until the child starts")
            self._pending.append(signum)
            return
        self._deliver(signum)

    def _deliver(self, signum: int) -> None:
        logger.debug(f"Forwarding {signal.Signals(signum).name} to child {self.process.pid}")
        try:
            self.process.send_signal(signum)
        except ProcessLookupError:
            # Child already exited
            pass
        except ValueError:
            # Windows can only deliver CTRL events and SIGTERM to a child
            self.process.terminate()


__all__ = ["SignalRelay", "FORWARDED_SIGNALS"]
