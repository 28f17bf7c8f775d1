"""Session termination for the dev container.

Three sources can end a session: an interrupt delivered to the process,
the dev container exiting on its own, and the ``docker attach`` session
ending or failing. Each source fires into a single-slot queue; the first
event wins and later ones are dropped, so cleanup runs exactly once.
"""

from __future__ import annotations

import contextlib
import queue
import signal
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import DevSwapError
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from .docker import DockerRuntime

logger = get_logger(__name__)


class TerminationSource(str, Enum):
    """What ended the session."""

    INTERRUPT = "interrupt"
    CONTAINER_EXIT = "container-exit"
    ATTACH_EXIT = "attach-exit"


@dataclass(frozen=True)
class TerminationEvent:
    """The single end-of-session signal.

    Attributes:
        source: Which source fired.
        exit_code: Exit status reported by the source, if any.
        error: Failure reported by the source, if any.
    """

    source: TerminationSource
    exit_code: int | None = None
    error: str | None = None

    def describe(self) -> str:
        if self.source == TerminationSource.INTERRUPT:
            return "Interrupt signal received"
        if self.source == TerminationSource.CONTAINER_EXIT:
            if self.error:
                return f"Error waiting for container to stop: {self.error}"
            if self.exit_code:
                return f"Container stopped with status code: {self.exit_code}"
            return "Container stopped"
        if self.error:
            return f"Error attaching to container: {self.error}"
        return "Attach session ended"


class SessionCoordinator:
    """Merge all termination sources into exactly one TerminationEvent."""

    def __init__(self) -> None:
        self._events: queue.Queue[TerminationEvent] = queue.Queue(maxsize=1)
        self._lock = threading.Lock()
        self._fired = False

    @property
    def fired(self) -> bool:
        with self._lock:
            return self._fired

    def fire(self, event: TerminationEvent) -> bool:
        """Deliver a termination event.

        Returns:
            True if this was the first event, False if it was dropped.
        """
        with self._lock:
            if self._fired:
                logger.debug("Ignoring late termination event: %s", event.source.value)
                return False
            self._fired = True
            self._events.put_nowait(event)
        logger.info("Session terminated by %s", event.source.value)
        return True

    def wait(self, timeout: float | None = None) -> TerminationEvent:
        """Block until the first termination event arrives.

        Raises:
            queue.Empty: If ``timeout`` elapses first.
        """
        return self._events.get(timeout=timeout)

    def _on_signal(self, signum: int, frame: Any) -> None:
        # Handlers run on the main thread, which may be blocked inside wait();
        # firing from a helper thread keeps the queue lock out of the handler.
        threading.Thread(
            target=self.fire,
            args=(TerminationEvent(TerminationSource.INTERRUPT),),
            name="devswap-interrupt",
            daemon=True,
        ).start()

    @contextlib.contextmanager
    def handle_signals(self) -> Iterator[None]:
        """Route SIGINT/SIGTERM into the coordinator while the block runs."""
        signums = [signal.SIGINT]
        if hasattr(signal, "SIGTERM"):
            signums.append(signal.SIGTERM)

        previous = {signum: signal.signal(signum, self._on_signal) for signum in signums}
        try:
            yield
        finally:
            for signum, handler in previous.items():
                signal.signal(signum, handler)

    def _spawn(self, target: Callable[[], None], name: str) -> threading.Thread:
        # Watchers are never joined; they finish on their own or die with the process.
        thread = threading.Thread(target=target, name=name, daemon=True)
        thread.start()
        return thread

    def watch_container(self, runtime: DockerRuntime, container_id: str) -> threading.Thread:
        """Fire when the container stops running."""

        def _wait() -> None:
            try:
                code = runtime.wait(container_id)
            except DevSwapError as e:
                self.fire(TerminationEvent(TerminationSource.CONTAINER_EXIT, error=str(e)))
                return
            self.fire(TerminationEvent(TerminationSource.CONTAINER_EXIT, exit_code=code))

        return self._spawn(_wait, "devswap-wait")

    def watch_attach(
        self,
        attach: Callable[[str], int],
        container_id: str,
    ) -> threading.Thread:
        """Run the attach session and fire when it ends."""

        def _attach() -> None:
            try:
                code = attach(container_id)
            except DevSwapError as e:
                self.fire(TerminationEvent(TerminationSource.ATTACH_EXIT, error=str(e)))
                return
            error = f"docker attach exited with status {code}" if code else None
            self.fire(TerminationEvent(TerminationSource.ATTACH_EXIT, exit_code=code, error=error))

        return self._spawn(_attach, "devswap-attach")
