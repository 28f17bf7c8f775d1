"""Container swap lifecycle for devswap.

Replaces a container with a development twin and restores it afterwards:

    LOCATE -> SNAPSHOT -> TEARDOWN_ORIGINAL -> DERIVE -> START_DEV -> RUN
           -> TEARDOWN_DEV -> RECREATE_ORIGINAL -> DONE

Phases run once, in order, with no retries. Failures before RUN abort the
swap. Failures while tearing down the dev container are reported and the
original is recreated regardless. The snapshot taken in SNAPSHOT is the
only record of the original container once it has been removed.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel

from .constants import STOP_GRACE_PERIOD
from .deriver import derive, dev_name
from .docker import attach as docker_attach
from .errors import (
    ContainerConflictError,
    ContainerNotFoundError,
    DockerError,
    NameConflictError,
    SwapError,
)
from .logging import get_logger
from .models import OriginalSpec
from .session import SessionCoordinator, TerminationEvent

if TYPE_CHECKING:
    from collections.abc import Callable

    from .docker import DockerRuntime
    from .models import DevSpec
    from .run_config import SwapConfig

console = Console()
logger = get_logger(__name__)


class Phase(str, Enum):
    """Lifecycle phases, in execution order."""

    LOCATE = "locate"
    SNAPSHOT = "snapshot"
    TEARDOWN_ORIGINAL = "teardown-original"
    DERIVE = "derive"
    START_DEV = "start-dev"
    RUN = "run"
    TEARDOWN_DEV = "teardown-dev"
    RECREATE_ORIGINAL = "recreate-original"
    DONE = "done"


# Once the original is removed, a fatal error leaves no container running.
DESTRUCTIVE_PHASES = frozenset(
    {Phase.TEARDOWN_ORIGINAL, Phase.DERIVE, Phase.START_DEV, Phase.RECREATE_ORIGINAL}
)


class SwapController:
    """Run one container swap from lookup to restore.

    Args:
        runtime: Runtime client.
        config: Swap settings from the CLI.
        source_path: Host directory mounted into the dev container.
        attach: Blocking attach function, ``docker attach`` by default.
        coordinator: Termination coordinator; a fresh one by default.
    """

    def __init__(
        self,
        runtime: DockerRuntime,
        config: SwapConfig,
        source_path: str,
        *,
        attach: Callable[[str], int] | None = None,
        coordinator: SessionCoordinator | None = None,
    ) -> None:
        self.runtime = runtime
        self.config = config
        self.source_path = source_path
        self.attach = attach or docker_attach
        self.coordinator = coordinator or SessionCoordinator()

        self.phase = Phase.LOCATE
        self.original: OriginalSpec | None = None
        self.dev_spec: DevSpec | None = None
        self.dev_id: str | None = None
        self.restored_id: str | None = None
        self.teardown_errors: list[DockerError] = []

    def _enter(self, phase: Phase) -> None:
        logger.info("Phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def execute(self) -> TerminationEvent:
        """Run every phase in order.

        Returns:
            The event that ended the dev session.

        Raises:
            SwapError: On any fatal phase failure.
        """
        container_id = self.locate()
        original = self.snapshot(container_id)
        self.teardown_original(original)
        dev_spec = self.derive(original)

        # Interrupts after the first one are absorbed until the original is back
        with self.coordinator.handle_signals():
            self.start_dev(dev_spec)
            event = self.run()
            self.teardown_dev()
            self.recreate_original(original)

        self._enter(Phase.DONE)
        return event

    def locate(self) -> str:
        """Resolve the target name to a container ID and check the dev name is free."""
        self._enter(Phase.LOCATE)
        name = self.config.name
        try:
            container_id = self.runtime.find_container_id(name)
        except ContainerNotFoundError as e:
            raise SwapError(
                Phase.LOCATE, f"Error getting Docker container's id by name: {e}"
            ) from e
        except DockerError as e:
            raise SwapError(Phase.LOCATE, f"Error listing containers: {e}") from e

        taken = dev_name(name)
        try:
            exists = self.runtime.container_exists(taken)
        except DockerError as e:
            raise SwapError(Phase.LOCATE, f"Error listing containers: {e}") from e
        if exists:
            raise NameConflictError(
                Phase.LOCATE,
                f"A container named {taken} already exists; remove it before starting a session",
            )
        return container_id

    def snapshot(self, container_id: str) -> OriginalSpec:
        """Capture the full configuration of the original container."""
        self._enter(Phase.SNAPSHOT)
        try:
            data = self.runtime.inspect(container_id)
        except DockerError as e:
            raise SwapError(Phase.SNAPSHOT, f"Error inspecting container: {e}") from e

        self.original = OriginalSpec.from_inspect(data)
        logger.debug("Snapshot of %s (%s) taken", self.original.name, self.original.id)
        return self.original

    def teardown_original(self, original: OriginalSpec) -> None:
        """Stop and remove the original container.

        No automatic recreation is attempted if this fails.
        """
        self._enter(Phase.TEARDOWN_ORIGINAL)
        console.print("Stopping original container")
        try:
            self.runtime.stop(original.id, timeout=STOP_GRACE_PERIOD)
        except DockerError as e:
            raise SwapError(Phase.TEARDOWN_ORIGINAL, f"Error stopping container: {e}") from e

        self._wait_stopped(original.id)

        try:
            self.runtime.remove(original.id)
        except DockerError as e:
            raise SwapError(Phase.TEARDOWN_ORIGINAL, f"Error removing container: {e}") from e

    def derive(self, original: OriginalSpec) -> DevSpec:
        self._enter(Phase.DERIVE)
        self.dev_spec = derive(
            original,
            self.config.image,
            self.source_path,
            self.config.target,
            home=self.config.home,
        )
        console.print(
            Panel.fit(
                f"[bold]{original.name}[/bold] → {self.dev_spec.name} ({self.dev_spec.image})\n"
                f"[dim]{self.source_path} → {self.dev_spec.working_dir}[/dim]",
                border_style="blue",
            )
        )
        return self.dev_spec

    def start_dev(self, dev_spec: DevSpec) -> str:
        """Create and start the dev container, then attach to it."""
        self._enter(Phase.START_DEV)
        try:
            self.dev_id = self.runtime.create(dev_spec.create_config(), dev_spec.name)
        except ContainerConflictError as e:
            raise NameConflictError(Phase.START_DEV, f"Error creating container: {e}") from e
        except DockerError as e:
            raise SwapError(Phase.START_DEV, f"Error creating container: {e}") from e

        try:
            self.runtime.start(self.dev_id)
        except DockerError as e:
            raise SwapError(Phase.START_DEV, f"Error starting container: {e}") from e

        self.coordinator.watch_attach(self.attach, self.dev_id)
        console.print("Quit the container to restore the original one")
        return self.dev_id

    def run(self) -> TerminationEvent:
        """Block until the session ends."""
        self._enter(Phase.RUN)
        assert self.dev_id is not None
        self.coordinator.watch_container(self.runtime, self.dev_id)

        event = self.coordinator.wait()
        if event.error:
            console.print(f"[yellow]{event.describe()}[/yellow]")
        else:
            console.print(event.describe())
        console.print("Stopping dev container...")
        return event

    def teardown_dev(self) -> None:
        """Stop and remove the dev container, reporting but tolerating failures."""
        self._enter(Phase.TEARDOWN_DEV)
        if self.dev_id is None:
            return
        try:
            if self.runtime.is_running(self.dev_id):
                self.runtime.stop(self.dev_id, timeout=STOP_GRACE_PERIOD)
                self._wait_stopped(self.dev_id)
        except DockerError as e:
            self._report_teardown_error("could not stop dev container", e)

        try:
            self.runtime.remove(self.dev_id)
        except DockerError as e:
            self._report_teardown_error("could not remove dev container", e)
            return
        console.print("Container removed successfully")

    def _report_teardown_error(self, what: str, error: DockerError) -> None:
        self.teardown_errors.append(error)
        logger.warning("Dev teardown: %s: %s", what, error)
        console.print(f"[yellow]Warning: {what}: {error}[/yellow]")

    def recreate_original(self, original: OriginalSpec) -> str:
        """Create and start the original container from the snapshot."""
        self._enter(Phase.RECREATE_ORIGINAL)
        try:
            container_id = self.runtime.create(original.create_config(), original.name)
            self.restored_id = container_id
        except ContainerConflictError as e:
            raise NameConflictError(
                Phase.RECREATE_ORIGINAL,
                f"Error creating container: name {original.name} is already in use: {e}",
            ) from e
        except DockerError as e:
            raise SwapError(Phase.RECREATE_ORIGINAL, f"Error creating container: {e}") from e

        try:
            self.runtime.start(container_id)
        except DockerError as e:
            raise SwapError(Phase.RECREATE_ORIGINAL, f"Error starting container: {e}") from e

        console.print(f"[green]Original container {original.name} started successfully[/green]")
        return container_id

    def _wait_stopped(self, container_id: str) -> None:
        # Outcome is reported only; removal follows either way.
        try:
            code = self.runtime.wait(container_id)
        except DockerError as e:
            console.print(f"[yellow]Error waiting for container to stop: {e}[/yellow]")
            return
        if code == 0:
            console.print("Container stopped")
        else:
            console.print(f"Container stopped with status code: {code}")
