"""Exclusive lifecycle controller for the tunneling agent process.

The controller owns the only handle to the running agent. Launch and
shutdown share one lock, so lifecycle transitions never interleave:

    Idle --launch--> Running --launch--> Running (previous instance reaped first)
    Running --shutdown--> Idle
    Idle --shutdown--> Idle (fails with "no running process")

The settle delay and the status query both happen while the lock is held.
Concurrent requests queue behind an in-flight launch.
"""

import logging
import subprocess
import threading
import time

from tunnel_bot.config import TunnelProfile
from tunnel_bot.constants import (
    DEFAULT_SETTLE_DELAY_SECONDS,
    MESSAGE_LAUNCH_FAILED_FORMAT,
    MESSAGE_NO_RUNNING_PROCESS,
    MESSAGE_SHUTDOWN_FAILED_FORMAT,
    MESSAGE_SHUTDOWN_SUCCESS,
    MESSAGE_SHUTDOWN_SUCCESS_FORMAT,
    MESSAGE_STATUS_FAILED_FORMAT,
    OPERATION_LAUNCH,
    OPERATION_SHUTDOWN,
    PROCESS_LOG_ALREADY_GONE,
    PROCESS_LOG_EXITED,
    PROCESS_LOG_KILL_ESCALATE,
    PROCESS_LOG_KILLING,
    PROCESS_LOG_STARTED,
    PROCESS_LOG_STARTING,
    PROCESS_SHUTDOWN_TIMEOUT_SECONDS,
)
from tunnel_bot.exceptions import NoProcessRunningError, SpawnError, StatusFetchError
from tunnel_bot.tunnel.base import ControllerResult, format_endpoints
from tunnel_bot.tunnel.status_client import TunnelStatusClient
from tunnel_bot.utils.platform import (
    describe_exit,
    get_process_group_kwargs,
    signal_kill,
    signal_terminate,
)

logger = logging.getLogger(__name__)


class ProcessController:
    """Runs at most one tunneling agent process at a time.

    Args:
        agent_binary: Path (or PATH name) of the agent binary.
        status_client: Client used to report endpoints after a launch.
        settle_delay: Seconds to wait after spawning before querying status.
        shutdown_timeout: Seconds to wait for a graceful exit before killing.
    """

    def __init__(
        self,
        agent_binary: str,
        status_client: TunnelStatusClient,
        settle_delay: float = DEFAULT_SETTLE_DELAY_SECONDS,
        shutdown_timeout: float = PROCESS_SHUTDOWN_TIMEOUT_SECONDS,
    ) -> None:
        self._agent_binary = agent_binary
        self._status_client = status_client
        self._settle_delay = settle_delay
        self._shutdown_timeout = shutdown_timeout
        self._lock = threading.Lock()
        # Guarded by _lock
        self._process: subprocess.Popen | None = None  # type: ignore[type-arg]

    def is_running(self) -> bool:
        """Whether an agent instance is currently owned by the controller."""
        with self._lock:
            return self._process is not None

    def launch(self, profile: TunnelProfile) -> ControllerResult:
        """Start the agent with a profile, replacing any running instance.

        The previous instance (if any) is terminated and reaped before the
        new one is spawned. After spawning, waits the settle delay and
        queries the agent's status once.

        Args:
            profile: Tunnel profile whose arguments are passed to the agent.

        Returns:
            On success, the endpoint report. On spawn failure the controller
            is left idle. On status failure the new process keeps running
            and the result carries the fetch error.
        """
        with self._lock:
            if self._process is not None:
                self._terminate_locked(OPERATION_LAUNCH)

            try:
                process = self._spawn(profile.arguments)
            except SpawnError as e:
                logger.error(e.message)
                return ControllerResult(
                    success=False, message=MESSAGE_LAUNCH_FAILED_FORMAT.format(error=e.message)
                )
            self._process = process

            logger.info(PROCESS_LOG_STARTED.format(pid=process.pid, delay=self._settle_delay))
            time.sleep(self._settle_delay)

            try:
                endpoints = self._status_client.fetch_status()
            except StatusFetchError as e:
                return ControllerResult(
                    success=False, message=MESSAGE_STATUS_FAILED_FORMAT.format(error=e.message)
                )
            return ControllerResult(success=True, message=format_endpoints(endpoints))

    def shutdown(self) -> ControllerResult:
        """Terminate the running agent.

        Returns:
            A failed result if nothing is running. Otherwise a successful
            result describing how the process exited; an unclean exit is
            reported as information, not as a failure.
        """
        with self._lock:
            try:
                returncode = self._terminate_locked(OPERATION_SHUTDOWN)
            except NoProcessRunningError as e:
                return ControllerResult(
                    success=False, message=MESSAGE_SHUTDOWN_FAILED_FORMAT.format(error=e.message)
                )

        if returncode == 0:
            return ControllerResult(success=True, message=MESSAGE_SHUTDOWN_SUCCESS)
        return ControllerResult(
            success=True,
            message=MESSAGE_SHUTDOWN_SUCCESS_FORMAT.format(outcome=describe_exit(returncode)),
        )

    def _spawn(self, arguments: tuple[str, ...]) -> subprocess.Popen:  # type: ignore[type-arg]
        command = [self._agent_binary, *arguments]
        logger.info(PROCESS_LOG_STARTING.format(command=" ".join(command)))
        try:
            return subprocess.Popen(  # noqa: S603
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                **get_process_group_kwargs(),
            )
        except OSError as e:
            raise SpawnError(str(e), command=command) from e

    def _terminate_locked(self, operation: str) -> int:
        """Signal the running process, wait for it to exit and clear the handle.

        Must be called with _lock held. The signal is always followed by a
        wait, so the process is reaped before the lock is released.

        Returns:
            The process return code.

        Raises:
            NoProcessRunningError: If there is no process to terminate.
        """
        process = self._process
        if process is None:
            raise NoProcessRunningError(MESSAGE_NO_RUNNING_PROCESS)

        logger.debug(PROCESS_LOG_KILLING.format(operation=operation, pid=process.pid))
        try:
            try:
                signal_terminate(process)
            except ProcessLookupError:
                # Already exited; the wait below still reaps it
                logger.debug(PROCESS_LOG_ALREADY_GONE.format(pid=process.pid))

            try:
                returncode = process.wait(timeout=self._shutdown_timeout)
            except subprocess.TimeoutExpired:
                logger.warning(PROCESS_LOG_KILL_ESCALATE.format(pid=process.pid))
                try:
                    signal_kill(process)
                except ProcessLookupError:
                    logger.debug(PROCESS_LOG_ALREADY_GONE.format(pid=process.pid))
                returncode = process.wait()
        finally:
            self._process = None

        logger.info(PROCESS_LOG_EXITED.format(pid=process.pid, outcome=describe_exit(returncode)))
        return returncode
