"""Runs the winget executable and captures its text output."""

import asyncio
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from wingetctl.exceptions import CommandTimeoutError, InvocationError
from wingetctl.logger import get_logger
from wingetctl.utils.subprocess_executor import SubprocessExecutor, decode_output

logger = get_logger(__name__)

WINGET_EXECUTABLE = "winget"
DEFAULT_PROBE_TIMEOUT = 5.0


def resolve_winget_path(override: str | None = None) -> str:
    """Locate winget.

    Order: explicit override, the per-user WindowsApps install
    (``%LOCALAPPDATA%\\Microsoft\\WindowsApps\\winget.exe``), then the bare name
    so the OS resolves it through PATH.
    """
    if override:
        return override

    local_app_data = os.getenv("LOCALAPPDATA")
    if local_app_data:
        candidate = Path(local_app_data) / "Microsoft" / "WindowsApps" / "winget.exe"
        if candidate.is_file():
            return str(candidate)

    return WINGET_EXECUTABLE


@dataclass(frozen=True)
class CommandOutput:
    """Combined stdout/stderr of one winget run."""

    text: str
    exit_code: int | None = None


def combine_output(stdout: str, stderr: str) -> str:
    return f"{stdout}\n{stderr}" if stderr else stdout


class ProcessRunner:
    """Launches winget non-interactively and returns its combined output."""

    def __init__(self, executable: str | None = None, probe_timeout: float = DEFAULT_PROBE_TIMEOUT) -> None:
        self._executable_override = executable
        self.probe_timeout = probe_timeout if probe_timeout > 0 else DEFAULT_PROBE_TIMEOUT

    @property
    def executable(self) -> str:
        return resolve_winget_path(self._executable_override)

    async def run(self, args: Sequence[str], timeout: float | None = None) -> CommandOutput:
        """Run winget with ``args`` and wait for it to exit.

        Args:
            args: winget arguments, one list item per argument
            timeout: Seconds to wait before killing the process; None waits forever

        Raises:
            CommandTimeoutError: If the timeout expired
            InvocationError: If winget could not be started or the run failed
        """
        executable = self.executable
        try:
            result = await SubprocessExecutor.run(executable, *args, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise CommandTimeoutError(
                "winget {args} did not finish within {timeout}s", args=" ".join(args), timeout=timeout
            ) from e
        except OSError as e:
            raise InvocationError("Could not start {executable}: {error}", executable=executable, error=e) from e
        except Exception as e:
            raise InvocationError("winget {args} failed: {error}", args=" ".join(args), error=e) from e

        text = combine_output(decode_output(result.stdout), decode_output(result.stderr))
        return CommandOutput(text=text, exit_code=result.returncode)

    async def probe(self, timeout: float | None = None) -> bool:
        """Liveness check: True only if ``winget --version`` exits 0 within the timeout."""
        # The probe is always bounded
        timeout = timeout if timeout is not None and timeout > 0 else self.probe_timeout
        try:
            output = await self.run(["--version"], timeout=timeout)
        except InvocationError as e:
            logger.debug(f"winget probe failed: {e}")
            return False
        return output.exit_code == 0
