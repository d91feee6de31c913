"""Runs winget commands that need administrative rights.

When the process is not elevated, the command is written to a transient script
whose output is redirected to a transient file, the script is started through
the platform's elevation launcher, and the file is read back once the elevated
process exits. Both files live in a private directory that is removed
afterwards no matter what happened.
"""

import shlex
import subprocess
import tempfile
import uuid
from collections.abc import Callable, Sequence
from pathlib import Path

from wingetctl.logger import get_logger
from wingetctl.services.winget.runner import CommandOutput, ProcessRunner
from wingetctl.utils.privilege import PrivilegeHelper, current_system, is_elevated
from wingetctl.utils.subprocess_executor import decode_output

logger = get_logger(__name__)

ELEVATION_FAILED_PREFIX = "Elevation failed: "


def _remove_quietly(path: Path) -> None:
    # Best effort: the elevated process may still hold the file
    try:
        if path.is_dir():
            path.rmdir()
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not remove transient path {path}: {e}")


def render_script(executable: str, args: Sequence[str], output_path: Path, system: str) -> str:
    """Script body that runs winget and redirects both streams into ``output_path``."""
    if system == "windows":
        command_line = subprocess.list2cmdline([executable, *args]).replace("%", "%%")
        return f'@echo off\r\nchcp 65001 >nul\r\n{command_line} > "{output_path}" 2>&1\r\n'
    return f"#!/bin/sh\n{shlex.join([executable, *args])} > {shlex.quote(str(output_path))} 2>&1\n"


class ElevationBridge:
    """Runs a winget command with administrative rights, elevating only when needed."""

    def __init__(
        self,
        runner: ProcessRunner,
        privilege_check: Callable[[], bool] = is_elevated,
        temp_dir: Path | None = None,
        system: str | None = None,
    ) -> None:
        self._runner = runner
        self._privilege_check = privilege_check
        self._temp_dir = temp_dir
        self._system = system or current_system()

    @property
    def runner(self) -> ProcessRunner:
        return self._runner

    def is_elevated(self) -> bool:
        return self._privilege_check()

    async def run(self, args: Sequence[str]) -> CommandOutput:
        """Run winget with ``args`` as administrator.

        Delegates to the plain runner when already elevated. Otherwise never
        raises: failures come back as text starting with ``Elevation failed:``.
        """
        if self.is_elevated():
            return await self._runner.run(args)
        return await self._run_elevated(args)

    def _transient_paths(self) -> tuple[Path, Path]:
        """Script and output paths inside a new directory owned by the caller.

        The elevated process may create the output file as root. In a shared
        sticky temp directory only root could delete it again; in a directory the
        caller owns, the caller can.
        """
        workdir = Path(tempfile.mkdtemp(prefix="wingetctl_", dir=self._temp_dir))
        suffix = ".bat" if self._system == "windows" else ".sh"
        script_path = workdir / f"winget_cmd_{uuid.uuid4().hex}{suffix}"
        output_path = workdir / f"winget_out_{uuid.uuid4().hex}.txt"
        return script_path, output_path

    async def _run_elevated(self, args: Sequence[str]) -> CommandOutput:
        try:
            script_path, output_path = self._transient_paths()
        except OSError as e:
            logger.error(f"Cannot create transient files for winget {' '.join(args)}: {e}")
            return CommandOutput(text=f"{ELEVATION_FAILED_PREFIX}{e}")

        try:
            script = render_script(self._runner.executable, args, output_path, self._system)
            script_path.write_text(script, encoding="utf-8", newline="")
            logger.info(f"Requesting elevation for: winget {' '.join(args)}")

            result = await PrivilegeHelper.run_with_privilege(script_path, system=self._system)

            if output_path.exists():
                text = output_path.read_text(encoding="utf-8", errors="replace")
                # Start-Process does not forward the elevated exit code
                exit_code = None if self._system == "windows" else result.returncode
                return CommandOutput(text=text, exit_code=exit_code)

            detail = (
                decode_output(result.stderr).strip()
                or decode_output(result.stdout).strip()
                or f"elevated output file not found (launcher exit code {result.returncode})"
            )
            logger.error(f"Elevated run produced no output: {detail}")
            return CommandOutput(text=f"{ELEVATION_FAILED_PREFIX}{detail}", exit_code=result.returncode)
        except Exception as e:
            logger.error(f"Elevation failed for winget {' '.join(args)}: {e}")
            return CommandOutput(text=f"{ELEVATION_FAILED_PREFIX}{e}")
        finally:
            _remove_quietly(script_path)
            _remove_quietly(output_path)
            _remove_quietly(script_path.parent)


def is_elevation_failure(text: str) -> bool:
    return text.startswith(ELEVATION_FAILED_PREFIX)
