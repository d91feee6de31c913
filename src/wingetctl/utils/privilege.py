"""
Privilege helpers: elevation detection and the launcher used to run a script
with elevated rights.

On Windows the script is started through PowerShell's ``Start-Process -Verb
RunAs``, which lets UAC ask the user for consent and blocks until the elevated
process exits. Elsewhere ``pkexec`` is preferred and ``sudo`` is the fallback.
"""
from __future__ import annotations

import ctypes
import os
import platform
import shutil
import subprocess
from pathlib import Path

from wingetctl.logger import get_logger
from wingetctl.utils.subprocess_executor import SubprocessExecutor

logger = get_logger(__name__)


def current_system() -> str:
    return platform.system().lower()


def is_elevated() -> bool:
    """Return True when the current process already holds administrative rights."""
    if current_system() == "windows":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
        except (AttributeError, OSError) as e:
            logger.debug(f"IsUserAnAdmin unavailable: {e}")
            return False
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def _ps_quote(value: str) -> str:
    # PowerShell single-quoted literal: only ' needs escaping, by doubling
    return "'" + value.replace("'", "''") + "'"


class PrivilegeHelper:
    """Builds and runs the platform's elevation launcher for a script file."""

    @staticmethod
    def _pkexec_available() -> bool:
        return shutil.which("pkexec") is not None

    @staticmethod
    def _sudo_available() -> bool:
        return shutil.which("sudo") is not None

    @staticmethod
    def _powershell_executable() -> str:
        return shutil.which("pwsh") or "powershell.exe"

    @staticmethod
    def build_elevated_command(script: Path | str, system: str | None = None) -> list[str]:
        """Return the argument list that runs ``script`` with elevated rights.

        Raises:
            RuntimeError: If no elevation tool is available on this system
        """
        system = system or current_system()
        script = str(script)

        if system == "windows":
            inner = f'/c "{script}"'
            command = (
                f"Start-Process -FilePath 'cmd.exe' -ArgumentList {_ps_quote(inner)} "
                "-Verb RunAs -Wait -WindowStyle Hidden -ErrorAction Stop"
            )
            return [
                PrivilegeHelper._powershell_executable(),
                "-NoProfile",
                "-NonInteractive",
                "-WindowStyle",
                "Hidden",
                "-Command",
                command,
            ]

        if PrivilegeHelper._pkexec_available():
            return ["pkexec", "sh", script]
        if PrivilegeHelper._sudo_available():
            return ["sudo", "sh", script]

        raise RuntimeError("No privilege escalation tool (pkexec or sudo) available on system")

    @staticmethod
    async def run_with_privilege(
        script: Path | str,
        system: str | None = None,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess[bytes]:
        """Run ``script`` through the elevation launcher and wait for it to exit.

        Raises:
            RuntimeError: If no elevation tool is available
            OSError: If the launcher cannot be started
        """
        full = PrivilegeHelper.build_elevated_command(script, system=system)
        logger.debug(f"Attempting privileged run: {full}")
        return await SubprocessExecutor.run(*full, timeout=timeout)
