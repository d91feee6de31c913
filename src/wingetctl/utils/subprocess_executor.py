"""Subprocess execution utilities with automatic logging."""

import asyncio
import subprocess
import sys
from pathlib import Path
from typing import Any

from wingetctl.logger import get_logger

logger = get_logger(__name__)


def decode_output(data: bytes | None, encoding: str = "utf-8") -> str:
    """Decode captured process output, replacing undecodable bytes."""
    if not data:
        return ""
    return data.decode(encoding, errors="replace")


def _no_window_kwargs() -> dict[str, Any]:
    # Console tools spawned from a GUI host would otherwise flash a window
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {}


class SubprocessExecutor:
    """Executes subprocess commands with automatic debug logging."""

    @staticmethod
    async def run(
        *args: str,
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
        check: bool = False,
        timeout: float | None = None,
    ) -> subprocess.CompletedProcess[bytes]:
        """
        Execute a subprocess command non-interactively with automatic debug logging.

        stdin is closed so a tool that unexpectedly prompts fails instead of hanging.

        Args:
            *args: Command arguments
            cwd: Working directory
            env: Environment variables
            check: Whether to raise exception on non-zero exit code
            timeout: Timeout in seconds; the process is killed when it expires

        Returns:
            CompletedProcess-like object with returncode, stdout, stderr

        Raises:
            subprocess.CalledProcessError: If check=True and returncode != 0
            asyncio.TimeoutError: If timeout is exceeded
            OSError: If the executable cannot be started
        """
        cmd_str = " ".join(args)
        logger.debug(f"Executing subprocess: {cmd_str}")
        if cwd:
            logger.debug(f"Working directory: {cwd}")

        cwd_arg = str(cwd) if cwd else None
        process: asyncio.subprocess.Process | None = None

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd_arg,
                env=env,
                **_no_window_kwargs(),
            )

            if timeout:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
            else:
                stdout, stderr = await process.communicate()

            # Log outputs at debug level
            if stdout:
                logger.debug(f"Subprocess stdout: {decode_output(stdout)}")
            if stderr:
                logger.debug(f"Subprocess stderr: {decode_output(stderr)}")

            assert process.returncode is not None
            result = subprocess.CompletedProcess(args, process.returncode, stdout, stderr)

            if check and process.returncode != 0:
                raise subprocess.CalledProcessError(
                    process.returncode,
                    args,
                    decode_output(stdout) or None,
                    decode_output(stderr) or None,
                )

            return result

        except asyncio.TimeoutError:
            logger.error(f"Subprocess timeout after {timeout}s: {cmd_str}")
            if process and process.returncode is None:
                process.kill()
                await process.wait()
            raise
        except Exception as e:
            logger.error(f"Subprocess execution failed: {cmd_str} - {e}")
            raise
