import asyncio
import subprocess
import sys
from pathlib import Path

import pytest

from wingetctl.exceptions import CommandTimeoutError, InvocationError
from wingetctl.services.winget.runner import ProcessRunner, resolve_winget_path
from wingetctl.utils.subprocess_executor import SubprocessExecutor


def _fake_run(returncode: int = 0, stdout: bytes = b"", stderr: bytes = b"", recorded: dict | None = None):
    async def fake_run(*args: str, **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        if recorded is not None:
            recorded["args"] = args
            recorded["kwargs"] = kwargs
        return subprocess.CompletedProcess(args, returncode, stdout, stderr)

    return staticmethod(fake_run)


@pytest.mark.asyncio
async def test_run_returns_stdout_with_stderr_appended(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded: dict = {}
    monkeypatch.setattr(SubprocessExecutor, "run", _fake_run(1, b"table", b"warning", recorded=recorded))

    output = await ProcessRunner(executable="winget").run(["list"], timeout=30)

    assert output.text == "table\nwarning"
    assert output.exit_code == 1
    assert recorded["args"] == ("winget", "list")
    assert recorded["kwargs"]["timeout"] == 30


@pytest.mark.asyncio
async def test_run_without_stderr_returns_stdout_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(SubprocessExecutor, "run", _fake_run(0, "Grüße".encode()))

    output = await ProcessRunner(executable="winget").run(["search", "x"])

    assert output.text == "Grüße"


@pytest.mark.asyncio
async def test_start_failure_raises_invocation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    async def missing(*args: str, **kwargs: object) -> None:
        raise FileNotFoundError("winget")

    monkeypatch.setattr(SubprocessExecutor, "run", staticmethod(missing))

    with pytest.raises(InvocationError):
        await ProcessRunner(executable="winget").run(["list"])


@pytest.mark.asyncio
async def test_timeout_raises_command_timeout_error(monkeypatch: pytest.MonkeyPatch) -> None:
    async def slow(*args: str, **kwargs: object) -> None:
        raise asyncio.TimeoutError

    monkeypatch.setattr(SubprocessExecutor, "run", staticmethod(slow))

    with pytest.raises(CommandTimeoutError) as excinfo:
        await ProcessRunner(executable="winget").run(["list"], timeout=1)
    assert excinfo.value.retriable


@pytest.mark.asyncio
async def test_probe_reports_availability(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded: dict = {}
    monkeypatch.setattr(SubprocessExecutor, "run", _fake_run(0, b"v1.7.10861", recorded=recorded))

    assert await ProcessRunner(executable="winget", probe_timeout=2.5).probe() is True
    assert recorded["args"] == ("winget", "--version")
    assert recorded["kwargs"]["timeout"] == 2.5

    monkeypatch.setattr(SubprocessExecutor, "run", _fake_run(1))
    assert await ProcessRunner(executable="winget").probe() is False


@pytest.mark.asyncio
async def test_probe_timeout_means_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    async def slow(*args: str, **kwargs: object) -> None:
        raise asyncio.TimeoutError

    monkeypatch.setattr(SubprocessExecutor, "run", staticmethod(slow))

    assert await ProcessRunner(executable="winget").probe(timeout=0.1) is False


@pytest.mark.asyncio
async def test_non_positive_probe_timeout_stays_bounded(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded: dict = {}
    monkeypatch.setattr(SubprocessExecutor, "run", _fake_run(0, b"v1.7.10861", recorded=recorded))

    assert await ProcessRunner(executable="winget", probe_timeout=0).probe() is True
    assert recorded["kwargs"]["timeout"] == 5.0

    assert await ProcessRunner(executable="winget", probe_timeout=3.0).probe(timeout=0) is True
    assert recorded["kwargs"]["timeout"] == 3.0

@pytest.mark.asyncio
async def test_real_process_output_is_captured(tmp_path: Path) -> None:
    script = tmp_path / "fake_winget.py"
    script.write_text("import sys\nprint('Name  Id')\nsys.stderr.write('oops')\n", encoding="utf-8")

    result = await SubprocessExecutor.run(sys.executable, str(script), timeout=30)

    assert result.returncode == 0
    assert b"Name  Id" in result.stdout
    assert result.stderr == b"oops"


def test_resolve_prefers_override(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_winget_path("C:/tools/winget.exe") == "C:/tools/winget.exe"


def test_resolve_uses_per_user_install_when_present(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    exe = tmp_path / "Microsoft" / "WindowsApps" / "winget.exe"
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))

    assert resolve_winget_path() == "winget"

    exe.parent.mkdir(parents=True)
    exe.write_bytes(b"")
    assert resolve_winget_path() == str(exe)


def test_resolve_falls_back_to_path_lookup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    assert resolve_winget_path() == "winget"
