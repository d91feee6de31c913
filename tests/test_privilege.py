import shutil
import subprocess

import pytest

from wingetctl.utils import privilege
from wingetctl.utils.privilege import PrivilegeHelper
from wingetctl.utils.subprocess_executor import SubprocessExecutor


def test_windows_launcher_uses_runas_and_waits() -> None:
    cmd = PrivilegeHelper.build_elevated_command(r"C:\Temp\winget_cmd_1.bat", system="windows")

    joined = " ".join(cmd)
    assert "-Verb RunAs" in joined
    assert "-Wait" in joined
    assert "'/c \"C:\\Temp\\winget_cmd_1.bat\"'" in joined


def test_windows_launcher_escapes_single_quotes() -> None:
    cmd = PrivilegeHelper.build_elevated_command(r"C:\Users\o'brien\x.bat", system="windows")
    assert "o''brien" in cmd[-1]


def test_prefers_pkexec_then_sudo(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "which", lambda name: f"/usr/bin/{name}" if name in ("pkexec", "sudo") else None)
    assert PrivilegeHelper.build_elevated_command("/tmp/x.sh", system="linux") == ["pkexec", "sh", "/tmp/x.sh"]

    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/sudo" if name == "sudo" else None)
    assert PrivilegeHelper.build_elevated_command("/tmp/x.sh", system="linux") == ["sudo", "sh", "/tmp/x.sh"]


def test_no_escalation_tool_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "which", lambda name: None)
    with pytest.raises(RuntimeError):
        PrivilegeHelper.build_elevated_command("/tmp/x.sh", system="linux")


@pytest.mark.asyncio
async def test_run_with_privilege_goes_through_executor(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/pkexec" if name == "pkexec" else None)
    recorded = {}

    async def fake_run(*args: str, **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        recorded["args"] = args
        return subprocess.CompletedProcess(args, 0, b"", b"")

    monkeypatch.setattr(SubprocessExecutor, "run", staticmethod(fake_run))

    result = await PrivilegeHelper.run_with_privilege("/tmp/x.sh", system="linux")

    assert result.returncode == 0
    assert recorded["args"] == ("pkexec", "sh", "/tmp/x.sh")


def test_is_elevated_uses_effective_uid_off_windows(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(privilege, "current_system", lambda: "linux")
    monkeypatch.setattr(privilege.os, "geteuid", lambda: 0, raising=False)
    assert privilege.is_elevated() is True

    monkeypatch.setattr(privilege.os, "geteuid", lambda: 1000, raising=False)
    assert privilege.is_elevated() is False
