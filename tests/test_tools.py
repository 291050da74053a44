import io
import subprocess

import pytest

from subdomainx import tools
from subdomainx.tools import (
    Tool,
    check_all_tools,
    check_tool_availability,
    display_tool_status,
    get_required_tools,
    prompt_tool_installation,
)

_API_VARS = (
    "SECURITYTRAILS_API_KEY",
    "VIRUSTOTAL_API_KEY",
    "CENSYS_API_ID",
    "CENSYS_SECRET",
)


@pytest.fixture
def nothing_on_path(monkeypatch):
    monkeypatch.setattr(tools.shutil, "which", lambda name: None)
    for var in _API_VARS:
        monkeypatch.delenv(var, raising=False)


def _simple_tool(name, command):
    return Tool(name, name, f"{name} tool", {"linux": command, "darwin": command, "windows": command})


def test_required_tools_have_unique_names_and_all_platforms():
    found = get_required_tools()
    names = [tool.name for tool in found]
    assert names[0] == "subfinder"
    assert len(names) == len(set(names))
    for tool in found:
        assert set(tool.install_cmd) == {"linux", "darwin", "windows"}
        assert tool.required is False


def test_required_tools_include_known_entries():
    by_name = {tool.name: tool for tool in get_required_tools()}
    assert by_name["knockpy"].install_cmd["linux"] == "pip3 install knockpy"
    assert by_name["crtsh"].install_cmd["linux"] == "Built-in (no installation required)"
    assert by_name["httpx"].description == "Fast and multi-purpose HTTP probe"


def test_api_tool_needs_key(monkeypatch, nothing_on_path):
    assert check_tool_availability("securitytrails") is False
    monkeypatch.setenv("SECURITYTRAILS_API_KEY", "   ")
    assert check_tool_availability("securitytrails") is False
    monkeypatch.setenv("SECURITYTRAILS_API_KEY", "placeholder")
    assert check_tool_availability("securitytrails") is True


def test_censys_needs_both_credentials(monkeypatch, nothing_on_path):
    monkeypatch.setenv("CENSYS_API_ID", "placeholder")
    assert check_tool_availability("censys") is False
    monkeypatch.setenv("CENSYS_SECRET", "secret")
    assert check_tool_availability("censys") is True


@pytest.mark.parametrize("name", ["linkheader", "crtsh", "urlscan", "threatcrowd", "hackertarget"])
def test_public_apis_always_available(name, nothing_on_path):
    assert check_tool_availability(name) is True


def test_command_tool_uses_path(monkeypatch):
    monkeypatch.setattr(tools.shutil, "which", lambda name: "/bin/" + name if name == "amass" else None)
    assert check_tool_availability("amass") is True
    assert check_tool_availability("subfinder") is False


def test_check_all_tools_partitions_in_order(nothing_on_path):
    available, missing = check_all_tools()
    all_names = [tool.name for tool in get_required_tools()]
    available_names = [tool.name for tool in available]
    missing_names = [tool.name for tool in missing]
    assert sorted(available_names + missing_names) == sorted(all_names)
    assert available_names == [n for n in all_names if n in available_names]
    assert "crtsh" in available_names
    assert "subfinder" in missing_names
    assert "securitytrails" in missing_names


def test_prompt_with_nothing_missing(capsys):
    prompt_tool_installation([])
    assert "✅ All tools are available!" in capsys.readouterr().out


def test_prompt_declined(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("n\n"))
    prompt_tool_installation([_simple_tool("alpha", "echo alpha")])
    out = capsys.readouterr().out
    assert "1. alpha - alpha tool" in out
    assert "SubdomainX will skip unavailable tools during enumeration." in out
    assert "Command:" not in out


def test_prompt_shows_instructions(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("YES\nno\n"))
    prompt_tool_installation([_simple_tool("alpha", "echo alpha")])
    out = capsys.readouterr().out
    assert "--- 1. alpha ---" in out
    assert "Command: echo alpha" in out
    assert "💡 After installing the tools, run SubdomainX again." in out


def test_prompt_missing_platform_entry(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("y\nn\n"))
    prompt_tool_installation([Tool("beta", "beta", "beta tool", {})])
    out = capsys.readouterr().out
    assert "Please visit the tool's official repository for installation instructions." in out


def test_prompt_end_of_input_raises(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    with pytest.raises(RuntimeError, match="failed to read input"):
        prompt_tool_installation([_simple_tool("alpha", "echo alpha")])


def test_auto_install_runs_allowed_commands(monkeypatch, capsys):
    calls = []

    def fake_run(argv, check=False):
        calls.append(argv)
        return subprocess.CompletedProcess(argv, 0)

    monkeypatch.setattr(tools.subprocess, "run", fake_run)
    monkeypatch.setattr(tools.shutil, "which", lambda name: "/bin/" + name)
    monkeypatch.setattr("sys.stdin", io.StringIO("y\ny\n"))
    prompt_tool_installation(
        [_simple_tool("alpha", "echo alpha"), _simple_tool("builder", "sudo make install")]
    )
    out = capsys.readouterr().out
    assert len(calls) == 1
    assert calls[0][-1] == "echo alpha"
    assert "✅ Successfully installed alpha" in out
    assert "⏭️  Skipping builder (requires manual installation)" in out
    assert "🎉 Automatic installation completed!" in out


def test_auto_install_reports_failure(monkeypatch, capsys):
    monkeypatch.setattr(
        tools.subprocess, "run", lambda argv, check=False: subprocess.CompletedProcess(argv, 2)
    )
    monkeypatch.setattr("sys.stdin", io.StringIO("y\ny\n"))
    prompt_tool_installation([_simple_tool("alpha", "echo alpha")])
    out = capsys.readouterr().out
    assert "❌ Failed to install alpha" in out
    assert "Successfully installed" not in out


def test_display_tool_status_totals(nothing_on_path, capsys):
    available, missing = check_all_tools()
    display_tool_status()
    out = capsys.readouterr().out
    assert out.endswith(f"Total: {len(available)} available, {len(missing)} missing")
    assert "  • subfinder - Fast subdomain discovery tool" in out
    assert "💡 Run with --install-tools to see installation instructions" in out