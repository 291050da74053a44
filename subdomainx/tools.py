"""The external tools and APIs used for enumeration, and checks for their availability."""

from __future__ import annotations

import os
import platform
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Iterable, Sequence

_BUILT_IN = "Built-in (no installation required)"


@dataclass
class Tool:
    """An enumeration or scanning tool and how to install it on each platform."""

    name: str
    command: str
    description: str
    install_cmd: dict[str, str] = field(default_factory=dict)
    required: bool = False


def _same_everywhere(command: str) -> dict[str, str]:
    return {"linux": command, "darwin": command, "windows": command}


def _pip(package: str) -> dict[str, str]:
    return {
        "linux": f"pip3 install {package}",
        "darwin": f"pip3 install {package}",
        "windows": f"pip install {package}",
    }


def _download(name: str) -> str:
    return f"Download {name} from the tool's official release page"


def get_required_tools() -> list[Tool]:
    """Return every tool the scanner can make use of, in checking order."""
    return [
        Tool("subfinder", "subfinder", "Fast subdomain discovery tool",
             _same_everywhere(_download("subfinder"))),
        Tool("amass", "amass", "Comprehensive subdomain enumeration",
             {"linux": _download("amass"), "darwin": "brew install amass",
              "windows": _download("amass")}),
        Tool("findomain", "findomain", "Fast and cross-platform subdomain discovery",
             {"linux": _download("findomain"), "darwin": "brew install findomain",
              "windows": _download("findomain")}),
        Tool("assetfinder", "assetfinder", "Find subdomains related to a domain",
             _same_everywhere(_download("assetfinder"))),
        Tool("sublist3r", "sublist3r", "Subdomain enumeration using OSINT", _pip("sublist3r")),
        Tool("knockpy", "knockpy", "Subdomain enumeration tool", _pip("knockpy")),
        Tool("dnsrecon", "dnsrecon", "DNS enumeration and reconnaissance",
             {"linux": "pip3 install dnsrecon || sudo apt-get install dnsrecon",
              "darwin": "pip3 install dnsrecon", "windows": "pip install dnsrecon"}),
        Tool("fierce", "fierce", "DNS reconnaissance tool", _pip("fierce")),
        Tool("massdns", "massdns", "High-performance DNS stub resolver",
             {"linux": _download("massdns"), "darwin": "brew install massdns",
              "windows": _download("massdns")}),
        Tool("altdns", "altdns", "Subdomain permutation and alteration", _pip("py-altdns")),
        Tool("httpx", "httpx", "Fast and multi-purpose HTTP probe",
             _same_everywhere(_download("httpx"))),
        Tool("nmap", "nmap", "Network exploration and port scanning",
             {"linux": "sudo apt-get install nmap || sudo yum install nmap",
              "darwin": "brew install nmap", "windows": _download("nmap")}),
        Tool("securitytrails", "securitytrails", "SecurityTrails API for subdomain enumeration",
             _same_everywhere("Set SECURITYTRAILS_API_KEY environment variable")),
        Tool("virustotal", "virustotal", "VirusTotal API for subdomain enumeration",
             _same_everywhere("Set VIRUSTOTAL_API_KEY environment variable")),
        Tool("censys", "censys", "Censys API for subdomain enumeration",
             _same_everywhere("Set CENSYS_API_ID and CENSYS_SECRET environment variables")),
        Tool("waybackurls", "waybackurls",
             "Fetch URLs from Wayback Machine for subdomain discovery",
             _same_everywhere(_download("waybackurls"))),
        Tool("linkheader", "linkheader", "Discover subdomains from HTTP Link headers",
             _same_everywhere(_BUILT_IN)),
        Tool("crtsh", "crtsh", "Certificate Transparency database for subdomain discovery",
             _same_everywhere(_BUILT_IN)),
        Tool("urlscan", "urlscan", "URLScan.io API for subdomain enumeration",
             _same_everywhere("Set URLSCAN_API_KEY environment variable (optional)")),
        Tool("threatcrowd", "threatcrowd", "ThreatCrowd API for subdomain enumeration",
             _same_everywhere(_BUILT_IN)),
        Tool("hackertarget", "hackertarget", "HackerTarget API for subdomain enumeration",
             _same_everywhere("Set HACKERTARGET_API_KEY environment variable (optional)")),
    ]


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


_ALWAYS_AVAILABLE = frozenset({"linkheader", "crtsh", "urlscan", "threatcrowd", "hackertarget"})


def check_tool_availability(tool_name: str) -> bool:
    """Return True if the tool's API credentials are set, it is built in, or it is on PATH."""
    if tool_name == "securitytrails":
        return bool(_env("SECURITYTRAILS_API_KEY"))
    if tool_name == "virustotal":
        return bool(_env("VIRUSTOTAL_API_KEY"))
    if tool_name == "censys":
        return bool(_env("CENSYS_API_ID")) and bool(_env("CENSYS_SECRET"))
    if tool_name in _ALWAYS_AVAILABLE:
        return True
    return shutil.which(tool_name) is not None


def check_all_tools() -> tuple[list[Tool], list[Tool]]:
    """Split the known tools into (available, missing)."""
    available: list[Tool] = []
    missing: list[Tool] = []
    for tool in get_required_tools():
        (available if check_tool_availability(tool.command) else missing).append(tool)
    return available, missing


def _os_name() -> str:
    return platform.system().lower()


def _read_answer() -> str:
    line = sys.stdin.readline()
    if not line.endswith("\n"):
        raise RuntimeError("failed to read input: unexpected end of input")
    return line.strip().lower()


def _auto_install_tools(tools: Iterable[Tool]) -> None:
    print("\n🔧 Starting automatic installation...")
    os_name = _os_name()
    for tool in tools:
        command = tool.install_cmd.get(os_name)
        if command is None:
            print(f"⏭️  Skipping {tool.name} (manual installation required)")
            continue
        if "sudo" in command or "Download" in command:
            print(f"⏭️  Skipping {tool.name} (requires manual installation)")
            continue

        print(f"📦 Installing {tool.name}...", flush=True)
        argv = ["cmd", "/C", command] if os_name == "windows" else ["sh", "-c", command]
        try:
            completed = subprocess.run(argv, check=False)
        except OSError as exc:
            print(f"❌ Failed to install {tool.name}: {exc}")
            continue
        if completed.returncode != 0:
            print(f"❌ Failed to install {tool.name}: exit status {completed.returncode}")
            continue

        if check_tool_availability(tool.command):
            print(f"✅ Successfully installed {tool.name}")
        else:
            print(f"⚠️  {tool.name} installation completed but tool not found in PATH")
        print()

    print("🎉 Automatic installation completed!")
    print("💡 Some tools may require manual installation or PATH configuration.")


def prompt_tool_installation(missing_tools: Sequence[Tool]) -> None:
    """Ask on stdin whether to show install instructions and whether to run them."""
    if not missing_tools:
        print("✅ All tools are available!")
        return

    print(f"\n⚠️  Found {len(missing_tools)} missing tools:\n")
    for number, tool in enumerate(missing_tools, start=1):
        print(f"{number}. {tool.name} - {tool.description}")

    print("\nWould you like to see installation instructions? (y/n): ", end="", flush=True)
    if _read_answer() not in ("y", "yes"):
        print("\n⚠️  Some tools are missing. SubdomainX will skip unavailable tools during enumeration.")
        return

    os_name = _os_name()
    print(f"\n📦 Installation instructions for {os_name}:\n")
    for number, tool in enumerate(missing_tools, start=1):
        print(f"--- {number}. {tool.name} ---")
        command = tool.install_cmd.get(os_name)
        if command is not None:
            print(f"Command: {command}")
        else:
            print("Please visit the tool's official repository for installation instructions.")
        print()

    print(
        "Would you like to automatically install tools that support auto-installation? (y/n): ",
        end="",
        flush=True,
    )
    if _read_answer() in ("y", "yes"):
        _auto_install_tools(missing_tools)
        return

    print("\n💡 After installing the tools, run SubdomainX again.")
    print("💡 You can also disable specific tools in the config file if you don't want to install them.")


def display_tool_status() -> None:
    """Print which tools are available and which are missing."""
    available, missing = check_all_tools()

    print("\n🔧 Tool Status:")
    print("================")

    if available:
        print(f"\n✅ Available tools ({len(available)}):")
        for tool in available:
            print(f"  • {tool.name} - {tool.description}")

    if missing:
        print(f"\n❌ Missing tools ({len(missing)}):")
        for tool in missing:
            print(f"  • {tool.name} - {tool.description}")
        print("\n💡 Run with --install-tools to see installation instructions")

    print(f"\nTotal: {len(available)} available, {len(missing)} missing", end="")