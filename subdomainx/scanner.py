"""HTTP probing and port scanning of discovered subdomains."""

from __future__ import annotations

import html
import json
import re
import socket
import subprocess
import threading
import time
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol, Sequence

from subdomainx.concurrency import WorkerPool
from subdomainx.retry import retry
from subdomainx.types import HTTPResult, Port, PortResult, SubdomainResult

USER_AGENT = "SubdomainX/1.0"
COMMON_PORTS = (21, 22, 23, 25, 53, 80, 110, 143, 443, 993, 995, 8080, 8443)

_SERVICES = {
    21: "ftp",
    22: "ssh",
    23: "telnet",
    25: "smtp",
    53: "dns",
    80: "http",
    110: "pop3",
    143: "imap",
    443: "https",
    993: "imaps",
    995: "pop3s",
    8080: "http-proxy",
    8443: "https-alt",
}

_HTTPX_ARGS = (
    "-l", "/dev/stdin",
    "-json",
    "-title",
    "-tech-detect",
    "-status-code",
    "-content-length",
    "-rate-limit", "1000",
    "-threads", "50",
    "-timeout", "10",
    "-follow-redirects",
    "-no-color",
)
_SMAP_ARGS = ("-iL", "-", "-oJ", "-")

_PORT_CONNECT_TIMEOUT = 3.0
_MAX_BODY = 1024 * 1024
_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)


class ScanError(Exception):
    """Raised when an external scanner cannot be run or fails."""


@dataclass
class ScanOptions:
    """The settings that HTTP and port scanning depend on."""

    threads: int = 10
    retries: int = 3
    timeout: int = 30
    rate_limit: int = 100
    max_http_targets: int = 1000
    filters: dict[str, str] = field(default_factory=dict)


class _HTTPScanner(Protocol):
    name: str

    def scan(self, targets: Sequence[str], options: ScanOptions) -> list[HTTPResult]: ...


class _PortScanner(Protocol):
    name: str

    def scan(self, targets: Sequence[str], options: ScanOptions) -> list[PortResult]: ...


_scanners: dict[str, _HTTPScanner] = {}
_port_scanners: dict[str, _PortScanner] = {}


def register_scanner(scanner: _HTTPScanner) -> None:
    """Make an HTTP scanner available under its name."""
    _scanners[scanner.name] = scanner


def register_port_scanner(scanner: _PortScanner) -> None:
    """Make a port scanner available under its name."""
    _port_scanners[scanner.name] = scanner


class _Skip(Exception):
    pass


def _field(obj: Mapping[str, Any], key: str, kind: type, default: Any) -> Any:
    value = obj.get(key)
    if value is None:
        return default
    if kind is int and (isinstance(value, bool) or not isinstance(value, int)):
        raise _Skip
    if not isinstance(value, kind):
        raise _Skip
    return value


def _string_list(obj: Mapping[str, Any], key: str) -> list[str]:
    items = _field(obj, key, list, [])
    if not all(isinstance(item, str) for item in items):
        raise _Skip
    return list(items)


def _json_objects(output: str) -> Iterable[dict[str, Any]]:
    for line in output.split("\n"):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except ValueError:
            continue
        if obj is None:
            obj = {}
        if isinstance(obj, dict):
            yield obj


def parse_httpx_output(output: str) -> list[HTTPResult]:
    """Turn httpx JSON-lines output into results, skipping lines that do not parse."""
    results = []
    for obj in _json_objects(output):
        try:
            results.append(
                HTTPResult(
                    url=_field(obj, "url", str, ""),
                    status_code=_field(obj, "status_code", int, 0),
                    title=_field(obj, "title", str, ""),
                    content_length=_field(obj, "content_length", int, 0),
                    technologies=_string_list(obj, "tech"),
                )
            )
        except _Skip:
            continue
    return results


def _parse_port(obj: Any) -> Port:
    if obj is None:
        return Port()
    if not isinstance(obj, dict):
        raise _Skip
    return Port(
        number=_field(obj, "number", int, 0),
        protocol=_field(obj, "protocol", str, ""),
        state=_field(obj, "state", str, ""),
        service=_field(obj, "service", str, ""),
        version=_field(obj, "version", str, ""),
    )


def parse_smap_output(output: str) -> list[PortResult]:
    """Turn smap JSON-lines output into results, skipping lines that do not parse."""
    results = []
    for obj in _json_objects(output):
        try:
            results.append(
                PortResult(
                    host=_field(obj, "host", str, ""),
                    ip=_field(obj, "ip", str, ""),
                    ports=[_parse_port(item) for item in _field(obj, "ports", list, [])],
                )
            )
        except _Skip:
            continue
    return results


def _run_tool(name: str, args: Sequence[str], targets: Sequence[str]) -> str:
    try:
        completed = subprocess.run(
            [name, *args],
            input="\n".join(targets),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        raise ScanError(f"{name} execution failed: {exc}") from exc
    if completed.returncode != 0:
        raise ScanError(
            f"{name} execution failed (exit {completed.returncode}): {completed.stderr}"
        )
    return completed.stdout


class HTTPXScanner:
    """Probes URLs by running the httpx command."""

    name = "httpx"

    def scan(self, targets: Sequence[str], options: ScanOptions) -> list[HTTPResult]:
        if not targets:
            return []
        return parse_httpx_output(_run_tool("httpx", _HTTPX_ARGS, targets))


class SmapScanner:
    """Scans hosts for open ports by running the smap command."""

    name = "smap"

    def scan(self, targets: Sequence[str], options: ScanOptions) -> list[PortResult]:
        if not targets:
            return []
        return parse_smap_output(_run_tool("smap", _SMAP_ARGS, targets))


def _parse_list(spec: str) -> set[int]:
    values = set()
    for token in spec.split(","):
        token = token.strip()
        if token.isdigit():
            values.add(int(token))
    return values


def should_include_http_result(result: HTTPResult, options: ScanOptions) -> bool:
    """Apply the `status_code` filter, a comma-separated list of allowed codes."""
    allowed = _parse_list(options.filters.get("status_code", ""))
    if not allowed:
        return True
    return result.status_code in allowed


def should_include_port_result(result: PortResult, options: ScanOptions) -> bool:
    """Apply the `ports` filter: keep hosts with at least one listed port."""
    allowed = _parse_list(options.filters.get("ports", ""))
    if not allowed:
        return True
    return any(port.number in allowed for port in result.ports)


def extract_technologies(headers: Any) -> list[str]:
    """Return the Server and X-Powered-By header values that are present, in that order."""
    lookup: dict[str, str] = {}
    for key, value in headers.items():
        lookup.setdefault(key.lower(), value)
    return [value for value in (lookup.get("server"), lookup.get("x-powered-by")) if value]


def service_name(port: int) -> str:
    """Return the well-known service name for a port, or "unknown"."""
    return _SERVICES.get(port, "unknown")


def _extract_title(body: bytes, charset: str | None) -> str:
    text = body.decode(charset or "utf-8", errors="replace")
    match = _TITLE_RE.search(text)
    return html.unescape(match.group(1)).strip() if match else ""


def _remaining(deadline: float) -> float:
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise TimeoutError("context deadline exceeded")
    return remaining


def _scan_http(url: str, options: ScanOptions, deadline: float) -> HTTPResult:
    timeout = min(options.timeout, _remaining(deadline))
    request = urllib.request.Request(url, headers={"User-Agent": USER_AGENT}, method="GET")
    try:
        response = urllib.request.urlopen(request, timeout=timeout)
    except urllib.error.HTTPError as exc:
        response = exc
    with response:
        headers = response.headers
        try:
            body = response.read(_MAX_BODY)
        except (OSError, AttributeError, ValueError):
            body = b""
        length_header = headers.get("Content-Length", "")
        content_length = int(length_header) if length_header.strip().isdigit() else -1
        return HTTPResult(
            url=url,
            status_code=response.getcode(),
            title=_extract_title(body, headers.get_content_charset()),
            content_length=content_length,
            technologies=extract_technologies(headers),
        )


def _is_port_open(host: str, port: int) -> bool:
    try:
        with socket.create_connection((host, port), timeout=_PORT_CONNECT_TIMEOUT):
            return True
    except OSError:
        return False


def _scan_ports(host: str, options: ScanOptions, deadline: float) -> PortResult:
    open_ports = []
    for port in COMMON_PORTS:
        _remaining(deadline)
        if _is_port_open(host, port):
            open_ports.append(
                Port(number=port, protocol="tcp", state="open", service=service_name(port))
            )
    return PortResult(host=host, ip="", ports=open_ports)


def _run_pool(targets, job, include, options, label):
    results = []
    errors = []
    lock = threading.Lock()

    def task(target):
        try:
            result = retry(lambda: job(target), options.retries, options.timeout)
        except Exception as exc:
            with lock:
                errors.append(f"failed to scan {label}{target}: {exc}")
            return
        if include(result, options):
            with lock:
                results.append(result)

    with WorkerPool(options.threads, options.rate_limit) as pool:
        for target in targets:
            pool.submit(lambda target=target: task(target))
    return results, errors


def run_httpx(options: ScanOptions, subdomains: Sequence[SubdomainResult]) -> list[HTTPResult]:
    """Probe http:// and https:// for each subdomain, up to `max_http_targets` subdomains."""
    if not subdomains:
        return []
    limit = max(options.max_http_targets, 0)
    if len(subdomains) > limit:
        print(f"⚠️  Limiting HTTP scan to first {limit} subdomains for performance")
    urls = [
        f"{scheme}://{item.subdomain}"
        for item in subdomains[:limit]
        for scheme in ("http", "https")
    ]

    scanner = _scanners.get("httpx")
    if scanner is not None:
        return scanner.scan(urls, options)

    deadline = time.monotonic() + options.timeout * len(urls)
    results, errors = _run_pool(
        urls,
        lambda url: _scan_http(url, options, deadline),
        should_include_http_result,
        options,
        "",
    )
    for error in errors:
        print(f"HTTP scan error: {error}")
    return results


def run_smap(options: ScanOptions, subdomains: Sequence[SubdomainResult]) -> list[PortResult]:
    """Scan each distinct subdomain host for open ports."""
    if not subdomains:
        return []
    hosts = list(dict.fromkeys(item.subdomain for item in subdomains))

    scanner = _port_scanners.get("smap")
    if scanner is not None:
        return scanner.scan(hosts, options)

    deadline = time.monotonic() + options.timeout * len(hosts)
    results, errors = _run_pool(
        hosts,
        lambda host: _scan_ports(host, options, deadline),
        should_include_port_result,
        options,
        "ports for ",
    )
    for error in errors:
        print(f"Port scan error: {error}")
    return results


register_scanner(HTTPXScanner())
register_port_scanner(SmapScanner())