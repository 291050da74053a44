"""Validation of scan settings and of domains, addresses, ports and URLs."""

from __future__ import annotations

import ipaddress
import re

from subdomainx.fileutils import ensure_directory, file_exists

VALID_FORMATS = frozenset({"json", "txt", "html", "zap", "burp", "nessus", "csv"})

_DOMAIN_RE = re.compile(
    r"[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*"
)


class ValidationError(ValueError):
    """Raised when a value or a setting is not acceptable."""


def validate_input(
    wildcard_file: str,
    output_dir: str,
    output_format: str,
    threads: int,
    retries: int,
    timeout: int,
    rate_limit: int,
    wordlist: str = "",
) -> None:
    """Check scan settings, creating the output directory on the way."""
    if not file_exists(wildcard_file):
        raise ValidationError(f"wildcard file not found: {wildcard_file}")
    try:
        ensure_directory(output_dir)
    except OSError as exc:
        raise ValidationError(f"failed to create output directory: {exc}") from exc
    if output_format not in VALID_FORMATS:
        raise ValidationError(
            f"invalid output format: {output_format}. "
            "Supported formats: json, txt, html, zap, burp, nessus, csv"
        )
    if threads <= 0:
        raise ValidationError("threads must be greater than 0")
    if retries < 0:
        raise ValidationError("retries cannot be negative")
    if timeout <= 0:
        raise ValidationError("timeout must be greater than 0")
    if rate_limit <= 0:
        raise ValidationError("rate limit must be greater than 0")
    if wordlist and not file_exists(wordlist):
        raise ValidationError(f"wordlist file not found: {wordlist}")


def validate_domain(domain: str) -> str:
    """Return the domain if it is well formed with at least two labels."""
    if not domain:
        raise ValidationError("domain cannot be empty")
    if not _DOMAIN_RE.fullmatch(domain):
        raise ValidationError(f"invalid domain format: {domain}")
    if len(domain.split(".")) < 2:
        raise ValidationError(f"domain must have at least one subdomain and TLD: {domain}")
    return domain


def validate_ip(ip: str) -> str:
    """Return the address if it is a valid IPv4 or IPv6 address."""
    try:
        if "%" in ip:
            raise ValueError(ip)
        ipaddress.ip_address(ip)
    except ValueError:
        raise ValidationError(f"invalid IP address: {ip}") from None
    return ip


def validate_port(port: int) -> int:
    """Return the port if it lies in 1..65535."""
    if port < 1 or port > 65535:
        raise ValidationError(f"port must be between 1 and 65535, got: {port}")
    return port


def validate_url(url: str) -> str:
    """Return the URL if it uses the http or https scheme."""
    if not url:
        raise ValidationError("URL cannot be empty")
    if not url.startswith(("http://", "https://")):
        raise ValidationError(f"URL must start with http:// or https://: {url}")
    return url