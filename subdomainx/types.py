"""Result records produced by enumeration and scanning, with JSON-ready dict forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class SubdomainResult:
    """A discovered subdomain and the source that reported it."""

    subdomain: str = ""
    source: str = ""
    ips: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"subdomain": self.subdomain, "source": self.source}
        if self.ips:
            data["ips"] = list(self.ips)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SubdomainResult:
        return cls(
            subdomain=data.get("subdomain", ""),
            source=data.get("source", ""),
            ips=list(data.get("ips") or []),
        )


@dataclass
class LinkHeader:
    """A Link header entry and the subdomains found in it."""

    url: str = ""
    rel: str = ""
    subdomains: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url, "rel": self.rel}
        if self.subdomains:
            data["subdomains"] = list(self.subdomains)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LinkHeader:
        return cls(
            url=data.get("url", ""),
            rel=data.get("rel", ""),
            subdomains=list(data.get("subdomains") or []),
        )


@dataclass
class HTTPResult:
    """The outcome of probing one URL over HTTP."""

    url: str = ""
    status_code: int = 0
    title: str = ""
    technologies: list[str] = field(default_factory=list)
    content_length: int = 0
    link_headers: list[LinkHeader] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url, "status_code": self.status_code}
        if self.title:
            data["title"] = self.title
        if self.technologies:
            data["technologies"] = list(self.technologies)
        if self.content_length:
            data["content_length"] = self.content_length
        if self.link_headers:
            data["link_headers"] = [header.to_dict() for header in self.link_headers]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HTTPResult:
        return cls(
            url=data.get("url", ""),
            status_code=int(data.get("status_code") or 0),
            title=data.get("title", "") or "",
            technologies=list(data.get("technologies") or []),
            content_length=int(data.get("content_length") or 0),
            link_headers=[LinkHeader.from_dict(item) for item in data.get("link_headers") or []],
        )


@dataclass
class Port:
    """A single port observed on a host."""

    number: int = 0
    protocol: str = ""
    state: str = ""
    service: str = ""
    version: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "number": self.number,
            "protocol": self.protocol,
            "state": self.state,
        }
        if self.service:
            data["service"] = self.service
        if self.version:
            data["version"] = self.version
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Port:
        return cls(
            number=int(data.get("number") or 0),
            protocol=data.get("protocol", "") or "",
            state=data.get("state", "") or "",
            service=data.get("service", "") or "",
            version=data.get("version", "") or "",
        )


@dataclass
class PortResult:
    """The ports found on one host."""

    host: str = ""
    ip: str = ""
    ports: list[Port] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"host": self.host}
        if self.ip:
            data["ip"] = self.ip
        if self.ports:
            data["ports"] = [port.to_dict() for port in self.ports]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PortResult:
        return cls(
            host=data.get("host", "") or "",
            ip=data.get("ip", "") or "",
            ports=[Port.from_dict(item) for item in data.get("ports") or []],
        )


@dataclass
class ScanResults:
    """Everything a scan produced."""

    subdomains: list[SubdomainResult] = field(default_factory=list)
    http: list[HTTPResult] = field(default_factory=list)
    ports: list[PortResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"subdomains": [item.to_dict() for item in self.subdomains]}
        if self.http:
            data["http"] = [item.to_dict() for item in self.http]
        if self.ports:
            data["ports"] = [item.to_dict() for item in self.ports]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ScanResults:
        return cls(
            subdomains=[SubdomainResult.from_dict(item) for item in data.get("subdomains") or []],
            http=[HTTPResult.from_dict(item) for item in data.get("http") or []],
            ports=[PortResult.from_dict(item) for item in data.get("ports") or []],
        )