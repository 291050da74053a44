"""Saving and restoring scan state so an interrupted scan can be resumed."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from subdomainx.types import HTTPResult, PortResult, SubdomainResult

_SUFFIX = "_checkpoint.json"
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIME_RE = re.compile(r"^(.*T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(.*)$")


class CheckpointError(Exception):
    """Raised when a checkpoint cannot be saved, loaded or deleted."""


def _now() -> datetime:
    return datetime.now().astimezone()


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.isoformat()


def _parse_time(value: str | None) -> datetime:
    if not value:
        return _ZERO_TIME
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    match = _TIME_RE.match(text)
    if match:
        base, fraction, rest = match.groups()
        text = base + (f".{fraction[:6].ljust(6, '0')}" if fraction else "") + rest
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _checkpoint_path(scan_id: str, output_dir: str | os.PathLike[str]) -> str:
    return os.path.join(os.fspath(output_dir), f"{scan_id}{_SUFFIX}")


@dataclass
class ProgressState:
    """How far a scan has got and when it last moved."""

    total_tasks: int = 0
    completed_tasks: int = 0
    start_time: datetime = _ZERO_TIME
    last_update: datetime = _ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_tasks": self.total_tasks,
            "completed_tasks": self.completed_tasks,
            "start_time": _format_time(self.start_time),
            "last_update": _format_time(self.last_update),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProgressState:
        return cls(
            total_tasks=int(data.get("total_tasks") or 0),
            completed_tasks=int(data.get("completed_tasks") or 0),
            start_time=_parse_time(data.get("start_time")),
            last_update=_parse_time(data.get("last_update")),
        )


@dataclass
class Checkpoint:
    """The saved state of one scan."""

    scan_id: str = ""
    timestamp: datetime = _ZERO_TIME
    domain: str = ""
    wildcard_file: str = ""
    config: dict[str, Any] = field(default_factory=dict)
    progress: ProgressState = field(default_factory=ProgressState)
    subdomains: list[SubdomainResult] = field(default_factory=list)
    http_results: list[HTTPResult] = field(default_factory=list)
    port_results: list[PortResult] = field(default_factory=list)
    completed: bool = False
    error_message: str = ""

    def update_progress(self, completed_tasks: int, total_tasks: int) -> None:
        self.progress.completed_tasks = completed_tasks
        self.progress.total_tasks = total_tasks
        self.progress.last_update = _now()

    def add_subdomains(self, subdomains: Iterable[SubdomainResult]) -> None:
        self.subdomains.extend(subdomains)

    def add_http_results(self, results: Iterable[HTTPResult]) -> None:
        self.http_results.extend(results)

    def add_port_results(self, results: Iterable[PortResult]) -> None:
        self.port_results.extend(results)

    def mark_completed(self) -> None:
        self.completed = True
        self.progress.last_update = _now()

    def mark_error(self, error_msg: str) -> None:
        self.error_message = error_msg
        self.progress.last_update = _now()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "scan_id": self.scan_id,
            "timestamp": _format_time(self.timestamp),
            "domain": self.domain,
            "wildcard_file": self.wildcard_file,
            "config": dict(self.config),
            "progress": self.progress.to_dict(),
            "subdomains": [item.to_dict() for item in self.subdomains],
            "http_results": [item.to_dict() for item in self.http_results],
            "port_results": [item.to_dict() for item in self.port_results],
            "completed": self.completed,
        }
        if self.error_message:
            data["error_message"] = self.error_message
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Checkpoint:
        return cls(
            scan_id=data.get("scan_id", "") or "",
            timestamp=_parse_time(data.get("timestamp")),
            domain=data.get("domain", "") or "",
            wildcard_file=data.get("wildcard_file", "") or "",
            config=dict(data.get("config") or {}),
            progress=ProgressState.from_dict(data.get("progress") or {}),
            subdomains=[SubdomainResult.from_dict(i) for i in data.get("subdomains") or []],
            http_results=[HTTPResult.from_dict(i) for i in data.get("http_results") or []],
            port_results=[PortResult.from_dict(i) for i in data.get("port_results") or []],
            completed=bool(data.get("completed", False)),
            error_message=data.get("error_message", "") or "",
        )


def save_checkpoint(checkpoint: Checkpoint, output_dir: str | os.PathLike[str]) -> str:
    """Write the checkpoint as `<scan_id>_checkpoint.json` and return its path."""
    try:
        os.makedirs(output_dir, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise CheckpointError(f"failed to create output directory: {exc}") from exc
    try:
        payload = json.dumps(checkpoint.to_dict(), indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise CheckpointError(f"failed to marshal checkpoint: {exc}") from exc
    path = _checkpoint_path(checkpoint.scan_id, output_dir)
    try:
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(payload)
    except OSError as exc:
        raise CheckpointError(f"failed to write checkpoint file: {exc}") from exc
    return path


def load_checkpoint(scan_id: str, output_dir: str | os.PathLike[str]) -> Checkpoint:
    """Read the checkpoint saved for `scan_id`."""
    path = _checkpoint_path(scan_id, output_dir)
    if not os.path.exists(path):
        raise CheckpointError(f"checkpoint file not found: {path}")
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise CheckpointError(f"failed to read checkpoint file: {exc}") from exc
    try:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("checkpoint is not a JSON object")
        return Checkpoint.from_dict(data)
    except (ValueError, TypeError, AttributeError) as exc:
        raise CheckpointError(f"failed to unmarshal checkpoint: {exc}") from exc


def list_checkpoints(output_dir: str | os.PathLike[str]) -> list[str]:
    """Return the scan IDs of the checkpoints in a directory, sorted by file name."""
    if not os.path.exists(output_dir):
        return []
    try:
        entries = sorted(os.scandir(output_dir), key=lambda entry: entry.name)
    except OSError as exc:
        raise CheckpointError(f"failed to read output directory: {exc}") from exc
    return [
        entry.name[: -len(_SUFFIX)]
        for entry in entries
        if not entry.is_dir() and entry.name.endswith(_SUFFIX)
    ]


def delete_checkpoint(scan_id: str, output_dir: str | os.PathLike[str]) -> None:
    """Remove the checkpoint saved for `scan_id`."""
    try:
        os.remove(_checkpoint_path(scan_id, output_dir))
    except OSError as exc:
        raise CheckpointError(f"failed to delete checkpoint file: {exc}") from exc


def create_checkpoint(
    scan_id: str, domain: str, wildcard_file: str, config: Mapping[str, Any] | None
) -> Checkpoint:
    """Return a fresh, empty checkpoint stamped with the current time."""
    now = _now()
    return Checkpoint(
        scan_id=scan_id,
        timestamp=now,
        domain=domain,
        wildcard_file=wildcard_file,
        config=dict(config or {}),
        progress=ProgressState(start_time=now, last_update=now),
    )