"""Shared logging utilities."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from rich.console import Console

from auth import SECRET_HEADER

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"

_SENSITIVE = (SECRET_HEADER.lower(), "authorization", "cookie", "key")


def write_incoming_log(
    method: str,
    path: str,
    headers: dict[str, str],
    query: dict[str, str],
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single incoming request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "method": method,
        "path": path,
        "headers": _redact_headers(headers),
        "query": query,
    }
    return _write_json(log_root / "incoming", payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path = LOG_ROOT) -> int:
    """Delete request logs from a previous run. Returns the number removed."""
    deleted = 0
    for old_file in (log_root / "incoming").glob("*.json"):
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


class ConsoleLogger:
    """Plain console RequestLogger, used when the dashboard is off."""

    def __init__(self, console: Console | None = None):
        self._console = console or Console()

    def log_forward(
        self,
        target: str,
        status: int,
        *,
        cache_ttl: int | None = None,
        cache_hit: bool = False,
    ) -> None:
        suffix = " [dim](cache hit)[/dim]" if cache_hit else ""
        self._console.print(f"[cyan]GET[/cyan] {target} -> {status}{suffix}")
        write_cli_log("FORWARD", target, status=status, cache_ttl=cache_ttl, cache_hit=cache_hit)

    def log_rejected(self, status: int, reason: str) -> None:
        self._console.print(f"[yellow]{status}[/yellow] {reason}")
        write_cli_log("REJECTED", reason, status=status)

    def log_error(self, target: str, status: int, message: str) -> None:
        self._console.print(f"[red]{status}[/red] {target}: {message}")
        write_cli_log("ERROR", message[:200], target=target, status=status)


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if any(marker in key.lower() for marker in _SENSITIVE):
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
