"""Shared-secret authentication for the proxy path."""

import hmac

from rich.console import Console

from core.config import CONFIG_FILE, SECRET_ENV_VAR, Config

console = Console()

# Stripped from the forwarded request
SECRET_HEADER = "X-Proxy-Secret"


def secret_matches(provided: str | None, expected: str) -> bool:
    """Check a request's secret against the configured one."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def check_auth(config: Config) -> bool:
    """Report whether a shared secret is configured."""
    if config.secret:
        console.print(f"[green]Secret configured[/green] (from {config.secret_source})")
        console.print(f"[dim]Clients must send the {SECRET_HEADER} header.[/dim]")
        return True
    else:
        console.print("[yellow]No secret configured[/yellow]")
        console.print(f"\n[dim]Set the {SECRET_ENV_VAR} environment variable, or edit:[/dim]")
        console.print(f"  {CONFIG_FILE}")
        return False
