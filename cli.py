"""CLI entry point for egress-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from auth import check_auth
from core.config import CONFIG_FILE, SECRET_ENV_VAR, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import LOG_ROOT, ConsoleLogger, clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg in ("--check", "--auth"):
            check_auth(config)
            return

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            console.print(f"[bold]Logs:[/bold] {LOG_ROOT}")
            return

        if arg in ("--version", "-V"):
            console.print(config.version)
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    if not config.secret:
        console.print("[red][ERROR][/red] Shared secret not configured!")
        console.print(f"[dim]Set {SECRET_ENV_VAR} or edit {CONFIG_FILE} and set secret[/dim]")
        sys.exit(1)

    clear_logs()

    import uvicorn

    dashboard = Dashboard(config) if config.proxy.dashboard else None
    app = create_app(config, dashboard or ConsoleLogger(console))

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port, version=config.version)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = f"""
[bold cyan]Egress Proxy[/bold cyan]

Forwards authenticated GET requests to the URL in the `url` query parameter.

[bold]Usage:[/bold]
    egress-proxy              Start with live dashboard
    egress-proxy --check      Check whether a secret is configured
    egress-proxy --config     Show config and log locations
    egress-proxy --version    Show version
    egress-proxy --help       Show this help

[bold]Requests:[/bold]
    GET /?url=<absolute-url>[&cacheTtl=<seconds>]  with header X-Proxy-Secret
    GET /health, /version                          no auth

[bold]Secret:[/bold]
    Read from ${SECRET_ENV_VAR}, falling back to "secret" in {CONFIG_FILE}
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
