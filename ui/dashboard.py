"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from auth import SECRET_HEADER
from core.config import Config
from ui.log_utils import write_cli_log

console = Console()


class RequestInfo:
    """Info about a single forwarded request."""

    def __init__(self, target: str, status: int, cache_ttl: int | None, cache_hit: bool, timestamp: datetime):
        self.target = target[:40] + "..." if len(target) > 40 else target
        self.status = status
        self.cache_ttl = cache_ttl
        self.cache_hit = cache_hit
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing forwarded requests and failures."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 8
        self._counts = {"forwarded": 0, "cache_hits": 0, "rejected": 0, "errors": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    @property
    def counts(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def log_forward(
        self,
        target: str,
        status: int,
        *,
        cache_ttl: int | None = None,
        cache_hit: bool = False,
    ) -> None:
        """Log a request forwarded upstream or served from the edge cache."""
        with self._lock:
            self._counts["forwarded"] += 1
            if cache_hit:
                self._counts["cache_hits"] += 1
            info = RequestInfo(target, status, cache_ttl, cache_hit, datetime.now())
            self._recent.insert(0, info)
            self._recent = self._recent[: self._max_recent]
            self._refresh()
            write_cli_log("FORWARD", target, status=status, cache_ttl=cache_ttl, cache_hit=cache_hit)

    def log_rejected(self, status: int, reason: str) -> None:
        """Log a request refused before forwarding."""
        with self._lock:
            self._counts["rejected"] += 1
            self._refresh()
            write_cli_log("REJECTED", reason, status=status)

    def log_error(self, target: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._counts["errors"] += 1
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{target} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], target=target, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Egress Proxy", style="bold cyan")
        stats.append(f" {self.config.version}", style="dim")
        stats.append("  |  ")
        stats.append(f"Forwarded: {self._counts['forwarded']}", style="green")
        stats.append("  |  ")
        stats.append(f"Cache hits: {self._counts['cache_hits']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._counts['rejected']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Errors: {self._counts['errors']}", style="red")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build the recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Target", ratio=3)
            table.add_column("Status", width=6)
            table.add_column("Cache", ratio=1)

            for req in self._recent:
                status_style = "green" if req.status < 400 else "yellow"
                if req.cache_hit:
                    cache_str = f"hit ({req.cache_ttl}s)"
                elif req.cache_ttl:
                    cache_str = f"{req.cache_ttl}s"
                else:
                    cache_str = "-"
                table.add_row(
                    req.timestamp.strftime("%H:%M:%S"),
                    req.target,
                    f"[{status_style}]{req.status}[/{status_style}]",
                    cache_str,
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[green]Recent Requests[/green]", border_style="green")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"GET http://{self.config.proxy.host}:{self.config.proxy.port}/?url=<target> "
                f"with the {SECRET_HEADER} header",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
