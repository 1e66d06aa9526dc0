import json

from core.config import Config
from ui import log_utils
from ui.dashboard import Dashboard
from ui.log_utils import ConsoleLogger, clear_logs, write_cli_log, write_incoming_log


def test_incoming_log_masks_secret_headers(tmp_path):
    path = write_incoming_log(
        "GET",
        "/",
        {"x-proxy-secret": "super-secret-value", "authorization": "Bearer abc", "accept": "*/*"},
        {"url": "http://origin.test/"},
        log_root=tmp_path,
    )

    payload = json.loads(path.read_text())
    assert payload["headers"]["x-proxy-secret"] == "super-...alue"
    assert payload["headers"]["authorization"] == "***"
    assert payload["headers"]["accept"] == "*/*"
    assert payload["query"] == {"url": "http://origin.test/"}


def test_clear_logs_removes_request_logs(tmp_path):
    write_incoming_log("GET", "/", {}, {}, log_root=tmp_path)
    write_incoming_log("GET", "/", {}, {}, log_root=tmp_path)

    assert clear_logs(tmp_path) == 2
    assert not list((tmp_path / "incoming").glob("*.json"))


def test_cli_log_appends_lines(tmp_path):
    log_file = tmp_path / "proxy.log"
    write_cli_log("STARTUP", "Proxy started", log_file=log_file, port=8080)
    write_cli_log("SHUTDOWN", "Proxy stopped", log_file=log_file)

    lines = log_file.read_text().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("STARTUP: Proxy started port=8080")
    assert lines[1].endswith("SHUTDOWN: Proxy stopped")


def test_dashboard_counts_events(tmp_path, monkeypatch):
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", tmp_path / "proxy.log")
    dashboard = Dashboard(Config(secret="s"))

    dashboard.log_forward("origin.test", 200, cache_ttl=None)
    dashboard.log_forward("origin.test", 200, cache_ttl=60, cache_hit=True)
    dashboard.log_rejected(401, "Unauthorized")
    dashboard.log_error("origin.test", 502, "Connection refused")

    assert dashboard.counts == {"forwarded": 2, "cache_hits": 1, "rejected": 1, "errors": 1}
    assert dashboard._build_layout() is not None
    assert "ERROR: Connection refused" in (tmp_path / "proxy.log").read_text()


def test_console_logger_writes_cli_log(tmp_path, monkeypatch):
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", tmp_path / "proxy.log")
    logger = ConsoleLogger()

    logger.log_forward("origin.test", 429)
    logger.log_rejected(405, "Method not allowed")

    text = (tmp_path / "proxy.log").read_text()
    assert "FORWARD: origin.test status=429" in text
    assert "REJECTED: Method not allowed status=405" in text
