"""Tests for the CLI commands."""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from vhost_monitor.cli import main
from vhost_monitor.model.site import RawSiteEntry, ReachabilityResult, Site


def _site(domain: str, reachable: bool = True, days: int | None = 60) -> Site:
    return Site(
        domain=domain,
        config_path=f"/etc/nginx/sites-enabled/{domain}",
        is_enabled=True,
        port=443,
        is_tls=True,
        cert_path=f"/etc/ssl/{domain}.pem",
        is_reachable=reachable,
        http_status_code=200 if reachable else None,
        response_time_ms=12 if reachable else None,
        cert_expiry=datetime(2030, 1, 1, tzinfo=timezone.utc) if days is not None else None,
        cert_days_remaining=days,
    )


def test_check_all_healthy_exits_zero(tmp_path):
    runner = CliRunner()
    with patch("vhost_monitor.cli.collect_sites", return_value=[_site("a.example.com")]):
        result = runner.invoke(main, ["--config", str(tmp_path), "check"])

    assert result.exit_code == 0, result.output
    assert "a.example.com" in result.output


def test_check_unreachable_exits_one(tmp_path):
    runner = CliRunner()
    sites = [_site("a.example.com"), _site("b.example.com", reachable=False)]
    with patch("vhost_monitor.cli.collect_sites", return_value=sites):
        result = runner.invoke(main, ["--config", str(tmp_path), "check"])

    assert result.exit_code == 1


def test_check_expiring_certificate_exits_one(tmp_path):
    runner = CliRunner()
    with patch("vhost_monitor.cli.collect_sites", return_value=[_site("a.example.com", days=3)]):
        result = runner.invoke(main, ["--config", str(tmp_path), "check", "--warn-days", "7"])

    assert result.exit_code == 1


def test_check_json_output_and_overrides(tmp_path):
    runner = CliRunner()
    with patch("vhost_monitor.cli.collect_sites", return_value=[_site("a.example.com")]) as mock_collect:
        result = runner.invoke(
            main,
            ["--config", str(tmp_path), "check", "--json", "--batch-size", "5", "--batch-delay", "0"],
        )

    assert result.exit_code == 0, result.output
    assert '"domain": "a.example.com"' in result.output
    assert '"isSsl": true' in result.output
    cfg = mock_collect.call_args[0][0]
    assert cfg.batch_size == 5
    assert cfg.batch_delay == 0


def test_discover_lists_entries(tmp_path):
    entry = RawSiteEntry(domain="a.example.com", config_path="/etc/nginx/sites-enabled/a", is_enabled=True)
    runner = CliRunner()
    with patch("vhost_monitor.cli.discover_unique_sites", return_value={"a.example.com": entry}):
        result = runner.invoke(main, ["--config", str(tmp_path), "discover", "--json"])

    assert result.exit_code == 0, result.output
    assert '"origin": "standard"' in result.output


def test_probe_single_domain(tmp_path):
    runner = CliRunner()
    with patch("vhost_monitor.cli.CertificateInspector") as mock_inspector, \
         patch("vhost_monitor.cli.ReachabilityProbe") as mock_probe:
        mock_inspector.return_value.inspect = MagicMock(side_effect=_async_return(None))
        mock_probe.return_value.probe = MagicMock(
            side_effect=_async_return(ReachabilityResult(is_reachable=True, status_code=204, response_time_ms=3))
        )

        result = runner.invoke(main, ["--config", str(tmp_path), "probe", "a.example.com", "--port", "8443"])

    assert result.exit_code == 0, result.output
    mock_probe.return_value.probe.assert_called_once_with("a.example.com", 8443, True)


def test_invalid_config_exits_two(tmp_path):
    (tmp_path / "config.yaml").write_text("batch_size: 0\n")
    runner = CliRunner()

    result = runner.invoke(main, ["--config", str(tmp_path), "check"])

    assert result.exit_code == 2


def test_init_config_writes_defaults(tmp_path):
    runner = CliRunner()

    result = runner.invoke(main, ["--config", str(tmp_path), "init-config"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "config.yaml").exists()

    again = runner.invoke(main, ["--config", str(tmp_path), "init-config"])
    assert again.exit_code == 1


def _async_return(value):
    async def _inner(*args, **kwargs):
        return value
    return _inner
