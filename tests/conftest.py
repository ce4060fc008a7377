"""Pytest configuration and fixtures for vhost-monitor tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from vhost_monitor.config import MonitorConfig
from vhost_monitor.connector.local import CommandResult, LocalConnector

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_local_connector():
    """Create a mock local connector for testing."""
    connector = MagicMock(spec=LocalConnector)

    # Default behavior: commands succeed, nothing exists
    connector.run.return_value = CommandResult(
        command="test",
        stdout="",
        stderr="",
        exit_code=0,
    )
    connector.read_file.return_value = None
    connector.dir_exists.return_value = False
    connector.list_dir.return_value = []
    connector.find_files.return_value = []
    connector.glob_files.return_value = []

    return connector


@pytest.fixture
def fast_config():
    """Config with short timeouts and no pause between batches."""
    return MonitorConfig(batch_delay=0, handshake_timeout=1.0, probe_timeout=1.0)


@pytest.fixture
def layout_config(tmp_path):
    """Config whose standard and Plesk roots live under tmp_path."""
    nginx_root = tmp_path / "nginx"
    return MonitorConfig(
        nginx_root=str(nginx_root),
        sites_enabled_dir=str(nginx_root / "sites-enabled"),
        sites_available_dir=str(nginx_root / "sites-available"),
        plesk_vhosts_root=str(tmp_path / "vhosts" / "system"),
        plesk_conf_root=str(nginx_root / "plesk.conf.d"),
        batch_delay=0,
    )


def make_certificate_der(not_after: datetime, common_name: str = "example.com") -> bytes:
    """Self-signed certificate in DER form expiring at `not_after`."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_after - timedelta(days=90))
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.DER)


PLAIN_SITE = """server {
    listen 80;
    server_name shop.example.com www.shop.example.com;
    root /var/www/shop;
}
"""

TLS_SITE = """server {
    listen 443 ssl;
    server_name shop.example.com;
    ssl_certificate /etc/ssl/shop.pem;
    ssl_certificate_key /etc/ssl/shop.key;
    root /var/www/shop;
}
"""


@pytest.fixture
def plain_site_conf():
    return PLAIN_SITE


@pytest.fixture
def tls_site_conf():
    return TLS_SITE


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def cert_der_factory():
    return make_certificate_der
