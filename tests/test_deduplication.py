from itertools import permutations

from vhost_monitor.engine.deduplication import deduplicate_sites
from vhost_monitor.model.site import RawSiteEntry


def _entry(domain: str, tls: bool = False, path: str = "", enabled: bool = True) -> RawSiteEntry:
    return RawSiteEntry(
        domain=domain,
        config_path=path or f"/etc/nginx/sites-enabled/{domain}",
        is_enabled=enabled,
        port=443 if tls else 80,
        is_tls=tls,
        cert_path=f"/etc/ssl/{domain}.pem" if tls else None,
    )


def test_one_entry_per_domain() -> None:
    entries = [_entry("a.example.com"), _entry("b.example.com"), _entry("a.example.com", path="/x")]

    unique = deduplicate_sites(entries)

    assert set(unique) == {"a.example.com", "b.example.com"}
    assert unique["a.example.com"].config_path == "/etc/nginx/sites-enabled/a.example.com"


def test_tls_entry_wins_regardless_of_order() -> None:
    plain = _entry("shop.example.com", path="/plain")
    tls = _entry("shop.example.com", tls=True, path="/tls")

    for order in ([plain, tls], [tls, plain]):
        merged = deduplicate_sites(order)["shop.example.com"]
        assert merged is tls


def test_first_tls_entry_is_kept_among_tls_entries() -> None:
    first = _entry("shop.example.com", tls=True, path="/first")
    second = _entry("shop.example.com", tls=True, path="/second")

    assert deduplicate_sites([first, second])["shop.example.com"] is first


def test_enabled_flag_does_not_influence_choice() -> None:
    enabled_plain = _entry("shop.example.com", enabled=True, path="/enabled")
    available_tls = _entry("shop.example.com", tls=True, enabled=False, path="/available")

    merged = deduplicate_sites([enabled_plain, available_tls])["shop.example.com"]

    assert merged is available_tls


def test_idempotent() -> None:
    entries = [
        _entry("a.example.com"),
        _entry("a.example.com", tls=True),
        _entry("b.example.com", tls=True),
        _entry("b.example.com"),
        _entry("c.example.com"),
    ]
    for order in permutations(entries):
        once = deduplicate_sites(order)
        assert deduplicate_sites(once.values()) == once


def test_empty_input() -> None:
    assert deduplicate_sites([]) == {}
