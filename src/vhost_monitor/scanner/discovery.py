"""Site Discovery Scanner - Finds nginx vhost files across server layouts.

This scanner lists directories, reads files and hands the text to the
parser. Deciding what a file means is the parser's job.

Layouts:
- Standard: sites-enabled (enabled) and sites-available minus enabled
- Plesk vhosts: <vhosts root>/<domain>/nginx.conf, root-owned
- Plesk conf.d: <plesk conf root>/vhosts/*.conf, root-owned
"""

import os
from dataclasses import dataclass

import structlog

from vhost_monitor.config import MonitorConfig
from vhost_monitor.connector.local import LocalConnector
from vhost_monitor.errors import DiscoveryError, ParseError
from vhost_monitor.model.site import RawSiteEntry, SiteOrigin
from vhost_monitor.parser.vhost_conf import VhostConfigParser

logger = structlog.get_logger(__name__)

PLESK_TAG = " (Plesk)"


@dataclass
class ConfigCandidate:
    """A config file found by a layout, not read yet."""

    path: str
    is_enabled: bool
    origin: SiteOrigin = SiteOrigin.STANDARD

    @property
    def reported_path(self) -> str:
        if self.origin is SiteOrigin.PLESK:
            return self.path + PLESK_TAG
        return self.path


class SiteDiscoveryScanner:
    """Collects RawSiteEntry objects from every known config layout.

    A missing layout contributes nothing; one bad file or one failing
    layout never stops the others.
    """

    def __init__(
        self,
        local: LocalConnector,
        config: MonitorConfig | None = None,
        parser: VhostConfigParser | None = None,
    ) -> None:
        self.local = local
        self.config = config or MonitorConfig()
        self.parser = parser or VhostConfigParser()

    def discover(self) -> list[RawSiteEntry]:
        """Run every layout and parse each candidate file.

        Returns:
            One entry per parseable vhost file, duplicates included.
        """
        layouts = (
            ("standard", self._standard_candidates),
            ("plesk_vhosts", self._plesk_vhost_candidates),
            ("plesk_conf", self._plesk_conf_candidates),
        )

        entries: list[RawSiteEntry] = []
        for name, collect in layouts:
            try:
                candidates = collect()
            except DiscoveryError as e:
                logger.info("layout_skipped", layout=name, reason=str(e))
                continue
            except OSError as e:
                logger.warning("layout_failed", layout=name, error=str(e))
                continue

            for candidate in candidates:
                entry = self._parse_candidate(candidate)
                if entry is not None:
                    entries.append(entry)

        logger.debug("discovery_complete", entries=len(entries))
        return entries

    def _parse_candidate(self, candidate: ConfigCandidate) -> RawSiteEntry | None:
        """Read and parse one file, returning None when it is skipped."""
        try:
            text = self.local.read_file(
                candidate.path,
                privileged=self.needs_privilege(candidate.path),
                timeout=self.config.privileged_read_timeout,
            )
            if text is None:
                raise ParseError(candidate.path, "unreadable")
            return self.parser.parse(
                candidate.reported_path,
                text,
                candidate.is_enabled,
                origin=candidate.origin,
            )
        except ParseError as e:
            logger.debug("config_skipped", path=e.path, reason=e.reason)
            return None
        except Exception as e:
            logger.warning("config_failed", path=candidate.path, error=repr(e))
            return None

    def needs_privilege(self, path: str) -> bool:
        """True when the path lies inside a root-owned config tree."""
        return any(
            path == root or path.startswith(root.rstrip("/") + "/")
            for root in self.config.privileged_roots
        )

    # -------------------------------------------------------------------------
    # Layouts
    # -------------------------------------------------------------------------

    def _standard_candidates(self) -> list[ConfigCandidate]:
        cfg = self.config
        if not self.local.dir_exists(cfg.nginx_root):
            raise DiscoveryError(f"{cfg.nginx_root} not found (nginx not installed)")

        enabled = self._list_sites(cfg.sites_enabled_dir)
        available = self._list_sites(cfg.sites_available_dir)
        enabled_names = set(enabled)

        candidates = [
            ConfigCandidate(os.path.join(cfg.sites_enabled_dir, name), is_enabled=True)
            for name in enabled
        ]
        candidates.extend(
            ConfigCandidate(os.path.join(cfg.sites_available_dir, name), is_enabled=False)
            for name in available
            if name not in enabled_names
        )
        return candidates

    def _list_sites(self, path: str) -> list[str]:
        """List site files in a directory, skipping dotfiles and the default site."""
        if not self.local.dir_exists(path):
            return []
        try:
            files = self.local.list_dir(path)
        except OSError as e:
            logger.warning("sites_dir_unreadable", path=path, error=str(e))
            return []
        return [
            f for f in files
            if f and not f.startswith(".") and f != self.config.reserved_site_name
        ]

    def _plesk_vhost_candidates(self) -> list[ConfigCandidate]:
        cfg = self.config
        if not self.local.dir_exists(cfg.plesk_vhosts_root):
            raise DiscoveryError(f"{cfg.plesk_vhosts_root} not found")

        paths = self.local.find_files(
            cfg.plesk_vhosts_root, cfg.plesk_vhost_filename, cfg.plesk_vhosts_depth
        )
        return [ConfigCandidate(p, is_enabled=True, origin=SiteOrigin.PLESK) for p in paths]

    def _plesk_conf_candidates(self) -> list[ConfigCandidate]:
        cfg = self.config
        if not self.local.dir_exists(cfg.plesk_conf_root):
            raise DiscoveryError(f"{cfg.plesk_conf_root} not found")

        paths = self.local.glob_files(os.path.join(cfg.plesk_conf_root, cfg.plesk_conf_glob))
        return [ConfigCandidate(p, is_enabled=True, origin=SiteOrigin.PLESK) for p in paths]
