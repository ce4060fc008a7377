"""Virtual Host Configuration Parser.

Extracts the site identity (domain, port, TLS flag, certificate path) from the
text of a single nginx vhost file. Works for hand-written sites-available
files and Plesk-generated vhost configs alike.

IMPORTANT DESIGN NOTES:
1. Parsing is a pure function of the file text - no filesystem access here
2. Only the FIRST server_name directive names the site
3. An ssl_certificate directive is TLS evidence even when no listen line
   carries the ssl flag
4. Comments are stripped before matching so commented-out directives
   never count
"""

import re
from dataclasses import dataclass

from vhost_monitor.errors import ParseError
from vhost_monitor.model.site import RawSiteEntry, SiteOrigin

DEFAULT_PORT = 80
TLS_PORT = 443
MIN_PORT = 1
MAX_PORT = 65535
WILDCARD_NAME = "_"


@dataclass
class ListenDirective:
    """A parsed listen directive."""

    port: int
    has_tls_flag: bool


class VhostConfigParser:
    """Parser for one nginx virtual host file.

    Example:
        >>> parser = VhostConfigParser()
        >>> entry = parser.parse("/etc/nginx/sites-enabled/shop", text, is_enabled=True)
        >>> entry.domain, entry.port, entry.is_tls
        ('shop.example.com', 443, True)
    """

    # server_name example.com www.example.com;
    SERVER_NAME_RE = re.compile(r"\bserver_name\s+([^;]+);")

    # listen 443 ssl http2;  listen 10.0.0.1:8080;  listen [::]:443 ssl;
    LISTEN_RE = re.compile(r"\blisten\s+([^;]+);")

    # ssl_certificate /etc/ssl/site.pem;  (ssl_certificate_key is not a cert)
    CERTIFICATE_RE = re.compile(r"\bssl_certificate\s+([^;]+);")

    def parse(
        self,
        path: str,
        raw_text: str,
        is_enabled: bool,
        origin: SiteOrigin = SiteOrigin.STANDARD,
    ) -> RawSiteEntry:
        """Parse one vhost file into a RawSiteEntry.

        Args:
            path: Config path to report for this site.
            raw_text: Full text of the config file.
            is_enabled: Whether the file is active in nginx.
            origin: Layout the file was discovered in.

        Returns:
            RawSiteEntry describing the site.

        Raises:
            ParseError: If the file has no server_name (snippets, includes).
        """
        text = self.strip_comments(raw_text)

        domain = self._extract_domain(text)
        if domain is None:
            raise ParseError(path, "no server_name directive")

        has_certificate = self.CERTIFICATE_RE.search(text) is not None
        port, is_tls = self._resolve_port(text, has_certificate)

        cert_path = None
        if is_tls:
            cert_match = self.CERTIFICATE_RE.search(text)
            if cert_match:
                cert_path = cert_match.group(1).strip()

        return RawSiteEntry(
            domain=domain,
            config_path=path,
            is_enabled=is_enabled,
            port=port,
            is_tls=is_tls,
            cert_path=cert_path,
            origin=origin,
        )

    def _extract_domain(self, text: str) -> str | None:
        """Pick the first non-wildcard name, else the first name verbatim."""
        match = self.SERVER_NAME_RE.search(text)
        if not match:
            return None
        names = match.group(1).split()
        if not names:
            return None
        return next((n for n in names if n != WILDCARD_NAME), names[0])

    def _resolve_port(self, text: str, has_certificate: bool) -> tuple[int, bool]:
        """Scan listen directives in file order and settle port + TLS."""
        port = DEFAULT_PORT
        is_tls = False

        for listen in self.listen_directives(text):
            if listen.has_tls_flag or listen.port == TLS_PORT:
                port = listen.port
                is_tls = True
                break
            if port == DEFAULT_PORT:
                # Provisional; a later TLS listen still wins
                port = listen.port

        if has_certificate and not is_tls:
            port = TLS_PORT
            is_tls = True

        return port, is_tls

    def listen_directives(self, text: str) -> list[ListenDirective]:
        """Return every listen directive with a numeric port, in file order."""
        directives: list[ListenDirective] = []
        for match in self.LISTEN_RE.finditer(text):
            args = match.group(1).split()
            if not args:
                continue
            port = self._extract_listen_port(args[0])
            if port is None:
                continue
            flags = {a.lower() for a in args[1:]}
            directives.append(ListenDirective(port=port, has_tls_flag="ssl" in flags))
        return directives

    @staticmethod
    def _extract_listen_port(value: str) -> int | None:
        """Port from `443`, `10.0.0.1:443`, `[::]:443` or `localhost:8080`."""
        if value.startswith("unix:"):
            return None
        if "]:" in value:
            value = value.rsplit("]:", 1)[1]
        elif ":" in value and not value.startswith("["):
            value = value.rsplit(":", 1)[1]
        if not (value.isascii() and value.isdigit()):
            return None
        port = int(value)
        return port if MIN_PORT <= port <= MAX_PORT else None

    @staticmethod
    def strip_comments(text: str) -> str:
        """Drop `#` comments, keeping line structure."""
        lines = []
        for line in text.splitlines():
            hash_pos = line.find("#")
            lines.append(line if hash_pos < 0 else line[:hash_pos])
        return "\n".join(lines)
