"""
Domain blacklist for search engines, social networks and data aggregators.
"""

from typing import Iterable, List, Optional
from urllib.parse import urlparse


# Hosts that are never a company's own website. Matched on the domain itself
# or any of its subdomains.
DEFAULT_BLACKLIST = (
    # search engines and portals
    "bing.com",
    "yahoo.com",
    "duckduckgo.com",
    "wikipedia.org",
    # social and media platforms
    "x.com",
    "tiktok.com",
    "pinterest.com",
    "wa.me",
    "whatsapp.com",
    # Brazilian company registries and aggregators
    "cnpj.biz",
    "cnpj.info",
    "cnpj.ws",
    "casadosdados.com.br",
    "econodata.com.br",
    "empresascnpj.com",
    "consultacnpj.com",
    "consultasocio.com",
    "informecadastral.com.br",
    "speedio.com.br",
    "solutudo.com.br",
    "guiamais.com.br",
    "telelistas.net",
    "apontador.com.br",
    "reclameaqui.com.br",
    "jusbrasil.com.br",
    "escavador.com",
    # job boards and marketplaces
    "glassdoor.com.br",
    "glassdoor.com",
    "indeed.com",
    "vagas.com.br",
    "mercadolivre.com.br",
    "olx.com.br",
)

# Platform hosts matched as plain substrings, so regional variants such as
# google.com.br or br.linkedin.com are caught too.
PLATFORM_HOSTS = (
    "google.com",
    "support.google.com",
    "maps.google.com",
    "facebook.com",
    "instagram.com",
    "linkedin.com",
    "twitter.com",
    "youtube.com",
)


def host_from_url(url: Optional[str]) -> Optional[str]:
    """Extract the lowercase hostname of a URL without a leading "www.".

    Args:
        url: URL to parse

    Returns:
        Hostname, or None if the URL cannot be parsed or has no host
    """
    if not url or not isinstance(url, str):
        return None

    try:
        host = urlparse(url.strip()).hostname
    except ValueError:
        return None

    if not host:
        return None

    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host or None


class DomainBlacklist:
    """
    Decide whether a domain can be a company's own website.

    Matching is case-insensitive. Configured domains block themselves and
    their subdomains; platform hosts block any domain containing them.
    """

    def __init__(self, domains: Optional[Iterable[str]] = None,
                 platform_hosts: Iterable[str] = PLATFORM_HOSTS):
        """
        Initialize the blacklist.

        Args:
            domains: Blocked domains (defaults to DEFAULT_BLACKLIST)
            platform_hosts: Hosts blocked by substring match
        """
        if domains is None:
            domains = DEFAULT_BLACKLIST
        self.domains = self._clean(domains)
        self.platform_hosts = self._clean(platform_hosts)

    @staticmethod
    def _clean(domains: Iterable[str]) -> List[str]:
        cleaned = []
        for domain in domains:
            domain = str(domain).lower().strip()
            if domain.startswith("www."):
                domain = domain[4:]
            if domain and domain not in cleaned:
                cleaned.append(domain)
        return cleaned

    def is_blacklisted(self, domain: Optional[str]) -> bool:
        """
        Check if a domain is blacklisted.

        Args:
            domain: Hostname, with or without a leading "www."

        Returns:
            True if the domain is blocked; empty domains are blocked too
        """
        if not domain:
            return True

        domain = domain.lower().strip().rstrip(".")
        if domain.startswith("www."):
            domain = domain[4:]
        if not domain:
            return True

        if any(host in domain for host in self.platform_hosts):
            return True

        for blocked in self.domains:
            if domain == blocked or domain.endswith("." + blocked):
                return True

        return False

    def is_blacklisted_url(self, url: Optional[str]) -> bool:
        """
        Check if a URL points to a blacklisted domain.

        Unparsable URLs are treated as blacklisted.
        """
        return self.is_blacklisted(host_from_url(url))

    def extend(self, domains: Iterable[str]) -> None:
        """
        Add domains to the blacklist.

        Args:
            domains: Additional domains to block
        """
        self.domains = self._clean(list(self.domains) + list(domains))

    @classmethod
    def from_config(cls, filtering_config: Optional[dict]) -> 'DomainBlacklist':
        """Build the default blacklist plus any domains from configuration."""
        blacklist = cls()
        extra = (filtering_config or {}).get('blacklist') or []
        if extra:
            blacklist.extend(extra)
        return blacklist
