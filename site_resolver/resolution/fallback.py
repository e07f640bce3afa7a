"""
Fallback chain used when search yields no usable candidates.
"""

import logging
from typing import List, Optional, Sequence

import requests

from site_resolver.core.config import SearchConfig
from site_resolver.core.models import CandidateResult
from site_resolver.filtering.blacklist import DomainBlacklist
from site_resolver.search.queries import fallback_slug


PROBE_TITLE_TEMPLATE = "{company} - Site Oficial"
PROBE_SNIPPET_TEMPLATE = "Site oficial da empresa {company}."
SUGGESTION_TITLE_TEMPLATE = "{company} - Site Sugerido (Ainda não tem um site oficial.)"
SUGGESTION_SNIPPET_TEMPLATE = "Endereço sugerido para a empresa {company}."


class FallbackResolver:
    """
    Resolve a company without search results.

    First probes each guessed domain with an HTTP HEAD request, skipping
    blacklisted guesses; if none answers, fabricates one clearly labelled
    suggestion URL. The suggestion is never checked against the blacklist.
    """

    def __init__(self, config: SearchConfig, blacklist: Optional[DomainBlacklist] = None):
        self.config = config
        self.blacklist = blacklist or DomainBlacklist()
        self.logger = logging.getLogger(__name__)

    def probe_domains(self, company_name: str, domain_guesses: Sequence[str]) -> List[CandidateResult]:
        """
        Probe guessed domains in priority order.

        Args:
            company_name: Raw company name
            domain_guesses: Guessed domains, highest priority first

        Returns:
            A single confirmed candidate, or an empty list
        """
        for domain in domain_guesses:
            if self.blacklist.is_blacklisted(domain):
                self.logger.debug(f"Skipping blacklisted guess {domain}")
                continue

            url = f"https://{domain}"
            try:
                response = requests.head(url, timeout=self.config.probe_timeout, allow_redirects=True)
            except requests.RequestException as e:
                self.logger.debug(f"Probe failed for {domain}: {e}")
                continue

            if response.status_code < 400:
                self.logger.info(f"Domain {domain} answered with HTTP {response.status_code}")
                return [CandidateResult(
                    title=PROBE_TITLE_TEMPLATE.format(company=company_name),
                    link=url,
                    snippet=PROBE_SNIPPET_TEMPLATE.format(company=company_name),
                    domain=domain,
                )]

            self.logger.debug(f"Probe of {domain} returned HTTP {response.status_code}")

        return []

    def suggest(self, company_name: str) -> Optional[CandidateResult]:
        """
        Build the synthetic suggestion for a company.

        Returns:
            Suggested candidate, or None when the name has no usable characters
        """
        slug = fallback_slug(company_name)
        if not slug:
            return None

        domain = f"{slug}.com.br"
        return CandidateResult(
            title=SUGGESTION_TITLE_TEMPLATE.format(company=company_name),
            link=f"https://{domain}",
            snippet=SUGGESTION_SNIPPET_TEMPLATE.format(company=company_name),
            domain=domain,
        )

    def resolve(self, company_name: str, domain_guesses: Sequence[str]) -> List[CandidateResult]:
        """Run the probe stage, then the suggestion stage if needed."""
        results = self.probe_domains(company_name, domain_guesses)
        if results:
            return results

        self.logger.info(f"No guessed domain answered for {company_name!r}; using a suggestion")
        suggestion = self.suggest(company_name)
        return [suggestion] if suggestion else []
