"""
Per-company website resolution: search, filter, fallback, rank, truncate.
"""

import logging
import time
from typing import Callable, Iterable, List, Optional

from site_resolver.core.config import SearchConfig
from site_resolver.core.exceptions import ResolutionError
from site_resolver.core.models import (
    CandidateResult,
    ResolutionOutcome,
    STATUS_COMPLETE,
    STATUS_ERROR,
)
from site_resolver.filtering.blacklist import DomainBlacklist
from site_resolver.filtering.results import filter_items, deduplicate, count_distinct_domains
from site_resolver.resolution.fallback import FallbackResolver
from site_resolver.scoring.relevance import RelevanceRanker
from site_resolver.search.client import GoogleSearchClient
from site_resolver.search.queries import generate_domain_guesses, generate_search_queries
from site_resolver.search.rate_limiter import RateLimiter


ProgressCallback = Callable[[int, int, ResolutionOutcome], None]


class CompanyWebsiteResolver:
    """
    Resolve company names to ranked website candidates.

    Companies are processed strictly one after another, and so are the
    queries of a single company, to stay within the search API rate limits.
    """

    def __init__(self, config: SearchConfig,
                 client: Optional[GoogleSearchClient] = None,
                 blacklist: Optional[DomainBlacklist] = None,
                 ranker: Optional[RelevanceRanker] = None,
                 fallback: Optional[FallbackResolver] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize the resolver.

        Args:
            config: Search settings; validated here
            client: Search client (built from config if omitted)
            blacklist: Domain blacklist (defaults to the built-in list)
            ranker: Relevance ranker (default weights if omitted)
            fallback: Fallback resolver (built from config and the blacklist if omitted)
            sleep: Function used for the pauses between queries and companies

        Raises:
            ConfigurationError: If the configuration is incomplete
        """
        self.config = config.validate()
        self.client = client or GoogleSearchClient(config, sleep=sleep)
        self.blacklist = blacklist or DomainBlacklist()
        self.ranker = ranker or RelevanceRanker()
        self.fallback = fallback or FallbackResolver(config, blacklist=self.blacklist)
        self._sleep = sleep
        self.logger = logging.getLogger(__name__)

    def _search_candidates(self, company_name: str) -> List[CandidateResult]:
        """Run queries in order until enough distinct domains are found."""
        queries = generate_search_queries(company_name)
        query_limiter = RateLimiter(self.config.query_delay_ms, sleep=self._sleep)
        quota = self.config.max_links_per_company

        accumulated: List[CandidateResult] = []
        for index, query in enumerate(queries, 1):
            query_limiter.wait_if_needed()

            items = self.client.execute_query(query)
            candidates = filter_items(items, self.blacklist)
            accumulated.extend(candidates)

            distinct = count_distinct_domains(accumulated)
            self.logger.debug(
                f"Query {index}/{len(queries)} for {company_name!r}: "
                f"{len(items)} items, {len(candidates)} kept, {distinct} distinct domains"
            )
            if distinct >= quota:
                self.logger.debug(f"Domain quota reached after {index} queries")
                break

        return accumulated

    def _resolve(self, company_name: str) -> ResolutionOutcome:
        name = company_name.strip() if isinstance(company_name, str) else ''
        if not name:
            raise ResolutionError("Company name is empty")

        results = self._search_candidates(name)

        if not results:
            self.logger.info(f"No search results for {name!r}; trying fallback")
            results = self.fallback.resolve(name, generate_domain_guesses(name))

        unique = deduplicate(results)
        ranked = self.ranker.rank(unique, name)
        links = tuple(ranked[:self.config.max_links_per_company])

        return ResolutionOutcome(company_name=name, links=links, status=STATUS_COMPLETE)

    def resolve_company(self, company_name: str) -> ResolutionOutcome:
        """
        Resolve a single company.

        Never raises: unexpected failures are reported as an outcome with
        status "error".

        Args:
            company_name: Company name

        Returns:
            ResolutionOutcome for the company
        """
        try:
            outcome = self._resolve(company_name)
        except Exception as e:
            self.logger.error(f"Error resolving {company_name!r}: {e}", exc_info=True)
            return ResolutionOutcome(
                company_name=company_name.strip() if isinstance(company_name, str) else str(company_name),
                links=(),
                status=STATUS_ERROR,
                message=str(e) or e.__class__.__name__,
            )

        self.logger.info(
            f"Resolved {outcome.company_name!r}: {len(outcome.links)} link(s)"
            + (f", best {outcome.best_link}" if outcome.best_link else "")
        )
        return outcome

    def resolve_companies(self, company_names: Iterable[str],
                          progress_callback: Optional[ProgressCallback] = None) -> List[ResolutionOutcome]:
        """
        Resolve companies sequentially, pausing between them.

        Args:
            company_names: Company names in processing order
            progress_callback: Optional callback(current, total, outcome)

        Returns:
            One outcome per name, in input order
        """
        names = list(company_names)
        company_limiter = RateLimiter(self.config.search_delay_ms, sleep=self._sleep)

        outcomes = []
        for index, name in enumerate(names, 1):
            company_limiter.wait_if_needed()
            outcome = self.resolve_company(name)
            outcomes.append(outcome)
            if progress_callback:
                progress_callback(index, len(names), outcome)

        errors = sum(1 for outcome in outcomes if outcome.is_error)
        self.logger.info(f"Resolution completed: {len(outcomes) - errors} complete, {errors} errors")
        return outcomes


def resolve_company(company_name: str, config: SearchConfig, **kwargs) -> ResolutionOutcome:
    """Resolve one company with a freshly built resolver."""
    return CompanyWebsiteResolver(config, **kwargs).resolve_company(company_name)


def resolve_companies(company_names: Iterable[str], config: SearchConfig,
                      progress_callback: Optional[ProgressCallback] = None,
                      **kwargs) -> List[ResolutionOutcome]:
    """
    Resolve a batch of companies.

    Raises:
        ConfigurationError: If the configuration is incomplete; nothing is resolved
    """
    resolver = CompanyWebsiteResolver(config, **kwargs)
    return resolver.resolve_companies(company_names, progress_callback=progress_callback)
