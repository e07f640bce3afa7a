"""
Conversion of raw search items into filtered, deduplicated candidates.
"""

import logging
from typing import Iterable, List

from site_resolver.core.models import RawSearchItem, CandidateResult
from site_resolver.filtering.blacklist import DomainBlacklist, host_from_url


logger = logging.getLogger(__name__)


def filter_items(items: Iterable[RawSearchItem], blacklist: DomainBlacklist) -> List[CandidateResult]:
    """
    Turn raw search items into candidates.

    Items without a link or title, with an unparsable link, or on a
    blacklisted domain are dropped.

    Args:
        items: Raw items from the search API
        blacklist: Domain blacklist

    Returns:
        Candidates in input order
    """
    candidates = []
    for item in items:
        if not item.link or not item.title:
            continue

        domain = host_from_url(item.link)
        if domain is None:
            logger.debug(f"Dropping unparsable link: {item.link!r}")
            continue

        if blacklist.is_blacklisted(domain):
            logger.debug(f"Dropping blacklisted domain: {domain}")
            continue

        candidates.append(CandidateResult(
            title=item.title,
            link=item.link,
            snippet=item.snippet or '',
            domain=domain,
        ))
    return candidates


def deduplicate(candidates: Iterable[CandidateResult]) -> List[CandidateResult]:
    """Keep the first candidate for every link, preserving order."""
    seen = set()
    unique = []
    for candidate in candidates:
        if candidate.link in seen:
            continue
        seen.add(candidate.link)
        unique.append(candidate)
    return unique


def count_distinct_domains(candidates: Iterable[CandidateResult]) -> int:
    return len({candidate.domain for candidate in candidates})
