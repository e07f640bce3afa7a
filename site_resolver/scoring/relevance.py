"""
Relevance ranking of website candidates for a company.
"""

import re
from typing import Dict, List, Optional, Sequence

from site_resolver.core.models import CandidateResult, ScoredCandidate
from site_resolver.search.queries import generate_domain_guesses, strip_diacritics


DEFAULT_WEIGHTS = {
    "exact_domain_guess": 500,   # domain is one of the generated guesses
    "domain_contains_name": 200,
    "tld_com_br": 80,
    "tld_br": 60,
    "tld_com": 40,
    "title_contains_name": 50,
    "title_official_term": 50,
    "snippet_official_term": 30,
    "social_domain": -100,
}

OFFICIAL_TERMS = ("oficial", "official", "homepage", "home", "site oficial")
SOCIAL_DOMAIN_MARKERS = ("facebook", "instagram", "linkedin", "twitter")

_WHITESPACE = re.compile(r"\s+")


def normalize_for_matching(company_name: str) -> str:
    """Lowercase, diacritics removed, whitespace removed."""
    return _WHITESPACE.sub("", strip_diacritics(company_name.lower()))


def normalize_domain(domain: str) -> str:
    domain = domain.lower().strip()
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


class RelevanceRanker:
    """
    Order candidates by an additive integer score.

    Each rule contributes its weight independently. An exact match against a
    generated domain guess dominates; ties keep their original order.
    """

    def __init__(self, weights: Optional[Dict[str, int]] = None):
        """
        Initialize the ranker.

        Args:
            weights: Overrides for DEFAULT_WEIGHTS; unknown keys are rejected
        """
        self.weights = dict(DEFAULT_WEIGHTS)
        if weights:
            unknown = set(weights) - set(DEFAULT_WEIGHTS)
            if unknown:
                raise ValueError(f"Unknown scoring weights: {sorted(unknown)}")
            self.weights.update(weights)

    def score(self, candidate: CandidateResult, company_name: str,
              domain_guesses: Optional[Sequence[str]] = None) -> int:
        """
        Score one candidate.

        Args:
            candidate: Candidate to score
            company_name: Raw company name
            domain_guesses: Generated guesses (computed from the name if omitted)

        Returns:
            Integer relevance score
        """
        if domain_guesses is None:
            domain_guesses = generate_domain_guesses(company_name)

        w = self.weights
        domain = normalize_domain(candidate.domain)
        title = (candidate.title or "").lower()
        snippet = (candidate.snippet or "").lower()
        normalized_name = normalize_for_matching(company_name)
        raw_name = company_name.strip().lower()

        score = 0

        if normalized_name and normalized_name in domain:
            score += w["domain_contains_name"]

        if domain.endswith(".com.br"):
            score += w["tld_com_br"]
        elif domain.endswith(".br"):
            score += w["tld_br"]
        elif domain.endswith(".com"):
            score += w["tld_com"]

        if raw_name and raw_name in title:
            score += w["title_contains_name"]

        if any(term in title for term in OFFICIAL_TERMS):
            score += w["title_official_term"]
        if any(term in snippet for term in OFFICIAL_TERMS):
            score += w["snippet_official_term"]

        if any(marker in domain for marker in SOCIAL_DOMAIN_MARKERS):
            score += w["social_domain"]

        if domain in domain_guesses:
            score += w["exact_domain_guess"]

        return score

    def score_all(self, candidates: Sequence[CandidateResult],
                  company_name: str) -> List[ScoredCandidate]:
        guesses = generate_domain_guesses(company_name)
        return [
            ScoredCandidate(candidate=c, score=self.score(c, company_name, guesses), position=i)
            for i, c in enumerate(candidates)
        ]

    def rank(self, candidates: Sequence[CandidateResult], company_name: str) -> List[CandidateResult]:
        """
        Sort candidates by descending score.

        Args:
            candidates: Deduplicated candidates in insertion order
            company_name: Raw company name

        Returns:
            The same candidates, reordered; scores are not exposed
        """
        if not candidates:
            return []

        scored = self.score_all(candidates, company_name)
        scored.sort(key=lambda s: (-s.score, s.position))
        return [s.candidate for s in scored]
