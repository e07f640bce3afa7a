"""
Search query and domain guess generation for company names.

Queries are ordered precision-first: site-scoped queries against each guessed
domain come before the broader exact-name queries.
"""

import re
import unicodedata
from typing import List


TLD_SUFFIXES = (".com.br", ".com", ".net.br", ".net", ".br", ".org.br", ".org")
HYPHENATED_TLD_SUFFIXES = (".com.br", ".com", ".br")

BROAD_QUERY_TERMS = ("site oficial", "homepage", "contato")
BROAD_QUERY_SITE = ".br"
EXCLUDED_SITES = (
    "facebook.com",
    "instagram.com",
    "linkedin.com",
    "twitter.com",
    "youtube.com",
)
EXCLUDED_FILE_TYPES = ("pdf",)

_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-z0-9]")


def strip_diacritics(text: str) -> str:
    """Remove combining marks after canonical decomposition (São -> Sao)."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_company_name(company_name: str) -> str:
    """
    Normalize a company name into a domain label.

    Lowercases, strips diacritics, removes whitespace and the characters
    "&" and "-".

    Args:
        company_name: Raw company name

    Returns:
        Normalized name, e.g. "Açúcar & Cia" -> "acucarcia"
    """
    name = strip_diacritics(company_name.strip().lower())
    name = _WHITESPACE.sub("", name)
    return name.replace("&", "").replace("-", "")


def _hyphenated_name(company_name: str) -> str:
    name = strip_diacritics(company_name.strip().lower()).replace("&", " ")
    return "-".join(name.split())


def fallback_slug(company_name: str) -> str:
    """Lowercase alphanumeric slug used for the synthetic suggestion URL."""
    return _NON_ALNUM.sub("", strip_diacritics(company_name.lower()))


def generate_domain_guesses(company_name: str) -> List[str]:
    """
    Build the ordered list of plausible domains for a company.

    The order is the priority used for exact-domain scoring and for the
    direct probe fallback.

    Args:
        company_name: Raw company name

    Returns:
        Domain guesses without duplicates, e.g. ["acme.com.br", "acme.com", ...]
    """
    normalized = normalize_company_name(company_name)
    if not normalized:
        return []

    guesses = [f"{normalized}{suffix}" for suffix in TLD_SUFFIXES]

    if " " in company_name.strip():
        hyphenated = _hyphenated_name(company_name)
        if hyphenated:
            guesses.extend(f"{hyphenated}{suffix}" for suffix in HYPHENATED_TLD_SUFFIXES)

    unique = []
    for guess in guesses:
        if guess not in unique:
            unique.append(guess)
    return unique


def build_broad_query(company_name: str, term: str) -> str:
    """Exact-name query restricted to .br, without platforms and PDFs."""
    parts = [f'"{company_name.strip()}"', term, f"site:{BROAD_QUERY_SITE}"]
    parts.extend(f"-site:{site}" for site in EXCLUDED_SITES)
    parts.extend(f"-filetype:{file_type}" for file_type in EXCLUDED_FILE_TYPES)
    return " ".join(parts)


def generate_search_queries(company_name: str) -> List[str]:
    """
    Build the ordered search queries for a company.

    Args:
        company_name: Raw company name

    Returns:
        Site-scoped queries for every domain guess, then the broad queries
    """
    exact_name = f'"{company_name.strip()}"'
    queries = [f"site:{domain} {exact_name}" for domain in generate_domain_guesses(company_name)]
    queries.extend(build_broad_query(company_name, term) for term in BROAD_QUERY_TERMS)
    return queries
