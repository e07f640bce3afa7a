"""Company Website Resolver

A tool for locating the probable official website of Brazilian companies
by querying Google Custom Search, filtering and ranking the results, and
falling back to guessed domains when search finds nothing.
"""

__version__ = "0.1.0"
__description__ = "Automated official website resolution for company names"
