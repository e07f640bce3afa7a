"""Data models for the Company Website Resolver."""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any


STATUS_COMPLETE = "complete"
STATUS_ERROR = "error"

DEFAULT_COMPANY_COLUMN = "empresa"
COMPANY_COLUMN_ALIASES = ('empresa', 'company', 'company_name', 'companyname')


@dataclass(frozen=True)
class CompanyRecord:
    """Represents one company row from the input spreadsheet."""
    name: str
    # Remaining columns are carried through to the output untouched
    extra_data: Dict[str, Any] = field(default_factory=dict)
    # Header the name was read from and the source column order
    name_column: str = DEFAULT_COMPANY_COLUMN
    columns: Tuple[str, ...] = ()

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'CompanyRecord':
        """Create CompanyRecord from a spreadsheet row.

        Args:
            row: Dictionary representing the row, keyed by column name

        Returns:
            CompanyRecord instance

        Raises:
            ValueError: If the row has no usable company name
        """
        normalized = {str(key).strip().lower(): key for key in row}
        name_key = None
        for alias in COMPANY_COLUMN_ALIASES:
            if alias in normalized:
                name_key = normalized[alias]
                break

        if name_key is None:
            raise ValueError("Row has no company name column")

        value = row[name_key]
        name = value.strip() if isinstance(value, str) else ''
        if not name:
            raise ValueError("Company name is empty")

        extra_data = {k: v for k, v in row.items() if k != name_key}
        return cls(name=name, extra_data=extra_data, name_column=name_key, columns=tuple(row))


@dataclass(frozen=True)
class RawSearchItem:
    """A single item as returned by the search API."""
    title: str
    link: str
    snippet: str = ''


@dataclass(frozen=True)
class CandidateResult:
    """A search result or probed URL considered as the company website."""
    title: str
    link: str
    snippet: str
    domain: str  # hostname without leading "www."


@dataclass(frozen=True)
class ScoredCandidate:
    """Candidate with its relevance score. Only used inside the ranker."""
    candidate: CandidateResult
    score: int
    position: int


@dataclass(frozen=True)
class ResolutionOutcome:
    """Final result of resolving one company."""
    company_name: str
    links: Tuple[CandidateResult, ...] = ()
    status: str = STATUS_COMPLETE
    message: Optional[str] = None

    def __post_init__(self):
        """Validate status value."""
        if self.status not in (STATUS_COMPLETE, STATUS_ERROR):
            raise ValueError(f"Invalid resolution status: {self.status}")

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR

    @property
    def best_link(self) -> Optional[str]:
        """Top-ranked link, if any."""
        return self.links[0].link if self.links else None
