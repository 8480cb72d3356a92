"""Website enrichment data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

# Marker rendered into prompts whenever a website summary could not be produced
NOT_AVAILABLE_MARKER = "Website data not available"
ANALYSIS_FALLBACK_DESCRIPTION = "Could not analyze website"


class EnrichmentStatus(Enum):
    """Outcome of a website enrichment attempt."""

    OK = "ok"
    NO_URL = "no_url"  # Nothing to fetch
    UNAVAILABLE = "unavailable"  # Fetch or summarization failed


class FocusKind(Enum):
    """Which question a website summary answers."""

    CONTACT_BUSINESS = "contact_business"
    SELLER_OFFERINGS = "seller_offerings"


@dataclass
class EnrichmentResult:
    """A short business summary extracted from a website, or the reason there is none."""

    url: Optional[str]
    status: EnrichmentStatus
    summary: str = ""
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_available(self) -> bool:
        return self.status == EnrichmentStatus.OK and bool(self.summary)

    @property
    def prompt_text(self) -> str:
        """Summary for prompt inclusion, or the explicit not-available marker."""
        return self.summary if self.is_available else NOT_AVAILABLE_MARKER

    @classmethod
    def unavailable(cls, url: Optional[str], error_message: str) -> "EnrichmentResult":
        status = EnrichmentStatus.UNAVAILABLE if url else EnrichmentStatus.NO_URL
        return cls(url=url, status=status, error_message=error_message)

    def to_dict(self) -> dict:
        """Convert to dictionary for caching."""
        return {
            "url": self.url,
            "status": self.status.value,
            "summary": self.summary,
            "error_message": self.error_message,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EnrichmentResult":
        """Create from dictionary (cache retrieval)."""
        return cls(
            url=data.get("url"),
            status=EnrichmentStatus(data["status"]),
            summary=data.get("summary", ""),
            error_message=data.get("error_message"),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass
class WebsiteAnalysis:
    """Structured description of a company extracted from its website."""

    company_name: str = ""
    description: str = ANALYSIS_FALLBACK_DESCRIPTION
    products: list[str] = field(default_factory=list)
    target_audience: str = ""

    def to_dict(self) -> dict:
        return {
            "company_name": self.company_name,
            "description": self.description,
            "products": list(self.products),
            "target_audience": self.target_audience,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WebsiteAnalysis":
        products = data.get("products") or []
        if not isinstance(products, list):
            products = [products]
        return cls(
            company_name=str(data.get("company_name") or ""),
            description=str(data.get("description") or ANALYSIS_FALLBACK_DESCRIPTION),
            products=[str(p) for p in products if p],
            target_audience=str(data.get("target_audience") or ""),
        )
