"""Contact and seller profile data models."""

from dataclasses import asdict, dataclass
from typing import Optional


def _get_field(data: dict, names: list[str]) -> Optional[str]:
    """Return the first non-empty value among several possible key spellings."""
    for name in names:
        if name in data and data[name]:
            return str(data[name]).strip()
        # Try case-insensitive match
        for key in data:
            if key.lower() == name.lower() and data[key]:
                return str(data[key]).strip()
    return None


@dataclass(frozen=True)
class ContactProfile:
    """The person a message is being written for."""

    name: str
    title: Optional[str] = None
    company: Optional[str] = None
    website: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None
    funnel_stage: Optional[str] = None
    relationship_goal: Optional[str] = None
    id: Optional[str] = None

    @property
    def domain(self) -> Optional[str]:
        """Extract domain from website URL."""
        if not self.website:
            return None
        url = self.website.lower()
        # Remove protocol
        if "://" in url:
            url = url.split("://", 1)[1]
        # Remove path
        url = url.split("/", 1)[0]
        # Remove www prefix
        if url.startswith("www."):
            url = url[4:]
        return url

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ContactProfile":
        """Create a ContactProfile from a loosely keyed dictionary."""
        return cls(
            name=_get_field(data, ["name", "full_name", "Name"]) or "",
            title=_get_field(data, ["title", "job_title", "position"]),
            company=_get_field(data, ["company", "organization"]),
            website=_get_field(data, ["website", "url", "domain"]),
            linkedin_url=_get_field(data, ["linkedin_url", "linkedinUrl", "linkedin"]),
            notes=_get_field(data, ["notes"]),
            funnel_stage=_get_field(data, ["funnel_stage", "funnelStage", "stage"]),
            relationship_goal=_get_field(data, ["relationship_goal", "relationshipGoal", "goal"]),
            id=_get_field(data, ["id", "contact_id", "contactId"]),
        )


@dataclass(frozen=True)
class SellerProfile:
    """The sender's own company and what it sells."""

    company: Optional[str] = None
    website: Optional[str] = None
    products_url: Optional[str] = None
    product_description: Optional[str] = None

    @property
    def needs_offerings_analysis(self) -> bool:
        """True when offerings must be derived from the products page."""
        return not self.product_description and bool(self.products_url)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SellerProfile":
        """Create a SellerProfile from a loosely keyed dictionary."""
        return cls(
            company=_get_field(data, ["company", "company_name", "companyName"]),
            website=_get_field(data, ["website", "url"]),
            products_url=_get_field(data, ["products_url", "productsUrl"]),
            product_description=_get_field(
                data, ["product_description", "productDescription", "description"]
            ),
        )
