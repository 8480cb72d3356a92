"""AI-assisted outreach message drafting."""

__version__ = "0.1.0"
