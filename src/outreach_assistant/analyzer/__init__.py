"""Website enrichment."""

from outreach_assistant.analyzer.context_analyzer import ContextEnricher

__all__ = ["ContextEnricher"]
