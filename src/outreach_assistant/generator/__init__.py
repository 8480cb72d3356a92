"""Message generation components."""

from outreach_assistant.generator.client import GenerationClient
from outreach_assistant.generator.message_generator import MessageGenerator
from outreach_assistant.generator.prompt_composer import PromptComposer
from outreach_assistant.generator.response_parser import ResponseParser
from outreach_assistant.generator.session_recorder import SessionRecorder

__all__ = [
    "GenerationClient",
    "MessageGenerator",
    "PromptComposer",
    "ResponseParser",
    "SessionRecorder",
]
