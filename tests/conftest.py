import json
from unittest.mock import AsyncMock, Mock

import pytest

from outreach_assistant.config import Settings
from outreach_assistant.models.contact import ContactProfile, SellerProfile
from outreach_assistant.models.message import GenerationRequest
from outreach_assistant.storage.protocols import QuotaStatus

FOUR_VARIANTS = [
    {"variant": "direct", "content": "Hi Dana, can we book 15 minutes this week?", "matchReason": "Clear ask"},
    {"variant": "value", "content": "Field teams lose hours to rescheduling.", "matchReason": "Pain first"},
    {"variant": "curiosity", "content": "How do your techs handle same-day changes?", "matchReason": "Question"},
    {"variant": "relationship", "content": "Loved the Acme robotics launch post.", "matchReason": "Warm"},
]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        db_path=tmp_path / "outreach.db",
        rate_limit_requests_per_second=100.0,
        fetch_timeout_seconds=1.0,
    )


@pytest.fixture
def four_variants_json():
    return json.dumps(FOUR_VARIANTS)


@pytest.fixture
def stub_client(four_variants_json):
    """Backend stub returning four well-formed variants."""
    client = Mock()
    client.complete = AsyncMock(return_value=four_variants_json)
    return client


@pytest.fixture
def quota():
    gate = Mock()
    gate.check_quota = AsyncMock(return_value=QuotaStatus(allowed=True, used=0, limit=10))
    gate.increment_usage = AsyncMock(return_value=None)
    return gate


@pytest.fixture
def message_store():
    store = Mock()
    store.insert_message_variants = AsyncMock(return_value=None)
    return store


@pytest.fixture
def dana():
    return ContactProfile(name="Dana Lee", company="Acme Robotics", title="VP Eng", website=None)


@pytest.fixture
def tool_co():
    return SellerProfile(company="Tool Co", product_description="Scheduling software for field teams")


@pytest.fixture
def cold_email_request(dana, tool_co):
    return GenerationRequest(
        contact=dana,
        seller=tool_co,
        communications="",
        channel="email",
        objective="book a 15-minute call",
        tone="professional",
        contact_id="contact-1",
    )
