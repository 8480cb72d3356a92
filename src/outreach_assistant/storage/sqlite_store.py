"""SQLite store for contacts, generated messages, usage quotas and enrichment cache."""

import json
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import aiosqlite

from outreach_assistant.config import Settings, get_settings
from outreach_assistant.models.contact import ContactProfile
from outreach_assistant.models.context import EnrichmentResult, FocusKind
from outreach_assistant.models.message import MessageRecord
from outreach_assistant.storage.protocols import QuotaStatus

# Per-month limits by subscription tier
TIER_LIMITS = {
    "free": {"messages": 10, "contacts": 25},
    "starter": {"messages": 50, "contacts": 100},
    "professional": {"messages": 200, "contacts": 500},
    "enterprise": {"messages": 1000, "contacts": 5000},
}
DEFAULT_TIER = "free"


class SQLiteStore:
    """SQLite-backed implementation of the contact, message and quota stores."""

    def __init__(self, db_path: Optional[Path] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.db_path = Path(db_path or settings.db_path)
        self.ttl_days = settings.cache_ttl_days
        self._db: Optional[aiosqlite.Connection] = None

    async def __aenter__(self) -> "SQLiteStore":
        """Enter async context and initialize database."""
        # Ensure directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._db = await aiosqlite.connect(self.db_path)
        await self._init_tables()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context."""
        if self._db:
            await self._db.close()

    async def _init_tables(self):
        """Create database tables if they don't exist."""
        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS contacts (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                data TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS communications (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                contact_id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                channel TEXT NOT NULL,
                direction TEXT NOT NULL,
                content TEXT NOT NULL,
                sent_at TEXT NOT NULL
            )
        """)

        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS generated_messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                session_id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                contact_id TEXT,
                channel TEXT NOT NULL,
                tone TEXT NOT NULL,
                variant TEXT NOT NULL,
                content TEXT NOT NULL,
                product_pitched TEXT,
                match_reason TEXT,
                buyer_context TEXT,
                seller_context TEXT,
                created_at TEXT NOT NULL
            )
        """)

        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS usage (
                user_id TEXT NOT NULL,
                resource_kind TEXT NOT NULL,
                period TEXT NOT NULL,
                count INTEGER NOT NULL,
                PRIMARY KEY (user_id, resource_kind, period)
            )
        """)

        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS user_plans (
                user_id TEXT PRIMARY KEY,
                tier TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        await self._db.execute("""
            CREATE TABLE IF NOT EXISTS enrichment_cache (
                url TEXT NOT NULL,
                kind TEXT NOT NULL,
                data TEXT NOT NULL,
                created_at TEXT NOT NULL,
                PRIMARY KEY (url, kind)
            )
        """)

        await self._db.commit()

    # Contact methods

    async def add_contact(self, user_id: str, contact: ContactProfile) -> str:
        """Store a contact and return its id."""
        contact_id = contact.id or uuid.uuid4().hex
        data = contact.to_dict()
        data["id"] = contact_id
        await self._db.execute(
            """
            INSERT OR REPLACE INTO contacts (id, user_id, data, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (contact_id, user_id, json.dumps(data), datetime.utcnow().isoformat()),
        )
        await self._db.commit()
        return contact_id

    async def get_contact(self, user_id: str, contact_id: str) -> Optional[ContactProfile]:
        """Get a contact owned by the user."""
        cursor = await self._db.execute(
            "SELECT data FROM contacts WHERE id = ? AND user_id = ?",
            (contact_id, user_id),
        )
        row = await cursor.fetchone()
        return ContactProfile.from_dict(json.loads(row[0])) if row else None

    async def list_contacts(self, user_id: str) -> list[ContactProfile]:
        cursor = await self._db.execute(
            "SELECT data FROM contacts WHERE user_id = ? ORDER BY created_at, rowid",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [ContactProfile.from_dict(json.loads(row[0])) for row in rows]

    # Communication history methods

    async def log_communication(
        self,
        user_id: str,
        contact_id: str,
        content: str,
        channel: str = "other",
        direction: str = "outbound",
        sent_at: Optional[datetime] = None,
    ):
        """Record one exchange with a contact."""
        await self._db.execute(
            """
            INSERT INTO communications (contact_id, user_id, channel, direction, content, sent_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                contact_id,
                user_id,
                channel,
                direction,
                content,
                (sent_at or datetime.utcnow()).isoformat(),
            ),
        )
        await self._db.commit()

    async def get_communication_history(self, user_id: str, contact_id: str) -> str:
        """
        Get the contact's history as one text block, oldest first.

        Returns an empty string when there has been no contact yet.
        """
        cursor = await self._db.execute(
            """
            SELECT channel, direction, content, sent_at FROM communications
            WHERE contact_id = ? AND user_id = ?
            ORDER BY sent_at, id
            """,
            (contact_id, user_id),
        )
        rows = await cursor.fetchall()
        lines = []
        for channel, direction, content, sent_at in rows:
            day = sent_at[:10]
            lines.append(f"[{day} {direction} via {channel}] {content}")
        return "\n".join(lines)

    # Generated message methods

    async def insert_message_variants(self, records: list[MessageRecord]):
        """Save all variants of a session in one transaction."""
        await self._db.executemany(
            """
            INSERT INTO generated_messages (
                session_id, user_id, contact_id, channel, tone, variant, content,
                product_pitched, match_reason, buyer_context, seller_context, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    r.session_id,
                    r.user_id,
                    r.contact_id,
                    r.channel,
                    r.tone,
                    r.variant,
                    r.content,
                    r.product_pitched,
                    r.match_reason,
                    r.buyer_context,
                    r.seller_context,
                    r.created_at.isoformat(),
                )
                for r in records
            ],
        )
        await self._db.commit()

    async def get_recent_messages(self, user_id: str, limit: int = 50) -> list[dict]:
        """Get the user's most recently generated messages, newest first."""
        cursor = await self._db.execute(
            """
            SELECT session_id, contact_id, channel, tone, variant, content, created_at
            FROM generated_messages WHERE user_id = ?
            ORDER BY created_at DESC, id DESC LIMIT ?
            """,
            (user_id, limit),
        )
        rows = await cursor.fetchall()
        columns = ["session_id", "contact_id", "channel", "tone", "variant", "content", "created_at"]
        return [dict(zip(columns, row)) for row in rows]

    async def get_session_messages(self, session_id: str) -> list[dict]:
        cursor = await self._db.execute(
            "SELECT variant, content, match_reason FROM generated_messages WHERE session_id = ? ORDER BY id",
            (session_id,),
        )
        rows = await cursor.fetchall()
        return [
            {"variant": variant, "content": content, "match_reason": reason}
            for variant, content, reason in rows
        ]

    # Plan and quota methods

    async def set_plan(self, user_id: str, tier: str):
        """Assign a subscription tier to a user."""
        if tier not in TIER_LIMITS:
            raise ValueError(f"Unknown tier: {tier}")
        await self._db.execute(
            "INSERT OR REPLACE INTO user_plans (user_id, tier, updated_at) VALUES (?, ?, ?)",
            (user_id, tier, datetime.utcnow().isoformat()),
        )
        await self._db.commit()

    async def get_plan(self, user_id: str) -> str:
        cursor = await self._db.execute(
            "SELECT tier FROM user_plans WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return row[0] if row else DEFAULT_TIER

    async def get_usage(self, user_id: str, resource_kind: str) -> int:
        """Get this period's usage count."""
        cursor = await self._db.execute(
            "SELECT count FROM usage WHERE user_id = ? AND resource_kind = ? AND period = ?",
            (user_id, resource_kind, self._current_period()),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def check_quota(self, user_id: str, resource_kind: str) -> QuotaStatus:
        tier = await self.get_plan(user_id)
        limit = TIER_LIMITS[tier].get(resource_kind, 0)
        used = await self.get_usage(user_id, resource_kind)
        return QuotaStatus(allowed=used < limit, used=used, limit=limit)

    async def increment_usage(self, user_id: str, resource_kind: str):
        await self._db.execute(
            """
            INSERT INTO usage (user_id, resource_kind, period, count) VALUES (?, ?, ?, 1)
            ON CONFLICT (user_id, resource_kind, period) DO UPDATE SET count = count + 1
            """,
            (user_id, resource_kind, self._current_period()),
        )
        await self._db.commit()

    def _current_period(self) -> str:
        return datetime.utcnow().strftime("%Y-%m")

    # Enrichment cache methods

    async def get_enrichment(self, url: str, kind: FocusKind) -> Optional[EnrichmentResult]:
        """
        Get a cached summary if not expired.

        Returns:
            EnrichmentResult if found and valid, None otherwise.
        """
        cursor = await self._db.execute(
            "SELECT data, created_at FROM enrichment_cache WHERE url = ? AND kind = ?",
            (url.lower(), kind.value),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        data_json, created_at_str = row
        created_at = datetime.fromisoformat(created_at_str)

        # Check TTL
        if datetime.utcnow() - created_at > timedelta(days=self.ttl_days):
            # Cache expired, delete it
            await self._db.execute(
                "DELETE FROM enrichment_cache WHERE url = ? AND kind = ?",
                (url.lower(), kind.value),
            )
            await self._db.commit()
            return None

        return EnrichmentResult.from_dict(json.loads(data_json))

    async def set_enrichment(self, kind: FocusKind, result: EnrichmentResult):
        """Cache a summary."""
        await self._db.execute(
            """
            INSERT OR REPLACE INTO enrichment_cache (url, kind, data, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (
                (result.url or "").lower(),
                kind.value,
                json.dumps(result.to_dict()),
                result.created_at.isoformat(),
            ),
        )
        await self._db.commit()

    # Utility methods

    async def clear_enrichment_cache(self):
        """Clear all cached summaries."""
        await self._db.execute("DELETE FROM enrichment_cache")
        await self._db.commit()

    async def clear_expired(self):
        """Remove expired cache entries."""
        expiry_date = datetime.utcnow() - timedelta(days=self.ttl_days)
        await self._db.execute(
            "DELETE FROM enrichment_cache WHERE created_at < ?",
            (expiry_date.isoformat(),),
        )
        await self._db.commit()

    async def get_stats(self) -> dict:
        """Get store statistics."""
        cursor = await self._db.execute("SELECT COUNT(*) FROM contacts")
        contact_count = (await cursor.fetchone())[0]

        cursor = await self._db.execute("SELECT COUNT(*) FROM generated_messages")
        message_count = (await cursor.fetchone())[0]

        cursor = await self._db.execute("SELECT COUNT(DISTINCT session_id) FROM generated_messages")
        session_count = (await cursor.fetchone())[0]

        cursor = await self._db.execute("SELECT COUNT(*) FROM enrichment_cache")
        cached_count = (await cursor.fetchone())[0]

        return {
            "contacts": contact_count,
            "generated_messages": message_count,
            "sessions": session_count,
            "cached_summaries": cached_count,
        }
