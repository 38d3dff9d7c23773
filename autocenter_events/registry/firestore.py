"""Firestore token registry — the device_tokens collection written by client registration."""

from __future__ import annotations

from typing import Any

from google.cloud.firestore_v1.base_query import FieldFilter

from autocenter_events.envelope import RecipientQuery, RecipientToken
from autocenter_events.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_PLATFORM = "web_pwa"


class FirestoreTokenRegistry:
    """Reads and prunes tokens through an async Firestore client.

    Document ids are the push tokens themselves; ``role`` and ``username`` are
    document fields.
    """

    def __init__(self, client: Any, collection: str = "device_tokens") -> None:
        self._client = client
        self._collection = collection

    @classmethod
    def from_app(cls, app: Any = None, collection: str = "device_tokens") -> "FirestoreTokenRegistry":
        from firebase_admin import firestore_async

        return cls(firestore_async.client(app), collection)

    async def query(self, query: RecipientQuery) -> list[RecipientToken]:
        if not query.roles:
            return []
        ref = self._client.collection(self._collection)
        if len(query.roles) == 1:
            q = ref.where(filter=FieldFilter("role", "==", query.roles[0]))
        else:
            q = ref.where(filter=FieldFilter("role", "in", list(query.roles)))
        if query.username is not None:
            q = q.where(filter=FieldFilter("username", "==", query.username))

        tokens: list[RecipientToken] = []
        async for doc in q.stream():
            data = doc.to_dict() or {}
            tokens.append(
                RecipientToken(
                    token=doc.id,
                    role=str(data.get("role", "")),
                    username=data.get("username"),
                    platform=data.get("platform") or DEFAULT_PLATFORM,
                )
            )
        logger.debug("registry query", collection=self._collection, roles=query.roles, count=len(tokens))
        return tokens

    async def delete(self, token: str) -> None:
        # Firestore treats deleting a missing document as success.
        await self._client.collection(self._collection).document(token).delete()
