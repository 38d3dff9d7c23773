"""Token registry contract."""

from __future__ import annotations

from typing import Protocol

from autocenter_events.envelope import RecipientQuery, RecipientToken


class TokenRegistry(Protocol):
    """Queryable store of recipient tokens, keyed by the token string.

    ``delete`` must tolerate keys that are already gone.
    """

    async def query(self, query: RecipientQuery) -> list[RecipientToken]: ...

    async def delete(self, token: str) -> None: ...
