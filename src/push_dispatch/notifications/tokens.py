"""Token store — reset, selection and state updates on ``notifications_tokens``.

Each function opens its own session and commits on its own; nothing here
spans a transaction across calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select, update

from push_dispatch.models.token import NotificationToken, TokenStatus

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from push_dispatch.datastore.client import Datastore

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_PREFIXES = ("ExponentPushToken",)


def is_push_token(token: str | None, prefixes: Iterable[str] = DEFAULT_TOKEN_PREFIXES) -> bool:
    """Return True if *token* looks like a token issued by a known provider."""
    if not token:
        return False
    return token.startswith(tuple(prefixes))


async def reset_tokens(datastore: Datastore, log: logging.Logger = logger) -> int:
    """Mark every tracked token as not notified.

    Returns:
        Number of rows touched.
    """
    async with datastore.session() as session:
        result = await session.execute(update(NotificationToken).values(notified=False))
        await session.commit()
    log.info("Reset notified flag on all tokens (%d rows)", result.rowcount)
    return result.rowcount


async def select_valid_tokens(
    datastore: Datastore,
    log: logging.Logger = logger,
    *,
    prefixes: Iterable[str] = DEFAULT_TOKEN_PREFIXES,
) -> list[str]:
    """Return distinct published test tokens with a recognised provider prefix.

    Order follows the query result; an empty list means there is nothing to send.
    """
    prefixes = tuple(prefixes)
    stmt = select(NotificationToken.push_token).where(
        NotificationToken.is_for_test.is_(True),
        NotificationToken.status == TokenStatus.PUBLISHED.value,
    )
    async with datastore.session() as session:
        rows = (await session.execute(stmt)).scalars().all()

    tokens = list(dict.fromkeys(t for t in rows if is_push_token(t, prefixes)))
    log.info("%d valid tokens found", len(tokens))
    return tokens


async def mark_tokens_notified(
    datastore: Datastore, tokens: Collection[str], log: logging.Logger = logger
) -> int:
    """Set ``notified = true`` for the given tokens. Returns rows updated."""
    if not tokens:
        return 0
    stmt = (
        update(NotificationToken)
        .where(NotificationToken.push_token.in_(list(tokens)))
        .values(notified=True)
    )
    async with datastore.session() as session:
        result = await session.execute(stmt)
        await session.commit()
    log.debug("Set notified on %d of %d tokens", result.rowcount, len(tokens))
    return result.rowcount


async def mark_tokens_invalid(
    datastore: Datastore, tokens: Collection[str], log: logging.Logger = logger
) -> int:
    """Demote the given tokens to ``draft`` and clear ``notified``. Returns rows updated."""
    if not tokens:
        return 0
    stmt = (
        update(NotificationToken)
        .where(NotificationToken.push_token.in_(list(tokens)))
        .values(notified=False, status=TokenStatus.DRAFT.value)
    )
    async with datastore.session() as session:
        result = await session.execute(stmt)
        await session.commit()
    log.debug("Demoted %d of %d tokens to draft", result.rowcount, len(tokens))
    return result.rowcount
