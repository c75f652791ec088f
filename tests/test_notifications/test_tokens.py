"""Tests for token store operations against in-memory SQLite."""

from __future__ import annotations

import logging

import pytest

from push_dispatch.models import TokenStatus
from push_dispatch.notifications.tokens import (
    is_push_token,
    mark_tokens_invalid,
    mark_tokens_notified,
    reset_tokens,
    select_valid_tokens,
)

PUBLISHED = TokenStatus.PUBLISHED
DRAFT = TokenStatus.DRAFT


class TestIsPushToken:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("ExponentPushToken[abc]", True),
            ("ExponentPushTokenXYZ", True),
            ("ExpoPushToken[abc]", False),
            ("fcm:abc", False),
            ("", False),
            (None, False),
        ],
    )
    def test_default_prefix(self, token, expected) -> None:
        assert is_push_token(token) is expected

    def test_custom_prefixes(self) -> None:
        assert is_push_token("ExpoPushToken[a]", ["ExpoPushToken", "ExponentPushToken"])


class TestResetTokens:
    async def test_clears_notified_on_all_rows(self, datastore, seed_tokens, load_token) -> None:
        await seed_tokens(
            ("ExponentPushToken[1]", PUBLISHED, True, True),
            ("ExponentPushToken[2]", DRAFT, False, True),
            ("garbage", PUBLISHED, True, True),
            ("ExponentPushToken[4]", PUBLISHED, False, False),
        )

        touched = await reset_tokens(datastore)

        assert touched == 4
        for token in ("ExponentPushToken[1]", "ExponentPushToken[2]", "garbage"):
            row = await load_token(token)
            assert row.notified is False

    async def test_empty_table(self, datastore) -> None:
        assert await reset_tokens(datastore) == 0

    async def test_uses_injected_logger(self, datastore, caplog) -> None:
        log = logging.getLogger("push_dispatch.test.run")
        with caplog.at_level(logging.INFO, logger="push_dispatch.test.run"):
            await reset_tokens(datastore, log)
        assert any(r.name == "push_dispatch.test.run" for r in caplog.records)


class TestSelectValidTokens:
    async def test_filters_status_test_flag_and_prefix(self, datastore, seed_tokens) -> None:
        await seed_tokens(
            ("ExponentPushToken[ok-1]", PUBLISHED, True),
            ("ExponentPushToken[ok-2]", PUBLISHED, True),
            ("ExponentPushToken[draft]", DRAFT, True),
            ("ExponentPushToken[not-test]", PUBLISHED, False),
            ("ExponentPushToken[archived]", TokenStatus.ARCHIVED, True),
            ("apns-device-token", PUBLISHED, True),
        )

        tokens = await select_valid_tokens(datastore)

        assert set(tokens) == {"ExponentPushToken[ok-1]", "ExponentPushToken[ok-2]"}
        assert len(tokens) == len(set(tokens))

    async def test_empty_result(self, datastore, seed_tokens) -> None:
        await seed_tokens(("ExponentPushToken[draft]", DRAFT, True))
        assert await select_valid_tokens(datastore) == []

    async def test_custom_prefixes(self, datastore, seed_tokens) -> None:
        await seed_tokens(
            ("ExpoPushToken[new]", PUBLISHED, True),
            ("ExponentPushToken[old]", PUBLISHED, True),
        )
        tokens = await select_valid_tokens(datastore, prefixes=["ExpoPushToken"])
        assert tokens == ["ExpoPushToken[new]"]


class TestMarkTokens:
    async def test_mark_notified(self, datastore, seed_tokens, load_token) -> None:
        await seed_tokens(
            ("ExponentPushToken[A]", PUBLISHED, True),
            ("ExponentPushToken[B]", PUBLISHED, True),
            ("ExponentPushToken[C]", PUBLISHED, True),
        )

        updated = await mark_tokens_notified(
            datastore, ["ExponentPushToken[A]", "ExponentPushToken[B]"]
        )

        assert updated == 2
        assert (await load_token("ExponentPushToken[A]")).notified is True
        assert (await load_token("ExponentPushToken[B]")).notified is True
        assert (await load_token("ExponentPushToken[C]")).notified is False

    async def test_mark_invalid(self, datastore, seed_tokens, load_token) -> None:
        await seed_tokens(
            ("ExponentPushToken[A]", PUBLISHED, True, True),
            ("ExponentPushToken[B]", PUBLISHED, True, True),
        )

        updated = await mark_tokens_invalid(datastore, {"ExponentPushToken[A]"})

        assert updated == 1
        row = await load_token("ExponentPushToken[A]")
        assert row.notified is False
        assert row.status == "draft"
        untouched = await load_token("ExponentPushToken[B]")
        assert untouched.status == "published"
        assert untouched.notified is True

    async def test_empty_input_is_noop(self, datastore) -> None:
        assert await mark_tokens_notified(datastore, []) == 0
        assert await mark_tokens_invalid(datastore, set()) == 0

    async def test_updates_log_to_injected_logger(self, datastore, seed_tokens, caplog) -> None:
        await seed_tokens(
            ("ExponentPushToken[A]", PUBLISHED, True),
            ("ExponentPushToken[B]", PUBLISHED, True),
        )
        log = logging.getLogger("push_dispatch.test.run")

        with caplog.at_level(logging.DEBUG, logger=log.name):
            await mark_tokens_notified(datastore, ["ExponentPushToken[A]"], log)
            await mark_tokens_invalid(datastore, ["ExponentPushToken[B]"], log)

        messages = [r.getMessage() for r in caplog.records if r.name == log.name]
        assert messages == [
            "Set notified on 1 of 1 tokens",
            "Demoted 1 of 1 tokens to draft",
        ]
