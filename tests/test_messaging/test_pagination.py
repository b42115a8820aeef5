"""Tests for cursor pagination over top-level messages."""

import base64
from uuid import uuid4

import pytest

from teamthreads.auth.identity import ANONYMOUS
from teamthreads.db.models import MessageTypeEnum
from teamthreads.errors import AuthenticationError, InvalidCursorError, NotAParticipantError
from teamthreads.messaging.messages import delete_message
from teamthreads.messaging.pagination import (
    PaginationOptions,
    decode_cursor,
    encode_cursor,
    list_top_level_messages,
)


# ---------------------------------------------------------------------------
# Cursor encoding
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestCursor:
    """Tests for encode_cursor / decode_cursor."""

    def test_cursor_is_url_safe(self, base_time) -> None:
        cursor = encode_cursor(base_time, uuid4())
        assert "=" not in cursor
        assert "+" not in cursor and "/" not in cursor

    def test_decode_recovers_position(self, base_time) -> None:
        message_id = uuid4()
        assert decode_cursor(encode_cursor(base_time, message_id)) == (base_time, message_id)

    @pytest.mark.parametrize(
        "cursor",
        [
            "not base64 at all!",
            base64.urlsafe_b64encode(b"not json").decode(),
            base64.urlsafe_b64encode(b'{"t": "yesterday", "id": "x"}').decode(),
            base64.urlsafe_b64encode(b'{"id": "only-id"}').decode(),
            base64.urlsafe_b64encode(b"[1, 2]").decode(),
        ],
    )
    def test_malformed_cursor_rejected(self, cursor: str) -> None:
        with pytest.raises(InvalidCursorError):
            decode_cursor(cursor)


# ---------------------------------------------------------------------------
# list_top_level_messages
# ---------------------------------------------------------------------------


@pytest.fixture
async def chat(seed, base_time, minutes_after):
    """A thread with five top-level messages t1..t5, one minute apart."""
    admin = await seed.user(name="Ada")
    member = await seed.user(name="", email="bob@example.com")
    outsider = await seed.user()
    team = await seed.team(admin)
    await seed.member(team, member)
    thread = await seed.thread(team, admin=admin, participants=(member,))
    messages = {}
    for i in range(1, 6):
        messages[f"t{i}"] = await seed.message(
            thread, admin, f"t{i}", minutes_after(base_time, i)
        )
    return {
        "admin": admin,
        "member": member,
        "outsider": outsider,
        "thread": thread,
        "messages": messages,
    }


@pytest.mark.integration
class TestListTopLevelMessages:
    """Tests for list_top_level_messages."""

    async def test_pages_walk_newest_first_without_gaps(self, session, chat, as_caller) -> None:
        """Five messages at size 2 come back as [t5,t4], [t3,t2], [t1]."""
        caller = as_caller(chat["member"])
        thread_id = chat["thread"].id

        first = await list_top_level_messages(
            session, caller, thread_id, PaginationOptions(num_items=2)
        )
        second = await list_top_level_messages(
            session, caller, thread_id, PaginationOptions(2, first.continue_cursor)
        )
        third = await list_top_level_messages(
            session, caller, thread_id, PaginationOptions(2, second.continue_cursor)
        )

        assert [m.content for m in first.page] == ["t5", "t4"]
        assert [m.content for m in second.page] == ["t3", "t2"]
        assert [m.content for m in third.page] == ["t1"]
        assert (first.is_done, second.is_done, third.is_done) == (False, False, True)

    async def test_exact_fit_reports_done(self, session, chat, as_caller) -> None:
        page = await list_top_level_messages(
            session, as_caller(chat["admin"]), chat["thread"].id, PaginationOptions(5)
        )
        assert len(page.page) == 5
        assert page.is_done is True

    async def test_new_messages_do_not_shift_later_pages(
        self, session, seed, chat, as_caller, base_time, minutes_after
    ) -> None:
        caller = as_caller(chat["member"])
        thread = chat["thread"]
        first = await list_top_level_messages(session, caller, thread.id, PaginationOptions(2))

        await seed.message(thread, chat["admin"], "t6", minutes_after(base_time, 6))
        second = await list_top_level_messages(
            session, caller, thread.id, PaginationOptions(2, first.continue_cursor)
        )

        assert [m.content for m in second.page] == ["t3", "t2"]

    async def test_replies_nested_oldest_first_and_not_top_level(
        self, session, seed, chat, as_caller, base_time, minutes_after
    ) -> None:
        thread = chat["thread"]
        parent = chat["messages"]["t5"]
        await seed.message(
            thread, chat["member"], "second", minutes_after(base_time, 30), reply_to=parent
        )
        await seed.message(
            thread, chat["admin"], "first", minutes_after(base_time, 20), reply_to=parent
        )

        result = await list_top_level_messages(
            session, as_caller(chat["member"]), thread.id, PaginationOptions(10)
        )

        assert [m.content for m in result.page] == ["t5", "t4", "t3", "t2", "t1"]
        top = result.page[0]
        assert [r.content for r in top.replies] == ["first", "second"]
        assert [r.author_name for r in top.replies] == ["Ada", "bob@example.com"]
        assert all(m.replies == [] for m in result.page[1:])

    async def test_enriches_author_fields(
        self, session, seed, chat, as_caller, base_time, minutes_after
    ) -> None:
        thread = chat["thread"]
        await seed.message(
            thread,
            None,
            "bot says hi",
            minutes_after(base_time, 10),
            message_type=MessageTypeEnum.AI,
        )

        result = await list_top_level_messages(
            session, as_caller(chat["admin"]), thread.id, PaginationOptions(2)
        )

        ai_message, human_message = result.page
        assert ai_message.author_name == "AI Assistant"
        assert ai_message.author_email is None
        assert human_message.author_name == "Ada"
        assert human_message.author_email == chat["admin"].email

    async def test_empty_page_keeps_cursor(self, session, chat, as_caller) -> None:
        caller = as_caller(chat["member"])
        thread_id = chat["thread"].id
        everything = await list_top_level_messages(
            session, caller, thread_id, PaginationOptions(5)
        )

        after_end = await list_top_level_messages(
            session, caller, thread_id, PaginationOptions(5, everything.continue_cursor)
        )

        assert after_end.page == []
        assert after_end.is_done is True
        assert after_end.continue_cursor == everything.continue_cursor

    async def test_non_participant_rejected(self, session, chat, as_caller) -> None:
        with pytest.raises(NotAParticipantError):
            await list_top_level_messages(
                session, as_caller(chat["outsider"]), chat["thread"].id, PaginationOptions(2)
            )

    async def test_anonymous_rejected(self, session, chat) -> None:
        with pytest.raises(AuthenticationError):
            await list_top_level_messages(
                session, ANONYMOUS, chat["thread"].id, PaginationOptions(2)
            )

    async def test_non_positive_page_size_rejected(self, session, chat, as_caller) -> None:
        with pytest.raises(ValueError):
            await list_top_level_messages(
                session, as_caller(chat["admin"]), chat["thread"].id, PaginationOptions(0)
            )

    async def test_malformed_cursor_rejected(self, session, chat, as_caller) -> None:
        with pytest.raises(InvalidCursorError):
            await list_top_level_messages(
                session,
                as_caller(chat["admin"]),
                chat["thread"].id,
                PaginationOptions(2, "garbage"),
            )

    async def test_admin_deletion_removes_parent_and_reply_from_next_read(
        self, session, seed, chat, as_caller, base_time, minutes_after
    ) -> None:
        thread = chat["thread"]
        parent = await seed.message(
            thread, chat["member"], "by member", minutes_after(base_time, 10)
        )
        await seed.message(
            thread, chat["member"], "reply", minutes_after(base_time, 11), reply_to=parent
        )

        await delete_message(session, as_caller(chat["admin"]), parent.id)
        result = await list_top_level_messages(
            session, as_caller(chat["member"]), thread.id, PaginationOptions(10)
        )

        contents = [m.content for m in result.page]
        assert "by member" not in contents
        assert all(r.content != "reply" for m in result.page for r in m.replies)
        assert len(result.page) == 5
