"""Threaded messaging: participant guard, message store, and pagination."""

from teamthreads.messaging.display import author_display_name
from teamthreads.messaging.messages import (
    delete_message,
    edit_message,
    send_message,
    send_system_message,
)
from teamthreads.messaging.pagination import (
    MessagePage,
    PaginationOptions,
    Reply,
    TopLevelMessage,
    list_top_level_messages,
)
from teamthreads.messaging.participants import get_participant, require_participant
from teamthreads.messaging.threads import (
    add_thread_participant,
    archive_thread,
    create_team_thread,
    mark_thread_as_read,
)

__all__ = [
    "MessagePage",
    "PaginationOptions",
    "Reply",
    "TopLevelMessage",
    "add_thread_participant",
    "archive_thread",
    "author_display_name",
    "create_team_thread",
    "delete_message",
    "edit_message",
    "get_participant",
    "list_top_level_messages",
    "mark_thread_as_read",
    "require_participant",
    "send_message",
    "send_system_message",
]
