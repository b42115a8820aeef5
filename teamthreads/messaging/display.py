"""Author display names for messages returned to callers."""

from typing import Optional, Union

from teamthreads.db.models.thread import MessageTypeEnum
from teamthreads.db.models.user import UserORM

ANONYMOUS_NAME = "Anonymous"
AI_ASSISTANT_NAME = "AI Assistant"
SYSTEM_NAME = "System"


def user_display_name(user: UserORM) -> str:
    # name, then email, then phone; empty strings count as missing
    return user.name or user.email or user.phone or ANONYMOUS_NAME


def author_display_name(
    message_type: Union[MessageTypeEnum, str],
    author: Optional[UserORM],
) -> str:
    """Resolve the display name shown next to a message.

    AI and system messages get fixed labels. A text message whose author
    can no longer be found is shown as anonymous rather than failing.

    Args:
        message_type: The message's type.
        author: The loaded author, or None if absent or deleted.

    Returns:
        The name to display.
    """
    if author is not None:
        return user_display_name(author)
    if message_type == MessageTypeEnum.AI:
        return AI_ASSISTANT_NAME
    if message_type == MessageTypeEnum.SYSTEM:
        return SYSTEM_NAME
    return ANONYMOUS_NAME
