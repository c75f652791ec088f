"""ORM models — importing this package registers every table on ``Base.metadata``."""

from __future__ import annotations

from push_dispatch.models.base import Base
from push_dispatch.models.token import TOKENS_TABLE, NotificationToken, TokenStatus

__all__ = ["TOKENS_TABLE", "Base", "NotificationToken", "TokenStatus"]
