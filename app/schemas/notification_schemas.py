from datetime import datetime
from typing import Any, Dict

from app.models.notification_model import NotificationType
from app.schemas.base import CamelModel


class NotificationOut(CamelModel):
    id: int
    user_id: int
    type: NotificationType
    message: str
    is_read: bool = False
    metadata: Dict[str, Any] = {}
    created_at: datetime

    @classmethod
    def from_model(cls, n) -> "NotificationOut":
        # the ORM attribute is ``meta``; ``metadata`` on a model is the table registry
        return cls(
            id=n.id,
            user_id=n.user_id,
            type=n.type,
            message=n.message,
            is_read=bool(n.is_read),
            metadata=dict(n.meta or {}),
            created_at=n.created_at,
        )


class MarkAllReadOut(CamelModel):
    updated: int
