import logging
from typing import Any, Mapping, Optional

from app.models.notification_model import Notification, NotificationType
from app.storage import Storage

logger = logging.getLogger(__name__)


async def notify(
    storage: Storage,
    recipient_id: int,
    actor_id: Optional[int],
    type: NotificationType,
    message: str,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Optional[Notification]:
    """Queue one notification for ``recipient_id`` unless they caused it themselves.

    The row is flushed with the caller's transaction; the caller commits.
    """
    if actor_id is not None and actor_id == recipient_id:
        return None
    notification = await storage.create_notification(recipient_id, type, message, metadata)
    logger.debug("Notification %s (%s) -> user %s", notification.id, type.value, recipient_id)
    return notification
