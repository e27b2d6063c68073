"""
Notifications router.

Workout transitions, level-ups, achievements and failed saves leave
notifications in a per-user outbox. The client polls this endpoint and
shows them as toasts; reading drains the outbox.
"""

from fastapi import APIRouter, Depends

from api.deps import get_current_user, get_notification_outbox
from api.schemas.profile import NotificationListResponse, NotificationResponse
from backend.services.notifications import NotificationOutbox

router = APIRouter(
    tags=["Notifications"],
)


@router.get("/notifications", response_model=NotificationListResponse)
def drain_notifications(
    user_id: str = Depends(get_current_user),
    outbox: NotificationOutbox = Depends(get_notification_outbox),
):
    """Return and clear the caller's pending notifications, oldest first."""
    return NotificationListResponse(
        notifications=[
            NotificationResponse(
                id=n.id,
                title=n.title,
                message=n.message,
                variant=n.variant,
                created_at=n.created_at,
            )
            for n in outbox.drain(user_id)
        ]
    )
