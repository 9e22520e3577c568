# FILE: medicare/api/routes_notifications.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medicare.api.deps import CurrentUser, current_user, get_db
from medicare.api.emr_router_utils import get_or_404
from medicare.api.response import ok
from medicare.core import rbac
from medicare.crud import collections
from medicare.schemas.emr import NotificationCreate, NotificationUpdate

router = APIRouter()


def _own_or_allowed(me: CurrentUser, notification, action: str) -> None:
    """Owners reach their own; everyone else goes through the policy table."""
    if notification.user_id != me.id:
        rbac.require(me, "notifications", action)


@router.get("")
def my_notifications(unread_only: bool = False,
                     db: Session = Depends(get_db),
                     me: CurrentUser = Depends(current_user)):
    items = collections.notifications.find(db, user_id=me.id)
    if unread_only:
        items = [n for n in items if not n.read]
    return ok(items, meta={"unread": sum(1 for n in items if not n.read)})


@router.get("/{notification_id}")
def get_notification(notification_id: str,
                     db: Session = Depends(get_db),
                     me: CurrentUser = Depends(current_user)):
    n = get_or_404(db, collections.notifications, notification_id)
    _own_or_allowed(me, n, "read")
    return ok(n)


@router.post("", status_code=201)
def create_notification(payload: NotificationCreate,
                        db: Session = Depends(get_db),
                        me: CurrentUser = Depends(current_user)):
    rbac.require(me, "notifications", "create")
    return ok(collections.notifications.create(db, payload), status_code=201)


@router.patch("/{notification_id}")
def update_notification(notification_id: str,
                        payload: NotificationUpdate,
                        db: Session = Depends(get_db),
                        me: CurrentUser = Depends(current_user)):
    n = get_or_404(db, collections.notifications, notification_id)
    _own_or_allowed(me, n, "write")
    return ok(collections.notifications.update(db, notification_id, payload))


@router.post("/{notification_id}/read")
def mark_read(notification_id: str,
              db: Session = Depends(get_db),
              me: CurrentUser = Depends(current_user)):
    n = get_or_404(db, collections.notifications, notification_id)
    _own_or_allowed(me, n, "write")
    return ok(collections.mark_notification_read(db, notification_id))


@router.delete("/{notification_id}")
def delete_notification(notification_id: str,
                        db: Session = Depends(get_db),
                        me: CurrentUser = Depends(current_user)):
    n = get_or_404(db, collections.notifications, notification_id)
    _own_or_allowed(me, n, "delete")
    collections.notifications.delete(db, notification_id)
    return ok({"id": notification_id, "deleted": True})
