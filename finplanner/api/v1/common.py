"""Shared helpers for v1 write endpoints"""

import logging
from typing import Any
from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.orm import Session
from finplanner.infrastructure.clients.notifications import NotificationClient
from finplanner.infrastructure.observability.logging import log_write
from finplanner.infrastructure.observability.metrics import record_write


def not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{entity} not found")


def write_succeeded(
    background_tasks: BackgroundTasks,
    notifier: NotificationClient,
    request_id: str,
    user_id: str,
    entity: str,
    action: str,
    count: int = 1,
    **data: Any,
) -> None:
    """Record metrics/logs for a committed write and schedule its notification"""
    record_write(entity, action)
    log_write(request_id, user_id, entity, action, count)
    if notifier.enabled:
        background_tasks.add_task(
            notifier.send_event,
            {"event": f"{entity}.{action}", "user_id": user_id, "count": count, **data},
        )


def write_failed(db: Session, request_id: str, entity: str, action: str, error: Exception) -> HTTPException:
    """Roll back the session and build the 500 response for a storage failure"""
    db.rollback()
    record_write(entity, action, success=False)
    logging.error(f"Failed to {action} {entity}: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")


def invalid_request(db: Session, request_id: str, error: Exception) -> HTTPException:
    """Roll back the session and build the 422 response for a domain rule violation"""
    db.rollback()
    logging.warning(f"Rejected write: {error}", extra={"request_id": request_id})
    return HTTPException(status_code=422, detail=str(error))
