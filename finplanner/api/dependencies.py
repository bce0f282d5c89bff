"""Dependency injection for FastAPI endpoints"""

import uuid
from typing import Optional
from fastapi import Header, HTTPException, Request
from finplanner.infrastructure.clients.notifications import NotificationClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Opaque identifier of the authenticated user, set by the identity layer"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing user identity")
    return x_user_id.strip()


def get_notification_client() -> NotificationClient:
    """Provide notification webhook client instance"""
    return NotificationClient()


def parse_record_id(record_id: str) -> uuid.UUID:
    """Path identifier as UUID, 400 when malformed"""
    try:
        return uuid.UUID(record_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid ID format")
