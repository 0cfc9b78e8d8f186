"""Dependency injection for FastAPI endpoints"""

import uuid

from fastapi import HTTPException, Request
from arrangement_gateway.infrastructure.clients.payments import PaymentsClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_payments_client() -> PaymentsClient:
    """Provide payments webhook client instance"""
    return PaymentsClient()


def parse_uuid(value: str, label: str) -> uuid.UUID:
    """Path/body ID as a UUID, or 400"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")
