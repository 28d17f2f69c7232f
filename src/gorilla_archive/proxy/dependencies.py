"""Forwarder dependencies for FastAPI."""

from fastapi import Request

from .service import ForwarderService


def get_forwarder_service(request: Request) -> ForwarderService:
    """Get the forwarder created at application startup.

    Returns:
        ForwarderService: Forwarder instance.
    """
    return request.app.state.forwarder
