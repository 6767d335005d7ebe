"""FastAPI dependency injection helpers."""

from fastapi import Request

from freight.wiring import Container


def get_container(request: Request) -> Container:
    """The container built by ``create_app`` for this application."""
    return request.app.state.container
