"""REST API presentation layer for Pazireshino.

Structure:
    api/
    ├── app.py                # FastAPI application factory
    ├── config.py             # API configuration
    ├── dependencies.py       # Dependency injection
    ├── exception_handlers.py # Error envelope
    ├── routers/              # API route handlers
    └── schemas/              # Pydantic request/response schemas
"""

from pazireshino.presentation.api.app import create_app

__all__ = ["create_app"]
