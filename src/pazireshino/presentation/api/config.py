"""API configuration adapter.

Bridges the centralized pazireshino_config settings with the API layer.
The app factory pins one Settings instance on ``app.state`` so every
request (and every test app) sees the settings it was built with.
"""

from typing import Annotated

from fastapi import Depends, Request

from pazireshino_config.settings import Settings

API_VERSION = "1.0.0"
API_V1_PREFIX = "/api/v1"
USERS_PREFIX = "/users"


def get_api_settings(request: Request) -> Settings:
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_api_settings)]
