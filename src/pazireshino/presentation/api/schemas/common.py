"""Common schemas shared across API endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    status: str = Field(..., description='"fail" for client errors, "error" otherwise')
    message: str = Field(..., description="Error message")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"status": "fail", "message": "Incorrect email or password"},
        },
    )


class MessageResponse(BaseModel):
    """Acknowledgement without payload."""

    status: str = "success"
    message: str


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
