from typing import Literal

from pydantic import BaseModel, Field


class StatusOut(BaseModel):
    status: Literal["ok"] = "ok"
    env: str = Field(..., description="Deployment environment name")


class HealthOut(BaseModel):
    status: Literal["ok"] = "ok"


class SubmitOut(BaseModel):
    success: bool = True
    message: str = Field(..., description="Human-readable acknowledgment")


class ValidationErrorsOut(BaseModel):
    errors: list[str]


class ErrorOut(BaseModel):
    error: str
