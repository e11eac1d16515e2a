"""Relay Service — request/response models."""

from typing import Optional

from pydantic import BaseModel, field_validator, model_validator


class ChatRequest(BaseModel):
    message: str

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("message must not be blank")
        return value


class ChatResponse(BaseModel):
    """Exactly one of `reply` / `error` is set."""

    reply: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def one_of_reply_or_error(self):
        if (self.reply is None) == (self.error is None):
            raise ValueError("exactly one of reply/error must be set")
        if self.reply is not None and not self.reply.strip():
            raise ValueError("reply must not be blank")
        return self


class HealthResponse(BaseModel):
    status: str
    service: str
