"""Pydantic response models for the content HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..compose import DocumentPayload


class DocumentResponse(BaseModel):
    """JSON view of a document: its body plus front-matter metadata."""

    body: str
    title: str | None = Field(default=None, description="Front-matter or heading title.")
    description: str | None = None

    @classmethod
    def from_payload(cls, payload: DocumentPayload) -> "DocumentResponse":
        return cls(body=payload.body, title=payload.title, description=payload.description)


__all__ = ["DocumentResponse"]
