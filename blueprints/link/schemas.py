from __future__ import annotations
from pydantic import BaseModel, Field, field_validator

class LinkIn(BaseModel):
    link: str = Field(max_length=2048)

    @field_validator("link")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

class CopyIn(BaseModel):
    dest_submission_id: int = Field(ge=1)
