"""Flat records produced from full-format Gmail messages.

Field names are snake_case in Python and camelCase on the wire, so tool
results keep the shape chat clients already expect (``fromEmail``,
``bodyDecoded``...). Use ``model_dump(by_alias=True)`` when serializing.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MessageHeaders(BaseModel):
    """Sender and subject pulled from a message header list."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    from_name: str = Field(default="", alias="fromName", description="Sender display name")
    from_email: str = Field(default="", alias="fromEmail", description="Sender email address")
    subject: str = Field(default="", description="Raw Subject header")


class ParsedMessage(BaseModel):
    """A message reduced to ids, sender, subject and one decoded body."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default="", description="Gmail message ID")
    thread_id: str = Field(default="", alias="threadId", description="Gmail thread ID")
    from_name: str = Field(default="", alias="fromName", description="Sender display name")
    from_email: str = Field(default="", alias="fromEmail", description="Sender email address")
    subject: str = Field(default="", description="Raw Subject header")
    body_decoded: str = Field(
        default="",
        alias="bodyDecoded",
        description="Decoded text of the requested body part",
    )
