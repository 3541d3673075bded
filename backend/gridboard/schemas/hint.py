"""Pydantic schemas for the onboarding hint endpoints."""

from pydantic import BaseModel


class HintItem(BaseModel):
    title: str
    content: str


class HintsResponse(BaseModel):
    dismissed: bool
    initial_delay_seconds: int
    rotation_seconds: int
    items: list[HintItem]
