"""Onboarding hint endpoints."""

from fastapi import APIRouter, Depends

from gridboard.api.deps import get_hint_service
from gridboard.schemas.hint import HintItem, HintsResponse
from gridboard.services.hint_service import (
    HINT_INITIAL_DELAY_SECONDS,
    HINT_ROTATION_SECONDS,
    HINTS,
    HintService,
)

router = APIRouter()


async def _response(hints: HintService) -> HintsResponse:
    return HintsResponse(
        dismissed=await hints.is_dismissed(),
        initial_delay_seconds=HINT_INITIAL_DELAY_SECONDS,
        rotation_seconds=HINT_ROTATION_SECONDS,
        items=[HintItem(title=h.title, content=h.content) for h in HINTS],
    )


@router.get("", response_model=HintsResponse)
async def get_hints(hints: HintService = Depends(get_hint_service)):
    """The hint rotation and whether the user has dismissed it."""
    return await _response(hints)


@router.post("/dismiss", response_model=HintsResponse)
async def dismiss_hints(hints: HintService = Depends(get_hint_service)):
    await hints.dismiss()
    return await _response(hints)
