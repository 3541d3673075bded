"""Tests for HintService — fixed rotation and the persisted dismissed flag.

Run: pytest backend/tests/services/test_hint_service.py -v
"""

from gridboard.services.hint_service import HINTS, HintService, hint_at


def test_rotation_wraps_around():
    assert hint_at(0) == HINTS[0]
    assert hint_at(len(HINTS)) == HINTS[0]
    assert hint_at(len(HINTS) + 1) == HINTS[1]
    assert HINTS[0].title == "Edit Dashboard"


async def test_hints_start_visible(hint_service):
    assert await hint_service.is_dismissed() is False


async def test_dismissal_survives_restart(hint_service, storage, redis):
    await hint_service.dismiss()

    assert await hint_service.is_dismissed() is True
    assert redis.data["test:hints_dismissed"] == "true"
    assert await HintService(storage).is_dismissed() is True
