"""Onboarding hints — a fixed rotation and a persisted "dismissed" flag."""

from dataclasses import dataclass

from gridboard.core.storage import HINTS_DISMISSED_KEY, LocalStorage

HINT_ROTATION_SECONDS = 10
HINT_INITIAL_DELAY_SECONDS = 3


@dataclass(frozen=True)
class Hint:
    title: str
    content: str


HINTS: tuple[Hint, ...] = (
    Hint(
        title="Edit Dashboard",
        content="Click 'Edit Dashboard' to rearrange and resize your widgets by dragging them around.",
    ),
    Hint(
        title="Add Widgets",
        content="Click 'Add Widget' in the top bar to choose from different visualization types for your data.",
    ),
    Hint(
        title="Upload Your Data",
        content="You can upload your own CSV or Excel files to visualize in any widget. Click on a widget's menu and select 'Edit'.",
    ),
    Hint(
        title="Custom Dashboard",
        content="Create multiple dashboards from the sidebar to organize different data visualizations.",
    ),
)


def hint_at(tick: int) -> Hint:
    """The hint shown after ``tick`` rotations."""
    return HINTS[tick % len(HINTS)]


class HintService:
    def __init__(self, storage: LocalStorage):
        self._storage = storage
        self._dismissed: bool | None = None

    async def is_dismissed(self) -> bool:
        if self._dismissed is None:
            self._dismissed = await self._storage.get_flag(HINTS_DISMISSED_KEY)
        return self._dismissed

    async def dismiss(self) -> None:
        """Permanently hide hints. The in-memory flag holds even if the write fails."""
        self._dismissed = True
        await self._storage.set_flag(HINTS_DISMISSED_KEY, True)
