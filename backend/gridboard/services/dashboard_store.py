"""Dashboard Store — the only writer of dashboards and their widgets.

Every mutating operation updates memory first and then writes the whole
dashboard collection through to storage (write-through). Lookups of unknown
widget or dashboard ids are silent no-ops.
"""

import asyncio
import logging
import uuid

from pydantic import ValidationError

from gridboard.core.config import settings
from gridboard.core.storage import DASHBOARDS_KEY, LocalStorage
from gridboard.schemas.dashboard import Dashboard
from gridboard.schemas.widget import Widget, WidgetDraft, WidgetPosition
from gridboard.services.widget_model import build_widget

logger = logging.getLogger(__name__)

DEFAULT_DASHBOARD_ID = "default-dashboard"
DEFAULT_DASHBOARD_NAME = "My Dashboard"


def _default_dashboard() -> Dashboard:
    return Dashboard(id=DEFAULT_DASHBOARD_ID, name=DEFAULT_DASHBOARD_NAME, widgets=[])


class DashboardStore:
    def __init__(self, storage: LocalStorage):
        self._storage = storage
        self._dashboards: list[Dashboard] = [_default_dashboard()]
        self._current_id: str = DEFAULT_DASHBOARD_ID
        self._lock = asyncio.Lock()

    async def load(self) -> None:
        """Restore dashboards from storage; seed the default dashboard when none exist."""
        stored = await self._storage.get_json(DASHBOARDS_KEY)
        dashboards: list[Dashboard] = []
        if isinstance(stored, list):
            for entry in stored:
                try:
                    dashboards.append(Dashboard.model_validate(entry))
                except ValidationError:
                    logger.warning("Skipping malformed stored dashboard", exc_info=True)

        if not dashboards:
            dashboards = [_default_dashboard()]

        self._dashboards = dashboards
        self._current_id = dashboards[0].id
        logger.info("Loaded %d dashboards", len(dashboards))

    # ── Reads ────────────────────────────────────────────────────────────

    @property
    def dashboards(self) -> list[Dashboard]:
        return list(self._dashboards)

    @property
    def current_dashboard(self) -> Dashboard:
        return self._find_dashboard(self._current_id) or self._dashboards[0]

    @property
    def widgets(self) -> list[Widget]:
        return list(self.current_dashboard.widgets)

    def get_widget(self, widget_id: str) -> Widget | None:
        for widget in self.current_dashboard.widgets:
            if widget.id == widget_id:
                return widget
        return None

    # ── Widgets ──────────────────────────────────────────────────────────

    async def add_widget(self, draft: WidgetDraft) -> Widget:
        """Append a widget with a fresh id at the default position.

        No collision avoidance: every new widget lands at the origin.
        Raises pydantic.ValidationError for a config that does not fit the type.
        """
        position = WidgetPosition(
            x=0, y=0, w=settings.grid.default_widget_w, h=settings.grid.default_widget_h
        )
        async with self._lock:
            dashboard = self.current_dashboard
            taken = {w.id for w in dashboard.widgets}
            widget_id = str(uuid.uuid4())
            while widget_id in taken:
                widget_id = str(uuid.uuid4())
            widget = build_widget(draft, widget_id, position)
            widgets = [*dashboard.widgets, widget]
            self._replace_current(dashboard.model_copy(update={"widgets": widgets}))
            await self.persist()
        logger.info("Added %s widget %s to dashboard %s", widget.type, widget.id, dashboard.id)
        return widget

    async def remove_widget(self, widget_id: str) -> None:
        async with self._lock:
            dashboard = self.current_dashboard
            remaining = [w for w in dashboard.widgets if w.id != widget_id]
            if len(remaining) == len(dashboard.widgets):
                return
            self._replace_current(dashboard.model_copy(update={"widgets": remaining}))
            await self.persist()
        logger.info("Removed widget %s from dashboard %s", widget_id, dashboard.id)

    async def update_widget(self, widget: Widget) -> bool:
        """Replace the widget with the same id. Never changes id or type.

        Returns False (no-op) when the id is unknown or the type differs.
        """
        async with self._lock:
            dashboard = self.current_dashboard
            existing = next((w for w in dashboard.widgets if w.id == widget.id), None)
            if existing is None:
                return False
            if existing.type != widget.type:
                logger.warning(
                    "Ignoring update that changes widget %s from %s to %s",
                    widget.id,
                    existing.type,
                    widget.type,
                )
                return False
            widgets = [widget if w.id == widget.id else w for w in dashboard.widgets]
            self._replace_current(dashboard.model_copy(update={"widgets": widgets}))
            await self.persist()
        return True

    async def update_widget_position(self, widget_id: str, position: WidgetPosition) -> bool:
        """Merge a new position into one widget; its config is untouched."""
        async with self._lock:
            dashboard = self.current_dashboard
            if not any(w.id == widget_id for w in dashboard.widgets):
                return False
            widgets = [
                w.model_copy(update={"position": position}) if w.id == widget_id else w
                for w in dashboard.widgets
            ]
            self._replace_current(dashboard.model_copy(update={"widgets": widgets}))
            await self.persist()
        return True

    # ── Dashboards ───────────────────────────────────────────────────────

    async def create_dashboard(self, name: str) -> Dashboard:
        """Create an empty dashboard and make it current."""
        async with self._lock:
            dashboard = Dashboard(id=str(uuid.uuid4()), name=name, widgets=[])
            self._dashboards = [*self._dashboards, dashboard]
            self._current_id = dashboard.id
            await self.persist()
        logger.info("Created dashboard %s (%s)", dashboard.id, name)
        return dashboard

    def switch_dashboard(self, dashboard_id: str) -> bool:
        """Point at another dashboard. Unknown ids leave the pointer unchanged."""
        if self._find_dashboard(dashboard_id) is None:
            return False
        self._current_id = dashboard_id
        return True

    async def rename_dashboard(self, dashboard_id: str, name: str) -> Dashboard | None:
        async with self._lock:
            dashboard = self._find_dashboard(dashboard_id)
            if dashboard is None:
                return None
            renamed = dashboard.model_copy(update={"name": name})
            self._dashboards = [renamed if d.id == dashboard_id else d for d in self._dashboards]
            await self.persist()
        return renamed

    # ── Persistence ──────────────────────────────────────────────────────

    async def persist(self) -> bool:
        """Write the full dashboard collection. Failures are logged by storage, not raised."""
        return await self._storage.set_json(
            DASHBOARDS_KEY, [d.model_dump(mode="json") for d in self._dashboards]
        )

    # ── Internals ────────────────────────────────────────────────────────

    def _find_dashboard(self, dashboard_id: str) -> Dashboard | None:
        return next((d for d in self._dashboards if d.id == dashboard_id), None)

    def _replace_current(self, updated: Dashboard) -> None:
        self._dashboards = [updated if d.id == updated.id else d for d in self._dashboards]
