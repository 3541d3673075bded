"""Layout Reconciler — widget positions <-> grid layout items.

Stateless. Each layout item targets a distinct widget id, so the order in
which a batch is applied does not matter.
"""

from gridboard.core.config import settings
from gridboard.schemas.widget import LayoutItem, Widget, WidgetPosition
from gridboard.services.dashboard_store import DashboardStore


def to_layout_items(widgets: list[Widget]) -> list[LayoutItem]:
    return [
        LayoutItem(
            i=widget.id,
            x=widget.position.x,
            y=widget.position.y,
            w=widget.position.w,
            h=widget.position.h,
            min_w=settings.grid.grid_min_w,
            min_h=settings.grid.grid_min_h,
        )
        for widget in widgets
    ]


async def apply_layout_change(store: DashboardStore, items: list[LayoutItem]) -> int:
    """Push a grid layout-change batch into the store. Returns how many widgets moved."""
    applied = 0
    for item in items:
        position = WidgetPosition(x=item.x, y=item.y, w=item.w, h=item.h)
        if await store.update_widget_position(item.i, position):
            applied += 1
    return applied
