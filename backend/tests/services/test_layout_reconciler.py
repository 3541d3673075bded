"""Tests for the layout reconciler — widget positions <-> grid layout items.

Run: pytest backend/tests/services/test_layout_reconciler.py -v
"""

from gridboard.schemas.widget import LayoutItem, WidgetDraft, WidgetPosition, WidgetType
from gridboard.services.layout_reconciler import apply_layout_change, to_layout_items


async def _store_with_widgets(store, count: int = 3):
    await store.load()
    for i in range(count):
        widget = await store.add_widget(WidgetDraft(type=WidgetType.BAR_CHART))
        await store.update_widget_position(widget.id, WidgetPosition(x=i * 2, y=i, w=2 + i, h=3))
    return store


async def test_layout_items_mirror_positions_with_minimums(store):
    await _store_with_widgets(store)
    items = to_layout_items(store.widgets)

    assert [item.i for item in items] == [w.id for w in store.widgets]
    for item, widget in zip(items, store.widgets):
        assert (item.x, item.y, item.w, item.h) == (
            widget.position.x,
            widget.position.y,
            widget.position.w,
            widget.position.h,
        )
        assert (item.min_w, item.min_h) == (2, 2)


async def test_permuted_positions_round_trip(store):
    await _store_with_widgets(store)
    items = to_layout_items(store.widgets)

    # Rotate the positions one place along the widget list.
    rotated = [
        LayoutItem(i=item.i, x=other.x, y=other.y, w=other.w, h=other.h)
        for item, other in zip(items, items[1:] + items[:1])
    ]
    assert await apply_layout_change(store, rotated) == len(rotated)

    by_id = {w.id: w.position for w in store.widgets}
    for item in rotated:
        assert by_id[item.i] == WidgetPosition(x=item.x, y=item.y, w=item.w, h=item.h)


async def test_identity_layout_change_is_idempotent(store):
    await _store_with_widgets(store)
    before = [w.model_dump() for w in store.widgets]

    await apply_layout_change(store, to_layout_items(store.widgets))
    await apply_layout_change(store, to_layout_items(store.widgets))

    assert [w.model_dump() for w in store.widgets] == before


async def test_unknown_ids_in_layout_are_ignored(store):
    await _store_with_widgets(store, count=1)
    applied = await apply_layout_change(store, [LayoutItem(i="ghost", x=1, y=1, w=2, h=2)])
    assert applied == 0
