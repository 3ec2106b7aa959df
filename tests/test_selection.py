"""Tests for the paginated selection widget."""

import pytest

from conftest import FakeSurface
from podterm.ui.selection import CANCELLED, SelectionState, SelectionWidget

ITEMS = [f"item {i:02d}" for i in range(40)]


def _select(keys, items=ITEMS, page_size=15, **kwargs):
    surface = FakeSurface(keys)
    widget = SelectionWidget(surface, header_text="header")
    result = widget.select("Pick", "help", items, str, page_size=page_size, **kwargs)
    return result, widget, surface


class TestSelectionState:
    """Cursor and viewport arithmetic."""

    def test_twenty_downs_scrolls_viewport(self) -> None:
        state = SelectionState(items=ITEMS, page_size=15)
        for _ in range(20):
            state.move(1)
        assert state.selected_index == 20
        assert state.viewport_top == 6

    def test_page_down_then_up(self) -> None:
        state = SelectionState(items=ITEMS, page_size=15)
        state.move(15)
        assert (state.selected_index, state.viewport_top) == (15, 1)
        state.move(-15)
        assert (state.selected_index, state.viewport_top) == (0, 0)

    def test_end_and_home(self) -> None:
        state = SelectionState(items=ITEMS, page_size=15)
        state.move_to(len(ITEMS) - 1)
        assert (state.selected_index, state.viewport_top) == (39, 25)
        state.move_to(0)
        assert (state.selected_index, state.viewport_top) == (0, 0)

    def test_clamps_at_both_ends(self) -> None:
        state = SelectionState(items=ITEMS, page_size=15)
        state.move(-1)
        assert state.selected_index == 0
        state.move(1000)
        assert state.selected_index == 39

    @pytest.mark.parametrize("moves", [[1] * 50, [15, 15, -3, 15, -40], [39, -1, -1, -15]])
    def test_selection_always_inside_viewport(self, moves) -> None:
        state = SelectionState(items=ITEMS, page_size=15)
        for delta in moves:
            state.move(delta)
            assert 0 <= state.selected_index < len(ITEMS)
            assert state.viewport_top <= state.selected_index
            assert state.selected_index < state.viewport_top + state.page_size
            assert 0 <= state.viewport_top

    def test_short_list_page_down_lands_on_last(self) -> None:
        state = SelectionState(items=["a", "b", "c"], page_size=15)
        state.move(15)
        assert state.selected_index == 2
        assert state.viewport_top == 0
        assert list(state.visible_range()) == [0, 1, 2]

    def test_visible_range(self) -> None:
        state = SelectionState(items=ITEMS, page_size=15, selected_index=39)
        state.clamp()
        assert list(state.visible_range()) == list(range(25, 40))


class TestSelectionWidget:
    """Key handling and rendering."""

    def test_enter_returns_item_under_cursor(self) -> None:
        result, widget, _ = _select([["down"] * 20, "enter"])
        assert result == "item 20"
        assert widget.state.viewport_top == 6

    def test_escape_cancels(self) -> None:
        result, _, _ = _select(["down", "esc"])
        assert result is CANCELLED
        assert not result

    def test_empty_list_cancels_without_drawing(self) -> None:
        result, _, surface = _select(["enter"], items=[])
        assert result is CANCELLED
        assert surface.frames == []

    def test_page_keys(self) -> None:
        result, _, _ = _select(["page down", "page down", "page up", "enter"])
        assert result == "item 15"

    def test_end_then_enter(self) -> None:
        result, _, _ = _select(["end", "enter"])
        assert result == "item 39"

    def test_unbound_and_mouse_keys_are_ignored(self) -> None:
        result, _, _ = _select([[("mouse press", 1, 0, 0), "x", "down"], "enter"])
        assert result == "item 01"

    def test_idle_ticks_redraw_with_live_footer(self) -> None:
        counter = {"n": 0}

        def footer():
            counter["n"] += 1
            return f"tick {counter['n']}"

        result, _, surface = _select([[], [], "enter"], footer_provider=footer)
        assert result == "item 00"
        assert len(surface.frames) == 3
        assert "tick 1" in surface.frames[0]
        assert "tick 3" in surface.frames[2]

    def test_global_handler_consumes_keys_first(self) -> None:
        seen = []

        def handler(key, item):
            seen.append((key, item))
            return key == "p"

        result, _, _ = _select([["p", "down"], "enter"], global_key_handler=handler)
        assert result == "item 01"
        assert seen[0] == ("p", "item 00")
        assert ("down", "item 00") in seen

    def test_global_handler_can_swallow_enter(self) -> None:
        result, _, _ = _select(
            ["enter", "esc"], global_key_handler=lambda key, item: key == "enter"
        )
        assert result is CANCELLED

    def test_failing_global_handler_does_not_end_selection(self) -> None:
        def handler(key, item):
            if key == "p":
                raise RuntimeError("boom")
            return False

        result, _, _ = _select(["p", "enter"], global_key_handler=handler)
        assert result == "item 00"

    def test_render_marks_selected_row(self) -> None:
        _, _, surface = _select(["down", "enter"], page_size=5)
        frame = surface.frames[-1]
        assert "> item 01" in frame
        assert "  item 00" in frame
        assert "item 05" not in frame
        assert "Pick" in frame
