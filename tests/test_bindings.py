"""
Tests for reactive cells and the binding manager.
"""

from fastcore.xml import Span

import pytest

from starbind import BindingManager, CommandKind, Element, PatchBatch, Page, StarBindError, array_selector, selectors
from starbind.core.bindings import to_display


class Equal:
    """Distinct instances that compare equal."""

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Equal) and other.value == self.value

    def __str__(self):
        return f"Equal({self.value})"


def patches(batch):
    return [(c.selector, c.value) for c in batch.commands]


class TestBindable:
    """Change detection on set()"""

    def test_initial_value_is_unset(self, recorder):
        cell = BindingManager(recorder).bind("score", "#Score")
        assert cell.get() is None
        assert str(cell) == ""

    def test_set_notifies_once_per_change(self, recorder):
        cell = BindingManager(recorder).bind("score", "#Score")
        assert cell.set("10") is True
        assert cell.set("10") is False
        assert len(recorder.batches) == 1

    def test_setting_none_on_unset_cell_is_noop(self, recorder):
        cell = BindingManager(recorder).bind("score", "#Score")
        assert cell.set(None) is False
        assert recorder.batches == []

    def test_equal_but_distinct_values_do_not_notify(self, recorder):
        cell = BindingManager(recorder).bind("item", "#Item")
        cell.set(Equal(1))
        cell.set(Equal(1))
        assert len(recorder.batches) == 1
        cell.set(Equal(2))
        assert len(recorder.batches) == 2

    def test_clearing_a_value_notifies(self, recorder):
        cell = BindingManager(recorder).bind("score", "#Score")
        cell.set(3)
        cell.set(None)
        assert patches(recorder.batches[-1]) == [("#Score", "")]


class TestDisplay:
    def test_display_rules(self):
        span = Span("bold")
        assert to_display(None) == ""
        assert to_display(12) == "12"
        assert to_display("text") == "text"
        assert to_display(span) is span


class TestBindingManager:
    """Patch computation, batching and root scoping"""

    def test_scoped_immediate_update(self, recorder):
        """Root #Card and binding #Score give one batch patching '#Card #Score'"""
        manager = BindingManager(recorder)
        manager.set_root_selector("#Card")
        score_field = manager.bind("score", "#Score")

        score_field.set("10")

        assert len(recorder.batches) == 1
        assert patches(recorder.batches[0]) == [("#Card #Score", "10")]
        assert recorder.batches[0].commands[0].kind == CommandKind.SET

    def test_without_root_selector(self, recorder):
        manager = BindingManager(recorder)
        manager.bind("score", "#Score").set(5)
        assert patches(recorder.batches[0]) == [("#Score", "5")]

    def test_root_selector_only_affects_future_patches(self, recorder):
        manager = BindingManager(recorder)
        cell = manager.bind("score", "#Score")
        cell.set(1)
        manager.set_root_selector("#Card")
        assert len(recorder.batches) == 1
        cell.set(2)
        assert patches(recorder.batches[1]) == [("#Card #Score", "2")]

    def test_shared_batch_is_not_delivered(self, recorder):
        """Two notifications into one batch: no delivery, two patches"""
        manager = BindingManager(recorder)
        manager.bind("score", "#Score", initial=7)
        manager.bind("name", "#Name", initial="Ada")
        batch = PatchBatch()

        manager.notify_value_changed("score", batch)
        manager.notify_value_changed("name", batch)

        assert recorder.batches == []
        assert patches(batch) == [("#Score", "7"), ("#Name", "Ada")]

    def test_set_with_batch(self, recorder):
        manager = BindingManager(recorder)
        batch = PatchBatch().append("<div id='Score'></div>")
        manager.bind("score", "#Score").set(3, batch)
        assert recorder.batches == []
        assert len(batch) == 2

    def test_unknown_name_is_ignored(self, recorder):
        manager = BindingManager(recorder)
        batch = PatchBatch()
        manager.notify_value_changed("ghost")
        manager.notify_value_changed("ghost", batch)
        assert recorder.batches == []
        assert len(batch) == 0

    def test_update_all(self, recorder):
        manager = BindingManager(recorder)
        manager.set_root_selector("#Card")
        manager.bind("score", "#Score", initial=1)
        manager.bind("name", "#Name")

        manager.update_all()

        assert len(recorder.batches) == 1
        assert patches(recorder.batches[0]) == [("#Card #Score", "1"), ("#Card #Name", "")]

    def test_rich_values_pass_through(self, recorder):
        manager = BindingManager(recorder)
        span = Span("hi")
        manager.bind("label", "#Label").set(span)
        assert recorder.batches[0].commands[0].value is span

    def test_bind_is_idempotent(self, recorder):
        manager = BindingManager(recorder)
        first = manager.bind("score", "#Score")
        second = manager.bind("score", "#Score")
        assert first is second
        assert len(manager) == 1


class Scoreboard:
    def ui_bindings(self):
        return {"score": "#Score", "player": "#Player"}


class TestScanAndBind:
    def test_cells_assigned_onto_target(self, recorder):
        manager = BindingManager(recorder)
        board = Scoreboard()

        assert manager.scan_and_bind(board) == ["score", "player"]
        assert board.score is manager.entry("score").bindable
        assert manager.entry("player").target is board
        assert board.score.get() is None

    def test_rescan_reuses_cells(self, recorder):
        manager = BindingManager(recorder)
        board = Scoreboard()
        manager.scan_and_bind(board)
        cell = board.score
        cell.set(4)

        manager.scan_and_bind(board)

        assert board.score is cell
        assert board.score.get() == 4
        assert len(manager) == 2

    def test_pairs_are_accepted(self, recorder):
        class Pairs:
            def ui_bindings(self):
                return [("title", "#Title")]

        target = Pairs()
        BindingManager(recorder).scan_and_bind(target)
        target.title.set("Hello")
        assert patches(recorder.batches[0]) == [("#Title", "Hello")]

    def test_collision_with_plain_attribute(self, recorder):
        class Labelled:
            def __init__(self):
                self.page = "home"

            def ui_bindings(self):
                return {"page": "#PageLabel"}

        target = Labelled()
        manager = BindingManager(recorder)
        with pytest.raises(StarBindError, match="page"):
            manager.scan_and_bind(target)
        assert target.page == "home"
        assert "page" not in manager

    def test_collision_with_element_attributes(self, sink):
        class PageLabel(Element):
            def ui_bindings(self):
                return {"page": "#PageLabel"}

            def on_create(self, root, commands, events):
                pass

        class BindingsLabel(PageLabel):
            def ui_bindings(self):
                return {"bindings": "#Bindings"}

        page = Page(sink)
        with pytest.raises(StarBindError, match="page"):
            PageLabel(page)
        with pytest.raises(StarBindError, match="bindings"):
            BindingsLabel(page)

    def test_target_without_declarations(self, recorder):
        manager = BindingManager(recorder)
        assert manager.scan_and_bind(object()) == []
        assert len(manager) == 0


class TestSelectors:
    def test_descendant_join(self):
        assert selectors("#Card", "#Score") == "#Card #Score"

    def test_empty_parts_skipped(self):
        assert selectors("", "#Score") == "#Score"
        assert selectors("#A", "", "#B") == "#A #B"

    def test_array_selector(self):
        assert array_selector("#Item", 0) == "#Item0"
        assert array_selector("IteratedElement", 12) == "IteratedElement12"
