import pytest

from blockpad.core.models import Node, NodeType
from blockpad.core.services import KeyEvent

ENTER = KeyEvent("Enter")
BACKSPACE = KeyEvent("Backspace")


# ---------------------------
# Split
# ---------------------------

def test_split_inserts_empty_paragraph_after_focused(translator, store, view):
    view.focus("A")
    result = translator.handle_key(ENTER, "A")

    assert result.success and result.handled and result.prevent_default
    assert result.action == "split"
    new_id = result.details["node_id"]
    assert store.get_order() == ("A", new_id, "B")
    new_node = store.get_node(new_id)
    assert new_node.text == ""
    assert new_node.type is NodeType.PARAGRAPH
    # original text is not partitioned
    assert store.get_node("A").text == "Title"


def test_split_focus_is_deferred_until_scheduler_runs(translator, view, scheduler):
    view.focus("A")
    result = translator.handle_key(ENTER, "A")
    new_id = result.details["node_id"]

    assert view.focused_id == "A"
    assert view.has_element(new_id)  # mounted before focus moves
    assert scheduler.run_pending() == 1
    assert view.focused_id == new_id
    assert view.caret == 0


def test_deferred_focus_skipped_when_new_block_is_gone(translator, operations, store, scheduler, view):
    view.focus("A")
    new_id = translator.handle_key(ENTER, "A").details["node_id"]
    operations.remove_node(new_id, 1)

    assert scheduler.run_pending() == 1
    assert view.focused_id == "A"
    assert store.get_order() == ("A", "B")


def test_split_last_node_appends(translator, store, scheduler, view):
    result = translator.handle_key(ENTER, "B")
    new_id = result.details["node_id"]
    assert store.get_order() == ("A", "B", new_id)
    scheduler.run_pending()
    assert view.focused_id == new_id


def test_consecutive_splits_keep_all_pending_focus_moves(translator, store, scheduler, view):
    first = translator.handle_key(ENTER, "A").details["node_id"]
    second = translator.handle_key(ENTER, first).details["node_id"]
    assert store.get_order() == ("A", first, second, "B")
    assert len(scheduler) == 2
    scheduler.run_pending()
    assert view.focused_id == second


def test_split_unknown_focus_aborts_without_changes(translator, store, scheduler, journal):
    before = store.snapshot
    result = translator.handle_key(ENTER, "ghost")
    assert result.success is False
    assert result.handled is True
    assert result.details["error"] == "NotFoundError"
    assert store.snapshot is before
    assert len(scheduler) == 0
    assert len(journal) == 0


def test_split_generates_unique_ids(translator, store):
    ids = {translator.handle_key(ENTER, "A").details["node_id"] for _ in range(20)}
    assert len(ids) == 20
    assert len(store.get_order()) == 22


# ---------------------------
# Merge backward
# ---------------------------

def test_merge_removes_empty_block_and_focuses_previous_end(translator, operations, store, view):
    operations.set_text("B", "")
    view.focus("B")

    result = translator.handle_key(BACKSPACE, "B")

    assert result.success and result.prevent_default
    assert result.action == "merge_backward"
    assert store.get_order() == ("A",)
    assert store.get_node("A").text == "Title"
    assert view.focused_id == "A"
    assert view.caret == len("Title")


def test_backspace_on_non_empty_block_is_left_to_the_surface(translator, store, view):
    view.focus("B")
    before = store.snapshot
    result = translator.handle_key(BACKSPACE, "B")
    assert result.handled is False
    assert result.prevent_default is False
    assert store.snapshot is before
    assert view.focused_id == "B"


def test_merge_on_first_block_is_noop(store, operations, translator, view):
    operations.remove_node("B", 1)
    operations.set_text("A", "")
    view.focus("A")
    before = store.snapshot

    result = translator.handle_key(BACKSPACE, "A")

    assert result.success and result.handled
    assert result.details["noop"] is True
    assert store.snapshot is before
    assert store.get_order() == ("A",)
    assert view.focused_id == "A"


def test_merge_moves_focus_before_removal(translator, operations, store, view):
    operations.set_text("B", "")
    view.focus("B")
    events = []
    original_focus = view.focus

    def recording_focus(node_id, caret="end"):
        events.append(("focus", node_id, store.get_order()))
        original_focus(node_id, caret)

    view.focus = recording_focus
    translator.handle_key(BACKSPACE, "B")
    assert events == [("focus", "A", ("A", "B"))]


def test_merge_failure_restores_focus(translator, operations, store, view, monkeypatch):
    from blockpad.core.exceptions import PositionMismatchError

    operations.set_text("B", "")
    view.focus("B")
    before = store.snapshot

    def stale_remove(node_id, position):
        raise PositionMismatchError(node_id, position, "A")

    monkeypatch.setattr(operations, "remove_node", stale_remove)
    result = translator.handle_key(BACKSPACE, "B")

    assert result.success is False
    assert result.details["error"] == "PositionMismatchError"
    assert store.snapshot is before
    assert view.focused_id == "B"


def test_merge_unknown_focus_aborts(translator, store):
    before = store.snapshot
    result = translator.handle_key(BACKSPACE, "ghost")
    assert result.success is False
    assert store.snapshot is before


def test_split_then_merge_returns_to_original_document(translator, store, scheduler, view):
    before = store.snapshot
    view.focus("A")
    new_id = translator.handle_key(ENTER, "A").details["node_id"]
    scheduler.run_pending()
    translator.handle_key(BACKSPACE, new_id)
    assert store.snapshot == before
    assert view.focused_id == "A"


# ---------------------------
# Undo placeholder and other keys
# ---------------------------

@pytest.mark.parametrize("event, action", [
    (KeyEvent("z", meta_key=True), "undo"),
    (KeyEvent("Z", meta_key=True, shift_key=True), "redo"),
])
def test_undo_branch_is_explicit_noop(translator, store, event, action):
    before = store.snapshot
    result = translator.handle_key(event, "A")
    assert result.handled is True
    assert result.action == action
    assert result.details == {"noop": True}
    assert store.snapshot is before


@pytest.mark.parametrize("event", [KeyEvent("z"), KeyEvent("a"), KeyEvent("ArrowDown", shift_key=True)])
def test_other_keys_are_not_handled(translator, store, event):
    before = store.snapshot
    result = translator.handle_key(event, "A")
    assert result.handled is False
    assert store.snapshot is before


def test_custom_key_bindings(operations, view, scheduler, store):
    from blockpad.core.services import EditTranslator
    from blockpad.core.settings import KeyBindings

    translator = EditTranslator(operations, view, scheduler, KeyBindings(split="Return"))
    assert translator.handle_key(KeyEvent("Enter"), "A").handled is False
    assert translator.handle_key(KeyEvent("Return"), "A").action == "split"
    assert len(store.get_order()) == 3
