import sys
import tkinter as tk
from types import SimpleNamespace

import pytest

from blockpad.core.interfaces import EditorView
from blockpad.core.models import Node
from blockpad.core.services import EditResult, KeyEvent
from blockpad.ui.editor_view import BlockEditorView, TkScheduler, key_event_from_tk


def _can_create_tk_root() -> bool:
    try:
        r = tk.Tk()
        r.destroy()
        return True
    except tk.TclError:
        return False


requires_display = pytest.mark.skipif(
    not _can_create_tk_root(),
    reason="Tkinter root cannot be created in this environment (likely headless CI without display).",
)

META_STATE = 0x0008 if sys.platform == "darwin" else 0x0004


@pytest.mark.parametrize("keysym, state, expected", [
    ("Return", 0, KeyEvent("Enter")),
    ("KP_Enter", 0, KeyEvent("Enter")),
    ("BackSpace", 0, KeyEvent("Backspace")),
    ("z", META_STATE, KeyEvent("z", meta_key=True)),
    ("Z", META_STATE | 0x0001, KeyEvent("Z", meta_key=True, shift_key=True)),
    ("a", 0, KeyEvent("a")),
])
def test_key_event_from_tk(keysym, state, expected):
    assert key_event_from_tk(SimpleNamespace(keysym=keysym, state=state)) == expected


@pytest.fixture
def tk_root():
    root = tk.Tk()
    # Avoid showing a window during tests
    root.withdraw()
    yield root
    try:
        root.update_idletasks()
    except Exception:
        pass
    root.destroy()


@pytest.fixture
def tk_view(tk_root, store):
    v = BlockEditorView(tk_root, store)
    v.pack()
    return v


@requires_display
def test_tk_view_renders_blocks(tk_view):
    assert isinstance(tk_view, EditorView)
    assert tk_view.element_text("A") == "Title"
    assert tk_view.element_text("B") == "Body text"
    assert tk_view.previous_sibling("B") == "A"
    assert tk_view.next_sibling("B") is None


@requires_display
def test_tk_view_follows_mutations(tk_view, operations):
    operations.insert_node(Node("N", text="inserted"), 1)
    assert tk_view.has_element("N")
    assert tk_view.previous_sibling("B") == "N"

    operations.set_text("A", "Renamed")
    assert tk_view.element_text("A") == "Renamed"

    operations.remove_node("N", 1)
    assert not tk_view.has_element("N")
    assert tk_view.next_sibling("A") == "B"


@requires_display
def test_tk_view_swallows_prevented_keys(tk_view):
    seen = []

    def on_key(event, node_id):
        seen.append((event.key, node_id))
        return EditResult(True, True, event.key == "Enter", "split", "")

    tk_view.on_key = on_key
    assert tk_view._on_key_press(SimpleNamespace(keysym="Return", state=0), "A") == "break"
    assert tk_view._on_key_press(SimpleNamespace(keysym="x", state=0), "A") is None
    assert seen == [("Enter", "A"), ("x", "A")]


@requires_display
def test_tk_view_reports_input(tk_view):
    reported = []
    tk_view.on_input = lambda node_id, text: reported.append((node_id, text))
    tk_view._widgets["B"].insert("end", "!")
    tk_view._on_key_release("B")
    assert reported == [("B", "Body text!")]


@requires_display
def test_tk_scheduler_runs_when_idle(tk_root):
    calls = []
    TkScheduler(tk_root).call_soon(lambda: calls.append(1))
    assert calls == []
    tk_root.update_idletasks()
    assert calls == [1]


def test_module_is_documented():
    from blockpad.ui import editor_view

    assert editor_view.__doc__
