"""Shared fixtures for the Blockpad test suite.

The standard document used across tests is ``[A, B]``: a heading "A" and a
paragraph "B", wired to a headless HTML view and a deferred-call scheduler.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from blockpad.core.ids import IdGenerator
from blockpad.core.interfaces import DeferredCallQueue
from blockpad.core.journal import EditJournal
from blockpad.core.models import Document, Node, NodeType, find_problems
from blockpad.core.services import DocumentOperations, EditTranslator
from blockpad.core.store import DocumentStore
from blockpad.ui.controllers import EditorController
from blockpad.ui.html_view import HtmlDocumentView

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture
def make_document():
    """Build a document from ``(id, type, text)`` triples."""
    def factory(*specs):
        return Document.from_nodes(Node(node_id, NodeType(kind), text) for node_id, kind, text in specs)
    return factory


@pytest.fixture
def two_blocks(make_document):
    return make_document(("A", "heading", "Title"), ("B", "paragraph", "Body text"))


@pytest.fixture
def store(two_blocks):
    return DocumentStore(two_blocks, IdGenerator())


@pytest.fixture
def journal():
    return EditJournal(max_entries=100)


@pytest.fixture
def operations(store, journal):
    return DocumentOperations(store, journal)


@pytest.fixture
def view(store):
    v = HtmlDocumentView(store)
    yield v
    v.close()


@pytest.fixture
def scheduler():
    return DeferredCallQueue()


@pytest.fixture
def translator(operations, view, scheduler):
    return EditTranslator(operations, view, scheduler)


@pytest.fixture
def controller(operations, translator, view):
    ctrl = EditorController(operations, translator)
    view.on_input = ctrl.handle_input
    return ctrl


@pytest.fixture
def assert_valid():
    """Assert that a document satisfies every structural invariant."""
    def check(document):
        assert find_problems(document.nodes_by_id, document.order) == []
    return check
