import pytest

from blockpad.core.exceptions import InvariantError, NotFoundError
from blockpad.core.ids import IdGenerator
from blockpad.core.models import Document, DocumentDraft, Node, NodeType
from blockpad.core.store import DocumentStore


def test_read_api(store):
    assert store.get_order() == ("A", "B")
    assert store.get_node("A").type is NodeType.HEADING
    assert store.index_of("B") == 1


def test_get_node_unknown_raises_not_found(store):
    with pytest.raises(NotFoundError) as info:
        store.get_node("missing")
    assert info.value.node_id == "missing"


def test_index_of_unknown_raises_not_found(store):
    with pytest.raises(NotFoundError):
        store.index_of("missing")


def test_default_store_is_empty():
    store = DocumentStore()
    assert store.get_order() == ()
    assert store.id_generator.next() == "0"


def test_invalid_seed_document_is_rejected():
    bad = DocumentDraft(nodes_by_id={"A": Node("A")}, order=["A", "A"]).freeze()
    with pytest.raises(InvariantError):
        DocumentStore(bad)


def test_id_generator_skips_seeded_ids():
    doc = Document.from_nodes([Node("0"), Node("1"), Node("7")])
    store = DocumentStore(doc, IdGenerator())
    assert store.id_generator.next() == "8"


def test_get_order_is_a_snapshot(store):
    order = store.get_order()

    def append(draft: DocumentDraft) -> None:
        draft.order.append("C")
        draft.nodes_by_id["C"] = Node("C")

    store.apply_mutation(append)
    assert order == ("A", "B")
    assert store.get_order() == ("A", "B", "C")


def test_apply_mutation_publishes_new_snapshot_and_notifies(store):
    seen = []
    store.subscribe(lambda previous, current: seen.append((previous.order, current.order)))
    before = store.snapshot

    def append(draft):
        draft.order.append("C")
        draft.nodes_by_id["C"] = Node("C")

    result = store.apply_mutation(append)
    assert result is store.snapshot
    assert store.snapshot is not before
    assert seen == [(("A", "B"), ("A", "B", "C"))]


def test_failing_mutator_leaves_snapshot_untouched(store):
    before = store.snapshot
    calls = []
    store.subscribe(lambda p, c: calls.append(c))

    def half_done(draft):
        draft.order.append("C")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        store.apply_mutation(half_done)
    assert store.snapshot is before
    assert calls == []


def test_invariant_breaking_mutation_is_discarded(store):
    before = store.snapshot

    def orphan(draft):
        draft.nodes_by_id["C"] = Node("C")

    with pytest.raises(InvariantError):
        store.apply_mutation(orphan)
    assert store.snapshot is before


def test_observer_failure_does_not_block_others(store):
    seen = []

    def broken(previous, current):
        raise ValueError("observer bug")

    store.subscribe(broken)
    store.subscribe(lambda p, c: seen.append(c.order))

    def rename(draft):
        draft.nodes_by_id["A"] = draft.nodes_by_id["A"].with_text("New")

    store.apply_mutation(rename)
    assert seen == [("A", "B")]
    assert store.get_node("A").text == "New"


def test_unsubscribe_stops_notifications(store):
    seen = []
    unsubscribe = store.subscribe(lambda p, c: seen.append(1))
    unsubscribe()
    unsubscribe()  # idempotent

    def rename(draft):
        draft.nodes_by_id["A"] = draft.nodes_by_id["A"].with_text("x")

    store.apply_mutation(rename)
    assert seen == []


def test_mutation_from_observer_is_delivered_in_order(store):
    def append_c(draft):
        draft.order.append("C")
        draft.nodes_by_id["C"] = Node("C")

    def append_d(draft):
        draft.order.append("D")
        draft.nodes_by_id["D"] = Node("D")

    def append_d_once(previous, current):
        if "D" not in current:
            store.apply_mutation(append_d)

    first, second = [], []
    store.subscribe(lambda p, c: first.append((p.order, c.order)))
    store.subscribe(append_d_once)
    store.subscribe(lambda p, c: second.append((p.order, c.order)))

    store.apply_mutation(append_c)

    expected = [
        (("A", "B"), ("A", "B", "C")),
        (("A", "B", "C"), ("A", "B", "C", "D")),
    ]
    assert first == expected
    assert second == expected
    assert store.get_order() == ("A", "B", "C", "D")
