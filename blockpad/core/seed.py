"""Sample document content for the desktop app and for manual testing.

Builds a document of headings, each followed by a few paragraphs of
placeholder text generated with Faker. Not used by the edit engine itself.
"""

from __future__ import annotations

from typing import List, Optional

from faker import Faker

from blockpad.core.ids import IdGenerator
from blockpad.core.models import Document, Node, NodeType

__all__ = ["build_sample_document"]


def build_sample_document(
    id_generator: IdGenerator,
    headings: int = 50,
    min_paragraphs: int = 3,
    max_paragraphs: int = 10,
    seed: Optional[int] = None,
    fake: Optional[Faker] = None,
) -> Document:
    """Return a document of *headings* headings with paragraphs in between.

    Each heading is followed by between *min_paragraphs* and
    *max_paragraphs* paragraphs (inclusive). Ids come from *id_generator*,
    so the same generator must then be handed to the store.

    Pass *seed* for reproducible content, or a configured *fake* to control
    the locale.
    """
    fake = fake or Faker()
    if seed is not None:
        fake.seed_instance(seed)
    low = max(0, min_paragraphs)
    high = max(low, max_paragraphs)

    nodes: List[Node] = []
    for _ in range(max(0, headings)):
        nodes.append(Node(id_generator.next(), NodeType.HEADING, fake.sentence()))
        for _ in range(fake.random_int(low, high)):
            nodes.append(Node(id_generator.next(), NodeType.PARAGRAPH, fake.paragraph()))
    return Document.from_nodes(nodes)
