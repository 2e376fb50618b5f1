# -*- coding: utf-8 -*-
"""Tk-based GUI front-end for Blockpad.

Exposes the :class:`BlockpadApp` widget, which is instantiated by ``run.py``.
"""

from __future__ import annotations

import logging
from typing import Optional

import tkinter as tk
from tkinter import ttk

from blockpad.core.ids import IdGenerator
from blockpad.core.journal import EditJournal
from blockpad.core.models import Document
from blockpad.core.seed import build_sample_document
from blockpad.core.services import DocumentOperations, EditTranslator
from blockpad.core.settings import EditorSettings
from blockpad.core.store import DocumentStore
from blockpad.ui.controllers import EditorController
from blockpad.ui.editor_view import BlockEditorView, TkScheduler

logger = logging.getLogger(__name__)

__all__ = ["BlockpadApp"]


class BlockpadApp:
    """Main application widget wiring the document services to the Tk view.

    Parameters
    ----------
    root
        Application root window.
    settings
        Editor settings (keys, journal size, seed size).
    document
        Starting document. When omitted a sample document is generated.
    seed
        Seed for reproducible sample content.
    """

    def __init__(
        self,
        root: tk.Tk,
        settings: Optional[EditorSettings] = None,
        document: Optional[Document] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.root = root
        self.settings = settings or EditorSettings()

        id_generator = IdGenerator()
        if document is None:
            sample = self.settings.seed
            document = build_sample_document(
                id_generator,
                headings=sample.headings,
                min_paragraphs=sample.min_paragraphs,
                max_paragraphs=sample.max_paragraphs,
                seed=seed,
            )
        self.store = DocumentStore(document, id_generator)
        self.journal = EditJournal(max_entries=self.settings.journal_max_entries)
        self.operations = DocumentOperations(self.store, self.journal)

        # --- Scrollable container ---------------------------------------
        outer = ttk.Frame(root)
        outer.pack(fill=tk.BOTH, expand=True)
        self.canvas = tk.Canvas(outer, highlightthickness=0)
        scrollbar = ttk.Scrollbar(outer, orient=tk.VERTICAL, command=self.canvas.yview)
        self.canvas.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        self.view = BlockEditorView(self.canvas, self.store)
        window = self.canvas.create_window((0, 0), window=self.view, anchor="nw")
        self.view.bind(
            "<Configure>",
            lambda e: self.canvas.configure(scrollregion=self.canvas.bbox("all")),
            add="+",
        )
        self.canvas.bind("<Configure>", lambda e: self.canvas.itemconfigure(window, width=e.width), add="+")

        translator = EditTranslator(self.operations, self.view, TkScheduler(root), self.settings.keys)
        self.controller = EditorController(self.operations, translator)
        self.view.on_key = self.controller.handle_key
        self.view.on_input = self.controller.handle_input

        order = self.store.get_order()
        if order:
            self.view.focus(order[0], "end")

        logger.info("Blockpad started with %d blocks", len(order))
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

    def on_close(self) -> None:
        logger.info("Closing; %d edits journaled this session", len(self.journal))
        self.root.destroy()
