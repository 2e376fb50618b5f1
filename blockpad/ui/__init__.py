"""Rendering layer: headless HTML view, Tk view and controllers.

The Tk view is not imported here so the headless parts work without a Tk
installation.
"""

from .html_view import HtmlDocumentView

__all__ = ["HtmlDocumentView"]
