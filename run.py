# -*- coding: utf-8 -*-

"""
Main entry point for launching the Blockpad editor.
"""

import logging
import tkinter as tk

import sv_ttk

from blockpad.app import BlockpadApp
from blockpad.config import ConfigManager
from blockpad.core.settings import EditorSettings
from blockpad.logging_config import setup_logging


def main():
    """
    Configure logging, main window, and launch application.
    """
    setup_logging()
    settings = EditorSettings.from_config(ConfigManager().get_editor_config())

    root = tk.Tk()
    root.title("Blockpad")
    window_width, window_height = settings.window_width, settings.window_height
    # Calculate position to center the window
    screen_width = root.winfo_screenwidth()
    screen_height = root.winfo_screenheight()
    pos_x = (screen_width // 2) - (window_width // 2)
    pos_y = (screen_height // 2) - (window_height // 2)
    root.geometry(f"{window_width}x{window_height}+{pos_x}+{pos_y}")

    sv_ttk.set_theme(settings.theme)

    BlockpadApp(root, settings)

    root.mainloop()

    logging.info("===== Application terminated =====")


if __name__ == '__main__':
    main()
