#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

Drop source images into ``images/`` and run:

    python main.py batch target.png

Or use the full CLI:

    python -m pixel_remix.cli batch --help
    python -m pixel_remix.cli single my_photo.jpg target.png
"""

from pixel_remix.cli import app

if __name__ == "__main__":
    app()
