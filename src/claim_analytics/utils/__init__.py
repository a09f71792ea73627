"""
Utility modules for the Claim Analytics Engine.
"""

from .file_loader import frame_to_rows, load_rows

__all__ = [
    "frame_to_rows",
    "load_rows",
]
