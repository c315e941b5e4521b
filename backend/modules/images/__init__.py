"""
Images module.

Locates image files on disk and removes images that are no longer used.
"""

from .depot import CleanupErrorHook, ImageDepot

__all__ = ["CleanupErrorHook", "ImageDepot"]
