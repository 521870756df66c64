"""Utility functions for goalcoach."""

from goalcoach.utils.ids import IdFactory, new_id

__all__ = ["IdFactory", "new_id"]
