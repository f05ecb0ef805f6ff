"""Common utility functions for pubmerge."""

from pubmerge.utils.timestamps import get_iso_timestamp

__all__ = ["get_iso_timestamp"]
