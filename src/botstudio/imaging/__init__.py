"""Image editing backend access."""

from botstudio.imaging.edit_client import EditResult, ImageEditClient

__all__ = [
    "EditResult",
    "ImageEditClient",
]
