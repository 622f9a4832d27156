"""
Image Tagger — Python Client
==============================

What:  The presentation layer without a browser: everything the UI does,
       expressed as plain async Python objects.

Modules:
    - api.py:        TaggerClient, an httpx wrapper over the HTTP API
    - session.py:    SessionStore, keeps the logged-in name across restarts
    - pins.py:       PinDrag, per-pin drag state and drag math
    - viewer.py:     ImageViewer, comment mode and pin gestures over one image
    - workspace.py:  Workspace, the main screen (image list, selection, errors)
"""

from tagger.client.api import ApiError, TaggerClient
from tagger.client.pins import PinDrag, Point
from tagger.client.session import SessionStore
from tagger.client.viewer import Composer, ImageRect, ImageViewer
from tagger.client.workspace import Workspace

__all__ = [
    "ApiError",
    "Composer",
    "ImageRect",
    "ImageViewer",
    "PinDrag",
    "Point",
    "SessionStore",
    "TaggerClient",
    "Workspace",
]
