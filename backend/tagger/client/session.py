"""
Image Tagger — Client Session Store
=====================================

What:  Remembers which user is logged in across client restarts.
How:   A small JSON file ({"name": "<user>"}) written with aiofiles. There is
       no expiry: the name stays until clear() (logout) removes the file.
Who:   Workspace.sign_in / restore / sign_out.

A missing, unreadable or malformed file is treated as "not logged in".
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os

from tagger.config import settings

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Args:
        path: Session file location (default: settings.client_session_path).
              "~" is expanded.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(os.path.expanduser(str(path or settings.client_session_path)))

    async def load(self) -> Optional[str]:
        """Return the persisted username, or None."""
        if not await aiofiles.os.path.exists(self.path):
            return None
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None

        name = data.get("name") if isinstance(data, dict) else None
        if not isinstance(name, str) or not name:
            logger.warning("Ignoring session file %s without a name", self.path)
            return None
        return name

    async def save(self, name: str) -> None:
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
            await f.write(json.dumps({"name": name}))
        logger.debug("Session saved for %s", name)

    async def clear(self) -> None:
        try:
            await aiofiles.os.remove(self.path)
        except FileNotFoundError:
            return
        logger.debug("Session cleared")
