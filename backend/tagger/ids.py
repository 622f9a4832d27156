"""
Image Tagger Backend — Record Identifiers
===========================================

What:  Generates ULID identifiers for users, images and threads.
How:   python-ulid supplies the 48-bit timestamp + 80-bit random value; two ids
       minted in the same millisecond are forced into increasing order by
       bumping the previous value by one.
Who:   Called by the identity, content and thread services when creating records.

ULIDs render as 26 Crockford base32 characters, so lexicographic order of the
string form equals creation order. Storage backends rely on this to list
records chronologically.
"""

import threading
from typing import Optional

from ulid import ULID

_lock = threading.Lock()
_last: Optional[ULID] = None


def new_id() -> str:
    """Return a fresh ULID string strictly greater than every earlier one."""
    global _last
    with _lock:
        candidate = ULID()
        if _last is not None and int(candidate) <= int(_last):
            candidate = ULID.from_int(int(_last) + 1)
        _last = candidate
        return str(candidate)
