"""
In-memory render results.
"""

from __future__ import annotations

import io


class SeekCloser(io.BytesIO):
    """
    Readable, seekable bytes whose close() does nothing.

    Lets callers close a result the same way whether it came from a file
    or from memory, as often as they like.
    """

    def close(self) -> None:
        pass
