"""
Page ingestion: strip the fixed preamble and decode the scene body.
"""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Union

from .constants import PREAMBLE_LENGTH
from .errors import InputUnavailable, MalformedScene, TruncatedInput
from .parser import Layer, decode_scene

logger = logging.getLogger(__name__)


def ingest(raw: Union[bytes, BinaryIO]) -> list[Layer]:
    """
    Decode one page record into its layers.

    The preamble is skipped without being checked; a malformed header of
    the right size is only caught if the body then fails to decode.

    Args:
        raw: Page record bytes, or a readable binary stream positioned at
            the start of the record

    Raises:
        TruncatedInput: fewer than PREAMBLE_LENGTH bytes available
        MalformedScene: the decoder rejected the body
        InputUnavailable: reading the stream failed
    """
    if isinstance(raw, (bytes, bytearray, memoryview)):
        data = raw
    else:
        try:
            data = raw.read()
        except (OSError, ValueError) as e:
            raise InputUnavailable(f"Can't read page record: {e}") from e
    if len(data) < PREAMBLE_LENGTH:
        raise TruncatedInput(
            f"Page record is {len(data)} bytes, preamble needs {PREAMBLE_LENGTH}"
        )

    body = io.BytesIO(bytes(data[PREAMBLE_LENGTH:]))
    try:
        scene = decode_scene(body)
    except (ValueError, EOFError) as e:
        raise MalformedScene(f"Can't decode scene: {e}") from e

    logger.debug("Decoded %d layers from %d bytes", len(scene.layers), len(data))
    return scene.layers
