"""Tests for page ingestion."""

from __future__ import annotations

import io
import struct

import pytest

from rmexport import ingest as ingest_module
from rmexport.errors import InputUnavailable, MalformedScene, TruncatedInput
from rmexport.ingest import ingest

from .conftest import line_block, page_record


class TestIngest:
    @pytest.mark.parametrize("size", [0, 1, 42])
    def test_short_input_never_reaches_decoder(self, monkeypatch, size) -> None:
        def fail(_):
            raise AssertionError("decoder called")

        monkeypatch.setattr(ingest_module, "decode_scene", fail)
        with pytest.raises(TruncatedInput):
            ingest(b"x" * size)

    def test_preamble_only_is_empty_scene(self) -> None:
        assert ingest(b"\x00" * 43) == []

    def test_preamble_not_validated(self) -> None:
        record = b"?" * 43 + line_block([(0, 0, 1), (1, 1, 1)])
        layers = ingest(record)
        assert len(layers[0].lines) == 1

    def test_accepts_stream(self, scenario_record) -> None:
        layers = ingest(io.BytesIO(scenario_record))
        assert len(layers[0].lines[0].points) == 3

    def test_decoder_error_wrapped(self, monkeypatch) -> None:
        cause = ValueError("boom")

        def fail(_):
            raise cause

        monkeypatch.setattr(ingest_module, "decode_scene", fail)
        with pytest.raises(MalformedScene) as exc_info:
            ingest(b"\x00" * 50)
        assert exc_info.value.__cause__ is cause

    def test_corrupt_body(self) -> None:
        record = page_record(struct.pack("<IBBBB", 500, 0, 1, 2, 5))
        with pytest.raises(MalformedScene) as exc_info:
            ingest(record)
        assert isinstance(exc_info.value.__cause__, EOFError)

    def test_input_not_mutated(self, scenario_record) -> None:
        data = bytearray(scenario_record)
        ingest(data)
        assert bytes(data) == scenario_record

    def test_closed_stream(self, scenario_record) -> None:
        stream = io.BytesIO(scenario_record)
        stream.close()
        with pytest.raises(InputUnavailable):
            ingest(stream)
