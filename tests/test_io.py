"""Tests for the CSV reader and the image sink."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from piecharter.core.errors import SinkError, SourceError
from piecharter.core.models import RenderedImage
from piecharter.core.reader import read_rows
from piecharter.core.sink import ImageSink, image_filename

FAKE_PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _image() -> RenderedImage:
    return RenderedImage(data=FAKE_PNG, width=10, height=10)


# ---------------------------------------------------------------------------
# read_rows
# ---------------------------------------------------------------------------

class TestReadRows:
    def test_cells_are_text(self, tmp_path):
        src = tmp_path / "a.csv"
        src.write_text("Filename,Field1,Field2\nc1,10,2.5\n", encoding="utf-8")
        assert read_rows(src) == [{"Filename": "c1", "Field1": "10", "Field2": "2.5"}]

    def test_empty_cells_stay_empty(self, tmp_path):
        src = tmp_path / "a.csv"
        src.write_text("Filename,Field1,Field2\nc1,,NA\n", encoding="utf-8")
        rows = read_rows(src)
        assert rows[0]["Field1"] == ""
        assert rows[0]["Field2"] == "NA"

    def test_identifier_not_coerced(self, tmp_path):
        src = tmp_path / "a.csv"
        src.write_text("Filename,Field1\n007,1\n", encoding="utf-8")
        assert read_rows(src)[0]["Filename"] == "007"

    def test_header_whitespace_stripped(self, tmp_path):
        src = tmp_path / "a.csv"
        src.write_text("Filename, Field1\nc1, 4\n", encoding="utf-8")
        assert read_rows(src) == [{"Filename": "c1", "Field1": "4"}]

    def test_bom_is_ignored(self, tmp_path):
        src = tmp_path / "a.csv"
        src.write_bytes("\ufeffFilename,Field1\nc1,1\n".encode("utf-8"))
        assert list(read_rows(src)[0]) == ["Filename", "Field1"]

    def test_trailing_delimiter_keeps_columns(self, tmp_path):
        src = tmp_path / "a.csv"
        src.write_text("Filename,Field1,Field2\nchart1,10,20,\nchart2,1,2,\n", encoding="utf-8")
        assert read_rows(src) == [
            {"Filename": "chart1", "Field1": "10", "Field2": "20"},
            {"Filename": "chart2", "Field1": "1", "Field2": "2"},
        ]

    def test_header_only(self, tmp_path):
        src = tmp_path / "a.csv"
        src.write_text("Filename,Field1\n", encoding="utf-8")
        assert read_rows(src) == []

    def test_empty_file(self, tmp_path):
        src = tmp_path / "a.csv"
        src.write_text("", encoding="utf-8")
        assert read_rows(src) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceError):
            read_rows(tmp_path / "nope.csv")


# ---------------------------------------------------------------------------
# ImageSink
# ---------------------------------------------------------------------------

class TestImageFilename:
    def test_plain_id(self):
        assert image_filename("chart1") == "chart1.png"

    def test_separators_replaced(self):
        assert image_filename("a/b\\c") == "a_b_c.png"

    def test_dot_ids(self):
        assert image_filename("..") == "__.png"


class TestImageSink:
    def test_creates_directory(self, tmp_path):
        sink = ImageSink(tmp_path / "nested" / "out")
        path = sink.write("chart1", _image())
        assert path == tmp_path / "nested" / "out" / "chart1.png"
        assert path.read_bytes() == FAKE_PNG

    def test_idempotent_directory(self, tmp_path):
        sink = ImageSink(tmp_path)
        sink.write("a", _image())
        sink.write("b", _image())
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.png", "b.png"]

    def test_overwrites_existing(self, tmp_path):
        sink = ImageSink(tmp_path)
        (tmp_path / "a.png").write_bytes(b"old")
        sink.write("a", _image())
        assert (tmp_path / "a.png").read_bytes() == FAKE_PNG

    def test_write_error_wrapped(self, tmp_path):
        sink = ImageSink(tmp_path)
        with patch.object(Path, "write_bytes", side_effect=PermissionError("denied")):
            with pytest.raises(SinkError) as exc_info:
                sink.write("a", _image())
        assert exc_info.value.context["row_id"] == "a"

    def test_nul_byte_in_id_wrapped(self, tmp_path):
        sink = ImageSink(tmp_path)
        with pytest.raises(SinkError) as exc_info:
            sink.write("a\x00b", _image())
        assert exc_info.value.context["row_id"] == "a\x00b"
