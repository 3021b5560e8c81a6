"""Tests for outline descriptor parsing."""
import pytest

from bookmarker.adapters.pdf.descriptor import parse_descriptor
from bookmarker.core.exceptions import PDFError


class TestParseDescriptor:
    def test_levels_from_dashes(self):
        rows = parse_descriptor("1||Root\n2|-|Child\n3|--|Grandchild\n9||Next")
        assert rows == [
            [1, "Root", 1],
            [2, "Child", 2],
            [3, "Grandchild", 3],
            [1, "Next", 9],
        ]

    def test_title_may_contain_pipes_and_be_empty(self):
        assert parse_descriptor("4||a|b\n5||") == [[1, "a|b", 4], [1, "", 5]]

    def test_blank_lines_skipped(self):
        assert parse_descriptor("1||A\n\n2||B\n") == [[1, "A", 1], [1, "B", 2]]

    def test_empty_descriptor(self):
        assert parse_descriptor("") == []

    @pytest.mark.parametrize("descriptor", [
        "x||Title",
        "1|Title",
        "1|-x|Title",
    ])
    def test_malformed_line(self, descriptor):
        with pytest.raises(PDFError):
            parse_descriptor(descriptor)

    def test_level_skip_rejected(self):
        with pytest.raises(PDFError):
            parse_descriptor("1||Root\n2|--|Too deep")

    def test_first_line_must_be_root(self):
        with pytest.raises(PDFError):
            parse_descriptor("1|-|Orphan")
