"""
Tests for CSV quoting, newline flattening and parsing.
"""

import csv

import pytest

from mss_widget.core.csv_codec import decode, encode_row, encode_rows, parse_header_line, to_cell


class TestEncoding:
    """Encoding rules for single records."""

    def test_plain_values_are_not_quoted(self):
        assert encode_row(["2024-01-01", "u1", 95]) == "2024-01-01,u1,95\n"

    def test_comma_and_quote_values_are_quoted(self):
        line = encode_row(["a,b", 'he said "hi"', "plain"])
        assert line == '"a,b","he said ""hi""",plain\n'

    def test_none_is_empty(self):
        assert encode_row([None, 1, ""]) == ",1,\n"

    def test_line_breaks_flatten_to_single_space(self):
        assert to_cell("line1\nline2") == "line1 line2"
        assert to_cell("line1\r\nline2") == "line1 line2"
        assert to_cell("line1\rline2") == "line1 line2"
        assert encode_row(['he said "hi"\nline2']) == '"he said ""hi"" line2"\n'

    def test_encode_rows_concatenates_lines(self):
        assert encode_rows([["h1", "h2"], ["1", "2"]]) == "h1,h2\n1,2\n"

    def test_encode_rows_keeps_parsed_line_breaks(self):
        text = 'a,b\n"x\ny",1\n'
        assert encode_rows(decode(text)) == text


class TestDecoding:
    """Parsing is the inverse of encoding."""

    def test_decode_quoted_fields(self):
        text = 'a,b\n"x,1","y""z"\n'
        assert decode(text) == [["a", "b"], ["x,1", 'y"z']]

    def test_round_trip_of_awkward_values(self):
        values = ["a,b", '"quoted"', "trailing,", ' spaced ', "", "ünïcode"]
        assert decode(encode_row(values)) == [values]

    def test_quoted_field_may_span_lines(self):
        text = 'h\n"line1\nline2"\n'
        assert decode(text) == [["h"], ["line1\nline2"]]

    def test_blank_lines_are_skipped(self):
        assert decode("a,b\n\n1,2\n\n") == [["a", "b"], ["1", "2"]]

    def test_malformed_quoting_raises(self):
        with pytest.raises(csv.Error):
            decode('a,b\n"x"y,1\n')

    def test_parse_header_line_strips_names(self):
        assert parse_header_line("timestamp, ip ,userId\n") == ["timestamp", "ip", "userId"]
        assert parse_header_line("") == []
