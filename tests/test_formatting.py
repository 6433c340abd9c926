"""Tests for header formatting."""

from __future__ import annotations

import time

from termwatch.utils.formatting import (
    format_header,
    format_label,
    format_timestamp,
    header_padding,
    render_header,
)

NOW = time.mktime((2015, 4, 12, 10, 30, 0, 0, 0, -1))


class TestFormatLabel:
    def test_single_digit_is_right_justified(self):
        assert format_label(1) == "Every  1s: "

    def test_two_digits(self):
        assert format_label(15) == "Every 15s: "

    def test_wide_interval_is_not_truncated(self):
        assert format_label(120) == "Every 120s: "


class TestFormatTimestamp:
    def test_fixed_width_with_newline(self):
        ts = format_timestamp(NOW)
        assert ts == time.ctime(NOW) + "\n"
        assert len(ts) == 25
        assert ts.endswith("2015\n")


class TestHeaderPadding:
    def test_wide_terminal(self):
        # 80 - 11 - 25 - 7 + 5
        assert header_padding(80, "Every  1s: ", "echo hi", "x" * 25) == 42

    def test_clamps_to_zero(self):
        assert header_padding(10, "Every  1s: ", "a very long command line", "x" * 25) == 0

    def test_exact_boundary(self):
        # W == L + C + T - 5 gives zero padding
        assert header_padding(11 + 7 + 25 - 5, "Every  1s: ", "echo hi", "x" * 25) == 0


class TestFormatHeader:
    def test_scenario_echo_hi(self):
        header = format_header(80, 1, "echo hi", NOW)
        assert header.startswith("Every  1s: echo hi ")

    def test_status_line_length(self):
        header = format_header(80, 1, "echo hi", NOW)
        line = header.split("\n", 1)[0] + "\n"
        label, command, ts = "Every  1s: ", "echo hi", format_timestamp(NOW)
        padding = 80 - len(label) - len(command) - len(ts) + 5
        assert len(line) == len(label) + len(command) + len(ts) + padding

    def test_rule_and_blank_line(self):
        header = format_header(40, 2, "date", NOW)
        lines = header.split("\n")
        assert lines[1] == "_" * 40
        assert lines[2] == ""
        assert header.endswith("_" * 40 + "\n\n")

    def test_narrow_terminal_has_no_padding(self):
        command = "x" * 100
        header = format_header(20, 2, command, NOW)
        assert header.startswith("Every  2s: " + command + time.ctime(NOW))


class TestRenderHeader:
    def test_writes_to_console(self, err_console):
        header = render_header(err_console, 80, 1, "echo hi", NOW)
        written = err_console.file.getvalue()
        assert "Every  1s: echo hi " in written
        assert "_" * 80 in written
        assert header.startswith("Every  1s: echo hi ")

    def test_command_text_written_unaltered(self, err_console):
        command = "printf 'a\tb'\x07 | cat"
        render_header(err_console, 80, 1, command, NOW)
        assert "Every  1s: " + command + " " in err_console.file.getvalue()
