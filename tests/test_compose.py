"""
Tests for laying out log lines.
"""

from qdebug.compose import compose
from qdebug.render import END_COLOR, YELLOW


class TestLayout:
    """Test placement of blobs on lines."""

    def test_single_line(self):
        assert compose(["a=1", "b=2", "c=3"], "0.000s", color=False) == "0.000s a=1 b=2 c=3\n"

    def test_no_args(self):
        assert compose([], "0.000s", color=False) == "0.000s \n"

    def test_wraps_at_width(self):
        """Blobs that would cross column 80 move to an indented line."""
        args = ["x" * 10] * 10
        text = compose(args, "0.000s", color=False)
        lines = text.rstrip("\n").split("\n")
        assert len(lines) == 2
        assert lines[0] == "0.000s " + " ".join(["x" * 10] * 6)
        assert lines[1] == " " * 7 + " ".join(["x" * 10] * 4)
        assert all(len(line) <= 80 for line in lines)

    def test_exact_fit_not_wrapped(self):
        """A line of exactly 80 columns stays whole."""
        text = compose(["x" * 73], "0.000s", color=False)
        assert text == "0.000s " + "x" * 73 + "\n"
        text = compose(["x" * 36, "y" * 36], "0.000s", color=False)
        assert text.count("\n") == 1

    def test_oversized_first_blob(self):
        """A blob wider than the line is never pushed to a new line by itself."""
        text = compose(["x" * 100], "0.000s", color=False)
        assert text == "0.000s " + "x" * 100 + "\n"

    def test_oversized_blob_after_another(self):
        text = compose(["short", "x" * 100], "0.000s", color=False)
        assert text == "0.000s short\n" + " " * 7 + "x" * 100 + "\n"

    def test_width_counter_reset_after_break(self):
        """After a wrap the new line counts from the indent."""
        args = ["a" * 70, "b" * 70, "c"]
        text = compose(args, "0.000s", color=False)
        lines = text.rstrip("\n").split("\n")
        assert lines == ["0.000s " + "a" * 70, " " * 7 + "b" * 70 + " c"]

    def test_custom_width(self):
        text = compose(["aaaa", "bbbb"], "0.000s", max_width=12, color=False)
        assert text == "0.000s aaaa\n       bbbb\n"


class TestIndentation:
    """Test alignment of multi-line blobs."""

    def test_embedded_newlines_indented(self):
        blob = "a=Point{\n    x: 1,\n}"
        text = compose([blob], "0.000s", color=False)
        assert text == "0.000s a=Point{\n" + " " * 7 + "    x: 1,\n" + " " * 7 + "}\n"

    def test_indent_tracks_timestamp_width(self):
        text = compose(["a\nb"], "12.345s", color=False)
        assert text == "12.345s a\n        b\n"


class TestColor:
    """Test timestamp coloring."""

    def test_timestamp_yellow(self):
        text = compose(["a"], "0.000s")
        assert text == f"{YELLOW}0.000s{END_COLOR} a\n"

    def test_color_ignored_for_width(self):
        """Color codes don't count toward the line width."""
        colored = ["\033[36m" + "x" * 36 + "\033[0m"] * 2
        assert compose(colored, "0.000s").count("\n") == 1
