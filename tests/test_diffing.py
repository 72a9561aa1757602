"""Tests for diff statistics and previews."""

from __future__ import annotations

import pytest

from multiedit_mcp.engine.diffing import (
    compute_diff_stats,
    compute_unified_diff,
    find_changed_lines,
    generate_change_preview,
    line_changes,
    split_lines,
)


class TestDiffStats:
    """Tests for compute_diff_stats."""

    def test_single_line_change(self) -> None:
        """Test a modified line counts as one removed and one added."""
        stats = compute_diff_stats("a\nb\nc\n", "a\nB\nc\n")
        assert stats.added == 1
        assert stats.removed == 1

    def test_identical(self) -> None:
        """Test no changes."""
        stats = compute_diff_stats("same\n", "same\n")
        assert (stats.added, stats.removed) == (0, 0)

    @pytest.mark.parametrize(
        ("original", "modified"),
        [
            ("a\nb\nc", "a\nc"),
            ("a", "a\nb\nc\nd"),
            ("", "new file\nwith lines\n"),
            ("one\ntwo\nthree\n", "uno\ndos\n"),
            ("x = 1\ny = 2\n", "x = 1\n# note\ny = 3\nz = 4\n"),
            ("a", "a\n"),
            ("a\nb\n", "a\nb"),
            ("x\f\ny\n", "x\f\nz\n"),
        ],
    )
    def test_stats_match_line_count_delta(self, original: str, modified: str) -> None:
        """Test added - removed equals the change in line count."""
        stats = compute_diff_stats(original, modified)
        delta = len(split_lines(modified)) - len(split_lines(original))
        assert stats.added - stats.removed == delta

    def test_trailing_newline_added(self) -> None:
        """Test adding only a final newline counts as a changed line."""
        stats = compute_diff_stats("a", "a\n")
        assert (stats.added, stats.removed) == (1, 1)
        assert generate_change_preview("a", "a\n").splitlines() == ["   1 - a", "   1 + a"]

    def test_trailing_newline_removed(self) -> None:
        """Test dropping the final newline counts as a changed line."""
        stats = compute_diff_stats("a\nb\n", "a\nb")
        assert (stats.added, stats.removed) == (1, 1)

    def test_preview_consistent_with_stats(self) -> None:
        """Test +/- lines in an uncapped preview reproduce the stats."""
        original = "a\nb\nc\nd\n"
        modified = "a\nB\nd\ne\nf\n"
        stats = compute_diff_stats(original, modified)
        preview = generate_change_preview(original, modified, max_lines=100)
        plus = sum(1 for line in preview.splitlines() if line[5:6] == "+")
        minus = sum(1 for line in preview.splitlines() if line[5:6] == "-")
        assert (plus, minus) == (stats.added, stats.removed)


class TestChangePreview:
    """Tests for generate_change_preview."""

    def test_form_feed_does_not_split_lines(self) -> None:
        """Test line numbers count newlines only."""
        original = "x = 1\n\f\ny = 2\n"
        modified = "x = 1\n\f\ny = 3\n"
        preview = generate_change_preview(original, modified)
        assert preview.splitlines() == ["   3 - y = 2", "   3 + y = 3"]

    def test_crlf_endings_not_shown(self) -> None:
        """Test line endings are stripped from displayed text."""
        preview = generate_change_preview("a\r\nb\r\n", "a\r\nc\r\n")
        assert preview.splitlines() == ["   2 - b", "   2 + c"]

    def test_format(self) -> None:
        """Test `<line> <+/-> <text>` format with right-aligned numbers."""
        preview = generate_change_preview("keep\nold\n", "keep\nnew\n")
        assert preview.splitlines() == ["   2 - old", "   2 + new"]

    def test_cap_and_more_marker(self) -> None:
        """Test the preview is bounded with a trailing marker."""
        original = "\n".join(f"line {i}" for i in range(30))
        modified = "\n".join(f"LINE {i}" for i in range(30))
        preview = generate_change_preview(original, modified, max_lines=10)
        lines = preview.splitlines()
        assert len(lines) == 11
        assert lines[-1] == "... and 50 more changes"

    def test_no_marker_at_exact_cap(self) -> None:
        """Test no marker when changes fit exactly."""
        preview = generate_change_preview("a\nb", "c\nd", max_lines=4)
        assert "more changes" not in preview
        assert len(preview.splitlines()) == 4

    def test_line_numbers_for_insert(self) -> None:
        """Test added lines use the new file's numbering."""
        changes = line_changes("a\nb\n", "a\nx\nb\n")
        assert len(changes) == 1
        assert changes[0].kind == "added"
        assert changes[0].line_number == 2
        assert changes[0].text == "x"


class TestUnifiedDiff:
    """Tests for compute_unified_diff."""

    def test_headers_and_hunks(self) -> None:
        """Test unified diff headers and changed lines."""
        diff = compute_unified_diff("a\nb\n", "a\nc\n", "/tmp/f.txt")
        assert "--- a//tmp/f.txt" in diff
        assert "+++ b//tmp/f.txt" in diff
        assert "-b\n" in diff
        assert "+c\n" in diff

    def test_empty_for_identical(self) -> None:
        """Test no diff for identical content."""
        assert compute_unified_diff("a\n", "a\n", "f") == ""


class TestFindChangedLines:
    """Tests for find_changed_lines."""

    def test_lines_containing_replacement(self) -> None:
        """Test 1-based line numbers of lines holding the new text."""
        content = "a = NEW\nb = 2\nc = NEW + NEW\n"
        assert find_changed_lines(content, "NEW") == ([1, 3], 2)

    def test_limit(self) -> None:
        """Test only the first ten line numbers are listed, with the full total."""
        content = "\n".join(["hit"] * 15)
        lines, total = find_changed_lines(content, "hit")
        assert lines == list(range(1, 11))
        assert total == 15

    def test_multiline_replacement_uses_first_non_blank_line(self) -> None:
        """Test a multi-line replacement is located by its first non-blank line."""
        content = "import os\n\nimport sys\nprint(sys.argv)\n"
        assert find_changed_lines(content, "\nimport sys\nprint(sys.argv)") == ([3], 1)

    def test_deletion(self) -> None:
        """Test an empty replacement reports no lines."""
        assert find_changed_lines("abc\n", "") == ([], 0)
