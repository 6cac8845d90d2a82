"""Tests for the unified diff parser."""

import pytest

from gitpane.git.diff_parser import DiffParser, parse_diff
from gitpane.git.errors import ParseError
from gitpane.git.models import ChangeKind, Hunk, LineKind


class TestBasicParsing:
    def test_added_file(self, sample_diff_added):
        diff = DiffParser(sample_diff_added).parse()

        assert len(diff) == 1
        change = diff.files[0]
        assert change.kind == ChangeKind.ADDED
        assert change.old_path is None
        assert change.new_path == "hello.py"
        assert change.new_mode == "100644"

        (hunk,) = change.hunks
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (0, 0, 1, 3)
        assert all(line.kind == LineKind.ADDED for line in hunk.lines)
        assert hunk.lines[0].text == "def greet(name):"
        assert hunk.lines[2].text == ""

    def test_modified_hunk_reconciles_with_header(self, sample_diff_modified):
        (change,) = parse_diff(sample_diff_modified)
        (hunk,) = change.hunks

        assert change.kind == ChangeKind.MODIFIED
        assert change.path == "notes.txt"
        assert hunk.old_count == 3
        assert hunk.new_count == 4
        kinds = [line.kind for line in hunk.lines]
        assert kinds == [
            LineKind.REMOVED,
            LineKind.CONTEXT,
            LineKind.CONTEXT,
            LineKind.ADDED,
            LineKind.ADDED,
        ]
        assert hunk.removed + kinds.count(LineKind.CONTEXT) == hunk.old_count
        assert hunk.added + kinds.count(LineKind.CONTEXT) == hunk.new_count

    def test_deleted_file(self, sample_diff_deleted):
        (change,) = parse_diff(sample_diff_deleted)
        assert change.kind == ChangeKind.DELETED
        assert change.new_path is None
        assert change.old_path == "gone.txt"
        assert change.path == "gone.txt"
        assert change.hunks[0].removed == 2

    def test_multiple_files_keep_order(self, sample_diff_modified, sample_diff_added):
        diff = parse_diff(sample_diff_modified + sample_diff_added)
        assert [c.path for c in diff] == ["notes.txt", "hello.py"]

    def test_empty_input(self):
        diff = parse_diff("")
        assert diff.is_empty
        assert len(diff) == 0

    def test_parsing_is_deterministic(self, sample_diff_rename, sample_diff_modified):
        text = sample_diff_rename + sample_diff_modified
        assert parse_diff(text) == parse_diff(text)


class TestHunkHeaders:
    def test_single_line_hunk_header(self):
        """Hunk header without comma implies count=1."""
        diff = (
            "diff --git a/f.txt b/f.txt\n"
            "index abc..def 100644\n"
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1 +1 @@\n"
            "-old line\n"
            "+replaced line\n"
        )
        (hunk,) = parse_diff(diff).files[0].hunks
        assert hunk.old_count == 1
        assert hunk.new_count == 1
        assert hunk.header == "@@ -1,1 +1,1 @@"

    def test_section_heading(self):
        diff = (
            "diff --git a/app.py b/app.py\n"
            "--- a/app.py\n"
            "+++ b/app.py\n"
            "@@ -10,2 +10,2 @@ def handler(request):\n"
            " context\n"
            "-before\n"
            "+after\n"
            " context\n"
        )
        (hunk,) = parse_diff(diff).files[0].hunks
        assert hunk.section == "def handler(request):"
        assert hunk.header == "@@ -10,2 +10,2 @@ def handler(request):"

    def test_several_hunks(self):
        diff = (
            "diff --git a/f.txt b/f.txt\n"
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "+A\n"
            "@@ -20,0 +21,1 @@\n"
            "+appended\n"
        )
        hunks = parse_diff(diff).files[0].hunks
        assert [h.new_start for h in hunks] == [1, 21]

    def test_header_property_matches_hunk(self):
        hunk = Hunk(old_start=3, old_count=0, new_start=4, new_count=2)
        assert hunk.header == "@@ -3,0 +4,2 @@"


class TestEdgeCases:
    def test_binary_file(self, sample_diff_binary):
        (change,) = parse_diff(sample_diff_binary)
        assert change.kind == ChangeKind.BINARY
        assert change.path == "image.png"
        assert change.hunks == ()

    def test_binary_patch_payload_is_skipped(self):
        diff = (
            "diff --git a/blob.bin b/blob.bin\n"
            "index 1234567..abcdef0 100644\n"
            "GIT binary patch\n"
            "literal 4\n"
            "LcmZQzWMT#Y01f~L\n"
            "\n"
            "literal 0\n"
            "HcmV?d00001\n"
            "\n"
            "diff --git a/next.txt b/next.txt\n"
            "--- a/next.txt\n"
            "+++ b/next.txt\n"
            "@@ -1 +1 @@\n"
            "-x\n"
            "+y\n"
        )
        parsed = parse_diff(diff)
        assert [c.kind for c in parsed] == [ChangeKind.BINARY, ChangeKind.MODIFIED]

    def test_rename_tracked(self, sample_diff_rename):
        (change,) = parse_diff(sample_diff_rename)
        assert change.kind == ChangeKind.RENAMED
        assert change.old_path == "old_name.py"
        assert change.new_path == "new_name.py"
        assert change.similarity == 97
        assert len(change.hunks) == 1

    def test_pure_copy(self):
        diff = (
            "diff --git a/a.txt b/b.txt\n"
            "similarity index 100%\n"
            "copy from a.txt\n"
            "copy to b.txt\n"
        )
        (change,) = parse_diff(diff)
        assert change.kind == ChangeKind.COPIED
        assert change.old_path == "a.txt"
        assert change.new_path == "b.txt"
        assert change.similarity == 100
        assert change.hunks == ()

    def test_mode_only(self, sample_diff_mode_only):
        (change,) = parse_diff(sample_diff_mode_only)
        assert change.kind == ChangeKind.MODIFIED
        assert change.old_mode == "100644"
        assert change.new_mode == "100755"
        assert change.hunks == ()

    def test_no_newline_marks_preceding_line(self, sample_diff_no_newline):
        (change,) = parse_diff(sample_diff_no_newline)
        removed, added = change.hunks[0].lines
        assert removed.kind == LineKind.REMOVED
        assert removed.no_newline_at_eof is True
        assert added.no_newline_at_eof is False

    def test_body_lines_that_look_like_headers(self, sample_diff_header_lookalikes):
        (change,) = parse_diff(sample_diff_header_lookalikes)
        lines = change.hunks[0].lines
        assert [(line.kind, line.text) for line in lines] == [
            (LineKind.REMOVED, "-- a/fake"),
            (LineKind.ADDED, "++ b/fake"),
            (LineKind.CONTEXT, "--"),
        ]

    def test_show_preamble_skipped(self, sample_show):
        diff = parse_diff(sample_show)
        assert [c.path for c in diff] == ["hello.py"]

    def test_log_patch_with_several_commits(self, sample_show):
        diff = parse_diff(sample_show + "\n" + sample_show)
        assert len(diff) == 2

    def test_tag_header_skipped(self, sample_diff_modified):
        text = (
            "tag v1.0\n"
            "Tagger: Test <test@test.com>\n"
            "\n"
            "release v1.0\n"
            "\n" + sample_diff_modified
        )
        assert [c.path for c in parse_diff(text)] == ["notes.txt"]

    def test_unmerged_path_line_recorded(self, sample_diff_modified):
        diff = parse_diff("* Unmerged path conflicted.txt\n" + sample_diff_modified)
        unmerged, modified = diff
        assert unmerged.kind == ChangeKind.UNMERGED
        assert unmerged.old_path == unmerged.new_path == "conflicted.txt"
        assert unmerged.hunks == ()
        assert modified.path == "notes.txt"

    def test_combined_section_recorded_without_hunks(self, sample_diff_modified):
        text = (
            "diff --cc merged.txt\n"
            "index 1111111,2222222..0000000\n"
            "--- a/merged.txt\n"
            "+++ b/merged.txt\n"
            "@@@ -1,1 -1,1 +1,5 @@@\n"
            "++<<<<<<< HEAD\n"
            " +ours\n"
            "++=======\n"
            "+ theirs\n"
            "++>>>>>>> feature\n" + sample_diff_modified
        )
        combined, modified = parse_diff(text)
        assert combined.kind == ChangeKind.COMBINED
        assert combined.old_path == combined.new_path == "merged.txt"
        assert combined.hunks == ()
        assert modified.path == "notes.txt"

    def test_quoted_combined_path(self):
        (change,) = parse_diff('diff --cc "caf\\303\\251.txt"\n')
        assert change.path == "café.txt"

    def test_empty_line_is_blank_context(self):
        # diff.suppressBlankEmpty prints a blank context line with no prefix
        diff = (
            "diff --git a/b.txt b/b.txt\n"
            "--- a/b.txt\n"
            "+++ b/b.txt\n"
            "@@ -1,3 +1,3 @@\n"
            " one\n"
            "\n"
            "-three\n"
            "+THREE\n"
        )
        (change,) = parse_diff(diff)
        assert [(line.kind, line.text) for line in change.hunks[0].lines] == [
            (LineKind.CONTEXT, "one"),
            (LineKind.CONTEXT, ""),
            (LineKind.REMOVED, "three"),
            (LineKind.ADDED, "THREE"),
        ]


class TestPaths:
    def test_path_with_spaces(self):
        diff = (
            "diff --git a/my file.txt b/my file.txt\n"
            "index 1234567..abcdef0 100644\n"
            "--- a/my file.txt\t\n"
            "+++ b/my file.txt\t\n"
            "@@ -1 +1 @@\n"
            "-x\n"
            "+y\n"
        )
        (change,) = parse_diff(diff)
        assert change.old_path == "my file.txt"
        assert change.new_path == "my file.txt"

    def test_quoted_utf8_path(self):
        diff = (
            'diff --git "a/caf\\303\\251.txt" "b/caf\\303\\251.txt"\n'
            "new file mode 100644\n"
            "index 0000000..abcdef0\n"
            "--- /dev/null\n"
            '+++ "b/caf\\303\\251.txt"\n'
            "@@ -0,0 +1 @@\n"
            "+bonjour\n"
        )
        (change,) = parse_diff(diff)
        assert change.new_path == "café.txt"
        assert change.kind == ChangeKind.ADDED

    def test_quoted_rename_headers(self):
        diff = (
            'diff --git a/plain.txt "b/tab\\there.txt"\n'
            "similarity index 100%\n"
            "rename from plain.txt\n"
            'rename to "tab\\there.txt"\n'
        )
        (change,) = parse_diff(diff)
        assert change.old_path == "plain.txt"
        assert change.new_path == "tab\there.txt"


class TestErrors:
    def test_hunk_ends_early(self):
        diff = (
            "diff --git a/f.txt b/f.txt\n"
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1,2 +1,2 @@\n"
            " only one line\n"
        )
        with pytest.raises(ParseError, match="ends early") as exc_info:
            parse_diff(diff)
        assert exc_info.value.line_no == 4
        assert exc_info.value.path == "f.txt"

    def test_body_overruns_header_counts(self):
        diff = (
            "diff --git a/f.txt b/f.txt\n"
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1,1 +1,2 @@\n"
            "-a\n"
            "-b\n"
        )
        with pytest.raises(ParseError) as exc_info:
            parse_diff(diff)
        assert exc_info.value.line_no == 6
        assert exc_info.value.line == "-b"

    def test_surplus_line_after_hunk(self):
        diff = (
            "diff --git a/f.txt b/f.txt\n"
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "+b\n"
            "+c\n"
        )
        with pytest.raises(ParseError):
            parse_diff(diff)

    def test_unrecognized_extended_header(self):
        diff = "diff --git a/f.txt b/f.txt\nbogus header\n"
        with pytest.raises(ParseError, match="unrecognized extended header") as exc_info:
            parse_diff(diff)
        assert exc_info.value.line_no == 2

    def test_malformed_hunk_header(self):
        diff = (
            "diff --git a/f.txt b/f.txt\n"
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -x +1 @@\n"
        )
        with pytest.raises(ParseError, match="malformed hunk header"):
            parse_diff(diff)

    def test_minus_without_plus(self):
        diff = "diff --git a/f.txt b/f.txt\n--- a/f.txt\n@@ -1 +1 @@\n"
        with pytest.raises(ParseError):
            parse_diff(diff)

    def test_no_newline_marker_first(self):
        diff = (
            "diff --git a/f.txt b/f.txt\n"
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1 +1 @@\n"
            "\\ No newline at end of file\n"
            "-a\n"
            "+b\n"
        )
        with pytest.raises(ParseError, match="no newline"):
            parse_diff(diff)

    def test_text_that_is_not_a_diff(self):
        with pytest.raises(ParseError, match="outside a file section") as exc_info:
            parse_diff("this is not a diff\nat all\n")
        assert exc_info.value.line_no == 1

    def test_stat_output_is_not_a_diff(self):
        text = " README.md | 2 +-\n 1 file changed, 1 insertion(+), 1 deletion(-)\n"
        with pytest.raises(ParseError):
            parse_diff(text)

    def test_stray_text_between_file_sections(self, sample_diff_modified):
        with pytest.raises(ParseError) as exc_info:
            parse_diff(sample_diff_modified + "garbage\n")
        assert exc_info.value.path == "notes.txt"

    def test_error_message_carries_context(self):
        diff = "diff --git a/f.txt b/f.txt\nbogus header\n"
        with pytest.raises(ParseError) as exc_info:
            parse_diff(diff)
        message = str(exc_info.value)
        assert "f.txt" in message
        assert "line 2" in message
        assert "bogus header" in message
