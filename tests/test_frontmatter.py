"""Tests for sync_agents.frontmatter -- metadata block codec."""

import pytest

from sync_agents.errors import FrontmatterError, SyncAgentsError
from sync_agents.frontmatter import parse, serialize

# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


class TestParse:
    def test_metadata_and_body(self):
        text = "---\nname: foo\ndescription: does X\n---\n\nBody text.\n"
        assert parse(text) == (
            {"name": "foo", "description": "does X"},
            "Body text.\n",
        )

    def test_body_without_blank_separator(self):
        assert parse("---\nname: foo\n---\nBody") == ({"name": "foo"}, "Body")

    def test_only_one_blank_line_is_consumed(self):
        meta, body = parse("---\nname: foo\n---\n\n\nBody")
        assert body == "\nBody"

    def test_no_opening_marker_means_no_metadata(self):
        text = "# Title\n\nname: foo\n"
        assert parse(text) == ({}, text)

    def test_unclosed_block_is_all_body(self):
        text = "---\nname: foo\nno closing marker\n"
        assert parse(text) == ({}, text)

    def test_empty_block(self):
        assert parse("---\n---\n\nBody") == ({}, "Body")

    def test_marker_inside_body_is_kept(self):
        meta, body = parse("---\nname: a\n---\nText\n---\nMore\n")
        assert meta == {"name": "a"}
        assert body == "Text\n---\nMore\n"

    def test_crlf_line_endings(self):
        meta, body = parse("---\r\nname: foo\r\n---\r\n\r\nBody\r\n")
        assert meta == {"name": "foo"}
        assert body == "Body\r\n"

    def test_key_order_preserved(self):
        meta, _ = parse("---\nzeta: 1\nalpha: 2\nname: x\n---\n")
        assert list(meta) == ["zeta", "alpha", "name"]

    def test_invalid_yaml_raises(self):
        with pytest.raises(FrontmatterError, match="Invalid YAML"):
            parse("---\nname: [unclosed\n---\nBody")

    def test_non_mapping_root_raises(self):
        with pytest.raises(FrontmatterError, match="mapping"):
            parse("---\n- a\n- b\n---\nBody")

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse("---\n- a\n---\n")
        assert issubclass(FrontmatterError, SyncAgentsError)


# ---------------------------------------------------------------------------
# serialize
# ---------------------------------------------------------------------------


class TestSerialize:
    def test_block_then_one_blank_line(self):
        text = serialize({"name": "foo", "description": "does X"}, "Body\n")
        assert text == "---\nname: foo\ndescription: does X\n---\n\nBody\n"

    def test_empty_metadata_still_emits_block(self):
        assert serialize({}, "Body") == "---\n---\n\nBody"

    def test_key_order_not_sorted(self):
        text = serialize({"name": "x", "alpha": "y"}, "")
        assert text.index("name:") < text.index("alpha:")

    def test_unicode_not_escaped(self):
        assert "café" in serialize({"description": "café"}, "")

    def test_unicode_line_breaks_escaped(self):
        text = serialize({"description": "a\u2028b"}, "")
        assert "\u2028" not in text
        assert parse(text)[0] == {"description": "a\u2028b"}


class TestRoundTrip:
    @pytest.mark.parametrize(
        "metadata, body",
        [
            ({"name": "foo", "description": "does X"}, "Body\n"),
            ({}, ""),
            ({"name": "bar", "description": "helps. Original model: m1"}, "x"),
            ({"count": 3, "enabled": True, "note": "---"}, "\n\nleading blanks"),
            ({"name": "q"}, "---\nlooks like a block\n---\n"),
            ({"\x85": None}, ""),
            ({"description": "line\u2028sep", "note": "para\u2029sep"}, ""),
            ({"description": "caf\u00e9 \x85 end"}, "Body\n"),
        ],
    )
    def test_parse_inverts_serialize(self, metadata, body):
        assert parse(serialize(metadata, body)) == (metadata, body)
