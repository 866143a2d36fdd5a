"""Tests for utility functions."""

from webclip.utils import (
    build_text_fragment_url,
    collapse_whitespace,
    first_srcset_url,
    is_absolute_url,
    is_data_uri,
    parse_srcset,
    resolve_srcset,
    resolve_url,
    safe_markdown_url,
    strip_text_fragment,
)


class TestCollapseWhitespace:
    """Tests for collapse_whitespace function."""

    def test_collapses_mixed_whitespace(self):
        """Test newlines, tabs and non-breaking spaces collapse to one space."""
        assert collapse_whitespace("a \n\t b\u00a0c") == "a b c"

    def test_keeps_outer_space(self):
        """Test leading and trailing runs become single spaces, not nothing."""
        assert collapse_whitespace("  a  ") == " a "


class TestResolveUrl:
    """Tests for resolve_url function."""

    def test_resolves_relative_path(self):
        """Test relative paths are joined to the base."""
        assert resolve_url("/x", "https://example.com/a/b") == "https://example.com/x"

    def test_resolves_sibling_path(self):
        """Test document-relative paths are joined to the base directory."""
        assert resolve_url("img.png", "https://example.com/a/b") == "https://example.com/a/img.png"

    def test_keeps_absolute_url(self):
        """Test absolute URLs are unchanged."""
        assert resolve_url("https://other.org/y", "https://example.com/") == "https://other.org/y"

    def test_passes_data_uri_through(self):
        """Test data URIs are never resolved."""
        uri = "data:image/png;base64,AAAA"
        assert resolve_url(uri, "https://example.com/") == uri

    def test_without_base_returns_trimmed_value(self):
        """Test values are only trimmed when no base is known."""
        assert resolve_url(" rel/path ", None) == "rel/path"

    def test_unresolvable_value_is_kept(self):
        """Test a malformed URL falls back to the original value."""
        assert resolve_url("http://[broken", "https://example.com/") == "http://[broken"


class TestSrcset:
    """Tests for srcset helpers."""

    def test_parses_candidates_with_descriptors(self):
        """Test URL and descriptor pairs are split."""
        assert parse_srcset("a.jpg 1x, b.jpg 2x") == [("a.jpg", "1x"), ("b.jpg", "2x")]

    def test_parses_candidates_without_descriptors(self):
        """Test a trailing comma ends a candidate."""
        assert parse_srcset("a.jpg, b.jpg") == [("a.jpg", ""), ("b.jpg", "")]

    def test_keeps_commas_inside_urls(self):
        """Test commas inside a URL do not split it."""
        assert parse_srcset("https://example.com/i.jpg?w=1,2 100w") == [("https://example.com/i.jpg?w=1,2", "100w")]

    def test_first_url(self):
        """Test the first candidate URL is returned."""
        assert first_srcset_url(" small.jpg 300w, large.jpg 900w") == "small.jpg"
        assert first_srcset_url("") == ""

    def test_resolves_every_candidate(self):
        """Test each candidate is made absolute and descriptors kept."""
        result = resolve_srcset("/a.png 1x, /b.png 2x", "https://example.com/page")
        assert result == "https://example.com/a.png 1x, https://example.com/b.png 2x"


class TestUrlHelpers:
    """Tests for URL classification and encoding helpers."""

    def test_is_data_uri(self):
        """Test data URI detection ignores case and whitespace."""
        assert is_data_uri(" DATA:text/plain,hi")
        assert not is_data_uri("https://example.com/data:x")

    def test_is_absolute_url(self):
        """Test only URLs with scheme and host count as absolute."""
        assert is_absolute_url("https://example.com")
        assert is_absolute_url("file:///tmp/page.html")
        assert not is_absolute_url("/relative")
        assert not is_absolute_url("example.com/page")

    def test_safe_markdown_url_encodes_breaking_characters(self):
        """Test spaces and parentheses are percent-encoded."""
        assert safe_markdown_url("https://example.com/a (1).png") == "https://example.com/a%20%281%29.png"


class TestTextFragments:
    """Tests for text-fragment directive helpers."""

    def test_strips_directive(self):
        """Test the directive and its marker are removed."""
        assert strip_text_fragment("https://example.com/p#:~:text=hello") == "https://example.com/p"

    def test_keeps_preceding_anchor(self):
        """Test an element anchor before the directive survives."""
        assert strip_text_fragment("https://example.com/p#intro:~:text=hello") == "https://example.com/p#intro"

    def test_leaves_plain_urls_alone(self):
        """Test URLs without a directive are unchanged."""
        url = "https://example.com/p?q=1#intro"
        assert strip_text_fragment(url) == url

    def test_builds_exact_directive(self):
        """Test short selections are matched verbatim."""
        url = build_text_fragment_url("https://example.com/p", "Hello world")
        assert url == "https://example.com/p#:~:text=Hello%20world"

    def test_encodes_directive_syntax(self):
        """Test dash, comma and ampersand are percent-encoded."""
        url = build_text_fragment_url("https://example.com/p", "a-b, c&d")
        assert url == "https://example.com/p#:~:text=a%2Db%2C%20c%26d"

    def test_builds_range_for_multiline_text(self):
        """Test multi-line selections use first and last words."""
        text = "First line here now\nsecond\nlast words of selection"
        url = build_text_fragment_url("https://example.com/p", text)
        assert url == "https://example.com/p#:~:text=First%20line%20here,words%20of%20selection"

    def test_builds_range_for_long_text(self):
        """Test long single-line selections use a range."""
        text = " ".join(["word"] * 30) + " end"
        url = build_text_fragment_url("https://example.com/p", text)
        assert url.endswith("#:~:text=word%20word%20word,word%20word%20end")

    def test_replaces_existing_directive(self):
        """Test a previous directive is replaced, not extended."""
        url = build_text_fragment_url("https://example.com/p#:~:text=old", "new")
        assert url == "https://example.com/p#:~:text=new"

    def test_empty_text_returns_stripped_url(self):
        """Test blank selections produce no directive."""
        assert build_text_fragment_url("https://example.com/p#:~:text=old", "  \n ") == "https://example.com/p"
