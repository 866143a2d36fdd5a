"""Tests for block rendering."""

import pytest

from webclip.dom import Element
from webclip.services.blocks import code_language, quote_lines
from webclip.services.converter import MarkdownConverter


class TestParagraphsAndContainers:
    """Tests for paragraph-like containers."""

    def test_paragraphs_separated_by_blank_line(self, converter: MarkdownConverter):
        """Test consecutive paragraphs get exactly one blank line."""
        assert converter.convert("<p>a</p><p>b</p>") == "a\n\nb"

    def test_empty_container_adds_no_spacing(self, converter: MarkdownConverter):
        """Test empty blocks contribute nothing."""
        assert converter.convert("<p>a</p><div> </div><p></p><p>b</p>") == "a\n\nb"

    def test_mixed_inline_and_block_children(self, converter: MarkdownConverter):
        """Test inline runs between blocks become their own paragraphs."""
        assert converter.convert("<div>intro<p>para</p>outro</div>") == "intro\n\npara\n\noutro"

    def test_unknown_tags_are_transparent(self, converter: MarkdownConverter):
        """Test unknown wrappers render their children in place."""
        assert converter.convert("<p>a <span class='x'>b</span> <custom-tag>c</custom-tag></p>") == "a b c"

    def test_unknown_wrapper_around_code_block(self, converter: MarkdownConverter):
        """Test a code block inside a custom element stays verbatim."""
        md = converter.convert("<code-block><pre>def f():\n return 1</pre></code-block>")
        assert md == "```\ndef f():\n return 1\n```"

    def test_unknown_wrapper_around_list(self, converter: MarkdownConverter):
        """Test a list inside a span is still separated from the text before it."""
        md = converter.convert("<p>Intro <span><ul><li>a</li><li>b</li></ul></span></p>")
        assert md == "Intro\n\n- a\n- b"

    def test_definition_lists_render_as_blocks(self, converter: MarkdownConverter):
        """Test dt and dd become separate paragraphs."""
        assert converter.convert("<dl><dt>Term</dt><dd>Meaning</dd></dl>") == "Term\n\nMeaning"


class TestHeadings:
    """Tests for headings."""

    @pytest.mark.parametrize("level", [1, 2, 3, 4, 5, 6])
    def test_heading_levels(self, converter: MarkdownConverter, level: int):
        """Test each heading level maps to that many hashes."""
        assert converter.convert(f"<h{level}>Title</h{level}>") == f"{'#' * level} Title"

    def test_heading_collapses_line_breaks(self, converter: MarkdownConverter):
        """Test breaks inside a heading become spaces."""
        assert converter.convert("<h2>Title<br>Subtitle</h2>") == "## Title Subtitle"

    def test_empty_heading_dropped(self, converter: MarkdownConverter):
        """Test headings without text render nothing."""
        assert converter.convert("<h1> </h1><p>x</p>") == "x"

    def test_heading_keeps_inline_markup(self, converter: MarkdownConverter):
        """Test inline formatting inside headings is kept."""
        assert converter.convert("<h3>The <em>best</em> part</h3>") == "### The *best* part"


class TestCodeBlocks:
    """Tests for preformatted code."""

    def test_fenced_with_language(self, converter: MarkdownConverter):
        """Test language classes are attached to the fence."""
        md = converter.convert('<pre><code class="language-python">print(1)\n</code></pre>')
        assert md == "```python\nprint(1)\n```"

    def test_language_from_pre(self, converter: MarkdownConverter):
        """Test the pre element can carry the language."""
        md = converter.convert('<pre data-language="rust"><code>fn main() {}</code></pre>')
        assert md == "```rust\nfn main() {}\n```"

    def test_preserves_indentation_and_raw_text(self, converter: MarkdownConverter):
        """Test code is neither escaped nor reflowed."""
        md = converter.convert("<pre>def f(a_b):\n    return a_b * 2</pre>")
        assert md == "```\ndef f(a_b):\n    return a_b * 2\n```"

    def test_drops_leading_newline(self, converter: MarkdownConverter):
        """Test the newline directly after pre is ignored."""
        assert converter.convert("<pre>\nx = 1</pre>") == "```\nx = 1\n```"

    def test_line_breaks_inside_pre(self, converter: MarkdownConverter):
        """Test br elements inside code count as newlines."""
        assert converter.convert("<pre><code>l1<br>l2<br/>l3</code></pre>") == "```\nl1\nl2\nl3\n```"

    def test_fence_outgrows_inner_backticks(self, converter: MarkdownConverter):
        """Test code containing a fence gets a longer one."""
        md = converter.convert("<pre>a\n```\nb</pre>")
        assert md == "````\na\n```\nb\n````"

    def test_empty_pre_dropped(self, converter: MarkdownConverter):
        """Test whitespace-only code blocks render nothing."""
        assert converter.convert("<pre>  </pre>") == ""

    def test_code_language_helper(self):
        """Test code element hints win over pre hints."""
        code = Element("code", {"class": "hljs lang-js"})
        pre = Element("pre", {"class": "language-python"})
        assert code_language(code, pre) == "js"
        assert code_language(None, pre) == "python"
        assert code_language(None, Element("pre")) == ""


class TestBlockquotes:
    """Tests for blockquotes."""

    def test_quotes_every_line(self, converter: MarkdownConverter):
        """Test blank lines inside a quote carry a bare marker."""
        assert converter.convert("<blockquote><p>a</p><p>b</p></blockquote>") == "> a\n>\n> b"

    def test_nested_quotes_accumulate_markers(self, converter: MarkdownConverter):
        """Test each nesting level adds one marker."""
        md = converter.convert("<blockquote>outer<blockquote>inner</blockquote></blockquote>")
        assert md == "> outer\n>\n> > inner"

    def test_quote_containing_list(self, converter: MarkdownConverter):
        """Test lists inside quotes are quoted line by line."""
        md = converter.convert("<blockquote><ul><li>a</li><li>b</li></ul></blockquote>")
        assert md == "> - a\n> - b"

    def test_empty_quote_dropped(self, converter: MarkdownConverter):
        """Test quotes without content render nothing."""
        assert converter.convert("<blockquote> </blockquote>") == ""

    def test_quote_lines_helper(self):
        """Test quote_lines prefixes lines and marks blanks."""
        assert quote_lines("a\n\nb") == "> a\n>\n> b"


class TestDetailsFiguresRules:
    """Tests for details, figures and horizontal rules."""

    def test_details_become_callout(self, converter: MarkdownConverter):
        """Test summary is the callout title and the body is quoted."""
        md = converter.convert("<details><summary>More</summary><p>Body</p></details>")
        assert md == "> [!details] More\n> Body"

    def test_details_without_summary(self, converter: MarkdownConverter):
        """Test details without summary still render the body."""
        assert converter.convert("<details><p>Body</p></details>") == "> [!details]\n> Body"

    def test_figure_caption_follows_body(self, converter: MarkdownConverter):
        """Test figcaption is emitted after the figure body."""
        md = converter.convert(
            '<figure><figcaption>Cap</figcaption><img src="https://example.com/i.png" alt="I"></figure>'
        )
        assert md == "![I](https://example.com/i.png)\n\nCap"

    def test_horizontal_rule(self, converter: MarkdownConverter):
        """Test hr renders a thematic break between blocks."""
        assert converter.convert("<p>a</p><hr><p>b</p>") == "a\n\n---\n\nb"


class TestBlankLineCollapsing:
    """Tests for blank line limits."""

    def test_many_breaks_collapse(self, converter: MarkdownConverter):
        """Test runs of breaks never leave more than one blank line."""
        md = converter.convert("<p>a<br><br><br><br>b</p>")
        assert md == "a\n\nb"

    def test_never_three_newlines(self, converter: MarkdownConverter):
        """Test no output contains three consecutive newlines."""
        html = "<div><p>a</p>\n\n\n<div><div><p>b</p></div></div>\n<br><br><br><ul><li>c</li></ul></div>"
        assert "\n\n\n" not in converter.convert(html)
