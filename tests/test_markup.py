"""
Unit tests for the body markup → text converter.
"""

from core.markup import html_to_text


class TestHtmlToText:
    """Tests for html_to_text."""

    def test_heading_paragraph_and_line_break(self):
        """Heading, blank line, then the paragraph with its line break."""
        text = html_to_text("<h1>Title</h1><p>Hello<br/>World</p>")
        assert text == "# Title\n\nHello\nWorld"
        assert "<" not in text

    def test_heading_levels(self):
        text = html_to_text('<h2 class="x">Setup</h2><h4>Details</h4>')
        assert text == "## Setup\n\n#### Details"

    def test_scripts_and_styles_removed_with_contents(self):
        html = (
            "<style>.a{color:red}</style><p>Visible</p>"
            "<script type='text/javascript'>alert('x')</script>"
        )
        text = html_to_text(html)
        assert text == "Visible"

    def test_list_items_become_bullets(self):
        text = html_to_text("<ul><li>First</li><li>Second</li></ul>")
        assert text == "• First\n• Second"

    def test_inline_code(self):
        text = html_to_text("<p>Run <code>SE38</code> now.</p>")
        assert text == "Run `SE38` now."

    def test_preformatted_block_becomes_fence(self):
        text = html_to_text("<p>Example:</p><pre><code>SELECT * FROM tcurr.</code></pre>")
        assert text == "Example:\n\n```\nSELECT * FROM tcurr.\n```"

    def test_unknown_tags_are_stripped(self):
        text = html_to_text('<div class="section"><span>Inner</span> <a href="#x">link</a></div>')
        assert text == "Inner link"

    def test_comments_are_stripped(self):
        assert html_to_text("<p>A<!-- hidden <b>x</b> -->B</p>") == "AB"

    def test_stray_angle_brackets_pass_through(self):
        """Text that is not a tag is kept instead of swallowed."""
        assert html_to_text("<p>a < b and c > d</p>") == "a < b and c > d"

    def test_angle_bracket_inside_attribute_value(self):
        """A quoted '>' in an attribute does not end the tag early."""
        assert html_to_text('<p><a title="a>b" href="#x">link</a></p>') == "link"

    def test_self_closing_paragraph_keeps_words_apart(self):
        assert html_to_text("One<p/>Two") == "One\n\nTwo"

    def test_markup_inside_preformatted_block_is_dropped(self):
        text = html_to_text("<pre><code>a</code><b>b</b></pre>")
        assert text == "```\nab\n```"

    def test_doctype_is_dropped(self):
        assert html_to_text("<!DOCTYPE html><p>Body</p>") == "Body"

    def test_entities_are_decoded(self):
        assert html_to_text("<p>Tom &amp; Jerry &lt;tag&gt;</p>") == "Tom & Jerry <tag>"

    def test_blank_line_runs_collapse(self):
        text = html_to_text("<p>One</p>\n\n   \n<p></p><p>Two</p>")
        assert text == "One\n\nTwo"

    def test_empty_input(self):
        assert html_to_text("") == ""
