from __future__ import annotations

from cardfolio.domain.richtext import Format, FormatResult, apply_format, render_fragments, render_html


def test_bold_wraps_selection():
    result = apply_format("say hello now", 4, 9, Format.BOLD)
    assert result == FormatResult("say **hello** now", 6, 11)
    assert result.text[result.selection_start : result.selection_end] == "hello"


def test_bold_toggles_off():
    result = apply_format("say **hello** now", 6, 11, "bold")
    assert result.text == "say hello now"


def test_italic_inside_bold_is_not_confused():
    result = apply_format("**hello**", 2, 7, Format.ITALIC)
    assert result.text == "***hello***"


def test_bullet_and_link():
    assert apply_format("item", 0, 4, Format.BULLET).text == "• item"
    assert apply_format("• item", 0, 6, Format.BULLET).text == "item"

    link = apply_format("docs", 0, 4, Format.LINK)
    assert link.text == "[docs](url)"
    assert link.text[link.selection_start : link.selection_end] == "docs"
    assert apply_format("", 0, 0, Format.LINK).text == "[link](https://example.com)"


def test_render_html():
    html = render_html("**hello** and *you*\n• [site](https://example.com)")
    assert '<p class="rt-line"><strong>hello</strong> and <em>you</em></p>' in html
    assert 'href="https://example.com"' in html
    assert "rt-bullet" in html


def test_render_escapes_and_blocks_script_links():
    html = render_html('<script>x</script> [bad](javascript:alert(1))')
    assert "<script>" not in html
    assert 'href="#"' in html


def test_empty_text():
    assert render_fragments("") == []
    assert render_fragments(None) == []
