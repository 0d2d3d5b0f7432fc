from arpeggios.markup import render_markdown


def test_render_markdown_produces_html():
    html = render_markdown("Play the **relative** minor.")

    assert html == "<p>Play the <strong>relative</strong> minor.</p>"


def test_render_markdown_does_not_pass_raw_html():
    html = render_markdown("<script>alert(1)</script>")

    assert "<script>" not in html


def test_render_markdown_empty():
    assert render_markdown("") == ""
    assert render_markdown(None) == ""
