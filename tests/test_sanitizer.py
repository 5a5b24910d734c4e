from app.core.sanitizer import HtmlSanitizer


def test_plain_text_is_unchanged():
    sanitizer = HtmlSanitizer()
    text = "A portfolio website for a photographer"
    assert sanitizer.sanitize(text) == text


def test_script_is_removed_with_its_content():
    result = HtmlSanitizer().sanitize("<script>alert('x')</script>A recipe blog")
    assert result == "A recipe blog"


def test_formatting_tags_are_unwrapped():
    result = HtmlSanitizer().sanitize("A <b>bold</b> <i>idea</i> for <a href='https://x.test'>dogs</a>")
    assert result == "A bold idea for dogs"


def test_event_handler_attributes_do_not_survive():
    result = HtmlSanitizer().sanitize('<img src=x onerror="alert(1)">Gallery site')
    assert "onerror" not in result
    assert "<" not in result
    assert result == "Gallery site"


def test_unsafe_containers_are_dropped():
    html = (
        "<style>body{display:none}</style>"
        "<iframe src='https://evil.test'></iframe>"
        "<svg onload='alert(1)'><circle/></svg>"
        "<!-- hidden -->Shop for plants"
    )
    assert HtmlSanitizer().sanitize(html) == "Shop for plants"


def test_entity_encoded_script_is_not_revived():
    result = HtmlSanitizer().sanitize("&lt;script&gt;alert(1)&lt;/script&gt;Travel journal")
    assert "<script" not in result.lower()
    assert "<" not in result
    assert "Travel journal" in result


def test_stray_angle_brackets_are_escaped():
    result = HtmlSanitizer().sanitize("Compare prices where a < b and c > d")
    assert "<" not in result
    assert ">" not in result
    assert "a &lt; b" in result


def test_markup_only_input_becomes_empty():
    assert HtmlSanitizer().sanitize("<script>alert(1)</script>") == ""


def test_nested_unsafe_elements():
    result = HtmlSanitizer().sanitize("<form><script>x()</script><input value='hi'></form>Wedding planner")
    assert result == "Wedding planner"


def test_harmless_angle_brackets_are_escaped_not_dropped():
    # text survives, only the bracket is entity-encoded
    assert HtmlSanitizer().sanitize("I <3 cats site") == "I &lt;3 cats site"
