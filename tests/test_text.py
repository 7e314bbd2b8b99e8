from blueprints.assign.text import count_words, shorten_text

def test_count_words_plain_and_empty():
    assert count_words("") == 0
    assert count_words(None) == 0
    assert count_words("one two  three") == 3

def test_count_words_ignores_tags():
    assert count_words("<p>a</p><p>b</p>") == 2
    assert count_words("<a href='https://x.org'>link</a>") == 1

def test_count_words_url():
    # схема, хост и домен считаются отдельными словами
    assert count_words("https://example.com") == 3
    assert count_words("https://example.com/" + "a" * 150) == 4

def test_shorten_text_short_unchanged():
    assert shorten_text("https://example.com") == "https://example.com"
    assert shorten_text("") == ""

def test_shorten_text_cuts_on_space():
    text = "word " * 50
    out = shorten_text(text, 140)
    assert len(out) <= 140
    assert out.endswith("word...")

def test_shorten_text_custom_ending():
    out = shorten_text("x" * 50, 20, ending="…")
    assert out == "x" * 19 + "…"
