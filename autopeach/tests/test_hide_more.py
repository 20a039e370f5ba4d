from autopeach.hide_more import HideMore, restore

hider = HideMore()

def test_comments():
    res = hider.hide("a <!-- note --> b")
    assert res.text == "a ⌊⌊⌊⌊0⌋⌋⌋⌋ b"
    assert res.tokens == {"⌊⌊⌊⌊0⌋⌋⌋⌋": "<!-- note -->"}

    res = hider.hide("a <!-- multi\nline --> b")
    assert res.text == "a ⌊⌊⌊⌊0⌋⌋⌋⌋ b"


def test_meta_comments():
    text = "<!-- category link -->"
    assert HideMore(preserve_meta_comments=True).hide(text).text == text
    assert HideMore(preserve_meta_comments=False).hide(text).text == "⌊⌊⌊⌊0⌋⌋⌋⌋"

    for text in ["<!-- interwiki links -->", "<!-- Categories -->", "<!-- {{Bio-stub}} -->"]:
        assert hider.hide(text).text == text


def test_unformatted():
    text = "<nowiki>[[a]]</nowiki> <pre>x</pre> <math>y</math> <source lang=\"c\">z</source>"
    res = hider.hide(text)
    assert res.text == "⌊⌊⌊⌊1⌋⌋⌋⌋ ⌊⌊⌊⌊2⌋⌋⌋⌋ ⌊⌊⌊⌊3⌋⌋⌋⌋ ⌊⌊⌊⌊0⌋⌋⌋⌋"
    assert res.restore() == text


def test_external_links():
    res = hider.hide("see http://example.com/a?b=c here")
    assert res.text == "see ⌊⌊⌊⌊0⌋⌋⌋⌋ here"
    assert res.tokens["⌊⌊⌊⌊0⌋⌋⌋⌋"] == "http://example.com/a?b=c"

    res = hider.hide("see [http://example.com Example] here")
    assert res.text == "see ⌊⌊⌊⌊0⌋⌋⌋⌋ here"

    res = hider.hide("{{cite|url=http://x.org}}")
    assert res.text == "{{cite|url=⌊⌊⌊⌊0⌋⌋⌋⌋}}"

    text = "see http://example.com here"
    assert HideMore(hide_external_links=False).hide(text).text == text


def test_lines():
    res = hider.hide("==History==\ntext")
    assert res.text == "⌊⌊⌊⌊0⌋⌋⌋⌋\ntext"

    res = hider.hide(":reply\nplain")
    assert res.text == "⌊⌊⌊⌊0⌋⌋⌋⌋\nplain"

    res = hider.hide("<!-- a -->\n==B==")
    assert res.text == "⌊⌊⌊⌊0⌋⌋⌋⌋\n⌊⌊⌊⌊1⌋⌋⌋⌋"


def test_link_trails():
    res = hider.hide("[[apple]]s are")
    assert res.text == "⌊⌊⌊⌊0⌋⌋⌋⌋ are"

    text = "[[apple]] are"
    assert hider.hide(text).text == text


def test_refs():
    res = hider.hide("Fact.<ref>Source</ref> More.<ref name=a/>")
    assert res.text == "Fact.⌊⌊⌊⌊0⌋⌋⌋⌋ More.⌊⌊⌊⌊1⌋⌋⌋⌋"

    res = hider.hide("<cite>Book</cite>")
    assert res.text == "⌊⌊⌊⌊0⌋⌋⌋⌋"


def test_nested_tokens():
    text = "<ref>See http://x.org <!-- c --></ref>"
    res = hider.hide(text)
    assert res.text == "⌊⌊⌊⌊2⌋⌋⌋⌋"
    assert res.tokens["⌊⌊⌊⌊2⌋⌋⌋⌋"] == "<ref>See ⌊⌊⌊⌊1⌋⌋⌋⌋ ⌊⌊⌊⌊0⌋⌋⌋⌋</ref>"
    assert restore(res.text, res.tokens) == text


def test_round_trip():
    text = """\
==Early life==
Bob was born in [[Paris]]ian society.<ref name="a">{{cite web|url=http://example.com|title=Bob}}</ref>
<!-- hidden note -->
:An indented reply
See [http://example.org the site] and <nowiki>[[not a link]]</nowiki>.<ref name="a" />
{{Infobox|a=1}}
[[Category:People]]<!-- categories -->
"""

    res = hider.hide(text)
    print(res.text)
    assert "{{Infobox|a=1}}" in res.text
    assert "<!-- categories -->" in res.text
    assert "http" not in res.text
    assert "Paris" not in res.text

    assert restore(res.text, res.tokens) == text
    assert res.tokens == {}


def test_restore():
    tokens = {"⌊⌊⌊⌊0⌋⌋⌋⌋": "a"}
    assert restore("x ⌊⌊⌊⌊5⌋⌋⌋⌋ ⌊⌊⌊⌊0⌋⌋⌋⌋", tokens) == "x ⌊⌊⌊⌊5⌋⌋⌋⌋ a"

    # the table is used up by the first restore
    assert restore("⌊⌊⌊⌊0⌋⌋⌋⌋", tokens) == "⌊⌊⌊⌊0⌋⌋⌋⌋"


def test_edit_masked_text():
    res = hider.hide("colour <!-- colour -->")
    text = res.text.replace("colour", "color")
    assert res.restore(text) == "color <!-- colour -->"


def test_hide_masked_text():
    first = hider.hide("a <!-- x --> b")
    assert first.text == "a ⌊⌊⌊⌊0⌋⌋⌋⌋ b"

    text = first.text + " <!-- y -->"
    second = hider.hide(text)
    assert second.text == "a ⌊⌊⌊⌊0⌋⌋⌋⌋ b ⌊⌊⌊⌊⌊0⌋⌋⌋⌋⌋"
    assert second.restore() == text
    assert first.restore(text) == "a <!-- x --> b <!-- y -->"


def test_malformed():
    res = hider.hide("<!-- unclosed")
    assert res.text == "<!-- unclosed"
    assert res.tokens == {}
    assert res.restore() == "<!-- unclosed"
