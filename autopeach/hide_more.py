"""
Hides wikitext that shouldn't be touched by text replacements (comments,
<nowiki>, <ref>s, headings, external links, etc) behind placeholder tokens
that can later be swapped back for the original text

    masked = HideMore().hide(text)
    new_text = masked.text.replace("colour", "color")
    new_text = masked.restore(new_text)
"""

import re
from collections import namedtuple

TOKEN_OPEN = "⌊"
TOKEN_CLOSE = "⌋"
_TOKEN_WIDTH = 4

_URL_SCHEMES = "https?|ftp|mailto|irc|gopher|telnet|nntp|worldwind|news|svn"
_URL_CHARS = r"""[\w._\-~!/*"'():;@&=+$,?%#\[\]]"""

_source = r"<\s*source(?:\s[^>]*?|)>.*?<\s*/\s*source\s*>"
_unformatted = r"<nowiki>.*?</\s*nowiki>|<pre\b.*?>.*?</\s*pre>|<math\b.*?>.*?</\s*math>|<!--.*?-->|<timeline\b.*?>.*?</\s*timeline>"

SOURCE = re.compile(_source, re.IGNORECASE | re.DOTALL)
UNFORMATTED = re.compile(_unformatted, re.IGNORECASE | re.DOTALL)
EXTERNAL_LINKS = re.compile(
        r"(?:" + _URL_SCHEMES + r")://(?:" + _URL_CHARS + r"+?(?=}})|" + _URL_CHARS + r"*)"
        r"|\[(?:" + _URL_SCHEMES + r")://.*?\]",
        re.IGNORECASE)
BLOCKS = re.compile(
        r"<\s*blockquote\s*>.*?<\s*/\s*blockquote\s*>"
        r"|<\s*poem\s*>.*?<\s*/\s*poem\s*>"
        r"|" + _source +
        r"|<\s*code\s*>.*?<\s*/\s*code\s*>"
        r"|<\s*noinclude\s*>.*?<\s*/\s*noinclude\s*>"
        r"|<\s*includeonly\s*>.*?<\s*/\s*includeonly\s*>"
        r"|" + _unformatted,
        re.IGNORECASE | re.DOTALL)
HEADINGS = re.compile(r"^(=+)(.*?)(=+)", re.MULTILINE)
INDENTED = re.compile(r"^:.*", re.MULTILINE)
LINK_TRAILS = re.compile(r"\[\[[^\[\]\n]+\]\](\w+)")
CITES = re.compile(r"<cite[^>]*?>[^<]*<\s*/cite\s*>", re.IGNORECASE)
REFS = re.compile(r"<ref\b[^<>]*?/\s*>|<ref\b[^>/]*?>.*?<\s*/\s*ref\s*>", re.IGNORECASE | re.DOTALL)

# Comments used to mark the category, stub and interlanguage link sections of a page
META_COMMENT = re.compile(
        r"<!-- ?(cat(egor(y|ies))?( links?)?|\{\{.*?stub\}\}.*?|other languages?|language links?"
        r"|inter ?(language|wiki)? ?links|inter ?wiki ?language ?links|inter ?wikis?"
        r"|the below are interlanguage links\.?) ?-->",
        re.IGNORECASE | re.DOTALL)


def _token_width(text):
    """ Returns the smallest number of glyphs needed for tokens that can't collide with text """
    width = _TOKEN_WIDTH
    while TOKEN_OPEN * width in text:
        width += 1
    return width

def _make_token(width, count):
    return TOKEN_OPEN*width + str(count) + TOKEN_CLOSE*width

def _token_pattern(tokens):
    token = next(iter(tokens))
    width = len(token) - len(token.lstrip(TOKEN_OPEN))
    return re.compile(TOKEN_OPEN + "{" + str(width) + r"}\d+" + TOKEN_CLOSE + "{" + str(width) + "}")


def restore(text, tokens):
    """
    Replaces the tokens in text with their original values. Tokens nested inside
    other tokens are restored as well. Unknown tokens are left alone.
    The token table is emptied when done.
    """
    if not tokens:
        return text

    pattern = _token_pattern(tokens)

    def replace(m):
        token = m.group(0)
        if token not in tokens:
            return token
        return pattern.sub(replace, tokens[token])

    text = pattern.sub(replace, text)
    tokens.clear()
    return text


class MaskedDocument(namedtuple("MaskedDocument", ["text", "tokens"])):

    def restore(self, text=None):
        """ Restores the hidden text into the given text (or the masked text if not given) """
        return restore(self.text if text is None else text, self.tokens)


class HideMore():

    def __init__(self, hide_external_links=True, preserve_meta_comments=True):
        self.hide_external_links = hide_external_links
        self.preserve_meta_comments = preserve_meta_comments

    def _is_meta_comment(self, text):
        return bool(META_COMMENT.match(text))

    def hide(self, text):
        """ Returns a MaskedDocument with all of the protected wikitext replaced by tokens """

        tokens = {}
        width = _token_width(text)

        def mask(pattern, text, keep=None):
            def replace(m):
                if keep and keep(m.group(0)):
                    return m.group(0)
                token = _make_token(width, len(tokens))
                tokens[token] = m.group(0)
                return token
            return pattern.sub(replace, text)

        text = mask(SOURCE, text)
        keep = self._is_meta_comment if self.preserve_meta_comments else None
        text = mask(UNFORMATTED, text, keep)

        if self.hide_external_links:
            text = mask(EXTERNAL_LINKS, text)

        # block tags, plus the unformatted set again
        text = mask(BLOCKS, text, keep)
        text = mask(HEADINGS, text)
        text = mask(INDENTED, text)
        text = mask(LINK_TRAILS, text)
        text = mask(CITES, text)
        text = mask(REFS, text)

        return MaskedDocument(text, tokens)
