import os
import re
import sys

def iter_xml(filename, limit=None, show_progress=False, *extra, title_matches=None, text_matches=None):
    """ Yields (text, title, *extra) for each page in a MediaWiki XML dump """

    if not os.path.isfile(filename):
        raise FileNotFoundError(f"Cannot open: {filename}")

    from pywikibot import xmlreader
    dump = xmlreader.XmlDump(filename)

    count = 0
    for entry in dump.parse():
        if not count % 1000 and show_progress:
            print(count, end = '\r', file=sys.stderr)

        if limit and count >= limit:
            break
        count += 1

        if title_matches and not title_matches(entry.title):
            continue

        if text_matches and not text_matches(entry.text):
            continue

        yield entry.text, entry.title, *extra


NAMESPACE = {
    "Talk": ("talk",),
    "User": ("user",),
    "User talk": ("user talk",),
    "Wikipedia": ("wp", "project", "wikipedia",),
    "File": ("file", "image",),
    "MediaWiki": ("mediawiki",),
    "Template": ("t", "template",),
    "Template talk": ("template talk",),
    "Help": ("help",),
    "Category": ("cat", "category",),
    "Portal": ("portal",),
    "Module": ("mod", "module",),
}
ALIAS_TO_NAMESPACE = {alias:namespace for namespace, aliases in NAMESPACE.items() for alias in aliases}
_ns_pat = "^([:]?(" + "|".join(ALIAS_TO_NAMESPACE.keys()) + ")):"

def split_namespace(target):
    """ Template:Foo => ("Template", "Foo") """
    if ":" not in target:
        return None, target

    m = re.match(_ns_pat, target, re.IGNORECASE)
    if not m:
        return None, target

    alias = m.group(1).lstrip(":").lower()
    return ALIAS_TO_NAMESPACE[alias], target.removeprefix(m.group(0))

def template_name(target):
    """
    Returns the name used to call a template, {{Foo}} for Template:Foo
    The first letter is capitalized, as MediaWiki does
    """
    namespace, name = split_namespace(target.strip())
    if namespace not in (None, "Template"):
        raise ValueError(f"Not a template: {target}")
    name = name.strip()
    return name[:1].upper() + name[1:]


def get_nest_depth(text, opener, closer, start_depth=0):
    """ Returns the level of depth inside ```start``` at the end of the text
    opener and closer are the nest opening and closing strings
    starting_depth, optional is the starting depth level

    zero }} zero {{ one {{ two {{ three }} two }} one }} zero }} zero
    """

    if start_depth < 0:
        raise ValueError("start_depth cannot be negative")

    depth = start_depth
    for i, t in enumerate(text.split(opener)):
        if i:
            depth += 1
        depth = max(0, depth - t.count(closer))

    return depth

def get_template_depth(text, start_depth=0):
    """ Returns the number of templates still open at the end of text """
    return get_nest_depth(text, "{{", "}}", start_depth=start_depth)
