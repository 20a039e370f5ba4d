"""
Isolates a single template invocation inside a page and allows its fields
to be read and edited without disturbing the rest of the page:

    t = extract(text, "Infobox person")
    if t:
        t.update("birth_place", "[[Paris]]")
        text = t.whole_page()
"""

import re

def find_close(text, start):
    """
    Returns the offset just past the }} that closes the template opened at
    text[start], or -1 if the template is never closed

    {{outer|{{inner|x}}}} counts as a single template
    """

    depth = 2
    for i in range(start+2, len(text)):
        c = text[i]
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1

        if depth == 1:
            return i + 2

    return -1


def split_fields(text):
    """
    Splits the text following the template name into a list of raw fields.

    Pipes and braces inside of nested templates or [[links]] don't end
    a field:

    |a=[[b|c]]|{{d|e}}}} => ["a=[[b|c]]", "{{d|e}}"]
    """

    fields = []
    current = ""
    started = False
    depth = 0
    in_link = False
    prev = ""

    for c in text:
        if c == "{":
            depth += 1
        elif c == "}":
            # closing }} of the template itself
            if not depth:
                break
            depth -= 1
        elif c == "|" and not depth and not in_link:
            if started:
                fields.append(current)
            current = ""
            started = True
            prev = c
            continue

        if in_link and prev == "]" and c == "]":
            in_link = False
            paired = True
        elif not in_link and prev == "[" and c == "[":
            in_link = True
            paired = True
        else:
            paired = False

        current += c
        # a bracket already used in a pair can't start another one: [[a]]]
        prev = "" if paired else c

    if started:
        fields.append(current)

    return fields

def _check_key(key):
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        raise TypeError(f"field key must be an int or str, not {type(key).__name__}")

def _replace_value(text, value):
    """ Replaces the stripped content of text with value, keeping the surrounding whitespace """
    stripped = text.strip()
    if stripped:
        start = text.index(stripped)
        return text[:start] + value + text[start+len(stripped):]

    # empty value, keep any trailing newline after the new value
    lead, newline, trail = text.partition("\n")
    return lead + value + newline + trail


class Template():

    def __init__(self, before, template_string, after, open_text, name, fields):
        self._before = before
        self._template_string = template_string
        self._after = after
        self.open = open_text
        self.name = name.rstrip()
        self._name_space = name[len(self.name):]
        self.fields = fields

    @property
    def before(self):
        return self._before

    @property
    def after(self):
        return self._after

    @property
    def template_string(self):
        """ The template as it appeared in the source text """
        return self._template_string

    def __str__(self):
        res = [self.open, self.name, self._name_space]
        for field in self.fields.values():
            res.append("|" + field)
        res.append("}}")
        return "".join(res)

    def __repr__(self):
        return f"<Template {self.name!r} {list(self.fields.keys())}>"

    def whole_page(self):
        """ Returns the full source text with the (possibly modified) template in place """
        return self._before + str(self) + self._after

    def has(self, key):
        _check_key(key)
        return key in self.fields

    def get(self, key):
        """
        Returns the stripped value of the given field or None if it doesn't exist
        Positional fields are accessed with int keys
        """
        _check_key(key)
        if key not in self.fields:
            return None

        value = self.fields[key]
        if isinstance(key, int):
            return value.strip()

        return value.partition("=")[2].strip()

    def add(self, value, key=None):
        """
        Adds a new field, or replaces an existing one with the same key
        If key is None, the value is added as the next positional field
        """
        if key is None:
            key = max((k for k in self.fields if isinstance(k, int)), default=0) + 1
            self.fields[key] = value
            return

        _check_key(key)
        if isinstance(key, int):
            self.fields[key] = value
        else:
            self.fields[key] = f"{key} = {value}"

    def update(self, key, value):
        """ Sets the value of a field, adding it if it doesn't exist """
        if not self.has(key):
            self.add(value, key)
            return

        raw = self.fields[key]
        if isinstance(key, int):
            self.fields[key] = _replace_value(raw, value)
            return

        name, equals, old_value = raw.partition("=")
        self.fields[key] = name + equals + _replace_value(old_value, value)

    def remove(self, key):
        _check_key(key)
        self.fields.pop(key, None)

    def rename_field(self, old, new):
        """
        Renames a field in place, keeping its position and spacing
        Raises ValueError if another field already uses the new key
        """
        _check_key(old)
        _check_key(new)
        if old not in self.fields or old == new:
            return
        if new in self.fields:
            raise ValueError(f"field {new!r} already exists")

        new_fields = {}
        for key, raw in self.fields.items():
            if key != old:
                new_fields[key] = raw
                continue

            if isinstance(old, int) and isinstance(new, str):
                raw = f"{new}={raw}"
            elif isinstance(old, str) and isinstance(new, int):
                raw = raw.partition("=")[2]
            elif isinstance(old, str):
                raw = re.sub(r"^(\s*)" + re.escape(old) + r"(\s*=)", lambda m: m.group(1) + new + m.group(2), raw, count=1, flags=re.IGNORECASE)
            new_fields[new] = raw

        self.fields = new_fields

    def rename(self, new_name):
        """ Renames the template itself """
        self.name = new_name


def parse_fields(fields):
    """ Returns a dict of { key: raw_field } for the list of raw fields """
    res = {}
    position = 0
    for field in fields:
        m = re.match(r"\s*([^=|}]*?)\s*=", field)
        if m:
            res[m.group(1)] = field
        else:
            position += 1
            res[position] = field
    return res


def extract(text, name):
    """
    Returns a Template for the first occurrence of {{name}} in text, or None if there
    is no such template. Only the first letter of name is matched case-insensitively.
    """
    if not name:
        return None

    pattern = r"\{\{(?i:" + re.escape(name[0]) + ")" + re.escape(name[1:]) + r"\s*[|}]"
    m = re.search(pattern, text)
    if not m:
        return None

    start = m.start()
    end = find_close(text, start)
    if end == -1:
        return None

    template_string = text[start:end]
    m = re.match(r"(\{\{\s*)([^|}]*)(.*)", template_string, re.DOTALL)

    if "|" in template_string:
        fields = parse_fields(split_fields(m.group(3)))
    else:
        fields = {}

    return Template(text[:start], template_string, text[end:], m.group(1), m.group(2), fields)


def fix_templates(text, name, callback):
    """
    Calls callback(template) for each occurrence of {{name}} in text and returns the text
    with any changes applied. Templates nested inside an occurrence are not visited.
    """
    done = []
    t = extract(text, name)
    while t:
        callback(t)
        done.append(t.before)
        done.append(str(t))
        text = t.after
        t = extract(text, name)

    done.append(text)
    return "".join(done)
