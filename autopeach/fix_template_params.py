"""
Applies configured changes to the parameters of templates on a page

Fixes are a dict of { template_name: [ change, ... ] } where each change is
    { "action": [ ACTION, *VALUES ], "summary": "optional message" }

ACTION can be one of
    rename_template NEW_NAME
    rename_param OLD NEW
    remove KEY
    set KEY VALUE     (only if KEY already exists)
    add KEY VALUE     (set KEY, adding it if needed)

Numeric keys refer to positional parameters
"""

import json
import re
import mwparserfromhell as mwparser

from autopeach.hide_more import HideMore
from autopeach.template import fix_templates
from autopeach.utils import get_template_depth, template_name


ACTIONS = {
    "rename_template": 1,
    "rename_param": 2,
    "remove": 1,
    "set": 2,
    "add": 2,
}

def clean_name(obj):
    text = re.sub(r"<!--.*?-->", "", str(obj.name), flags=re.DOTALL)
    return text.strip()

def ucfirst(text):
    return text[:1].upper() + text[1:]

def get_key(key):
    """ Numeric keys are positional parameters """
    return int(key) if isinstance(key, str) and key.isdigit() else key

def validate_fixes(fixes):
    """ Returns the fixes keyed by template name, raises ValueError if any change is invalid """
    res = {}
    for name, changes in fixes.items():
        for change in changes:
            if "action" not in change or change.keys() - {"action", "summary"}:
                raise ValueError("Invalid change", name, change)
            action, *values = change["action"]
            if action not in ACTIONS:
                raise ValueError("Unsupported action", action, change)
            if len(values) != ACTIONS[action]:
                raise ValueError(f"{action} expects {ACTIONS[action]} values", change)
        res[template_name(name)] = changes
    return res

def load_fixes(filename):
    with open(filename) as infile:
        return validate_fixes(json.load(infile))


class TemplateParamFixer():

    def __init__(self, fixes):
        self._fixes = validate_fixes(fixes)
        self._summary = None
        self._log = []

    def fix(self, code, page, template, details):
        if self._summary is not None:
            msg = f"{template}: {details}"
            if msg not in self._summary:
                self._summary.append(msg)

        self._log.append(("autofix_" + code, page, template, details))

    def warn(self, code, page, template=None, details=None):
        self._log.append((code, page, template, details))

    def apply_changes(self, t, changes, page):
        t_name = t.name

        for change in changes:
            action, *values = change["action"]
            details = change.get("summary")

            if action == "rename_template":
                t.rename(values[0])
                details = details or f"renamed to {values[0]}"

            elif action == "rename_param":
                old, new = map(get_key, values)
                if not t.has(old):
                    continue
                if t.has(new):
                    self.warn("rename_conflict", page, t_name, f"{old} -> {new}")
                    continue
                t.rename_field(old, new)
                details = details or f"renamed {old} to {new}"

            elif action == "remove":
                key = get_key(values[0])
                if not t.has(key):
                    continue
                t.remove(key)
                details = details or f"removed {key}"

            elif action == "set":
                key, value = get_key(values[0]), values[1]
                if not t.has(key) or t.get(key) == value:
                    continue
                t.update(key, value)
                details = details or f"set {key}={value}"

            elif action == "add":
                key, value = get_key(values[0]), values[1]
                if t.get(key) == value:
                    continue
                t.update(key, value)
                details = details or f"set {key}={value}"

            self.fix(action, page, t_name, details)

    def process(self, page_text, page, summary=None, options=None):
        # This function runs in two modes: fix and report
        #
        # When summary is None, this function runs in 'report' mode and
        # returns [(code, page, template, details)] for each fix or warning
        #
        # When summary is a list, this function runs in 'fix' mode.
        # summary will be appended with a description of any changes made
        # and the function will return the modified page text

        self._summary = summary
        self._log = []

        if "{{" not in page_text:
            return [] if summary is None else page_text

        options = options or {}
        hider = HideMore(
                hide_external_links=options.get("hide_external_links", True),
                preserve_meta_comments=options.get("preserve_meta_comments", True))
        masked = hider.hide(page_text)

        if get_template_depth(masked.text):
            self.warn("unbalanced_braces", page)
            return self._log if summary is None else page_text

        wiki = mwparser.parse(masked.text)
        found = {ucfirst(clean_name(t)) for t in wiki.ifilter_templates()}

        text = masked.text
        for name, changes in self._fixes.items():
            if name not in found:
                continue
            text = fix_templates(text, name, lambda t: self.apply_changes(t, changes, page))

        new_text = masked.restore(text)

        if summary is None:
            return self._log

        if not summary:
            return page_text

        return new_text
