#!/usr/bin/python3

import argparse
import multiprocessing
import sys

from collections import defaultdict, namedtuple
from autopeach.fix_template_params import TemplateParamFixer, load_fixes
from autopeach.utils import iter_xml
from autopeach.wikilog import WikiLogger, BaseHandler

class FileSaver(BaseHandler):

    def sort_items(self, items):
        count = defaultdict(int)
        for item in items:
            count[item.error] += 1

        # autofix sections first, everything else sorted by section size (smallest to largest)
        return sorted(items, key=lambda x: ("autofix" not in x.error, count[x.error], x.error, x.page))

    def is_new_section(self, item, prev_item):
        return prev_item.error != item.error

    def is_new_page(self, page_sections, section_entries):
        return page_sections[-1][-1].error.startswith("autofix") != section_entries[0].error.startswith("autofix")

    def page_name(self, page_sections, prev):
        return "fixes" if "autofix" in page_sections[0][0].error else "errors"

    def page_header(self, base_path, page_name, page_sections):
        rows = [["Error", "Count"]] + [[entries[0].error, len(entries)] for entries in page_sections]
        return self.make_wiki_table(rows, extra_class="sortable", num_headers=1) + [""]

    def get_section_header(self, base_path, page_name, section_entries, prev_section_entries):
        res = []
        item = section_entries[0]
        count = len(section_entries)

        if prev_section_entries:
            res.append("")
        res.append(f"==={item.error}===")
        res.append(f"; {count} item{'s' if count>1 else ''}")
        return res

    def format_entry(self, entry, prev_entry):
        line = f": [[{entry.page}]]"
        if entry.template:
            line += " {{tl|" + entry.template + "}}"
        if entry.details:
            line += " <nowiki>" + entry.details + "</nowiki>"
        return [line]

class Logger(WikiLogger):
    _paramtype = namedtuple("params", [ "error", "page", "template", "details" ])

logger = Logger()
def log(error, page, template=None, details=None):
    logger.add(error, page, template, details)

fixer = None
def process(args):
    # Needed to unpack args until Pool.istarprocess exists
    text, title = args
    return fixer.process(text, title)

def main():
    global fixer

    parser = argparse.ArgumentParser(description="List template parameters that would be changed by a set of fixes")
    parser.add_argument("xml", help="XML dump file")
    parser.add_argument("--fixes", help="JSON file with template fixes", required=True)
    parser.add_argument("--dest", help="Prefix for saved report files", default="")
    parser.add_argument("--limit", type=int, help="Limit processing to first N articles")
    parser.add_argument("--progress", help="Display progress", action='store_true')
    parser.add_argument("-j", help="run N jobs in parallel (default = # CPUs - 1)", type=int)
    args = parser.parse_args()

    if not args.j:
        args.j = multiprocessing.cpu_count()-1

    try:
        fixes = load_fixes(args.fixes)
    except ValueError as e:
        print("Invalid fixes file:", e, file=sys.stderr)
        exit(1)

    fixer = TemplateParamFixer(fixes)
    iter_entries = iter_xml(args.xml, args.limit, args.progress)

    if args.j > 1:
        pool = multiprocessing.Pool(args.j)
        iter_items = pool.imap_unordered(process, iter_entries, 100)
    else:
        iter_items = map(process, iter_entries)

    for results in iter_items:
        for log_values in results:
            log(*log_values)

    logger.save(args.dest, FileSaver)

if __name__ == "__main__":
    main()
