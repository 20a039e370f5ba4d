"""
Renders logged items into wikitext report pages

Pages are composed of one or more sections
Sections are generated calling is_new_section(item, prev_item) for each entry in the sorted log
"""

from collections import namedtuple

class BaseHandler():
    """ Saves a log to files containing wikitext """

    def save(self, items, base_path, **nargs):
        """ Save logged items to report pages """

        # Stash extra params so overridden functions can access them
        self.args = namedtuple('args', nargs.keys())(*nargs.values())

        if not items:
            return

        pages = self.make_pages(self.sort_items(items))
        for page_name, page_sections in pages.items():
            page_lines = self.make_page(base_path, page_name, page_sections)
            self.save_page(base_path + "/" + page_name, "\n".join(page_lines))

    def make_pages(self, items):
        """ Returns { page_name: [section_entries, ...] } """

        pages = {}
        page_name = None
        page_sections = []
        section_entries = []

        prev_item = None
        for item in items:
            if prev_item and self.is_new_section(item, prev_item):
                if page_sections and self.is_new_page(page_sections, section_entries):
                    page_name = self.page_name(page_sections, page_name)
                    pages[page_name] = page_sections
                    page_sections = []
                page_sections.append(section_entries)
                section_entries = []
            section_entries.append(item)
            prev_item = item

        if page_sections and self.is_new_page(page_sections, section_entries):
            page_name = self.page_name(page_sections, page_name)
            pages[page_name] = page_sections
            page_sections = []
        page_sections.append(section_entries)
        pages[self.page_name(page_sections, page_name)] = page_sections

        return pages

    def save_page(self, dest, page_text):
        dest = dest.lstrip("/").replace("/", "_")
        with open(dest, "w") as outfile:
            outfile.write(page_text)
        print("saved", dest)

    def sort_items(self, items):
        """ Sorts the logged items """
        return items

    def is_new_section(self, item, prev_item):
        """ Returns True if the current item should be added to a new section,
        False if it should be added to the current section """
        return False

    def is_new_page(self, page_sections, section_entries):
        """ Returns True if section_entries should be on a new page,
        False if they should be added to the existing page """
        return False

    def page_name(self, page_sections, prev):
        """ Returns a string to be used as the page name for the given items """
        return str(int(prev)+1) if prev else "1"

    def page_header(self, base_path, page_name, page_sections):
        return []

    def page_footer(self, base_path, page_name, page_sections):
        return []

    def get_section_header(self, base_path, page_name, section_entries, prev_section_entries):
        return []

    def format_entry(self, entry, prev_entry):
        return [str(entry)]

    def make_section(self, base_path, page_name, section_entries, prev_section_entries):
        res = self.get_section_header(base_path, page_name, section_entries, prev_section_entries)

        prev_entry = None
        for entry in section_entries:
            res += self.format_entry(entry, prev_entry)
            prev_entry = entry
        return res

    def make_page(self, base_path, page_name, page_sections):
        """ Returns a list of lines to be used as the given page """
        page_lines = self.page_header(base_path, page_name, page_sections)
        prev_section_entries = None
        for section_entries in page_sections:
            page_lines += self.make_section(base_path, page_name, section_entries, prev_section_entries)
            prev_section_entries = section_entries
        page_lines += self.page_footer(base_path, page_name, page_sections)
        return page_lines

    def make_wiki_table(self, rows, caption=None, extra_class=None, num_headers=0):
        """ Formats a list of rows as a wiki table """
        cls = f"wikitable {extra_class}" if extra_class else "wikitable"
        lines = ['{| class="' + cls + '"']
        if caption:
            lines.append(f'|+ {caption}')
        for i, row in enumerate(rows):
            lines.append("|-")
            divider = "!" if i < num_headers else "|"
            lines.append(divider + (divider*2).join(map(str, row)))
        lines.append("|}")
        return lines


class WikiLogger():

    _paramtype = None

    def __init__(self):
        self._items = []

    def add(self, *item):
        """ Add an item to the log """
        self._items.append(self._paramtype(*item) if self._paramtype else item)

    def save(self, dest, handler=BaseHandler, **nargs):
        handler().save(self._items, dest, **nargs)
