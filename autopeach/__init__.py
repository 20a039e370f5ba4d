from autopeach.template import Template, extract, fix_templates
from autopeach.hide_more import HideMore, MaskedDocument, restore
