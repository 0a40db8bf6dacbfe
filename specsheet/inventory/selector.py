import re
from typing import Optional

from specsheet.dom.views import DOMTreeNode

# Ancestor levels walked when an element has no usable id. Uniqueness past
# this depth is not guaranteed.
MAX_PATH_DEPTH = 5
MAX_CLASS_TOKENS = 2

CSS_IDENTIFIER = re.compile(r'^-?[_a-zA-Z\u0080-\U0010ffff][_a-zA-Z0-9\u0080-\U0010ffff-]*$')
# CSS strings cannot carry raw line breaks
_LINE_BREAK = re.compile(r'[\n\r\f]')


def synthesize_selector(element: Optional[DOMTreeNode]) -> str:
    """Build a short CSS path that re-locates `element` in the same snapshot.

    `#id` when the element has an id that is a plain identifier, `tag[id="..."]`
    for any other id, otherwise up to MAX_PATH_DEPTH
    `tag.class1.class2:nth-of-type(k)` fragments joined with ` > `, stopping
    below <html>.
    """
    if element is None:
        return ''
    by_id = _id_selector(element)
    if by_id:
        return by_id

    parts = []
    current = element
    depth = 0
    while current is not None and depth < MAX_PATH_DEPTH:
        parts.insert(0, _fragment(current))
        parent = current.parent_element
        if parent is None or parent.tag_name == 'html':
            break
        current = parent
        depth += 1
    return ' > '.join(parts)


def _id_selector(node: DOMTreeNode) -> str:
    element_id = node.element_id
    if not element_id or _LINE_BREAK.search(element_id):
        return ''
    if CSS_IDENTIFIER.match(element_id):
        return '#' + element_id
    quoted = element_id.replace('\\', '\\\\').replace('"', '\\"')
    return f'{node.tag_name}[id="{quoted}"]'


def _fragment(node: DOMTreeNode) -> str:
    fragment = node.tag_name
    classes = [c for c in node.class_list if CSS_IDENTIFIER.match(c)][:MAX_CLASS_TOKENS]
    if classes:
        fragment += '.' + '.'.join(classes)

    if not _id_selector(node):
        siblings = node.same_type_siblings()
        if len(siblings) > 1:
            fragment += f':nth-of-type({siblings.index(node) + 1})'
    return fragment
