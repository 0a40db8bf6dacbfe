import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
from lxml import html
from lxml.html import HtmlElement

from .query import compile_selector

TEXT_NODE = 3

# Characters libxml2 refuses in text and attribute values
_XML_ILLEGAL = re.compile('[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]')
# Names kept when libxml2 rejects the original attribute set (e.g. Vue's "@click")
_SAFE_NAME = re.compile(r'^[A-Za-z_][\w.-]*$')
_HTML_PARSER = html.HTMLParser()

@dataclass
class DOMRect:
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> dict[str, Any]:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['DOMRect']:
        if not data:
            return None
        return cls(
            x=float(data.get('x') or 0),
            y=float(data.get('y') or 0),
            width=float(data.get('width') or 0),
            height=float(data.get('height') or 0),
        )

@dataclass(eq=False)
class DOMTreeNode:
    """One element of a snapshot.

    Structure and selector matching live in the lxml `element`; geometry,
    rendered text and live form values come from the browser and are kept
    alongside it.
    """
    element: HtmlElement = field(repr=False)
    attributes: Dict[str, str] = field(default_factory=dict)
    bounds: Optional[DOMRect] = None

    # innerText as reported by the browser; None for synthetic fixtures
    rendered_text: Optional[str] = None

    # Live IDL properties that differ from attributes (value, selected)
    properties: Dict[str, Any] = field(default_factory=dict)

    snapshot: Optional['DOMSnapshot'] = field(default=None, repr=False)

    # Position in document order
    order: int = -1

    @property
    def tag_name(self) -> str:
        return self.element.tag

    @property
    def children(self) -> List['DOMTreeNode']:
        return [self.snapshot.node_for(c) for c in self.element]

    @property
    def parent_element(self) -> Optional['DOMTreeNode']:
        parent = self.element.getparent()
        return self.snapshot.node_for(parent) if parent is not None else None

    @property
    def element_id(self) -> str:
        return self.attributes.get('id', '')

    @property
    def class_list(self) -> List[str]:
        return self.attributes.get('class', '').split()

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def attr(self, name: str) -> str:
        """Attribute value or '' when absent."""
        return self.attributes.get(name) or ''

    @property
    def value(self) -> str:
        if 'value' in self.properties:
            return str(self.properties['value'] or '')
        if self.tag_name == 'select':
            options = [o for o in self.iter_descendants() if o.tag_name == 'option']
            for option in options:
                if option.selected:
                    return option.value
            return options[0].value if options else ''
        if self.tag_name == 'textarea':
            return self.text_content
        if self.tag_name == 'option' and 'value' not in self.attributes:
            return self.inner_text
        return self.attributes.get('value', '')

    @property
    def selected(self) -> bool:
        if 'selected' in self.properties:
            return bool(self.properties['selected'])
        return self.has_attribute('selected')

    @property
    def dataset(self) -> Dict[str, str]:
        """data-* attributes keyed the way HTMLElement.dataset names them."""
        result = {}
        for name, value in self.attributes.items():
            if not name.startswith('data-'):
                continue
            key = re.sub(r'-([a-z])', lambda m: m.group(1).upper(), name[5:])
            result[key] = value
        return result

    @property
    def text_content(self) -> str:
        return self.element.text_content()

    @property
    def inner_text(self) -> str:
        """Trimmed rendered text, falling back to the whitespace-collapsed text content."""
        if self.rendered_text is not None:
            return self.rendered_text.strip()
        return ' '.join(self.text_content.split())

    def iter_descendants(self) -> Iterator['DOMTreeNode']:
        for descendant in self.element.iterdescendants():
            yield self.snapshot.node_for(descendant)

    def iter_ancestors(self) -> Iterator['DOMTreeNode']:
        for ancestor in self.element.iterancestors():
            yield self.snapshot.node_for(ancestor)

    def closest(self, tag: str) -> Optional['DOMTreeNode']:
        if self.tag_name == tag:
            return self
        for ancestor in self.iter_ancestors():
            if ancestor.tag_name == tag:
                return ancestor
        return None

    def same_type_siblings(self) -> List['DOMTreeNode']:
        parent = self.parent_element
        if parent is None:
            return [self]
        return [s for s in parent.children if s.tag_name == self.tag_name]

    def nth_of_type(self) -> int:
        return self.same_type_siblings().index(self) + 1

class DOMSnapshot:
    """A frozen view of one rendered document.

    Built once per page visit from the extraction payload into an lxml tree;
    every query runs against that tree through cssselect, never against the
    live page.
    """

    def __init__(self, title: str = '', url: str = ''):
        self.title = title
        self.url = url
        self.root: Optional[DOMTreeNode] = None
        self._elements: List[DOMTreeNode] = []
        # lxml keeps one proxy per element while a reference is held, and every
        # node holds its element, so the proxies are stable keys
        self._nodes: Dict[HtmlElement, DOMTreeNode] = {}

    @property
    def elements(self) -> List[DOMTreeNode]:
        return list(self._elements)

    def node_for(self, element: HtmlElement) -> Optional[DOMTreeNode]:
        return self._nodes.get(element)

    def query_selector_all(self, selector: str) -> List[DOMTreeNode]:
        """Matching nodes in document order. Raises cssselect.SelectorError for bad selectors."""
        matches = compile_selector(selector)(self.root.element)
        return [self._nodes[e] for e in matches if e in self._nodes]

    def query_selector(self, selector: str) -> Optional[DOMTreeNode]:
        matches = self.query_selector_all(selector)
        return matches[0] if matches else None

    def get_element_by_id(self, element_id: str) -> Optional[DOMTreeNode]:
        if not element_id:
            return None
        for node in self._elements:
            if node.element_id == element_id:
                return node
        return None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'DOMSnapshot':
        """Build a snapshot from the dict shape produced by the extraction script.

        Each node is either `{"type": 3, "text": ...}` or an element
        `{"type": 1, "tag", "attrs", "rect", "text", "value", "selected", "children"}`.
        Element `type` may be omitted.
        """
        snapshot = cls(title=payload.get('title') or '', url=payload.get('url') or '')
        snapshot.root = snapshot._build(payload['root'], None)
        return snapshot

    def _build(self, data: Dict[str, Any], parent: Optional[HtmlElement]) -> DOMTreeNode:
        attributes = {str(k): str(v) for k, v in (data.get('attrs') or {}).items()}
        element = _make_element(parent, str(data['tag']).lower(), attributes)

        properties = {}
        if 'value' in data:
            properties['value'] = data['value']
        if 'selected' in data:
            properties['selected'] = data['selected']

        node = DOMTreeNode(
            element=element,
            attributes=attributes,
            bounds=DOMRect.from_dict(data.get('rect')),
            rendered_text=data.get('text'),
            properties=properties,
            snapshot=self,
            order=len(self._elements),
        )
        self._elements.append(node)
        self._nodes[element] = node

        last_child = None
        for child in data.get('children') or []:
            if child.get('type') == TEXT_NODE:
                _append_text(element, last_child, child.get('text') or '')
            else:
                last_child = self._build(child, element).element
        return node

def _new_element(parent: Optional[HtmlElement], tag: str, attrib: Dict[str, str]) -> HtmlElement:
    # Built detached so a rejected name never leaves a half-made child behind
    element = _HTML_PARSER.makeelement(tag, attrib)
    if parent is not None:
        parent.append(element)
    return element

def _make_element(parent: Optional[HtmlElement], tag: str, attributes: Dict[str, str]) -> HtmlElement:
    attrib = {k: _XML_ILLEGAL.sub('', v) for k, v in attributes.items()}
    try:
        return _new_element(parent, tag, attrib)
    except ValueError:
        safe = {k: v for k, v in attrib.items() if _SAFE_NAME.match(k)}
        return _new_element(parent, tag if _SAFE_NAME.match(tag) else 'unknown', safe)

def _append_text(parent: HtmlElement, last_child: Optional[HtmlElement], text: str) -> None:
    text = _XML_ILLEGAL.sub('', text)
    if last_child is None:
        parent.text = (parent.text or '') + text
    else:
        last_child.tail = (last_child.tail or '') + text
