# tests/helpers.py
# Builders for synthetic DOM payloads in the shape the extraction script returns.
from specsheet.dom.views import DOMSnapshot


def text(value):
    return {"type": 3, "text": value}


def el(tag, attrs=None, children=(), rect=None, **extra):
    node = {
        "type": 1,
        "tag": tag,
        "attrs": dict(attrs or {}),
        "children": [text(c) if isinstance(c, str) else c for c in children],
    }
    if rect is not None:
        node["rect"] = dict(zip(("x", "y", "width", "height"), rect))
    node.update(extra)
    return node


def page_payload(*body, head=(), title="Test page", url="http://example.test/"):
    root = el("html", children=[el("head", children=head), el("body", children=body)])
    return {"root": root, "title": title, "url": url}


def snapshot(*body, head=(), title="Test page", url="http://example.test/"):
    return DOMSnapshot.from_payload(page_payload(*body, head=head, title=title, url=url))
