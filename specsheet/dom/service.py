import logging
from typing import Any, Dict, Optional
from playwright.async_api import Page
from runner.errors import ExtractionError
from .views import DOMSnapshot

logger = logging.getLogger(__name__)

# One-shot structured extraction: serializes document.documentElement with
# attributes, rounded document-relative rects, innerText and live form values.
EXTRACT_SNAPSHOT_JS = """
() => {
  const SKIP_CONTENT = new Set(['script', 'style', 'noscript', 'template']);
  const FORM_VALUE_TAGS = new Set(['input', 'textarea', 'select', 'option']);

  function serialize(node) {
    if (node.nodeType === Node.TEXT_NODE) {
      const text = node.nodeValue || '';
      return text.trim() ? { type: 3, text } : null;
    }
    if (node.nodeType !== Node.ELEMENT_NODE) return null;

    const tag = node.tagName.toLowerCase();
    const attrs = {};
    for (const attr of Array.from(node.attributes || [])) {
      attrs[attr.name] = attr.value;
    }
    const rect = node.getBoundingClientRect();
    const out = {
      type: 1,
      tag,
      attrs,
      rect: {
        x: Math.round(rect.x + window.scrollX),
        y: Math.round(rect.y + window.scrollY),
        width: Math.round(rect.width),
        height: Math.round(rect.height),
      },
      text: typeof node.innerText === 'string' ? node.innerText : null,
      children: [],
    };
    if (FORM_VALUE_TAGS.has(tag) && node.value !== undefined && node.value !== null) {
      out.value = String(node.value);
    }
    if (tag === 'option') {
      out.selected = !!node.selected;
    }
    if (SKIP_CONTENT.has(tag)) {
      out.text = null;
      return out;
    }
    for (const child of Array.from(node.childNodes)) {
      const serialized = serialize(child);
      if (serialized) out.children.push(serialized);
    }
    return out;
  }

  return {
    title: document.title || '',
    url: window.location.href,
    root: serialize(document.documentElement),
  };
}
"""

class DomSnapshotService:
    """Captures a DOMSnapshot from a rendered Playwright page."""

    def __init__(self, page: Page):
        self.page = page
        self.last_snapshot: Optional[DOMSnapshot] = None

    async def capture(self) -> DOMSnapshot:
        try:
            payload: Dict[str, Any] = await self.page.evaluate(EXTRACT_SNAPSHOT_JS)
        except Exception as e:
            raise ExtractionError(f"DOM extraction script failed: {e}") from e
        if not payload or not payload.get('root'):
            raise ExtractionError("DOM extraction returned no document root")
        self.last_snapshot = DOMSnapshot.from_payload(payload)
        logger.debug("Captured DOM snapshot: %d elements from %s", len(self.last_snapshot.elements), self.last_snapshot.url)
        return self.last_snapshot
