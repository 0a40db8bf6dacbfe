"""
Label resolution for form controls.

The first non-empty candidate wins:
  1. aria-label
  2. <label for="id">
  3. the nearest wrapping <label>
  4. texts of the aria-labelledby targets, joined with " / "
  5. placeholder
  6. "" (unresolved)
"""
from specsheet.dom.views import DOMSnapshot, DOMTreeNode

UNRESOLVED_LABEL = ""
LABELLEDBY_SEPARATOR = " / "


def resolve_input_label(snapshot: DOMSnapshot, element: DOMTreeNode) -> str:
    for strategy in (_aria_label, _label_for, _wrapping_label, _labelled_by, _placeholder):
        label = strategy(snapshot, element)
        if label:
            return label
    return UNRESOLVED_LABEL


def _aria_label(snapshot: DOMSnapshot, element: DOMTreeNode) -> str:
    return element.attr('aria-label').strip()


def _label_for(snapshot: DOMSnapshot, element: DOMTreeNode) -> str:
    element_id = element.element_id
    if not element_id:
        return ""
    for candidate in snapshot.elements:
        if candidate.tag_name == 'label' and candidate.get_attribute('for') == element_id:
            return candidate.inner_text
    return ""


def _wrapping_label(snapshot: DOMSnapshot, element: DOMTreeNode) -> str:
    label = element.closest('label')
    return label.inner_text if label is not None else ""


def _labelled_by(snapshot: DOMSnapshot, element: DOMTreeNode) -> str:
    texts = []
    for ref in element.attr('aria-labelledby').split():
        target = snapshot.get_element_by_id(ref)
        if target is not None and target.inner_text:
            texts.append(target.inner_text)
    return LABELLEDBY_SEPARATOR.join(texts)


def _placeholder(snapshot: DOMSnapshot, element: DOMTreeNode) -> str:
    return element.attr('placeholder').strip()
