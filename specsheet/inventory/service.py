import logging
from typing import List

from specsheet.dom.views import DOMSnapshot, DOMTreeNode
from .labels import resolve_input_label
from .selector import synthesize_selector
from .views import (
    BoundingBox,
    ElementKind,
    ElementRecord,
    InputConstraints,
    Inventory,
    PageAnalysis,
    SelectOption,
)

logger = logging.getLogger(__name__)

BUTTON_SELECTOR = ', '.join([
    'button',
    '[role="button"]',
    'input[type="button"]',
    'input[type="submit"]',
    'input[type="reset"]',
])
LINK_SELECTOR = 'a[href]'
INPUT_SELECTOR = 'input, textarea, select'
HEADING_SELECTOR = 'main h1, main h2, main h3, header h1, header h2'
MAX_HEADINGS = 10

NO_TEXT_PLACEHOLDER = '(no text)'
LINK_PLACEHOLDER = '(link)'


class ElementClassifier:
    """
    Walks a DOMSnapshot once and buckets interactive elements into buttons,
    links and inputs. Visibility is not checked: hidden controls are part of
    the inventory so they still get documented.
    """

    def analyze(self, snapshot: DOMSnapshot) -> PageAnalysis:
        return PageAnalysis(
            title=snapshot.title,
            url=snapshot.url,
            headings=self.collect_headings(snapshot),
            meta_description=self.meta_description(snapshot),
            inventory=self.classify(snapshot),
        )

    def classify(self, snapshot: DOMSnapshot) -> Inventory:
        button_elements = snapshot.query_selector_all(BUTTON_SELECTOR)
        buttons = [self._button(el) for el in button_elements]

        counted = set(id(el) for el in button_elements)
        links = [self._link(el) for el in snapshot.query_selector_all(LINK_SELECTOR) if id(el) not in counted]

        inputs = [self._input(snapshot, el) for el in snapshot.query_selector_all(INPUT_SELECTOR)]

        logger.debug("Classified %d buttons, %d links, %d inputs", len(buttons), len(links), len(inputs))
        return Inventory(records=buttons + links + inputs)

    # --------------------------
    # Page-level metadata
    # --------------------------
    def collect_headings(self, snapshot: DOMSnapshot) -> List[str]:
        texts = [h.inner_text for h in snapshot.query_selector_all(HEADING_SELECTOR)]
        return [t for t in texts if t][:MAX_HEADINGS]

    def meta_description(self, snapshot: DOMSnapshot) -> str:
        meta = snapshot.query_selector('meta[name="description"]')
        return meta.attr('content') if meta is not None else ''

    # --------------------------
    # Per-kind extraction
    # --------------------------
    def _button(self, el: DOMTreeNode) -> ElementRecord:
        text = el.inner_text
        aria_label = el.attr('aria-label').strip()
        value = el.value.strip() if el.tag_name == 'input' else ''
        disabled = el.has_attribute('disabled') or el.attr('aria-disabled') == 'true'
        record = ElementRecord(
            kind=ElementKind.BUTTON,
            selector=synthesize_selector(el),
            tag=el.tag_name,
            role=el.attr('role'),
            type_attr=el.attr('type'),
            label=text or aria_label or value or NO_TEXT_PLACEHOLDER,
            bounding_box=BoundingBox.from_rect(el.bounds),
            disabled=disabled,
            href=el.attr('href'),
            form_action=el.attr('formaction'),
        )
        record.action_text = record.href or record.form_action
        record.notes = _join_attributes([
            record.tag,
            record.role and f'role={record.role}',
            record.type_attr and f'type={record.type_attr}',
            record.form_action and f'formaction={record.form_action}',
            'disabled' if disabled else '',
        ])
        return record

    def _link(self, el: DOMTreeNode) -> ElementRecord:
        href = el.attr('href')
        label = el.inner_text or el.attr('aria-label').strip() or el.attr('title').strip()
        record = ElementRecord(
            kind=ElementKind.LINK,
            selector=synthesize_selector(el),
            tag=el.tag_name,
            role=el.attr('role'),
            label=label or href or LINK_PLACEHOLDER,
            bounding_box=BoundingBox.from_rect(el.bounds),
            href=href,
            target=el.attr('target'),
            action_text=href,
        )
        record.notes = _join_attributes([
            record.tag,
            record.role and f'role={record.role}',
            record.target and f'target={record.target}',
        ])
        return record

    def _input(self, snapshot: DOMSnapshot, el: DOMTreeNode) -> ElementRecord:
        options = []
        if el.tag_name == 'select':
            options = [
                SelectOption(text=o.inner_text, value=o.value, selected=o.selected)
                for o in el.iter_descendants() if o.tag_name == 'option'
            ]

        dataset_rules = [
            f'data-{_dataset_attribute(key)}={value}'
            for key, value in el.dataset.items()
            if 'validation' in key.lower() or 'rule' in key.lower()
        ]

        constraints = InputConstraints(
            name=el.attr('name'),
            element_id=el.element_id,
            placeholder=el.attr('placeholder'),
            value=el.value,
            required=el.has_attribute('required') or el.attr('aria-required') == 'true',
            pattern=el.attr('pattern'),
            minlength=el.attr('minlength'),
            maxlength=el.attr('maxlength'),
            min=el.attr('min'),
            max=el.attr('max'),
            step=el.attr('step'),
            autocomplete=el.attr('autocomplete'),
            dataset_rules=dataset_rules,
            aria_describedby=el.attr('aria-describedby'),
            aria_description=el.attr('aria-description'),
            options=options,
        )

        notes = []
        if constraints.aria_describedby:
            notes.append(f'aria-describedby={constraints.aria_describedby}')
        if constraints.aria_description:
            notes.append(f'aria-description={constraints.aria_description}')
        if options:
            summary = ' / '.join(f"{'★ ' if o.selected else ''}{o.text or o.value}" for o in options)
            notes.append(f'Options: {summary}')

        return ElementRecord(
            kind=ElementKind.INPUT,
            selector=synthesize_selector(el),
            tag=el.tag_name,
            role=el.attr('role'),
            type_attr=el.attr('type'),
            label=resolve_input_label(snapshot, el),
            bounding_box=BoundingBox.from_rect(el.bounds),
            disabled=el.has_attribute('disabled'),
            constraints=constraints,
            action_text='\n'.join(v for v in (constraints.placeholder, constraints.value) if v),
            notes='\n'.join(notes),
        )


def _join_attributes(items) -> str:
    return ' / '.join(i for i in items if i)


def _dataset_attribute(key: str) -> str:
    """camelCase dataset key back to its hyphenated attribute suffix."""
    return ''.join('-' + c.lower() if c.isupper() else c for c in key)
