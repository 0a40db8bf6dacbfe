import logging
from typing import Dict, List, Sequence

from specsheet.config import ActionConfig
from .views import ElementRecord, Inventory

logger = logging.getLogger(__name__)

NOTES_PREFIX = "Configured actions: "


class ActionCorrelator:
    """
    Attaches the descriptions of configured scripted actions to the inventory
    records they target.

    Matching is deliberately loose: selectors match when equal or when either
    one contains the other, so a shared class fragment can correlate unrelated
    elements.
    """

    def __init__(self, actions: Sequence[ActionConfig] = ()):
        self.action_map = self.build_action_map(actions)

    @staticmethod
    def build_action_map(actions: Sequence[ActionConfig]) -> Dict[str, List[str]]:
        action_map: Dict[str, List[str]] = {}
        for action in actions:
            if not action.selector:
                continue
            action_map.setdefault(action.selector, []).append(action.display_description)
        return action_map

    def match(self, selector: str) -> List[str]:
        if not selector:
            return []
        matches = []
        for configured, descriptions in self.action_map.items():
            if configured == selector or configured in selector or selector in configured:
                matches.extend(descriptions)
        return list(dict.fromkeys(matches))

    def correlate_record(self, record: ElementRecord) -> ElementRecord:
        descriptions = self.match(record.selector)
        if descriptions:
            line = NOTES_PREFIX + " / ".join(descriptions)
            record.notes = "\n".join(n for n in (record.notes, line) if n)
        return record

    def correlate(self, inventory: Inventory) -> Inventory:
        matched = 0
        for record in inventory.records:
            before = record.notes
            self.correlate_record(record)
            if record.notes != before:
                matched += 1
        logger.debug("Correlated configured actions with %d of %d elements", matched, len(inventory))
        return inventory
