# tests/test_correlator.py
from specsheet.config import ActionConfig
from specsheet.inventory.correlator import ActionCorrelator
from specsheet.inventory.views import ElementKind, ElementRecord, Inventory


def _actions():
    return [
        ActionConfig(type="click", selector="#submit", description="Submit the form"),
        ActionConfig(type="type", selector="#email", value="a@b.c"),
        ActionConfig(type="click", selector="#submit", description="Submit the form"),
        ActionConfig(type="wait", duration=500),
        ActionConfig(type="hover", selector="nav > a"),
    ]


def test_action_map_groups_descriptions_by_selector():
    action_map = ActionCorrelator.build_action_map(_actions())
    assert action_map == {
        "#submit": ["Submit the form", "Submit the form"],
        "#email": ["type (a@b.c)"],
        "nav > a": ["hover"],
    }


def test_exact_and_substring_matches_are_deduplicated():
    correlator = ActionCorrelator(_actions())
    assert correlator.match("#submit") == ["Submit the form"]
    assert correlator.match("body > nav > a:nth-of-type(2)") == ["hover"]
    assert correlator.match("#email-confirm") == ["type (a@b.c)"]
    assert correlator.match("#other") == []
    assert correlator.match("") == []


def test_correlated_line_is_appended_to_notes():
    inventory = Inventory(records=[
        ElementRecord(kind=ElementKind.BUTTON, selector="#submit", notes="button / type=submit"),
        ElementRecord(kind=ElementKind.INPUT, selector="#email"),
        ElementRecord(kind=ElementKind.LINK, selector="#unrelated", notes="a"),
    ])
    ActionCorrelator(_actions()).correlate(inventory)
    assert inventory.records[0].notes == "button / type=submit\nConfigured actions: Submit the form"
    assert inventory.records[1].notes == "Configured actions: type (a@b.c)"
    assert inventory.records[2].notes == "a"


def test_no_actions_leaves_inventory_untouched():
    inventory = Inventory(records=[ElementRecord(kind=ElementKind.BUTTON, selector="#x", notes="button")])
    ActionCorrelator().correlate(inventory)
    assert inventory.records[0].notes == "button"
