# tests/test_dom_query.py
import pytest

from cssselect import SelectorError

from specsheet.dom.query import compile_selector
from helpers import el, snapshot


def _form_page():
    return snapshot(
        el("main", {"id": "app"}, [
            el("form", {"class": "login wide"}, [
                el("input", {"name": "user", "type": "text"}),
                el("input", {"name": "pass", "type": "password", "data-rule": "strong"}),
                el("button", {"type": "submit"}, ["Sign in"]),
            ]),
            el("a", {"href": "/help", "lang": "en-US"}, ["Help"]),
        ]),
    )


def test_tag_class_id_and_attribute_matching():
    snap = _form_page()
    assert [e.attr("name") for e in snap.query_selector_all("input")] == ["user", "pass"]
    assert snap.query_selector("form.login.wide").tag_name == "form"
    assert snap.query_selector("#app").tag_name == "main"
    assert snap.query_selector('input[type="password"]').attr("name") == "pass"
    assert snap.query_selector("input[data-rule]").attr("name") == "pass"
    assert snap.query_selector('a[href^="/he"]') is not None
    assert snap.query_selector('a[lang|="en"]') is not None
    assert snap.query_selector('form[class~="wide"]') is not None
    assert snap.query_selector("form.missing") is None


def test_group_results_keep_document_order():
    snap = _form_page()
    tags = [e.tag_name for e in snap.query_selector_all("button, input")]
    assert tags == ["input", "input", "button"]


def test_child_and_descendant_combinators():
    snap = _form_page()
    assert len(snap.query_selector_all("main input")) == 2
    assert snap.query_selector_all("main > input") == []
    assert len(snap.query_selector_all("main > form > input")) == 2


def test_nth_of_type():
    snap = _form_page()
    assert snap.query_selector("form > input:nth-of-type(2)").attr("name") == "pass"
    assert snap.query_selector("form > button:nth-of-type(1)") is not None


def test_escaped_identifiers_and_quoted_attributes():
    snap = snapshot(el("div", {"id": "1st:item"}), el("span", {"class": "a.b"}))
    assert snap.query_selector("#\\31 st\\:item").tag_name == "div"
    assert snap.query_selector('div[id="1st:item"]').tag_name == "div"
    assert snap.query_selector("span.a\\.b").tag_name == "span"


def test_sibling_combinators_and_pseudo_classes():
    snap = _form_page()
    assert snap.query_selector("input + button").tag_name == "button"
    assert snap.query_selector("form ~ a").attr("href") == "/help"
    assert snap.query_selector("input:not([type=text])").attr("name") == "pass"
    assert snap.query_selector("form > :first-child").attr("name") == "user"
    assert snap.query_selector_all("a:hover") == []


def test_framework_attributes_and_control_characters_are_tolerated():
    snap = snapshot(
        el("button", {"@click": "save()", ":disabled": "busy", "title": "a\x00b"}, ["Save\x07"]),
        el("input", {"name": "q"}),
    )
    button = snap.query_selector("button")
    assert button.attr("@click") == "save()"
    assert button.inner_text == "Save"
    assert snap.query_selector('[title="ab"]') is button
    assert snap.query_selector("button + input").attr("name") == "q"


def test_text_nodes_keep_their_position():
    snap = snapshot(el("p", children=["Hello ", el("b", children=["big"]), " world"]))
    assert snap.query_selector("p").text_content == "Hello big world"
    assert snap.query_selector("b").parent_element.tag_name == "p"


@pytest.mark.parametrize("selector", ["", "input[type", "div > ", "a:frobnicate", "p::"])
def test_invalid_selectors_raise(selector):
    snap = _form_page()
    with pytest.raises(SelectorError):
        snap.query_selector_all(selector)


def test_compiled_selectors_are_cached():
    assert compile_selector("form > input") is compile_selector("form > input")
