"""
Test question normalization

Every raw shape (endpoint wrapper, bare definition, DOM metadata, garbage)
must map to exactly one ParsedQuestion without raising.
"""

import pytest

from one_click_apply.data.models import INFO, SINGLE_SELECT, TEXT_FIELD
from one_click_apply.reasoning.normalize import (
    html_to_text,
    normalize_group,
    normalize_option_text,
    normalize_question,
    normalize_text,
    text_from_id,
)


def wrapped(definition, required=False, order=0, wrapper_id=None):
    return {
        "id": wrapper_id or definition.get("id"),
        "order": order,
        "required": required,
        "question": definition,
    }


# ========== Text helpers ==========

def test_normalize_text_strips_punctuation_and_case():
    assert normalize_text("  Are you   AUTHORIZED to work?! ") == "are you authorized to work"


def test_normalize_text_empty():
    assert normalize_text(None) == ""
    assert normalize_text("") == ""


def test_normalize_option_text_removes_filler():
    assert normalize_option_text("Please select: Yes") == "yes"


def test_html_to_text():
    assert html_to_text("<p>Please <b>read</b> this</p>") == "Please read this"
    assert html_to_text(None) == ""


@pytest.mark.parametrize("question_id,expected", [
    ("years_of_experience", "Years Of Experience"),
    ("workAuthorization", "Work Authorization"),
    ("start-date", "Start Date"),
])
def test_text_from_id(question_id, expected):
    assert text_from_id(question_id) == expected


# ========== Endpoint shapes ==========

def test_wrapped_text_field():
    q = normalize_question(
        wrapped(
            {"id": "q1", "type": "textField", "text": "Why this role?", "maxLength": 500, "minLength": -1},
            required=True,
            order=2,
        ),
        group=1,
    )
    assert q.id == "q1"
    assert q.type == TEXT_FIELD
    assert q.text == "Why this role?"
    assert q.required is True
    assert q.order == 2
    assert q.group == 1
    assert q.max_length == 500
    assert q.min_length is None


def test_select_with_dict_options():
    q = normalize_question(wrapped({
        "id": "auth",
        "type": "select",
        "text": "Authorized?",
        "options": [{"value": "1", "label": "Yes"}, {"value": "0", "label": "No"}],
    }))
    assert q.type == SINGLE_SELECT
    assert q.option_labels == ["Yes", "No"]
    assert q.options[0].value == "1"


def test_select_with_plain_string_options():
    q = normalize_question({"id": "s", "type": "select", "text": "Pick", "options": ["A", "B"]})
    assert q.type == SINGLE_SELECT
    assert [o.value for o in q.options] == ["A", "B"]


def test_select_without_options_degrades_to_text_field():
    q = normalize_question({"id": "s", "type": "select", "text": "Pick one"})
    assert q.type == TEXT_FIELD
    assert q.options == ()


def test_info_question_uses_html_when_text_missing():
    q = normalize_question(wrapped({"id": "notice", "type": "info", "questionHtml": "<p>Read <i>this</i></p>"}))
    assert q.type == INFO
    assert q.text == "Read this"
    assert q.html_content == "<p>Read <i>this</i></p>"


def test_text_falls_back_to_id():
    q = normalize_question({"id": "desiredSalary", "type": "textField"})
    assert q.text == "Desired Salary"


def test_unknown_type_becomes_optional_text_field():
    q = normalize_question(wrapped({"id": "x", "type": "hologram", "text": "?"}, required=True))
    assert q.type == TEXT_FIELD
    assert q.required is False


def test_required_from_either_level():
    q = normalize_question(wrapped({"id": "x", "type": "text", "text": "T", "required": True}, required=False))
    assert q.required is True


# ========== DOM shape ==========

def test_dom_field_with_options():
    q = normalize_question({
        "label": "Do you require sponsorship?",
        "input_type": "select",
        "option_texts": ["Yes", "No"],
        "required": True,
    }, group=3)
    assert q.type == SINGLE_SELECT
    assert q.text == "Do you require sponsorship?"
    assert q.option_labels == ["Yes", "No"]
    assert q.required is True
    assert q.group == 3


def test_dom_text_field():
    q = normalize_question({"label": "City", "input_type": "text", "id": "city"})
    assert q.type == TEXT_FIELD
    assert q.id == "city"


# ========== Malformed input ==========

@pytest.mark.parametrize("raw", [None, "just a string", 42, {}, {"type": "text"}, {"question": None}])
def test_malformed_input_never_raises(raw):
    q = normalize_question(raw)
    assert q.type == TEXT_FIELD
    assert q.required is False
    assert q.text


def test_normalize_group_keeps_order():
    questions = normalize_group([
        {"id": "a", "type": "text", "text": "A"},
        None,
        {"id": "c", "type": "info", "text": "C"},
    ], group=2)
    assert [q.id for q in questions] == ["a", "unknown_1", "c"]
    assert all(q.group == 2 for q in questions)


def test_unparseable_questions_get_distinct_ids():
    questions = normalize_group([None, {"id": "b", "type": "text", "text": "B"}, "garbage"])
    assert [q.id for q in questions] == ["unknown_0", "b", "unknown_2"]
