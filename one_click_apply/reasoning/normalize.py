"""Text normalization and question normalization"""

import re
import string

from one_click_apply.data.models import (
    INFO,
    SINGLE_SELECT,
    TEXT_FIELD,
    ParsedQuestion,
    SelectOption,
)

# Wire and DOM type names -> canonical question type
_TYPE_MAP = {
    "textfield": TEXT_FIELD,
    "text_field": TEXT_FIELD,
    "text": TEXT_FIELD,
    "textarea": TEXT_FIELD,
    "number": TEXT_FIELD,
    "email": TEXT_FIELD,
    "tel": TEXT_FIELD,
    "url": TEXT_FIELD,
    "select": SINGLE_SELECT,
    "single_select": SINGLE_SELECT,
    "radio": SINGLE_SELECT,
    "info": INFO,
}

_TAG_RE = re.compile(r"<[^>]*>")
_CAMEL_RE = re.compile(r"([a-z0-9])([A-Z])")


def normalize_text(text):
    """Normalize text for keyword matching - lowercase, strip punctuation"""
    if not text:
        return ""
    # Lowercase and remove punctuation
    text = text.lower()
    text = text.translate(str.maketrans('', '', string.punctuation))
    # Collapse whitespace
    return ' '.join(text.split())


def normalize_option_text(text):
    """Normalize option text for matching - removes filler words"""
    if not text:
        return ""
    text = normalize_text(text)
    filler_words = ['please select', 'select one', 'choose', 'pick']
    for filler in filler_words:
        text = text.replace(filler, '')
    # Re-collapse whitespace after removals
    return ' '.join(text.split())


def html_to_text(html):
    """Strip tags from an HTML fragment and collapse whitespace"""
    if not html:
        return ""
    return ' '.join(_TAG_RE.sub(' ', html).split())


def text_from_id(question_id):
    """Turn snake_case, kebab-case or camelCase ids into Title Case words"""
    if not question_id:
        return ""
    spaced = _CAMEL_RE.sub(r"\1 \2", str(question_id))
    spaced = re.sub(r"[_\-]+", " ", spaced)
    return ' '.join(word.capitalize() for word in spaced.split())


def _as_int(value, default=None):
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _length_limit(value):
    # -1 on the wire means no limit
    limit = _as_int(value)
    if limit is None or limit < 0:
        return None
    return limit


def _parse_options(raw_options):
    options = []
    for opt in raw_options or []:
        if isinstance(opt, dict):
            label = str(opt.get("label") or opt.get("text") or opt.get("value") or "").strip()
            value = str(opt.get("value") if opt.get("value") is not None else label).strip()
        elif opt is None:
            continue
        else:
            label = value = str(opt).strip()
        if label:
            options.append(SelectOption(value=value, label=label))
    return tuple(options)


def _is_dom_field(raw):
    return "label" in raw and "question" not in raw and "type" not in raw


def _normalize_dom_field(raw, group):
    """DOM field metadata (label/input_type/tag/option_texts) -> ParsedQuestion"""
    label = str(raw.get("label") or raw.get("aria_label") or raw.get("placeholder") or "").strip()
    field_id = str(raw.get("id") or raw.get("name") or label)
    option_texts = raw.get("option_texts") or []
    option_values = raw.get("option_values") or []
    options = tuple(
        SelectOption(
            value=str(option_values[i]) if i < len(option_values) and option_values[i] else text,
            label=text,
        )
        for i, text in enumerate(str(t).strip() for t in option_texts)
        if text
    )

    kind = str(raw.get("input_type") or raw.get("tag") or "").lower()
    if kind in ("select", "radio") or options:
        qtype = SINGLE_SELECT if options else TEXT_FIELD
    else:
        qtype = TEXT_FIELD

    return ParsedQuestion(
        id=field_id,
        type=qtype,
        text=label or text_from_id(field_id),
        required=bool(raw.get("required", False)),
        order=_as_int(raw.get("order"), 0),
        group=group,
        max_length=_length_limit(raw.get("max_length")),
        options=options,
    )


def _unparseable(raw, group, index=0):
    """Fallback for shapes we do not understand: optional free-text question"""
    question_id = ""
    text = ""
    if isinstance(raw, dict):
        question_id = str(raw.get("id") or "")
        text = str(raw.get("text") or raw.get("label") or "")
    elif raw is not None:
        text = str(raw)
    return ParsedQuestion(
        id=question_id or f"unknown_{index}",
        type=TEXT_FIELD,
        text=text or text_from_id(question_id) or "Unknown question",
        required=False,
        group=group,
    )


def normalize_question(raw, group=0, index=0):
    """
    Map any raw question shape to exactly one ParsedQuestion.

    Accepts the endpoint wrapper ({id, order, required, question: {...}}),
    the bare endpoint definition, or DOM field metadata. Never raises:
    malformed input becomes an optional text_field so one bad question
    cannot block the rest of the group.
    """
    if not isinstance(raw, dict):
        return _unparseable(raw, group, index)

    try:
        if _is_dom_field(raw):
            return _normalize_dom_field(raw, group)

        wrapper = raw if isinstance(raw.get("question"), dict) else {}
        definition = raw["question"] if wrapper else raw

        raw_type = str(definition.get("type") or "").strip().lower()
        qtype = _TYPE_MAP.get(raw_type)
        known_type = qtype is not None
        if not known_type:
            qtype = TEXT_FIELD

        question_id = str(definition.get("id") or wrapper.get("id") or "")
        if not question_id:
            return _unparseable(raw, group, index)

        html_content = definition.get("questionHtml")
        text = str(definition.get("text") or "").strip()
        if not text and qtype == INFO and html_content:
            text = html_to_text(html_content)
        if not text:
            text = text_from_id(question_id)

        options = _parse_options(definition.get("options"))
        if qtype == SINGLE_SELECT and not options:
            # A select without choices can only be answered as free text
            qtype = TEXT_FIELD

        required = bool(wrapper.get("required")) or bool(definition.get("required"))
        order = _as_int(wrapper.get("order"), None)
        if order is None:
            order = _as_int(definition.get("order"), 0)

        return ParsedQuestion(
            id=question_id,
            type=qtype,
            text=text,
            required=required if known_type else False,
            order=order,
            group=group,
            min_length=_length_limit(definition.get("minLength")),
            max_length=_length_limit(definition.get("maxLength")),
            options=options if qtype == SINGLE_SELECT else (),
            html_content=html_content,
        )
    except (AttributeError, TypeError, ValueError, KeyError):
        return _unparseable(raw, group, index)


def normalize_group(raw_questions, group=0):
    """Normalize every question of one group, keeping server order"""
    return [normalize_question(raw, group, index) for index, raw in enumerate(raw_questions or [])]
