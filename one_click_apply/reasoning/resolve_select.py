"""Select answer resolution: map a free-form completion onto one option"""

from one_click_apply.reasoning.normalize import normalize_option_text
from one_click_apply.reasoning.resolve_text import extract_first_json_object, strip_fences

EXACT_MATCH_CONFIDENCE = 0.85
SUBSTRING_MATCH_CONFIDENCE = 0.7
FALLBACK_CONFIDENCE = 0.3

MATCH_EXACT = "exact"
MATCH_SUBSTRING = "substring"
MATCH_FALLBACK = "first_option_default"


def extract_select_text(raw_response):
    """Pull the chosen option text out of a completion"""
    envelope = extract_first_json_object(raw_response)
    if envelope is not None:
        for key in ("answer", "option", "selection"):
            if envelope.get(key) is not None:
                return str(envelope[key]).strip()
    text = strip_fences(raw_response)
    return text.strip().strip('"\'').strip()


def resolve_select_answer(response_text, option_labels):
    """
    Match response text against the option labels.

    Precedence: exact (case-insensitive) → substring overlap in either
    direction, first option in list order wins → first option as an explicit
    low-confidence default. Never fails when at least one option exists.

    Returns: (label: str, confidence: float, match_kind: str)
    """
    if not option_labels:
        return ("", 0.0, MATCH_FALLBACK)

    answer = (response_text or "").strip().lower()

    if answer:
        for label in option_labels:
            if label.strip().lower() == answer:
                return (label, EXACT_MATCH_CONFIDENCE, MATCH_EXACT)

        for label in option_labels:
            option = label.strip().lower()
            if not option:
                continue
            if option in answer or answer in option:
                return (label, SUBSTRING_MATCH_CONFIDENCE, MATCH_SUBSTRING)

    return (option_labels[0], FALLBACK_CONFIDENCE, MATCH_FALLBACK)


def option_value_for(question, label):
    """Wire value for a chosen label; unknown labels are sent as-is"""
    for option in question.options:
        if option.label == label:
            return option.value
    # Operator edits may differ in case or punctuation
    wanted = normalize_option_text(label)
    for option in question.options:
        if wanted and normalize_option_text(option.label) == wanted:
            return option.value
    return label
