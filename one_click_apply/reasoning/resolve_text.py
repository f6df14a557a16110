"""Text answer parsing: JSON envelope extraction and confidence rules"""

import json
import re

DEFAULT_ENVELOPE_CONFIDENCE = 0.8
UNPARSED_RESPONSE_CONFIDENCE = 0.5
SHORT_ANSWER_MAX_CONFIDENCE = 0.3
MIN_ANSWER_LENGTH = 3

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


def extract_first_json_object(text):
    """
    Return the first balanced {...} object in text that parses as JSON.

    Tolerates markdown fences and prose before/after the object. Braces
    inside JSON strings do not count toward the balance.
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    try:
                        parsed = json.loads(text[start:i + 1])
                    except ValueError:
                        break
                    if isinstance(parsed, dict):
                        return parsed
                    break
        start = text.find("{", start + 1)
    return None


def strip_fences(text):
    return _FENCE_RE.sub("", (text or "").strip()).strip()


def clamp_confidence(value):
    return max(0.0, min(1.0, value))


def _coerce_confidence(raw):
    if raw is None or isinstance(raw, bool):
        return DEFAULT_ENVELOPE_CONFIDENCE
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_ENVELOPE_CONFIDENCE
    # Some models answer in percent
    if value > 1.0 and value <= 100.0:
        value = value / 100
    return clamp_confidence(value)


def parse_text_response(raw_response):
    """
    Parse a text_field completion into (answer, confidence).

    Expected shape is {"answer": ..., "confidence": ...}. A response with no
    usable JSON object is taken verbatim at reduced confidence.
    """
    envelope = extract_first_json_object(raw_response)
    if envelope is not None and "answer" in envelope:
        answer = envelope.get("answer")
        if answer is None:
            answer = ""
        elif isinstance(answer, list):
            answer = ", ".join(str(part) for part in answer)
        return str(answer).strip(), _coerce_confidence(envelope.get("confidence"))

    print("  ⚠️ Could not parse JSON answer, using raw response")
    return strip_fences(raw_response), UNPARSED_RESPONSE_CONFIDENCE


def apply_confidence_floor(value, confidence):
    """Empty or very short answers can never look confident"""
    if not value or len(value.strip()) < MIN_ANSWER_LENGTH:
        return min(confidence, SHORT_ANSWER_MAX_CONFIDENCE)
    return confidence
