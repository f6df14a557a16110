"""Question text classification"""

import hashlib
import re

from one_click_apply.reasoning.normalize import normalize_text

FORMAT_PHONE = "phone"
FORMAT_LINKEDIN = "linkedin"
FORMAT_URL = "url"
FORMAT_FREE_TEXT = "free_text"

# Whole words only: "excellent" and "automobile" are not phone questions
PHONE_PATTERN = re.compile(r"\b(phone|telephone|cellphone|mobile|cell)\b|number to receive")


def detect_answer_format(question_text):
    """
    Classify the expected answer format from question wording.

    Order matters: Phone → LinkedIn → other URL → free text.
    LinkedIn is checked before the generic URL rule so it gets the
    profile-URL instruction rather than the plain https rule.
    """
    text = (question_text or "").lower()

    if PHONE_PATTERN.search(text):
        return FORMAT_PHONE

    if 'linkedin' in text:
        return FORMAT_LINKEDIN

    url_patterns = ['github', 'portfolio', 'website']
    if any(pattern in text for pattern in url_patterns):
        return FORMAT_URL

    return FORMAT_FREE_TEXT


def categorize_question(question_text):
    """Coarse topic bucket stored alongside cached answers"""
    text = normalize_text(question_text)

    if 'authorization' in text or 'work permit' in text or 'visa' in text:
        return 'authorization'
    if 'years' in text and 'experience' in text:
        return 'experience'
    if 'salary' in text or 'compensation' in text:
        return 'compensation'
    if 'start' in text or 'available' in text or 'notice' in text:
        return 'availability'
    if 'relocate' in text or 'relocation' in text:
        return 'relocation'
    if 'degree' in text or 'education' in text:
        return 'education'

    return 'general'


KEYWORD_PATTERNS = [
    'authorization',
    'work permit',
    'visa',
    'experience',
    'years',
    'salary',
    'compensation',
    'start date',
    'availability',
    'relocate',
    'degree',
    'education',
    'skills',
    'certification',
]


def extract_keywords(question_text):
    text = normalize_text(question_text)
    return [pattern for pattern in KEYWORD_PATTERNS if pattern in text]


def cache_record_id(question_text):
    """Stable id so the same question text maps to one cache record"""
    digest = hashlib.md5((question_text or "").lower().encode("utf-8")).hexdigest()
    return f"qa_{digest[:12]}"
