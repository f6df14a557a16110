"""Test JSONL result logging, candidate profile rendering and classification"""

import json

import pytest

from one_click_apply.data.candidate_profile import load_profile, profile_to_text
from one_click_apply.data.models import TEXT_FIELD, ParsedQuestion
from one_click_apply.reasoning.classify import (
    FORMAT_FREE_TEXT,
    FORMAT_LINKEDIN,
    FORMAT_PHONE,
    FORMAT_URL,
    cache_record_id,
    categorize_question,
    detect_answer_format,
    extract_keywords,
)
from one_click_apply.reasoning.prompts import format_rules
from one_click_apply.utils.logging import log_result
from one_click_apply.utils.timing import format_elapsed_time


def test_log_result_appends_jsonl(tmp_path):
    log_file = str(tmp_path / "log.jsonl")
    log_result("https://example.test/a", "APPLIED", log_file=log_file, job_id="a")
    log_result("https://example.test/b", "FAILED", "boom", 1, log_file=log_file, job_id="b")

    with open(log_file, encoding="utf-8") as f:
        records = [json.loads(line) for line in f]

    assert [r["status"] for r in records] == ["APPLIED", "FAILED"]
    assert "failure_reason" not in records[0]
    assert records[1]["failure_reason"] == "boom"
    assert records[1]["steps_completed"] == 1
    assert records[1]["job_id"] == "b"
    assert records[0]["timestamp"]


def test_format_elapsed_time():
    assert format_elapsed_time(12.34) == "12.3s"
    assert format_elapsed_time(125) == "2m 5s"
    assert format_elapsed_time(3725) == "1h 2m"


def test_missing_profile_is_empty(tmp_path):
    assert load_profile(str(tmp_path / "nope.json")) == {}


def test_profile_text_priority_keys_first(tmp_path):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps({"skills": ["Python", "SQL"], "full_name": "Jordan", "email": "j@example.test"}))

    text = profile_to_text(load_profile(str(path)))
    lines = text.splitlines()

    assert lines[0] == "full name: Jordan"
    assert lines[1] == "email: j@example.test"
    assert any(line.startswith("skills:") and "Python" in line for line in lines)


def test_detect_answer_format():
    assert detect_answer_format("Mobile phone number") == FORMAT_PHONE
    assert detect_answer_format("LinkedIn profile URL") == FORMAT_LINKEDIN
    assert detect_answer_format("GitHub or portfolio link") == FORMAT_URL
    assert detect_answer_format("Why do you want to work here?") == FORMAT_FREE_TEXT


@pytest.mark.parametrize("text", [
    "Describe an excellent team you led",
    "Have you worked in the automobile industry?",
    "How many cells have you managed?",
])
def test_phone_words_inside_other_words_are_free_text(text):
    assert detect_answer_format(text) == FORMAT_FREE_TEXT
    assert not any("phone number" in rule for rule in format_rules(ParsedQuestion(id="q", type=TEXT_FIELD, text=text)))


def test_phone_variants_detected():
    assert detect_answer_format("Cell phone?") == FORMAT_PHONE
    assert detect_answer_format("Telephone") == FORMAT_PHONE
    assert detect_answer_format("Best number to receive texts") == FORMAT_PHONE


def test_categorize_and_keywords():
    assert categorize_question("Do you have US work authorization?") == "authorization"
    assert categorize_question("How many years of Python experience do you have?") == "experience"
    assert categorize_question("Favorite color?") == "general"
    assert extract_keywords("Years of experience with AWS?") == ["experience", "years"]


def test_cache_record_id_is_stable_and_case_insensitive():
    assert cache_record_id("Desired Salary?") == cache_record_id("desired salary?")
    assert cache_record_id("Desired Salary?").startswith("qa_")
    assert len(cache_record_id("x")) == 15
