"""Interview response state detection

Every endpoint response is classified exactly once, here, into one of four
states. Callers branch on the state type and never re-inspect the raw dict.

    Fetching       initial GET carrying the first question group
    MoreQuestions  submit accepted, another group follows
    Complete       application reached review with nothing left to answer
    Unexpected     any other combination - must abort, never loop
"""

from dataclasses import dataclass, field
from typing import Any, List

from one_click_apply.data.models import (
    STATUS_COMPLETED,
    STATUS_REVIEW,
    STATUS_SCREENING_QUESTIONS,
)


@dataclass(frozen=True)
class Fetching:
    group: int
    questions: List[Any]
    raw: dict = field(repr=False)


@dataclass(frozen=True)
class MoreQuestions:
    group: int
    questions: List[Any]
    raw: dict = field(repr=False)


@dataclass(frozen=True)
class Complete:
    status: str
    raw: dict = field(repr=False)


@dataclass(frozen=True)
class Unexpected:
    reason: str
    raw: Any = field(repr=False)


def _question_group(response):
    group = response.get("questionAnswerGroup")
    if isinstance(group, dict):
        return group
    return None


def _group_number(response, question_group):
    for source in (response.get("group"), question_group.get("group")):
        if source is None or isinstance(source, bool):
            continue
        try:
            return int(source)
        except (TypeError, ValueError):
            continue
    return None


def detect_state(response, initial=False):
    """
    Classify one endpoint response.

    Transition rules:
    - SCREENING_QUESTIONS + question group → Fetching (initial) / MoreQuestions
    - REVIEW without question group → Complete
    - initial GET with REVIEW/COMPLETED and no group → Complete (nothing to answer)
    - everything else → Unexpected
    """
    if not isinstance(response, dict):
        return Unexpected(f"response is not an object: {type(response).__name__}", response)

    status = response.get("status")
    question_group = _question_group(response)

    if status == STATUS_SCREENING_QUESTIONS and question_group is not None:
        group = _group_number(response, question_group)
        if group is None:
            if not initial:
                return Unexpected("question group without a group number", response)
            group = 1
        questions = question_group.get("questions") or []
        if not isinstance(questions, list):
            return Unexpected("questions is not a list", response)
        if initial:
            return Fetching(group, questions, response)
        return MoreQuestions(group, questions, response)

    if question_group is None:
        if status == STATUS_REVIEW:
            return Complete(status, response)
        if initial and status == STATUS_COMPLETED:
            return Complete(status, response)

    return Unexpected(
        f"status={status!r} with{'' if question_group is not None else 'out'} question group",
        response,
    )


def describe_state(state):
    """One-line summary for console output"""
    if isinstance(state, (Fetching, MoreQuestions)):
        return f"{type(state).__name__}(group={state.group}, questions={len(state.questions)})"
    if isinstance(state, Complete):
        return f"Complete(status={state.status})"
    return f"Unexpected({state.reason})"
