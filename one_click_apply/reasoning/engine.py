"""
Answer resolution engine

Decides per question whether to reuse a cached answer or generate one, and
scores how much the result can be trusted. Routing on that score (auto-accept
vs human review) happens in the orchestrator.

Resolution order:
1. info questions → empty answer, no collaborator calls
2. cache hit above the store's acceptance threshold → reuse at fixed confidence
3. one completion call with a type-specific prompt → parse, validate, score
"""

from dataclasses import replace

from one_click_apply.data.models import (
    INFO,
    SINGLE_SELECT,
    SOURCE_CACHED,
    SOURCE_GENERATED,
    SOURCE_USER_INPUT_REQUIRED,
    Answer,
    CacheRecord,
    CandidateContext,
)
from one_click_apply.data.answer_cache import utc_now_iso
from one_click_apply.reasoning.classify import (
    cache_record_id,
    categorize_question,
    extract_keywords,
)
from one_click_apply.reasoning.prompts import build_select_prompt, build_text_prompt
from one_click_apply.reasoning.resolve_select import (
    MATCH_EXACT,
    extract_select_text,
    resolve_select_answer,
)
from one_click_apply.reasoning.resolve_text import (
    apply_confidence_floor,
    clamp_confidence,
    parse_text_response,
)

CACHED_ANSWER_CONFIDENCE = 0.9
CACHE_WRITE_MIN_CONFIDENCE = 0.6
CACHE_SEARCH_LIMIT = 3


class AnswerResolutionEngine:
    """Resolve one ParsedQuestion into one Answer. resolve() never raises."""

    def __init__(self, cache, provider):
        self.cache = cache
        self.provider = provider

    def resolve(self, question, candidate_context=None, extra_context=""):
        """
        extra_context is an operator hint for regeneration. It only shapes the
        prompt: the cache is bypassed and writes stay keyed on question.text.
        """
        if question.type == INFO:
            return Answer.single(question.id, "", 1.0, SOURCE_CACHED)

        context = candidate_context or CandidateContext()
        hint = (extra_context or "").strip()
        try:
            if not hint:
                cached = self._lookup_cache(question)
                if cached is not None:
                    return cached

            answer = self._generate(self.with_extra_context(question, hint), context)
        except Exception as e:
            print(f"  ⚠️ Failed to resolve \"{question.text}\": {e}")
            return Answer.single(question.id, "", 0.0, SOURCE_USER_INPUT_REQUIRED)

        if answer.source == SOURCE_GENERATED and answer.confidence >= CACHE_WRITE_MIN_CONFIDENCE:
            self._save(question, answer.value)
        return answer

    def _lookup_cache(self, question):
        matches = self.cache.search(question.text, CACHE_SEARCH_LIMIT)
        if not matches:
            return None
        top = matches[0]
        score = top.similarity_score if top.similarity_score is not None else 0.0
        if score < self.cache.acceptance_threshold:
            return None

        print(f"  💾 Using cached answer ({score:.0%} similar, used {top.usage_count}x)")
        self.cache.increment_usage(top.id)
        return Answer.single(question.id, top.answer_text, CACHED_ANSWER_CONFIDENCE, SOURCE_CACHED)

    def _generate(self, question, context):
        if question.type == SINGLE_SELECT:
            prompt = build_select_prompt(question, context)
        else:
            prompt = build_text_prompt(question, context)

        raw_response = self.provider.complete(prompt)

        if question.type == SINGLE_SELECT:
            chosen_text = extract_select_text(raw_response)
            value, confidence, match_kind = resolve_select_answer(chosen_text, question.option_labels)
            if match_kind != MATCH_EXACT:
                print(f"  ⚠️ Select answer via {match_kind}: \"{chosen_text}\" → \"{value}\"")
        else:
            value, confidence = parse_text_response(raw_response)

        confidence = apply_confidence_floor(value, clamp_confidence(confidence))
        return Answer.single(question.id, value, confidence, SOURCE_GENERATED)

    def _save(self, question, answer_text):
        """Cache writes are best-effort; a failing store never changes the answer"""
        record = CacheRecord(
            id=cache_record_id(question.text),
            question_text=question.text,
            answer_text=answer_text,
            usage_count=1,
            last_used_at=utc_now_iso(),
            category=categorize_question(question.text),
            keywords=extract_keywords(question.text),
        )
        try:
            self.cache.insert(record)
        except Exception as e:
            print(f"  ⚠️ Failed to save answer to cache: {e}")

    def remember(self, question, answer):
        """Store an operator-approved answer so future lookups reuse it"""
        if answer.source == SOURCE_CACHED or not answer.value.strip():
            return
        self._save(question, answer.value)

    @staticmethod
    def with_extra_context(question, extra_context):
        """Copy of question with operator hints appended for regeneration"""
        if not extra_context or not extra_context.strip():
            return question
        return replace(question, text=f"{question.text}\n\nAdditional context: {extra_context.strip()}")
