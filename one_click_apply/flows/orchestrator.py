"""
Application orchestrator - one job end to end

    pre-flight (already applied?) → click apply → interview loop → outcome

Question-level policy:
- info questions answer "" without review
- an answer at or above the auto-approve threshold is used as-is
- anything else goes to the approver, at most MAX_RESOLVE_ATTEMPTS times
- a required question left unresolved aborts the job; an optional one is
  submitted empty
- an operator skip abandons the job and is reported as SKIPPED, not FAILED
"""

import time

import one_click_apply.config as config
from one_click_apply.data.models import (
    INFO,
    JOB_APPLIED,
    JOB_FAILED,
    JOB_SKIPPED,
    JOB_UNAVAILABLE,
    SINGLE_SELECT,
    SOURCE_USER_EDITED,
    SOURCE_USER_INPUT_REQUIRED,
    Answer,
    CandidateContext,
    JobResult,
)
from one_click_apply.errors import (
    ClientRequestError,
    JobSkipped,
    ProtocolViolation,
    RequiredQuestionUnresolved,
    TransientRequestError,
)
from one_click_apply.protocol.client import wire_answer
from one_click_apply.reasoning.normalize import normalize_group
from one_click_apply.reasoning.resolve_select import option_value_for
from one_click_apply.utils.logging import log_result
from one_click_apply.utils.timing import format_elapsed_time

# Reason codes - used for structured outcome tracking
SKIP_ALREADY_APPLIED = "already_applied"
SKIP_OPERATOR = "operator_skip"
SKIP_INTERVIEW_UNAVAILABLE = "interview_unavailable"
FAIL_PAGE_LOAD = "page_load_failed"
FAIL_APPLY_BUTTON_NOT_FOUND = "apply_button_not_found"
FAIL_REQUIRED_QUESTION = "required_question_unresolved"
FAIL_PROTOCOL_VIOLATION = "protocol_violation"
FAIL_REQUEST = "request_failed"


class ApplicationOrchestrator:
    def __init__(
        self,
        browser,
        client,
        engine,
        approver,
        profile_text="",
        auto_approve_threshold=None,
        max_attempts=None,
        collector=None,
        result_log_file=None,
    ):
        self.browser = browser
        self.client = client
        self.engine = engine
        self.approver = approver
        self.profile_text = profile_text
        self.auto_approve_threshold = (
            config.auto_approve_threshold() if auto_approve_threshold is None else auto_approve_threshold
        )
        self.max_attempts = max_attempts or config.MAX_RESOLVE_ATTEMPTS
        self.collector = collector
        self.result_log_file = result_log_file

    # ------------------------------------------------------------------
    # Job level
    # ------------------------------------------------------------------

    def apply_to_job(self, job):
        """Run one job and return its JobResult. Never raises for job-level failures."""
        print(f"Starting application for: {job.title or job.job_id}")
        start_time = time.time()

        already_applied, why = self.browser.is_already_applied()
        if already_applied:
            print(f"\n🔁 Job already applied - skipping ({why})")
            return self._finish(job, JobResult(job.job_id, JOB_SKIPPED, f"Already applied ({why})", SKIP_ALREADY_APPLIED), start_time)

        # The interview endpoint answers 404 until the apply click initializes the session
        if not self.browser.activate_entry_point(job):
            return self._finish(
                job,
                JobResult(job.job_id, JOB_FAILED, "Apply button not found - cannot initialize session", FAIL_APPLY_BUTTON_NOT_FOUND),
                start_time,
            )

        context = CandidateContext(
            profile_text=self.profile_text,
            job_title=job.title,
            company=job.company,
            job_description=job.description,
        )
        tracked = {"state": None, "answered": 0}

        def answer_provider(step, state):
            tracked["state"] = state
            answers = self.answer_group(step, state, job, context)
            tracked["answered"] += len(answers)
            return answers

        try:
            final = self.client.complete_interview(job.listing_key, answer_provider)
        except JobSkipped as e:
            result = JobResult(job.job_id, JOB_SKIPPED, e.message, SKIP_OPERATOR)
        except RequiredQuestionUnresolved as e:
            result = JobResult(job.job_id, JOB_FAILED, e.message, FAIL_REQUIRED_QUESTION)
        except ProtocolViolation as e:
            result = JobResult(job.job_id, JOB_FAILED, e.message, FAIL_PROTOCOL_VIOLATION)
        except (TransientRequestError, ClientRequestError) as e:
            result = JobResult(job.job_id, JOB_FAILED, e.message, FAIL_REQUEST)
        else:
            if final is None:
                result = JobResult(
                    job.job_id,
                    JOB_UNAVAILABLE,
                    "Interview endpoint not available for this job",
                    SKIP_INTERVIEW_UNAVAILABLE,
                )
            else:
                print("✓ Application submitted successfully")
                result = JobResult(job.job_id, JOB_APPLIED)

        state = tracked["state"]
        result.groups_submitted = len(state.processed_groups) if state is not None else 0
        result.questions_answered = tracked["answered"]
        return self._finish(job, result, start_time)

    def _finish(self, job, result, start_time):
        if self.collector is not None:
            self.collector.flush()
        print(f"⏱️  Total time: {format_elapsed_time(time.time() - start_time)}")
        log_result(
            job.url,
            result.status,
            result.reason,
            result.groups_submitted,
            log_file=self.result_log_file,
            job_id=job.job_id,
            reason_code=result.reason_code,
        )
        return result

    # ------------------------------------------------------------------
    # Group and question level
    # ------------------------------------------------------------------

    def answer_group(self, step, state, job, context):
        """Resolve every question in the active group, in order, before submitting"""
        questions = normalize_group(step.questions, step.group)
        print(f"\nProcessing {len(questions)} questions (group {step.group})")

        answers = []
        for question in questions:
            answer = self.answer_question(question, context, job, state)
            answers.append(self.to_wire(question, answer))
        return answers

    @staticmethod
    def to_wire(question, answer):
        values = list(answer.values)
        if question.type == SINGLE_SELECT:
            values = [option_value_for(question, v) if v else v for v in values]
        return wire_answer(question.id, values)

    def _record(self, job, state, question, answer, outcome):
        if self.collector is None:
            return
        self.collector.record(
            job_id=job.job_id,
            listing_key=job.listing_key,
            group=question.group,
            question_id=question.id,
            question_type=question.type,
            question_text=question.text,
            required=question.required,
            options=question.option_labels or None,
            proposed_answer=answer.value if answer else "",
            confidence=answer.confidence if answer else 0.0,
            source=answer.source if answer else SOURCE_USER_INPUT_REQUIRED,
            outcome=outcome,
        )

    def _unresolved(self, question, attempts, cause=None):
        if question.required:
            error = RequiredQuestionUnresolved(question.id, question.text, attempts)
            if cause is not None:
                raise error from cause
            raise error
        print(f"  ⚠️ Optional question left blank: {question.text}")
        return Answer.single(question.id, "", 0.0, SOURCE_USER_INPUT_REQUIRED)

    def answer_question(self, question, context, job, state):
        """Resolve one question, escalating to the approver below the threshold"""
        if question.type == INFO:
            return self.engine.resolve(question, context)

        print(f"Answering: {question.text}")
        extra_context = ""
        answer = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                answer = self.engine.resolve(question, context, extra_context=extra_context)

                if answer.source != SOURCE_USER_INPUT_REQUIRED and answer.confidence >= self.auto_approve_threshold:
                    print(f"  ✓ Auto-approved ({answer.confidence * 100:.0f}% confidence): {answer.value}")
                    return answer

                print(f"  ⚠ Low confidence ({answer.confidence * 100:.0f}%), requesting approval")
                approval = self.approver.approve(question, answer.value, answer.confidence)

                if approval.skip:
                    self._record(job, state, question, answer, "skipped")
                    raise JobSkipped(question_id=question.id)

                if approval.regenerate:
                    self._record(job, state, question, answer, "regenerate")
                    print(f"  ↻ Regenerating answer (attempt {attempt}/{self.max_attempts})")
                    extra_context = approval.extra_context
                    continue

                if approval.edited:
                    edited = Answer.single(question.id, approval.final_value, 1.0, SOURCE_USER_EDITED)
                    if edited.value.strip():
                        print(f"  ✓ User approved answer (edited): {edited.value}")
                        self.engine.remember(question, edited)
                        return edited
                    self._record(job, state, question, answer, "empty_edit")
                    continue

                if approval.final_value.strip():
                    print(f"  ✓ User approved answer: {approval.final_value}")
                    accepted = Answer.single(question.id, approval.final_value, answer.confidence, answer.source)
                    # Batch auto-accept is not a human review
                    if approval.by_operator:
                        self.engine.remember(question, accepted)
                    return accepted

                # Approving an empty proposal does not answer the question
                self._record(job, state, question, answer, "empty_accept")

            except JobSkipped:
                raise
            except Exception as e:
                print(f"  ❌ Error answering \"{question.text}\": {e}")
                self._record(job, state, question, answer, "error")
                return self._unresolved(question, attempt, cause=e)

        print(f"  ❌ Failed to get approved answer after {self.max_attempts} attempts")
        self._record(job, state, question, answer, "exhausted")
        return self._unresolved(question, self.max_attempts)
