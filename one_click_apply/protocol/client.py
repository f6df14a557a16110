"""
Interview protocol client

Drives the multi-group questionnaire:

    GET  interview?listing_key=K&placement_id=P           → first group
    POST interview?listing_key=K&group=G&placement_id=P   → next group | review

The loop ends when the server reports REVIEW with no question group. Any
other unexpected combination, a group number that goes backwards, or more
than MAX_GROUP_ITERATIONS round-trips aborts the job.
"""

import time
from dataclasses import dataclass
from urllib.parse import urlencode

import one_click_apply.config as config
from one_click_apply.data.models import ApplicationState
from one_click_apply.errors import (
    ClientRequestError,
    IterationLimitExceeded,
    ProtocolViolation,
    TransientRequestError,
)
from one_click_apply.protocol.transport import TransportError
from one_click_apply.state.detector import (
    Complete,
    Fetching,
    MoreQuestions,
    describe_state,
    detect_state,
)


@dataclass(frozen=True)
class RetryExhausted:
    operation: str
    attempts: int
    last_error: str


def wire_answer(question_id, value):
    """Answers are always sent as a list, even for single values"""
    if isinstance(value, (list, tuple)):
        values = [str(v) for v in value]
    else:
        values = [str(value)]
    return {"id": question_id, "answer": values}


def build_submit_payload(answers):
    return {"answer_holders": [{"answers": list(answers)}]}


class InterviewProtocolClient:
    def __init__(
        self,
        transport,
        base_url=None,
        placement_id=None,
        max_retries=None,
        retry_base_delay_ms=None,
        max_iterations=None,
        sleep=time.sleep,
    ):
        self.transport = transport
        self.base_url = base_url or config.INTERVIEW_BASE_URL
        self.placement_id = placement_id or config.PLACEMENT_ID
        self.max_retries = max_retries or config.MAX_RETRIES
        self.retry_base_delay_ms = (
            config.RETRY_BASE_DELAY_MS if retry_base_delay_ms is None else retry_base_delay_ms
        )
        self.max_iterations = max_iterations or config.MAX_GROUP_ITERATIONS
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _url(self, listing_key, group=None):
        params = {"listing_key": listing_key}
        if group is not None:
            params["group"] = group
        params["placement_id"] = self.placement_id
        return f"{self.base_url}?{urlencode(params)}"

    def _request(self, operation, send):
        """
        Bounded retry loop.

        Returns the HttpResponse on success, None on 404, or RetryExhausted
        once every attempt failed with a network error or 5xx. Other 4xx
        raise ClientRequestError immediately.
        """
        last_error = ""
        for attempt in range(1, self.max_retries + 1):
            try:
                response = send()
            except TransportError as e:
                last_error = str(e)
            else:
                if response.ok:
                    return response
                if response.status == 404:
                    return None
                if 400 <= response.status < 500:
                    raise ClientRequestError(
                        f"{operation} failed: HTTP {response.status} {response.reason}".strip(),
                        response.status,
                    )
                last_error = f"HTTP {response.status} {response.reason}".strip()

            if attempt < self.max_retries:
                print(f"  ⚠️ {operation} failed (attempt {attempt}/{self.max_retries}), retrying... ({last_error})")
                self._sleep(attempt * self.retry_base_delay_ms / 1000)

        print(f"  ❌ {operation} failed after {self.max_retries} attempts")
        return RetryExhausted(operation, self.max_retries, last_error)

    def _body_or_raise(self, result):
        if result is None:
            return None
        if isinstance(result, RetryExhausted):
            raise TransientRequestError(
                f"{result.operation} failed after {result.attempts} attempts: {result.last_error}",
                {"attempts": result.attempts},
            )
        return result.body

    def fetch(self, listing_key):
        """GET the first question group. None means the interview is not available."""
        print(f"Fetching interview questions for {listing_key}")
        url = self._url(listing_key)
        return self._body_or_raise(self._request("fetch", lambda: self.transport.get(url)))

    def submit(self, listing_key, group, answers):
        """POST one group's answers. None means the endpoint went away."""
        print(f"Submitting {len(answers)} answers for group {group}")
        url = self._url(listing_key, group)
        payload = build_submit_payload(answers)
        return self._body_or_raise(
            self._request(f"submit group {group}", lambda: self.transport.post(url, payload))
        )

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    @staticmethod
    def _apply_counts(state, response):
        if not isinstance(response, dict):
            return
        state.status = response.get("status", state.status)
        state.application_id = response.get("applicationId") or state.application_id
        if response.get("totalGroups") is not None:
            state.total_groups = response["totalGroups"]
        if response.get("totalQuestions") is not None:
            state.total_questions = response["totalQuestions"]

    def complete_interview(self, listing_key, answer_provider):
        """
        Run the interview to completion.

        answer_provider(step, state) receives the current Fetching or
        MoreQuestions step and the job's ApplicationState, and returns the
        wire answers for that group. It is never retried: whatever it raises
        (including a skip) propagates straight out.

        Returns the final response, or None when the endpoint reports 404.
        """
        print(f"Starting interview for {listing_key}")

        response = self.fetch(listing_key)
        if response is None:
            print("  ⚠️ Interview endpoint not available for this job (404)")
            return None

        step = detect_state(response, initial=True)
        state = ApplicationState(listing_key=listing_key)
        self._apply_counts(state, response)
        print(f"  Received {state.total_questions} questions across {state.total_groups} group(s)")

        if isinstance(step, Complete):
            print(f"  ✓ Nothing to answer (status={step.status})")
            return response
        if not isinstance(step, Fetching):
            raise ProtocolViolation(f"Unexpected initial interview state: {step.reason}", {"listing_key": listing_key})

        state.current_group = step.group
        iteration_count = 0

        while True:
            iteration_count += 1
            if iteration_count > self.max_iterations:
                raise IterationLimitExceeded(
                    f"Exceeded maximum iterations ({self.max_iterations}), possible infinite loop",
                    {"listing_key": listing_key, "processed_groups": list(state.processed_groups)},
                )

            answers = answer_provider(step, state)

            response = self.submit(listing_key, state.current_group, answers)
            if response is None:
                print("  ⚠️ Interview endpoint disappeared mid-application (404)")
                return None

            state.processed_groups.append(state.current_group)
            self._apply_counts(state, response)
            step = detect_state(response)
            print(f"  Submission response: {describe_state(step)}")

            if isinstance(step, Complete):
                print("✓ Interview completed successfully")
                return response

            if isinstance(step, MoreQuestions):
                if step.group in state.processed_groups or step.group < state.current_group:
                    raise ProtocolViolation(
                        f"Server returned group {step.group} which was already processed",
                        {"listing_key": listing_key, "processed_groups": list(state.processed_groups)},
                    )
                state.current_group = step.group
                print(f"  Continuing to group {state.current_group} (iteration {iteration_count})")
                continue

            raise ProtocolViolation(
                f"Unexpected interview state: {step.reason}",
                {"listing_key": listing_key, "group": state.current_group},
            )
