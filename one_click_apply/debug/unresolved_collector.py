"""
Debug-only unresolved question collector

This module provides read-only observability into questions that could not be
auto-resolved. It does NOT change behavior, does NOT relax confidence gates,
and does NOT submit applications.

Usage:
    1. Enable with --debug-unresolved CLI flag
    2. Orchestrator calls record() whenever a question needs review or fails
    3. Orchestrator calls flush() when the job reaches a terminal state

Output:
    debug_unresolved.jsonl - one JSON object per unresolved question
"""

import json
from datetime import datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

import one_click_apply.config as config


class UnresolvedCollector:
    def __init__(self, path: Optional[str] = None):
        self.path = path or config.DEBUG_UNRESOLVED_FILE
        self._buffer: List[Dict] = []

    def __len__(self):
        return len(self._buffer)

    def record(
        self,
        *,
        job_id: str,
        listing_key: str,
        group: int,
        question_id: str,
        question_type: str,
        question_text: str,
        required: bool,
        options: Optional[List[str]],
        proposed_answer: str,
        confidence: float,
        source: str,
        outcome: str,
    ):
        """
        Record an unresolved question to the in-memory buffer.

        Args:
            job_id: Job identifier
            listing_key: Interview listing key
            group: Question group number
            question_id / question_type / question_text / required / options:
                the normalized question
            proposed_answer: Best answer the engine produced
            confidence: Confidence of that answer
            source: Answer source (cached, generated, user_input_required)
            outcome: What happened next (escalated, regenerate, skipped, failed)
        """
        self._buffer.append(
            {
                "timestamp": datetime.now(ZoneInfo(config.LOG_TIMEZONE)).isoformat(),
                "job_id": job_id,
                "listing_key": listing_key,
                "group": group,
                "question_id": question_id,
                "question_type": question_type,
                "question_text": question_text,
                "required": required,
                "options": options,
                "proposed_answer": proposed_answer,
                "confidence": round(confidence, 3),
                "source": source,
                "outcome": outcome,
            }
        )

    def flush(self):
        """
        Append buffered records to the debug file and clear the buffer.

        Called on terminal job states only. Append-only, one JSON object
        per line.
        """
        if not self._buffer:
            return

        with open(self.path, "a", encoding="utf-8") as f:
            for record in self._buffer:
                f.write(json.dumps(record, ensure_ascii=False) + "\n")

        self._buffer.clear()
