"""Answer cache - previously given answers keyed by question similarity"""

import json
import os
from abc import ABC, abstractmethod
from dataclasses import asdict
from datetime import datetime, timezone
from difflib import SequenceMatcher
from typing import List

from one_click_apply.data.models import CacheRecord
from one_click_apply.reasoning.normalize import normalize_text


def utc_now_iso():
    return datetime.now(timezone.utc).isoformat()


class AnswerCache(ABC):
    """
    Similarity store interface.

    search() returns records ranked best-first with similarity_score set.
    acceptance_threshold is the score a record must reach to be reused.
    """

    acceptance_threshold: float = 0.7

    @abstractmethod
    def search(self, text: str, limit: int = 3) -> List[CacheRecord]:
        ...

    @abstractmethod
    def insert(self, record: CacheRecord) -> None:
        ...

    @abstractmethod
    def increment_usage(self, record_id: str) -> None:
        ...


class JsonAnswerCache(AnswerCache):
    """
    File-backed cache using SequenceMatcher ratio on normalized question text.

    Records live in one JSON file so answers survive across runs. Inserting
    a record with an existing id replaces it.
    """

    def __init__(self, path: str, acceptance_threshold: float = 0.7):
        self.path = path
        self.acceptance_threshold = acceptance_threshold
        self._records = self._load()

    def _load(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            records = {}
            for item in raw.get("records", []):
                item.pop("similarity_score", None)
                record = CacheRecord(**item)
                records[record.id] = record
            return records
        except (ValueError, TypeError, AttributeError) as e:
            # Keep the unreadable file for inspection; the next insert writes a fresh one
            backup_path = f"{self.path}.corrupt"
            os.replace(self.path, backup_path)
            print(f"⚠️ Answer cache {self.path} is unreadable ({e}), moved to {backup_path} - starting empty")
            return {}

    def _save(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        payload = {"records": []}
        for record in self._records.values():
            data = asdict(record)
            data.pop("similarity_score", None)
            payload["records"].append(data)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def __len__(self):
        return len(self._records)

    def get(self, record_id):
        return self._records.get(record_id)

    def search(self, text, limit=3):
        query = normalize_text(text)
        if not query:
            return []
        scored = []
        for record in self._records.values():
            score = SequenceMatcher(None, query, normalize_text(record.question_text)).ratio()
            scored.append((score, record))
        scored.sort(key=lambda pair: pair[0], reverse=True)

        results = []
        for score, record in scored[:limit]:
            hit = CacheRecord(**asdict(record))
            hit.similarity_score = round(score, 4)
            results.append(hit)
        return results

    def insert(self, record):
        stored = CacheRecord(**asdict(record))
        stored.similarity_score = None
        if not stored.last_used_at:
            stored.last_used_at = utc_now_iso()
        self._records[stored.id] = stored
        self._save()

    def increment_usage(self, record_id):
        record = self._records.get(record_id)
        if record is None:
            print(f"  ⚠️ Cache record not found: {record_id}")
            return
        record.usage_count += 1
        record.last_used_at = utc_now_iso()
        self._save()
