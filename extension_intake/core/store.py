# Copyright 2026 Extension Intake Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""
Persistence and object-storage collaborators for accepted submissions.

Production deployments plug in a database-backed ``SubmissionStore`` and a
cloud ``BlobStore``. The in-memory implementations here back the API server
and the test suite.
"""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import replace
from datetime import datetime, timezone

from .models import SubmissionRecord, SubmissionStatus


class BlobStore(ABC):
    """Durable storage for raw submission archives."""

    @abstractmethod
    def put(self, name: str, data: bytes, content_type: str = "application/zip") -> str:
        """
        Store *data* under *name*.

        Returns:
            A URL (or other reference) for the stored object
        """
        pass


class SubmissionStore(ABC):
    """Review queue of submission records."""

    @abstractmethod
    def create(self, record: SubmissionRecord) -> SubmissionRecord:
        """Insert *record* and return it with ``id`` assigned."""
        pass

    @abstractmethod
    def get(self, submission_id: int) -> SubmissionRecord | None:
        pass

    @abstractmethod
    def list_submissions(self, status: SubmissionStatus | None = None) -> list[SubmissionRecord]:
        """Return records newest first, optionally filtered by *status*."""
        pass

    @abstractmethod
    def update_status(
        self, submission_id: int, status: SubmissionStatus, review_notes: str | None = None
    ) -> SubmissionRecord | None:
        pass

    def stats(self) -> dict[str, int]:
        """Count submissions in total and per status."""
        counts = Counter(record.status for record in self.list_submissions())
        summary = {"total": sum(counts.values())}
        for status in SubmissionStatus:
            summary[status.value] = counts.get(status, 0)
        return summary


class InMemoryBlobStore(BlobStore):
    """Keeps archives in a dict keyed by object name."""

    def __init__(self, base_url: str = "memory://blobs"):
        self.base_url = base_url.rstrip("/")
        self._objects: dict[str, tuple[bytes, str]] = {}
        self._lock = threading.Lock()

    def put(self, name: str, data: bytes, content_type: str = "application/zip") -> str:
        with self._lock:
            self._objects[name] = (bytes(data), content_type)
        return f"{self.base_url}/{name}"

    def get(self, name: str) -> bytes | None:
        with self._lock:
            stored = self._objects.get(name)
        return stored[0] if stored else None

    def __len__(self) -> int:
        return len(self._objects)


class InMemorySubmissionStore(SubmissionStore):
    """Dict-backed store with sequential ids. Returned records are copies."""

    def __init__(self):
        self._records: dict[int, SubmissionRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, record: SubmissionRecord) -> SubmissionRecord:
        with self._lock:
            stored = replace(record, id=self._next_id)
            self._records[stored.id] = stored
            self._next_id += 1
            return copy.deepcopy(stored)

    def get(self, submission_id: int) -> SubmissionRecord | None:
        with self._lock:
            record = self._records.get(submission_id)
            return copy.deepcopy(record) if record else None

    def list_submissions(self, status: SubmissionStatus | None = None) -> list[SubmissionRecord]:
        with self._lock:
            records = [r for r in self._records.values() if status is None or r.status == status]
            records.sort(key=lambda r: (r.created_at, r.id), reverse=True)
            return [copy.deepcopy(r) for r in records]

    def update_status(
        self, submission_id: int, status: SubmissionStatus, review_notes: str | None = None
    ) -> SubmissionRecord | None:
        with self._lock:
            record = self._records.get(submission_id)
            if record is None:
                return None
            updated = replace(
                record, status=status, review_notes=review_notes, reviewed_at=datetime.now(timezone.utc)
            )
            self._records[submission_id] = updated
            return copy.deepcopy(updated)
