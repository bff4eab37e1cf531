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
Submission intake: turns an uploaded archive into a reviewed-queue record.

Flow::

    bytes -> extract_contents -> normalize_paths
          -> check_manifest + check_files (independent, results concatenated)
          -> generate_identifier -> BlobStore.put -> SubmissionStore.create
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .archive_reader import extract_contents
from .checks import check_files, check_manifest
from .exceptions import SubmissionStorageError
from .identifier import generate_identifier
from .models import (
    ArchiveContents,
    IntakeResult,
    Manifest,
    ManifestStatus,
    SubmissionRecord,
    ValidationResult,
)
from .paths import normalize_paths
from .store import BlobStore, InMemoryBlobStore, InMemorySubmissionStore, SubmissionStore
from .submission_policy import SubmissionPolicy

logger = logging.getLogger(__name__)

_MANIFEST_PROBLEMS: dict[ManifestStatus, str] = {
    ManifestStatus.ABSENT: (
        "No manifest.json found in zip root. Each extension must include a manifest.json."
    ),
    ManifestStatus.CORRUPT: "manifest.json could not be read as a JSON object",
    ManifestStatus.UNSUPPORTED_COMPRESSION: (
        "manifest.json is compressed; store it uncompressed (ZIP method 0) so it can be read"
    ),
    ManifestStatus.INVALID_ARCHIVE: "No manifest found: the upload is not a readable zip archive",
}


@dataclass
class ArchiveCheck:
    """Validation outcome for one archive, before anything is persisted."""

    contents: ArchiveContents
    file_list: list[str]
    validation: ValidationResult = field(default_factory=ValidationResult)


def describe_manifest_problem(contents: ArchiveContents) -> str | None:
    """Return the developer-facing reason a manifest is missing, if it is."""
    if contents.manifest is not None:
        return None
    message = _MANIFEST_PROBLEMS[contents.manifest_status]
    if contents.manifest_status is ManifestStatus.INVALID_ARCHIVE and contents.error:
        message = f"{message} ({contents.error})"
    return message


def _clean_fields(fields: Mapping[str, Any] | None) -> dict[str, str]:
    cleaned: dict[str, str] = {}
    for key, value in (fields or {}).items():
        if value is None:
            continue
        text = str(value).strip()
        if text:
            cleaned[key] = text
    return cleaned


class SubmissionIntake:
    """Validates uploaded extension packages and queues accepted ones for review."""

    def __init__(
        self,
        policy: SubmissionPolicy | None = None,
        submission_store: SubmissionStore | None = None,
        blob_store: BlobStore | None = None,
        blob_prefix: str = "submissions",
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the intake pipeline.

        Args:
            policy: Submission policy. If None, loads built-in defaults.
            submission_store: Persistence collaborator (in-memory if None)
            blob_store: Object storage collaborator (in-memory if None)
            blob_prefix: Folder under which raw archives are stored
            clock: Seconds-since-epoch source used in blob names
        """
        self.policy = policy or SubmissionPolicy.default()
        self.submission_store = submission_store if submission_store is not None else InMemorySubmissionStore()
        self.blob_store = blob_store if blob_store is not None else InMemoryBlobStore()
        self.blob_prefix = blob_prefix.strip("/")
        self._clock = clock

    def check_archive(self, data: bytes) -> ArchiveCheck:
        """
        Run the reader, normalizer and both validators over *data*.

        Never raises for bad input; every problem ends up in
        ``validation.errors``.
        """
        contents = extract_contents(data)
        file_list = normalize_paths(contents.file_list)
        validation = ValidationResult()

        problem = describe_manifest_problem(contents)
        if problem is not None:
            validation.errors.append(problem)
        else:
            validation.extend(check_manifest(contents.manifest, self.policy))

        validation.extend(check_files(file_list, self.policy))
        if contents.truncated:
            validation.warnings.append(
                f"Archive central directory ended after {len(contents.entries)} of "
                f"{contents.declared_entry_count} entries; later files were not checked"
            )

        logger.debug(
            "Checked archive: %d files, manifest %s, %d errors, %d warnings",
            len(file_list),
            contents.manifest_status.value,
            len(validation.errors),
            len(validation.warnings),
        )
        return ArchiveCheck(contents=contents, file_list=file_list, validation=validation)

    def submit(self, data: bytes, filename: str | None, fields: Mapping[str, Any] | None = None) -> IntakeResult:
        """
        Validate an uploaded package and, if it passes, store it for review.

        Args:
            data: The complete uploaded archive
            filename: Client-supplied file name (must end in ``.zip``)
            fields: Optional form fields: ``category``, ``description``,
                ``author_name``, ``author_email``

        Returns:
            IntakeResult; ``accepted`` is False when any validator reported errors

        Raises:
            SubmissionStorageError: If a collaborator fails after validation passed
        """
        if not data:
            return IntakeResult(accepted=False, errors=["No file uploaded."])
        if not filename or not filename.lower().endswith(".zip"):
            return IntakeResult(accepted=False, errors=["Only .zip files are accepted."])

        form = _clean_fields(fields)
        check = self.check_archive(data)
        errors = list(check.validation.errors)
        warnings = list(check.validation.warnings)

        if errors:
            logger.warning("Rejected submission %s: %s", filename, "; ".join(errors))
            return IntakeResult(
                accepted=False,
                errors=errors,
                warnings=warnings,
                manifest_status=check.contents.manifest_status,
                file_list=check.file_list,
            )

        manifest = Manifest.from_dict(check.contents.manifest)
        category = self._resolve_category(form.get("category") or manifest.category, warnings)
        record = self._build_record(manifest, form, category)
        record.blob_url = self._store_archive(record, data)

        try:
            stored = self.submission_store.create(record)
        except Exception as e:
            raise SubmissionStorageError(f"Failed to save submission for {record.ext_id}: {e}") from e

        logger.info("Accepted submission #%s: %s v%s (%s)", stored.id, stored.name, stored.version, stored.ext_id)
        return IntakeResult(
            accepted=True,
            warnings=warnings,
            record=stored,
            manifest_status=check.contents.manifest_status,
            file_list=check.file_list,
        )

    def lookup_status(self, submission_id: int) -> dict[str, Any] | None:
        """Return ``{id, name, version, status, review_notes}`` or None if unknown."""
        record = self.submission_store.get(submission_id)
        return record.status_view() if record else None

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    def _resolve_category(self, requested: str | None, warnings: list[str]) -> str:
        fallback = self.policy.defaults.category
        if not requested:
            return fallback
        if not self.policy.is_allowed_category(requested):
            allowed = ", ".join(sorted(self.policy.categories.allowed))
            warnings.append(f'Unknown category "{requested}" replaced with "{fallback}" (allowed: {allowed})')
            return fallback
        return requested

    def _build_record(self, manifest: Manifest, form: dict[str, str], category: str) -> SubmissionRecord:
        defaults = self.policy.defaults
        return SubmissionRecord(
            ext_id=generate_identifier(manifest.name),
            name=manifest.name,
            version=manifest.version,
            description=manifest.description or form.get("description", ""),
            author=manifest.author or form.get("author_name") or defaults.author,
            author_email=form.get("author_email"),
            category=category,
            icon=manifest.icon or defaults.icon,
            type=manifest.type or defaults.type,
            permissions=list(manifest.permissions),
            api_version=str(manifest.api_version or defaults.api_version),
            manifest_json=manifest.raw,
        )

    def _store_archive(self, record: SubmissionRecord, data: bytes) -> str:
        millis = int(self._clock() * 1000)
        blob_name = f"{self.blob_prefix}/{record.ext_id}-{record.version}-{millis}.zip"
        try:
            return self.blob_store.put(blob_name, data, content_type="application/zip")
        except Exception as e:
            raise SubmissionStorageError(f"Failed to store archive {blob_name}: {e}") from e
