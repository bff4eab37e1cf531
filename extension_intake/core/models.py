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
Data models for extension submissions and validation results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ManifestStatus(str, Enum):
    """Outcome of locating and decoding ``manifest.json`` inside an archive."""

    FOUND = "found"
    ABSENT = "absent"
    CORRUPT = "corrupt"
    UNSUPPORTED_COMPRESSION = "unsupported_compression"
    INVALID_ARCHIVE = "invalid_archive"


class SubmissionStatus(str, Enum):
    """Review state of a persisted submission."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class CentralDirectoryEntry:
    """One record of the ZIP central directory."""

    file_name: str
    local_header_offset: int
    compression_method: int
    extra_length: int = 0
    comment_length: int = 0

    @property
    def is_directory(self) -> bool:
        return self.file_name.endswith("/")


@dataclass
class ArchiveContents:
    """What the archive reader recovered from an uploaded buffer."""

    manifest: dict[str, Any] | None = None
    manifest_status: ManifestStatus = ManifestStatus.ABSENT
    manifest_path: str | None = None
    file_list: list[str] = field(default_factory=list)
    entries: list[CentralDirectoryEntry] = field(default_factory=list)
    declared_entry_count: int = 0
    # Set when the central directory walk hit a bad signature and stopped early
    truncated: bool = False
    error: str | None = None


@dataclass
class ValidationResult:
    """Errors block a submission; warnings are shown to the developer."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def extend(self, other: ValidationResult) -> ValidationResult:
        """Append *other*'s errors and warnings after this result's own."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


@dataclass
class Manifest:
    """Typed view of a ``manifest.json`` that has passed validation.

    Required: name, version, description, author, main.
    Optional: type, permissions, icon, category, api_version.
    """

    name: str
    version: str
    description: str
    author: str
    main: str
    type: str | None = None
    permissions: list[str] = field(default_factory=list)
    icon: str | None = None
    category: str | None = None
    api_version: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Manifest:
        """Build a manifest from decoded JSON. Unknown keys stay in ``raw``."""
        permissions = data.get("permissions") or []
        return cls(
            name=data["name"],
            version=data["version"],
            description=data["description"],
            author=data["author"],
            main=data["main"],
            type=data.get("type") or None,
            permissions=list(permissions),
            icon=data.get("icon") or None,
            category=data.get("category") or None,
            api_version=data.get("api_version") or None,
            raw=dict(data),
        )


@dataclass
class SubmissionRecord:
    """The row handed to the persistence collaborator for review."""

    ext_id: str
    name: str
    version: str
    description: str
    author: str
    category: str
    icon: str
    type: str
    permissions: list[str] = field(default_factory=list)
    api_version: str = "1.0"
    manifest_json: dict[str, Any] = field(default_factory=dict)
    blob_url: str | None = None
    author_email: str | None = None
    id: int | None = None
    status: SubmissionStatus = SubmissionStatus.PENDING
    review_notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    reviewed_at: datetime | None = None

    def status_view(self) -> dict[str, Any]:
        """The public projection served by the status lookup."""
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "status": self.status.value,
            "review_notes": self.review_notes,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ext_id": self.ext_id,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "author": self.author,
            "author_email": self.author_email,
            "category": self.category,
            "icon": self.icon,
            "type": self.type,
            "permissions": list(self.permissions),
            "api_version": self.api_version,
            "blob_url": self.blob_url,
            "manifest_json": self.manifest_json,
            "status": self.status.value,
            "review_notes": self.review_notes,
            "created_at": self.created_at.isoformat(),
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
        }


@dataclass
class IntakeResult:
    """Outcome of one submission attempt."""

    accepted: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    record: SubmissionRecord | None = None
    manifest_status: ManifestStatus | None = None
    file_list: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        """Human-readable summary for the submitting developer."""
        if not self.accepted:
            text = "; ".join(self.errors)
        elif self.record is not None:
            text = (
                f'Extension "{self.record.name}" v{self.record.version} submitted for review! '
                f"Submission #{self.record.id}"
            )
        else:
            text = "Extension package is valid."
        if self.warnings:
            text += "\n\nWarnings:\n" + "\n".join(f"• {w}" for w in self.warnings)
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "accepted": self.accepted,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "message": self.message,
            "manifest_status": self.manifest_status.value if self.manifest_status else None,
            "submission": self.record.status_view() if self.record else None,
        }
