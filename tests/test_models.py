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


"""Tests for result and record models."""

from __future__ import annotations

from extension_intake.core.exceptions import (
    ArchiveFormatError,
    ExtensionIntakeError,
    MalformedArchiveError,
    PolicyLoadError,
    SubmissionStorageError,
)
from extension_intake.core.models import (
    IntakeResult,
    Manifest,
    ManifestStatus,
    SubmissionRecord,
    ValidationResult,
)


def _record(**overrides) -> SubmissionRecord:
    values = dict(
        ext_id="notes",
        name="Notes",
        version="1.2.3",
        description="d",
        author="a",
        category="utilities",
        icon="puzzle",
        type="sidebar",
        id=7,
    )
    values.update(overrides)
    return SubmissionRecord(**values)


class TestValidationResult:
    def test_extend_keeps_order(self):
        first = ValidationResult(errors=["e1"], warnings=["w1"])
        first.extend(ValidationResult(errors=["e2"], warnings=["w2"]))

        assert first.errors == ["e1", "e2"]
        assert first.warnings == ["w1", "w2"]
        assert not first.valid

    def test_warnings_alone_are_valid(self):
        result = ValidationResult(warnings=["heads up"])
        assert result.valid
        assert result.to_dict() == {"valid": True, "errors": [], "warnings": ["heads up"]}


class TestIntakeResultMessage:
    def test_rejection_joins_errors(self):
        result = IntakeResult(accepted=False, errors=["a", "b"])
        assert result.message == "a; b"

    def test_acceptance(self):
        result = IntakeResult(accepted=True, record=_record())
        assert result.message == 'Extension "Notes" v1.2.3 submitted for review! Submission #7'

    def test_warnings_are_appended(self):
        result = IntakeResult(accepted=True, record=_record(), warnings=["w1", "w2"])
        assert result.message.endswith("\n\nWarnings:\n• w1\n• w2")

    def test_valid_without_record(self):
        assert IntakeResult(accepted=True).message == "Extension package is valid."

    def test_to_dict(self):
        result = IntakeResult(accepted=True, record=_record(), manifest_status=ManifestStatus.FOUND)
        payload = result.to_dict()

        assert payload["manifest_status"] == "found"
        assert payload["submission"]["id"] == 7
        assert payload["submission"]["status"] == "pending"


class TestManifestModel:
    def test_from_dict_keeps_unknown_keys(self):
        data = {
            "name": "N",
            "version": "1.0.0",
            "description": "d",
            "author": "a",
            "main": "index.js",
            "homepage": "https://example.test",
        }
        manifest = Manifest.from_dict(data)

        assert manifest.permissions == []
        assert manifest.type is None
        assert manifest.raw["homepage"] == "https://example.test"

    def test_record_to_dict(self):
        payload = _record(permissions=["storage"]).to_dict()
        assert payload["permissions"] == ["storage"]
        assert payload["status"] == "pending"
        assert payload["reviewed_at"] is None


def test_exception_hierarchy():
    assert issubclass(MalformedArchiveError, ArchiveFormatError)
    for exc in (ArchiveFormatError, SubmissionStorageError, PolicyLoadError):
        assert issubclass(exc, ExtensionIntakeError)


def test_top_level_lazy_exports():
    import extension_intake

    for name in extension_intake.__all__:
        assert getattr(extension_intake, name) is not None
    assert extension_intake.SubmissionIntake.__module__ == "extension_intake.core.intake"
