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
Extension Intake - Submission validation for browser-extension marketplace packages.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Keeps ``import extension_intake`` cheap for ``python -m`` entry points
    that never touch the FastAPI or YAML machinery.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "ExtensionIntakeConstants": (".config.constants", "ExtensionIntakeConstants"),
        "ArchiveContents": (".core.models", "ArchiveContents"),
        "Manifest": (".core.models", "Manifest"),
        "ManifestStatus": (".core.models", "ManifestStatus"),
        "SubmissionRecord": (".core.models", "SubmissionRecord"),
        "ValidationResult": (".core.models", "ValidationResult"),
        "extract_contents": (".core.archive_reader", "extract_contents"),
        "read_archive": (".core.archive_reader", "read_archive"),
        "normalize_paths": (".core.paths", "normalize_paths"),
        "check_manifest": (".core.checks.manifest_checks", "check_manifest"),
        "check_files": (".core.checks.file_checks", "check_files"),
        "generate_identifier": (".core.identifier", "generate_identifier"),
        "SubmissionPolicy": (".core.submission_policy", "SubmissionPolicy"),
        "SubmissionIntake": (".core.intake", "SubmissionIntake"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "SubmissionIntake",
    "SubmissionPolicy",
    "extract_contents",
    "read_archive",
    "normalize_paths",
    "check_manifest",
    "check_files",
    "generate_identifier",
    "ArchiveContents",
    "Manifest",
    "ManifestStatus",
    "SubmissionRecord",
    "ValidationResult",
    "Config",
    "ExtensionIntakeConstants",
]
