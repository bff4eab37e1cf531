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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

import json
import struct
import zlib
from pathlib import Path

import pytest
from dotenv import load_dotenv

from extension_intake.core.intake import SubmissionIntake
from extension_intake.core.store import InMemoryBlobStore, InMemorySubmissionStore
from extension_intake.core.submission_policy import SubmissionPolicy

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

project_root = Path(__file__).parent.parent
env_file = project_root / ".env"

if env_file.exists():
    load_dotenv(env_file)

FIXED_CLOCK = 1_700_000_000.0


# ---------------------------------------------------------------------------
# Hand-built ZIP archives
# ---------------------------------------------------------------------------


def build_zip(entries, comment: bytes = b"", deflate: frozenset[str] | set[str] = frozenset()) -> bytes:
    """
    Assemble a ZIP archive byte by byte.

    Args:
        entries: Sequence of ``(name, data)`` pairs, or a dict. Names may be
            ``bytes`` to exercise undecodable file names; ``str`` data is
            UTF-8 encoded.
        comment: Archive comment appended after the EOCD record
        deflate: Names whose data is stored with method 8 (raw DEFLATE)

    Returns:
        The archive bytes: local headers, central directory, then EOCD.
    """
    if isinstance(entries, dict):
        entries = list(entries.items())

    local = bytearray()
    central = bytearray()
    for name, data in entries:
        raw_name = name.encode("utf-8") if isinstance(name, str) else name
        payload = data.encode("utf-8") if isinstance(data, str) else data
        crc = zlib.crc32(payload)
        method = 0
        stored = payload
        if name in deflate:
            compressor = zlib.compressobj(wbits=-15)
            stored = compressor.compress(payload) + compressor.flush()
            method = 8

        offset = len(local)
        local += struct.pack(
            "<IHHHHHIIIHH",
            0x04034B50, 20, 0, method, 0, 0, crc, len(stored), len(payload), len(raw_name), 0,
        )
        local += raw_name + stored

        central += struct.pack(
            "<I6H3I5H2I",
            0x02014B50, 20, 20, 0, method, 0, 0,
            crc, len(stored), len(payload),
            len(raw_name), 0, 0, 0, 0,
            0, offset,
        )
        central += raw_name

    count = len(entries)
    eocd = struct.pack("<IHHHHIIH", 0x06054B50, 0, 0, count, count, len(central), len(local), len(comment))
    return bytes(local + central + eocd + comment)


def manifest_json(**overrides) -> str:
    """A manifest that passes every check, with optional field overrides.

    Passing ``field=None`` removes the field.
    """
    manifest = {
        "name": "My Cool Ext",
        "version": "1.0.0",
        "description": "Adds a tiny notes panel",
        "author": "Ada",
        "main": "index.js",
        "type": "sidebar",
        "permissions": ["storage"],
    }
    manifest.update(overrides)
    return json.dumps({k: v for k, v in manifest.items() if v is not None})


@pytest.fixture
def make_zip():
    """Factory fixture around :func:`build_zip`."""
    return build_zip


@pytest.fixture
def valid_archive() -> bytes:
    """A minimal, acceptable extension package."""
    return build_zip([("manifest.json", manifest_json()), ("index.js", "export default 1;\n")])


# ---------------------------------------------------------------------------
# Policy and intake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def policy() -> SubmissionPolicy:
    """The built-in submission policy."""
    return SubmissionPolicy.default()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def submission_store() -> InMemorySubmissionStore:
    return InMemorySubmissionStore()


@pytest.fixture
def intake(policy, blob_store, submission_store) -> SubmissionIntake:
    """An intake pipeline with fresh in-memory collaborators and a fixed clock."""
    return SubmissionIntake(
        policy=policy,
        submission_store=submission_store,
        blob_store=blob_store,
        clock=lambda: FIXED_CLOCK,
    )
