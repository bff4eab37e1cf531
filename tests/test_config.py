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


"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from extension_intake.config.config import Config
from extension_intake.config.constants import ExtensionIntakeConstants

ENV_VARS = (
    "EXTENSION_INTAKE_MAX_UPLOAD_MB",
    "EXTENSION_INTAKE_POLICY",
    "EXTENSION_INTAKE_BLOB_PREFIX",
    "EXTENSION_INTAKE_BLOB_BASE_URL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.max_upload_mb == 10
        assert config.max_upload_bytes == 10 * 1024 * 1024
        assert config.policy_path is None
        assert config.blob_prefix == "submissions"
        assert config.blob_base_url == "memory://blobs"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("EXTENSION_INTAKE_MAX_UPLOAD_MB", "25")
        monkeypatch.setenv("EXTENSION_INTAKE_POLICY", "/etc/intake/policy.yaml")
        monkeypatch.setenv("EXTENSION_INTAKE_BLOB_PREFIX", "/uploads/")
        monkeypatch.setenv("EXTENSION_INTAKE_BLOB_BASE_URL", "https://cdn.example.test")

        config = Config.from_env()

        assert config.max_upload_mb == 25
        assert config.policy_path == "/etc/intake/policy.yaml"
        assert config.blob_prefix == "uploads"
        assert config.blob_base_url == "https://cdn.example.test"

    def test_explicit_argument_wins(self, monkeypatch):
        monkeypatch.setenv("EXTENSION_INTAKE_MAX_UPLOAD_MB", "25")
        assert Config(max_upload_mb=2).max_upload_mb == 2

    def test_non_integer_limit(self, monkeypatch):
        monkeypatch.setenv("EXTENSION_INTAKE_MAX_UPLOAD_MB", "ten")
        with pytest.raises(ValueError, match="must be an integer"):
            Config()

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_limit(self, value):
        with pytest.raises(ValueError, match="must be positive"):
            Config(max_upload_mb=value)

    def test_from_file(self, tmp_path, monkeypatch):
        # Registered so monkeypatch restores what from_file writes
        monkeypatch.setenv("EXTENSION_INTAKE_MAX_UPLOAD_MB", "10")
        monkeypatch.setenv("EXTENSION_INTAKE_BLOB_PREFIX", "submissions")
        env_file = tmp_path / ".env"
        env_file.write_text("# intake\nEXTENSION_INTAKE_MAX_UPLOAD_MB=3\nEXTENSION_INTAKE_BLOB_PREFIX = staged\n")

        config = Config.from_file(env_file)

        assert config.max_upload_mb == 3
        assert config.blob_prefix == "staged"

    def test_from_missing_file_uses_environment(self, tmp_path):
        assert Config.from_file(tmp_path / "absent.env").max_upload_mb == 10


class TestConstants:
    def test_config_defaults_come_from_constants(self):
        config = Config()
        assert config.max_upload_mb == ExtensionIntakeConstants.DEFAULT_MAX_UPLOAD_MB
        assert config.blob_prefix == ExtensionIntakeConstants.DEFAULT_BLOB_PREFIX
        assert config.blob_base_url == ExtensionIntakeConstants.DEFAULT_BLOB_BASE_URL

    def test_upload_chunk_size(self):
        assert ExtensionIntakeConstants.UPLOAD_CHUNK_SIZE == 1024 * 1024
