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


"""Tests for shared top-level folder stripping."""

from __future__ import annotations

import pytest

from extension_intake.core.paths import normalize_paths


class TestNormalizePaths:
    def test_strips_shared_folder(self):
        files = ["myext/manifest.json", "myext/index.jsx", "myext/icons/a.png"]
        assert normalize_paths(files) == ["manifest.json", "index.jsx", "icons/a.png"]

    def test_root_manifest_leaves_list_unchanged(self):
        files = ["manifest.json", "src/index.js"]
        assert normalize_paths(files) == files

    def test_mixed_prefixes_leave_list_unchanged(self):
        files = ["a/manifest.json", "b/index.js"]
        assert normalize_paths(files) == files

    def test_root_level_file_blocks_stripping(self):
        files = ["myext/manifest.json", "README.md"]
        assert normalize_paths(files) == files

    def test_empty_list(self):
        assert normalize_paths([]) == []

    def test_prefix_must_end_at_separator(self):
        files = ["ext/manifest.json", "extra/index.js"]
        assert normalize_paths(files) == files

    def test_idempotent_once_manifest_is_at_root(self):
        once = normalize_paths(["myext/manifest.json", "myext/index.js"])
        assert normalize_paths(once) == once

    def test_strips_one_level_per_call(self):
        files = ["outer/inner/manifest.json", "outer/inner/index.js"]
        once = normalize_paths(files)
        assert once == ["inner/manifest.json", "inner/index.js"]
        assert normalize_paths(once) == ["manifest.json", "index.js"]

    @pytest.mark.parametrize(
        "files",
        [["manifest.json"], ["index.js"], ["a/b/c.js", "a/d.js"]],
    )
    def test_result_is_a_copy(self, files):
        result = normalize_paths(files)
        assert result is not files
        assert len(result) == len(files)
