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


"""API router for Extension Intake endpoints.

Composable ``APIRouter`` that can be mounted in other FastAPI applications.
Uploads are buffered in memory up to the configured ceiling; the validation
core then runs in a worker thread.
"""

import asyncio
import logging
import threading

try:
    from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel, Field
except ImportError:
    raise ImportError("API server requires FastAPI. Install with: pip install fastapi uvicorn python-multipart")

from .. import __version__ as PACKAGE_VERSION
from ..config.config import Config
from ..config.constants import ExtensionIntakeConstants
from ..core.exceptions import SubmissionStorageError
from ..core.intake import SubmissionIntake
from ..core.models import IntakeResult
from ..core.store import InMemoryBlobStore
from ..core.submission_policy import SubmissionPolicy

logger = logging.getLogger("extension_intake.api")

router = APIRouter()

_intake: SubmissionIntake | None = None
_config: Config | None = None
_state_lock = threading.Lock()


def get_config() -> Config:
    """Process-wide configuration, read from the environment once."""
    global _config
    if _config is None:
        with _state_lock:
            if _config is None:
                _config = Config.from_env()
    return _config


def get_intake() -> SubmissionIntake:
    """Process-wide intake pipeline backed by the in-memory collaborators."""
    global _intake
    if _intake is None:
        config = get_config()
        with _state_lock:
            if _intake is None:
                policy = SubmissionPolicy.from_yaml(config.policy_path) if config.policy_path else None
                _intake = SubmissionIntake(
                    policy=policy,
                    blob_store=InMemoryBlobStore(base_url=config.blob_base_url),
                    blob_prefix=config.blob_prefix,
                )
    return _intake


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class StatusResponse(BaseModel):
    """Public status of a persisted submission."""

    id: int
    name: str
    version: str
    status: str
    review_notes: str | None = None


class SubmitResponse(BaseModel):
    """Outcome of a submission upload."""

    accepted: bool
    message: str
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    manifest_status: str | None = None
    submission: StatusResponse | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    policy: str


class PolicyResponse(BaseModel):
    """The whitelists a developer needs to build a valid package."""

    permissions: list[str]
    categories: list[str]
    types: list[str]
    entry_extensions: list[str]
    forbidden_extensions: list[str]
    max_name_length: int
    max_description_length: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _read_upload(file: UploadFile, max_bytes: int) -> bytes:
    """Read *file* in chunks, refusing anything over *max_bytes*."""
    chunks: list[bytes] = []
    total_read = 0
    while True:
        chunk = await file.read(ExtensionIntakeConstants.UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        total_read += len(chunk)
        if total_read > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"Upload exceeds maximum size of {max_bytes // (1024 * 1024)} MB",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _to_response(result: IntakeResult) -> SubmitResponse:
    return SubmitResponse(
        accepted=result.accepted,
        message=result.message,
        errors=result.errors,
        warnings=result.warnings,
        manifest_status=result.manifest_status.value if result.manifest_status else None,
        submission=StatusResponse(**result.record.status_view()) if result.record else None,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/", response_model=dict)
async def root():
    """Root endpoint."""
    return {"service": "Extension Intake API", "version": PACKAGE_VERSION, "docs": "/docs", "health": "/health"}


@router.get("/health", response_model=HealthResponse)
async def health_check(intake: SubmissionIntake = Depends(get_intake)):
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=PACKAGE_VERSION, policy=intake.policy.policy_name)


@router.get("/policy", response_model=PolicyResponse)
async def get_policy(intake: SubmissionIntake = Depends(get_intake)):
    """List allowed permissions, categories and types."""
    policy = intake.policy
    return PolicyResponse(
        permissions=sorted(policy.permissions.allowed),
        categories=sorted(policy.categories.allowed),
        types=sorted(policy.manifest.allowed_types),
        entry_extensions=list(policy.files.entry_extensions),
        forbidden_extensions=list(policy.files.forbidden_extensions),
        max_name_length=policy.manifest.max_name_length,
        max_description_length=policy.manifest.max_description_length,
    )


@router.post("/submit", response_model=SubmitResponse, status_code=201)
async def submit_extension(
    file: UploadFile = File(..., description="ZIP file containing the extension package"),
    category: str | None = Form(None, description="Marketplace category"),
    description: str | None = Form(None, description="Fallback description"),
    author_name: str | None = Form(None, description="Fallback author name"),
    author_email: str | None = Form(None, description="Contact email for review notes"),
    intake: SubmissionIntake = Depends(get_intake),
    config: Config = Depends(get_config),
):
    """Validate an uploaded extension package and queue it for review."""
    data = await _read_upload(file, config.max_upload_bytes)
    fields = {
        "category": category,
        "description": description,
        "author_name": author_name,
        "author_email": author_email,
    }

    try:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, intake.submit, data, file.filename, fields)
    except SubmissionStorageError as e:
        logger.error("Submission storage failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Upload failed: {e}")

    response = _to_response(result)
    if not result.accepted:
        return JSONResponse(status_code=400, content=response.model_dump())
    return response


@router.get("/api/status/{submission_id}", response_model=StatusResponse)
async def submission_status(submission_id: int, intake: SubmissionIntake = Depends(get_intake)):
    """Look up the review status of a submission."""
    status = intake.lookup_status(submission_id)
    if status is None:
        raise HTTPException(status_code=404, detail="Not found")
    return StatusResponse(**status)
