"""Configuration models for harness annotations.

AnnotatorConfig holds the settings of a single invocation.
HarnessContext captures the pipeline identity exported by the harness
runner as ``HARNESS_*`` environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel

DEFAULT_ANNOTATIONS_FILE = "annotations.json"
MAX_SUMMARY_FILE_BYTES = 64 * 1024

ANNOTATIONS_FILE_ENV = "HARNESS_ANNOTATIONS_FILE"
STRICT_ENV = "HARNESS_ANNOTATIONS_STRICT"

_TRUTHY = frozenset({"1", "true", "yes", "on"})

# Field name -> environment variable.
_HARNESS_ENV: dict[str, str] = {
    "execution_id": "HARNESS_EXECUTION_ID",
    "step_id": "HARNESS_STEP_ID",
    "account_id": "HARNESS_ACCOUNT_ID",
    "project_id": "HARNESS_PROJECT_ID",
    "org_id": "HARNESS_ORG_ID",
    "pipeline_id": "HARNESS_PIPELINE_ID",
    "stage_id": "HARNESS_STAGE_ID",
    "stage_uuid": "HARNESS_STAGE_UUID",
}


class AnnotatorConfig(BaseModel):
    """Per-invocation configuration."""

    annotations_file: str = DEFAULT_ANNOTATIONS_FILE
    strict: bool = False
    max_summary_bytes: int = MAX_SUMMARY_FILE_BYTES

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> AnnotatorConfig:
        env = os.environ if environ is None else environ
        return cls(
            annotations_file=env.get(ANNOTATIONS_FILE_ENV) or DEFAULT_ANNOTATIONS_FILE,
            strict=env.get(STRICT_ENV, "").strip().lower() in _TRUTHY,
        )


class HarnessContext(BaseModel):
    """Pipeline identity read from the environment. Missing values are empty."""

    execution_id: str = ""
    step_id: str = ""
    account_id: str = ""
    project_id: str = ""
    org_id: str = ""
    pipeline_id: str = ""
    stage_id: str = ""
    stage_uuid: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> HarnessContext:
        env = os.environ if environ is None else environ
        return cls(**{field: env.get(var, "") for field, var in _HARNESS_ENV.items()})
