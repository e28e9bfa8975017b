"""
Configuration for the peer review workflow.

Settings come from three places, later ones winning:
    1. Defaults on WorkflowSettings
    2. workflow.yaml (or the file named by PEERREVIEW_CONFIG)
    3. PEERREVIEW_* environment variables (.env is loaded first)
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

# Load environment variables
load_dotenv()

ENV_PREFIX = "PEERREVIEW_"
WORKFLOW_CONFIG = Path(os.environ.get(f"{ENV_PREFIX}CONFIG", "workflow.yaml"))
DATA_DIR = Path(os.environ.get(f"{ENV_PREFIX}DATA_DIR", "data"))


class WorkflowSettings(BaseModel):
    """Tunable rules for scoring, progression and storage."""

    # Submissions
    default_required_reviews: int = Field(default=3, ge=1)
    honor_assignment_review_count: bool = True

    # Review scoring
    quality_feedback_length: int = Field(default=100, ge=1)
    quality_points: int = Field(default=15, ge=0)
    basic_points: int = Field(default=10, ge=0)
    min_feedback_length: int = Field(default=10, ge=0)
    min_rating: int = 1
    max_rating: int = 5
    allow_duplicate_reviews: bool = False

    # Progression
    experience_per_rating_point: int = Field(default=20, ge=0)
    experience_per_level: int = Field(default=1000, ge=1)

    # Storage
    store_backend: str = "memory"  # 'memory' | 'json'
    data_dir: Path = DATA_DIR


def _env_overrides() -> dict:
    """Collect PEERREVIEW_<FIELD> overrides from the environment."""
    overrides = {}
    for name in WorkflowSettings.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if value is not None:
            overrides[name] = value
    return overrides


def load_settings(path: Optional[Path] = None) -> WorkflowSettings:
    """Load settings from YAML + environment."""
    path = path or WORKFLOW_CONFIG
    data = {}
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")

    data.update(_env_overrides())

    try:
        return WorkflowSettings.model_validate(data)
    except PydanticValidationError as e:
        raise ValueError(f"Invalid workflow settings in {path}: {e}") from e


_settings: Optional[WorkflowSettings] = None


def get_settings() -> WorkflowSettings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() reloads them."""
    global _settings
    _settings = None
