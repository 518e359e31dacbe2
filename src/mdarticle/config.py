"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from mdarticle.core.extensions import CAPTION_MARKERS


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDARTICLE_"


class Settings(BaseModel):
    app_name:        str = "mdarticle"
    db_url:          str = "sqlite:///mdarticle.db"
    parser_config:   str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    allow_html:      bool = Field(default=True, description="Pass raw HTML in markdown through to rendered output")
    caption_markers: str = Field(default=CAPTION_MARKERS, min_length=1, description="Alt-text prefixes that turn an image into a captioned figure")
    naming:          str = Field(default="title", pattern="^(title|slug)$", description="Archive entry naming field")
    include_header:  bool = Field(default=True, description="Prepend YAML frontmatter to exported documents")
    include_title_heading: bool = Field(default=False, description="Prepend '# <title>' to exported bodies")
    on_collision:    str = Field(default="overwrite", pattern="^(overwrite|error|suffix)$", description="Archive entry name collision policy")
    archive_extension: str = Field(default=".md", description="Extension appended to archive entry names")
    log_json:        bool = Field(default=False, description="Emit JSON log lines instead of console output")
    verbose:         bool = Field(default=False, description="Enable debug logging")


def _file_settings(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {path.name}: expected a mapping, got {type(data).__name__}")
    return data


def _env_settings() -> dict[str, str]:
    return {
        name: val for name in Settings.model_fields
        if (val := os.getenv(f"{ENV_PREFIX}{name.upper()}"))
    }


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Layer config.yaml, then MDARTICLE_<FIELD> env vars, then non-None CLI overrides."""
    data = {**_file_settings(Path(CONFIG_FILE)), **_env_settings()}
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return Settings(**data)
