"""Render configuration: options schema and config.yaml loader"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from mdview.core.highlight import available_themes


CONFIG_FILE = "config.yaml"


class RawHtmlPolicy(str, Enum):
    """What to do with standard (non-component) raw HTML fragments"""
    passthrough = "passthrough"
    escape = "escape"
    drop = "drop"


class UnknownComponentPolicy(str, Enum):
    """What to do with a custom-looking tag that has no registered constructor"""
    text = "text"
    html = "html"
    error = "error"


class RenderOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    maths:              bool = Field(default=False, description="Send $..$ / $$..$$ to the math delegate instead of inline code")
    debug:              bool = Field(default=False, description="Emit the event stream as debug info")
    raw_html:           RawHtmlPolicy = Field(default=RawHtmlPolicy.passthrough, description="passthrough, escape or drop")
    unknown_components: UnknownComponentPolicy = Field(default=UnknownComponentPolicy.text, description="text, html or error")
    hard_line_breaks:   bool = Field(default=False, description="Render soft line breaks as hard breaks")
    max_depth:          int = Field(default=256, ge=1, description="Max open-element stack depth")
    wikilinks:          bool = Field(default=False, description="Parse [[target]] and [[target|label]] links")
    theme:              Optional[str] = Field(default=None, description="Pygments style for fenced code; None disables highlighting")

    @field_validator("theme")
    @classmethod
    def check_theme(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in available_themes():
            raise ValueError(f"Unknown theme {v!r}")
        return v


def load_config(overrides: dict[str, Any] = None) -> RenderOptions:
    """Load RenderOptions from config.yaml, then MDVIEW_<FIELD> env vars, then non-None overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in RenderOptions.model_fields:
        if val := os.getenv(f"MDVIEW_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return RenderOptions(**data)
