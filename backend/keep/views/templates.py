"""Jinja2 template factory for the web pages."""

from __future__ import annotations

from pathlib import Path

from starlette.templating import Jinja2Templates

from keep.utils import cn

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
APP_NAME = "Aether Keep"


def create_templates() -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.globals["cn"] = cn
    templates.env.globals["app_name"] = APP_NAME
    return templates
