"""Shared Jinja2 templates configuration."""

from pathlib import Path

from starlette.templating import Jinja2Templates

from pausegate.config import settings
from pausegate.services.i18n_service import get_i18n_service

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def t(key: str, lang: str | None = None, **kwargs) -> str:
    """Translation function for templates."""
    return get_i18n_service().t(key, lang, **kwargs)


def create_templates(directory: Path = TEMPLATES_DIR) -> Jinja2Templates:
    """Create a template environment with the application globals."""
    env_templates = Jinja2Templates(directory=str(directory))
    env_templates.env.globals["settings"] = settings
    env_templates.env.globals["t"] = t
    env_templates.env.globals["app_name"] = settings.app_name
    env_templates.env.globals["site_name"] = settings.site_name
    return env_templates


templates = create_templates()
