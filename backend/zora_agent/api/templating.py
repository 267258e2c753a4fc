"""Template rendering — one Jinja2Templates instance for every HTML route."""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from zora_agent.core.access_tier import has_pro_access, resolve_access_tier, safe_user_data
from zora_agent.core.entities import User

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    context: dict | None = None,
    user: User | None = None,
    status_code: int = 200,
):
    """Render with the user fields every layout needs."""
    ctx = {
        "user": safe_user_data(user),
        "tier": resolve_access_tier(user).value,
        "is_pro": has_pro_access(user),
        **(context or {}),
    }
    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
