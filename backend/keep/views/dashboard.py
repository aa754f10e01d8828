"""Dashboard shell behind the session gate."""

from __future__ import annotations

from typing import TYPE_CHECKING

from starlette.responses import RedirectResponse

from keep.server.csrf import render_with_csrf
from shared.auth.server import DASHBOARD_PATH

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

# Placeholder sections; their pages are not built yet.
DASHBOARD_SECTIONS = (
    {
        "href": "/campaigns",
        "title": "Campaign Manager",
        "description": "Manage your TTRPG campaigns, sessions, and players",
    },
    {
        "href": "/worlds",
        "title": "World Building",
        "description": "Create and organize your custom worlds and lore",
    },
    {
        "href": "/systems",
        "title": "System Building",
        "description": "Build custom game systems or use official ones",
    },
)


async def dashboard_page(request: Request) -> Response:
    """GET /dashboard - render the navigation shell for the signed-in user."""
    return render_with_csrf(
        request,
        "dashboard.html",
        {"email": request.user.email, "sections": DASHBOARD_SECTIONS},
    )


async def home(_request: Request) -> Response:
    """GET / - the dashboard is the landing page."""
    return RedirectResponse(DASHBOARD_PATH, status_code=303)
