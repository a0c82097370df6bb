"""Marketing pages and the customer account area."""

from __future__ import annotations

import contextlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from .accounts import AccountFlow, Flash, Outcome, require_session
from .catalog import GamePlanCatalog, load_catalog
from .config import Settings
from .models import PanelUser
from .panel import PanelClient
from .sessions import SessionStore
from .validation import RegistrationInput

logger = logging.getLogger("auranode.web")

BASE_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

SESSION_COOKIE_NAME = "auranode_session"
FLASH_CATEGORIES = ("success", "error")


def _flash(request: Request, flash: Flash) -> None:
    messages = request.session.get("flash_messages")
    if not isinstance(messages, list):
        messages = []
    messages.append({"message": flash.message, "category": flash.category})
    request.session["flash_messages"] = messages


def _consume_flash(request: Request) -> Dict[str, List[str]]:
    messages = request.session.pop("flash_messages", [])
    grouped: Dict[str, List[str]] = {category: [] for category in FLASH_CATEGORIES}
    if not isinstance(messages, list):
        return grouped
    for item in messages:
        if isinstance(item, dict) and item.get("category") in grouped:
            grouped[item["category"]].append(str(item.get("message", "")))
    return grouped


def create_app(
    settings: Settings,
    *,
    panel: Optional[PanelClient] = None,
    catalog: Optional[GamePlanCatalog] = None,
    session_store: Optional[SessionStore] = None,
) -> FastAPI:
    """Create the AuraNode web application."""

    if not settings.session_secret:
        raise RuntimeError("SESSION_SECRET must be configured to use the account pages")

    owns_panel = panel is None
    if panel is None:
        panel = PanelClient.from_settings(settings)
    if catalog is None:
        catalog = load_catalog(settings.plans_file)
    if session_store is None:
        session_store = SessionStore(ttl=settings.session_ttl)

    accounts = AccountFlow(panel, session_store)

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI):
        try:
            yield
        finally:
            if owns_panel:
                await panel.aclose()

    app = FastAPI(
        title="AuraNode",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=SESSION_COOKIE_NAME,
        https_only=settings.secure_cookies,
        same_site="lax",
        max_age=session_store.cookie_max_age,
    )

    if STATIC_DIR.exists():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
    templates.env.globals["now"] = datetime.now

    def _current_user(request: Request) -> Optional[PanelUser]:
        return session_store.get(request.session.get("session_id"))

    def _render(request: Request, template: str, **extra) -> HTMLResponse:
        messages = _consume_flash(request)
        context = {
            "request": request,
            "user": _current_user(request),
            "success_msg": messages["success"],
            "error_msg": messages["error"],
        }
        context.update(extra)
        return templates.TemplateResponse(request, template, context)

    def _follow(request: Request, outcome: Outcome) -> RedirectResponse:
        if outcome.clear_session:
            request.session.clear()
        if outcome.session is not None:
            request.session["session_id"] = outcome.session.session_id
        if outcome.flash is not None:
            _flash(request, outcome.flash)
        return RedirectResponse(
            request.url_for(outcome.redirect_to),
            status_code=status.HTTP_303_SEE_OTHER,
        )

    @app.get("/", response_class=HTMLResponse, name="home")
    async def home(request: Request):
        return _render(request, "index.html", title="Home")

    @app.get("/contact", response_class=HTMLResponse, name="contact")
    async def contact(request: Request):
        return _render(request, "contact.html", title="Contact")

    @app.get("/pricing", response_class=HTMLResponse, name="pricing")
    async def pricing(request: Request):
        return _render(
            request,
            "pricing_select.html",
            title="Select Your Game",
            games=list(catalog.items()),
        )

    @app.get("/pricing/{game}", response_class=HTMLResponse, name="pricing_game")
    async def pricing_game(request: Request, game: str):
        entry = catalog.get(game)
        if entry is None:
            logger.debug("Unknown pricing page requested: %s", game)
            return RedirectResponse(
                request.url_for("pricing"),
                status_code=status.HTTP_303_SEE_OTHER,
            )
        return _render(
            request,
            "pricing_game.html",
            title=entry.title,
            game_title=entry.title,
            plans=entry.plans,
        )

    @app.get("/register", response_class=HTMLResponse, name="show_register")
    async def show_register(request: Request):
        return _render(request, "register.html", title="Register")

    @app.post("/register", name="submit_register")
    async def submit_register(
        request: Request,
        first_name: str = Form(""),
        last_name: str = Form(""),
        username: str = Form(""),
        email: str = Form(""),
        password: str = Form(""),
    ):
        data = RegistrationInput(
            email=email,
            username=username,
            first_name=first_name,
            last_name=last_name,
            password=password,
        )
        outcome = await accounts.register(data)
        return _follow(request, outcome)

    @app.get("/login", response_class=HTMLResponse, name="show_login")
    async def show_login(request: Request):
        return _render(request, "login.html", title="Login")

    @app.post("/login", name="submit_login")
    async def submit_login(request: Request, email: str = Form("")):
        outcome = await accounts.login(
            email,
            previous_session_id=request.session.get("session_id"),
        )
        if outcome.session is not None:
            request.session.clear()
        return _follow(request, outcome)

    @app.get("/logout", name="logout")
    async def logout(request: Request):
        outcome = accounts.logout(request.session.get("session_id"))
        return _follow(request, outcome)

    @app.get("/dashboard", response_class=HTMLResponse, name="dashboard")
    async def dashboard(request: Request):
        guarded = require_session(session_store, request.session.get("session_id"))
        if isinstance(guarded, Outcome):
            request.session.pop("session_id", None)
            return _follow(request, guarded)
        servers = await accounts.dashboard(guarded)
        return _render(request, "dashboard.html", title="Dashboard", servers=servers)

    return app


__all__ = ["SESSION_COOKIE_NAME", "create_app"]
