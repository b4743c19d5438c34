from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from kurswatch.models import history_to_json

router = APIRouter(tags=["ui"])

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request):
    rt = request.app.state.runtime
    settings = rt.settings
    context = {
        "app_name": settings.app_name,
        "home_currency": settings.home_currency,
        "currencies": list(settings.currencies),
        # Page renders immediately; the websocket then keeps it current.
        "history": history_to_json(rt.state.current),
    }
    return templates.TemplateResponse(request, "dashboard.html", context)
