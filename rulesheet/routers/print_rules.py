from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from ..config import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES
from ..db import get_db
from ..schemas import SpecialRulesResponse
from ..services import roster_store
from ..services.print_sheet import SpecialRulesSheet

router = APIRouter(tags=["print"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))


def get_language(request: Request) -> str:
    """Active language: ``lang`` query parameter, then cookie, then default."""

    for candidate in (request.query_params.get("lang"), request.cookies.get("lang")):
        if not candidate:
            continue
        code = candidate.strip().lower()
        if code in SUPPORTED_LANGUAGES:
            return code
    return DEFAULT_LANGUAGE


def _http_client(request: Request):
    app = request.scope.get("app")
    state = getattr(app, "state", None)
    return getattr(state, "http_client", None)


async def _load_sheet(request: Request, roster: dict | None, language: str) -> SpecialRulesSheet:
    sheet = SpecialRulesSheet()
    sheet.refresh(roster, language)
    if roster is not None:
        await sheet.load_contents(_http_client(request))
    return sheet


@router.get("/print/special-rules/{list_id}", response_class=HTMLResponse)
async def print_special_rules(
    list_id: str,
    request: Request,
    db: Session = Depends(get_db),
    language: str = Depends(get_language),
):
    roster = roster_store.get_roster(db, list_id)
    sheet = await _load_sheet(request, roster, language)
    return templates.TemplateResponse(
        "print_special_rules.html",
        {
            "request": request,
            "list_id": list_id,
            "roster": roster,
            "sheet": sheet,
            "language": language,
        },
    )


@router.get("/api/lists/{list_id}/special-rules", response_model=SpecialRulesResponse)
async def special_rules_json(
    list_id: str,
    request: Request,
    db: Session = Depends(get_db),
    language: str = Depends(get_language),
):
    roster = roster_store.get_roster(db, list_id)
    if roster is None:
        raise HTTPException(status_code=404, detail="Army list not found.")
    sheet = await _load_sheet(request, roster, language)
    return SpecialRulesResponse(
        list_id=list_id,
        language=language,
        rules=sheet.rules,
        loading=sheet.loading,
        contents={rule: str(content) for rule, content in sheet.contents.items()},
    )
