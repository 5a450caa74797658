from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from datastore.mock_sheet import SheetNotFoundError
from services.event_logger import EventLoggerService, build_default_service


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_service() -> EventLoggerService:
    return build_default_service()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
def ui_index(
    request: Request,
    service: EventLoggerService = Depends(get_service),
) -> HTMLResponse:
    try:
        sheet = service.spreadsheet.require_sheet(service.sheet_name)
    except SheetNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc.args[0]),
        ) from exc

    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "sheet": sheet.name,
            "latest": sheet.read_latest(),
            "records": list(reversed(sheet.records())),
        },
    )
