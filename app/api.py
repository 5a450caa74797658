"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from app.schemas import LogListing, ReadingSchema
from datastore.mock_sheet import SheetNotFoundError
from services.event_logger import EventLoggerService, build_default_service

router = APIRouter()


def get_service() -> EventLoggerService:
    return build_default_service()


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Device endpoint: write a reading (sts=write) or read the latest one (sts=read).",
)
@router.get("/exec", response_class=PlainTextResponse, include_in_schema=False)
def device_request(
    request: Request,
    service: EventLoggerService = Depends(get_service),
) -> PlainTextResponse:
    parameters: dict[str, str] = {}
    for key, value in request.query_params.multi_items():
        # a repeated key keeps its first value
        parameters.setdefault(key, value)
    result = service.handle(parameters)
    return PlainTextResponse(result.body, status_code=status.HTTP_200_OK)


@router.get(
    "/log",
    response_model=LogListing,
    summary="List the latest reading and the full reading log of the configured sheet.",
)
def get_log(service: EventLoggerService = Depends(get_service)) -> LogListing:
    try:
        sheet = service.spreadsheet.require_sheet(service.sheet_name)
    except SheetNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc.args[0]),
        ) from exc
    records = sheet.records()
    return LogListing(
        sheet=sheet.name,
        count=len(records),
        latest=ReadingSchema.from_reading(sheet.read_latest()),
        records=[ReadingSchema.from_reading(reading) for reading in records],
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
