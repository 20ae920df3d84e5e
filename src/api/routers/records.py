"""Record viewer endpoints."""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse

from src.api.middleware.rate_limit import limiter
from src.models.records import ProjectionResult
from src.presentation.export import csv_filename, fields_to_csv
from src.presentation.links import generate_bookmarklet, record_viewer_url, viewer_endpoint
from src.presentation.stats import build_stats
from src.projection.service import ProjectionOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["records"])

_IDENTIFIER_PATTERN = r"^[A-Za-z0-9_\-]*$"

# Failure result code -> HTTP status; anything else is a host-side failure.
_FAILURE_STATUS = {
    "VALIDATION_ERROR": 400,
    "INSUFFICIENT_PERMISSION": 403,
    "RCRD_DSNT_EXIST": 404,
}


def _split(value: Optional[str]) -> Optional[list[str]]:
    """Comma-separated allow-list, None when not given."""
    if not value:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _status_for(result: ProjectionResult) -> int:
    if result.success:
        return 200
    code = result.error.code if result.error else ""
    return _FAILURE_STATUS.get(code, 502)


def _viewer_base(request: Request) -> str:
    return getattr(request.app.state, "viewer_base_url", "") or str(request.base_url)


@router.get("/record")
@limiter.limit("60/minute")
def view_record(
    request: Request,
    recordtype: str = Query("", max_length=100, pattern=_IDENTIFIER_PATTERN),
    recordid: str = Query("", max_length=100, pattern=_IDENTIFIER_PATTERN),
    compareid: Optional[str] = Query(None, max_length=100, pattern=_IDENTIFIER_PATTERN),
    output_format: str = Query("view", alias="format", pattern=r"^(view|json|csv)$"),
    fields: Optional[str] = Query(None, description="Comma-separated body field allow-list"),
    sublists: Optional[str] = Query(None, description="Comma-separated sublist allow-list"),
):
    """Project a record, or compare two records of one type.

    - compareid: compare recordid with compareid (JSON diff)
    - format=json: raw projection result
    - format=csv: body fields as a CSV attachment
    - format=view (default): result plus statistics and links
    """
    if compareid:
        comparison = request.app.state.comparator.compare(recordtype, recordid, compareid)
        return JSONResponse(
            status_code=200 if comparison.success else 422,
            content=comparison.to_payload(),
        )

    options = ProjectionOptions(include_fields=_split(fields), include_sublists=_split(sublists))
    result = request.app.state.projector.project(recordtype, recordid, options)
    status_code = _status_for(result)

    if output_format == "json":
        return JSONResponse(status_code=status_code, content=result.to_payload())

    if output_format == "csv":
        if not result.success:
            return JSONResponse(status_code=status_code, content=result.to_payload())
        filename = csv_filename(recordtype, recordid)
        filename_encoded = quote(filename, safe="")
        return Response(
            content=fields_to_csv(result.data).encode("utf-8-sig"),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename=\"{filename}\"; filename*=UTF-8''{filename_encoded}"
            },
        )

    stats = build_stats(result)
    base_url = _viewer_base(request)
    return JSONResponse(
        status_code=status_code,
        content={
            "result": result.to_payload(),
            "stats": stats.to_payload() if stats else None,
            "links": {
                "json": record_viewer_url(base_url, recordtype, recordid, format="json"),
                "csv": record_viewer_url(base_url, recordtype, recordid, format="csv"),
            },
        },
    )


@router.get("/bookmarklet")
@limiter.limit("30/minute")
def get_bookmarklet(request: Request):
    """Bookmarklet that opens the viewer for the record on screen."""
    endpoint = viewer_endpoint(_viewer_base(request))
    return {"viewerUrl": endpoint, "bookmarklet": generate_bookmarklet(endpoint)}
