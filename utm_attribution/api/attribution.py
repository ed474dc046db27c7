"""
Attribution endpoints

Downstream handlers read the record injected by UtmMiddleware through the
`get_attribution` dependency.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request

from utm_attribution.models.attribution import AttributionRecord

router = APIRouter(tags=["attribution"])


def get_attribution(request: Request) -> Optional[AttributionRecord]:
    """Attribution injected for this request, or None when nothing was captured"""
    return AttributionRecord.from_context(request.scope)


@router.get("/attribution")
async def current_attribution(
    request: Request,
    attribution: Optional[AttributionRecord] = Depends(get_attribution),
):
    """
    Show the attribution for the current request next to what the client
    had stored before it
    """
    stored = AttributionRecord.from_cookies(request.cookies)
    return {
        "attached": attribution is not None,
        "attribution": attribution.model_dump(by_alias=True) if attribution else None,
        "stored": stored.model_dump(by_alias=True),
    }
