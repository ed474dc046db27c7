"""UTM attribution middleware"""
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from utm_attribution.config import MAX_COOKIE_TTL, get_settings
from utm_attribution.models.attribution import (
    AttributionRecord,
    COOKIE_NAMES,
    DIRECT,
    PARAM_NAMES,
    UTM_DIMENSIONS,
    cookie_value,
    present,
)
from utm_attribution.utils.logger import log


class UtmMiddleware(BaseHTTPMiddleware):
    """
    Merge UTM query parameters, stored `u_*` cookies and the Referer header
    into an AttributionRecord.

    The record is exposed to downstream handlers under the `utm.*` scope keys
    (and as `request.state.utm`), then written back as cookies that expire
    `ttl` seconds from now. Cookie values are percent-encoded. Explicit
    arguments override the settings; `overwrite` is stored but has no effect
    on the merge.
    """

    def __init__(
        self,
        app: ASGIApp,
        ttl: Optional[int] = None,
        domain: Optional[str] = None,
        overwrite: Optional[bool] = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(app)
        settings = get_settings()
        self.ttl = settings.utm_cookie_ttl if ttl is None else ttl
        if not 0 <= self.ttl <= MAX_COOKIE_TTL:
            raise ValueError(f"ttl must be between 0 and {MAX_COOKIE_TTL}, got {self.ttl}")
        self.domain = domain if domain is not None else settings.utm_cookie_domain
        self.overwrite = settings.utm_overwrite if overwrite is None else overwrite
        self.clock = clock

    async def dispatch(self, request: Request, call_next):
        now = int(self.clock())
        record = self._extract_params(request, now)

        if record.is_attached():
            for key, value in record.context_items():
                request.scope[key] = value
            request.state.utm = record
            log.debug(
                f"UTM captured source={record.source} from={record.from_} lp={record.landing_page}"
            )

        response: Response = await call_next(request)

        self._bake_cookies(response, record, now)
        return response

    @staticmethod
    def _extract_params(request: Request, now: int) -> AttributionRecord:
        params = request.query_params
        cookies = request.cookies

        referer = present(request.headers.get("referer"))
        stored_from = cookie_value(cookies, COOKIE_NAMES["from_"])

        # Query parameter wins, stored cookie is the fallback
        values = {
            dim: present(params.get(PARAM_NAMES[dim])) or cookie_value(cookies, COOKIE_NAMES[dim])
            for dim in UTM_DIMENSIONS
        }

        has_signal = (
            referer is not None
            or any(values.values())
            or any(cookie_value(cookies, name) for name in COOKIE_NAMES.values())
        )
        if not has_signal:
            return AttributionRecord()

        if referer and stored_from is None:
            origin = referer
        else:
            origin = stored_from or DIRECT

        return AttributionRecord(
            **values,
            from_=origin,
            time=now,
            landing_page=request.url.path,
        )

    def _bake_cookies(self, response: Response, record: AttributionRecord, now: int) -> None:
        expires = datetime.fromtimestamp(now + self.ttl, tz=timezone.utc)
        baked = record.cookie_items()
        for name, value in baked:
            response.set_cookie(name, value, expires=expires, path="/", domain=self.domain)
        if baked:
            log.debug(f"Baked {len(baked)} UTM cookies (expires {expires.isoformat()})")
