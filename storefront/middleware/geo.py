# storefront/middleware/geo.py
import logging
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from storefront.services.geo import GeoInfo, GeoLookup, get_geo_lookup, locate, resolve_client_ip

logger = logging.getLogger(__name__)


class GeoMiddleware(BaseHTTPMiddleware):
    """
    Attaches ``request.state.geo`` (a GeoInfo) to every request.
    A failing lookup never breaks the request; the geo falls back to Unknown.
    """

    def __init__(self, app, lookup: Optional[GeoLookup] = None, dispatch: Callable = None):
        super().__init__(app, dispatch=dispatch)
        self.lookup = lookup or get_geo_lookup()

    async def dispatch(self, request: Request, call_next):
        remote = request.client.host if request.client else None
        try:
            ip = resolve_client_ip(request.headers.get("x-forwarded-for"), remote)
            request.state.geo = locate(self.lookup, ip)
        except Exception:
            logger.exception("Geo lookup failed")
            request.state.geo = GeoInfo()

        return await call_next(request)
