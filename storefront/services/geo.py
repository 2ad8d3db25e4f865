import ipaddress
import logging
from dataclasses import dataclass
from typing import Optional

import geoip2.database
import geoip2.errors

from storefront.core.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_COUNTRY = "Unknown"


@dataclass
class GeoInfo:
    ip: Optional[str] = None
    country: str = UNKNOWN_COUNTRY
    region: Optional[str] = None
    city: Optional[str] = None


class GeoLookup:
    """IP -> location. Implementations return None when the address is unknown."""

    def lookup(self, ip: str) -> Optional[GeoInfo]:
        raise NotImplementedError


class NullGeoLookup(GeoLookup):
    def lookup(self, ip: str) -> Optional[GeoInfo]:
        return None


class GeoIP2Lookup(GeoLookup):
    """Looks addresses up in a MaxMind City database through ``geoip2``."""

    def __init__(self, reader):
        self.reader = reader

    @classmethod
    def from_path(cls, path: str) -> "GeoIP2Lookup":
        return cls(geoip2.database.Reader(path))

    def lookup(self, ip: str) -> Optional[GeoInfo]:
        try:
            record = self.reader.city(ip)
        except (geoip2.errors.AddressNotFoundError, ValueError):
            return None
        return GeoInfo(
            ip=ip,
            country=record.country.iso_code or UNKNOWN_COUNTRY,
            region=record.subdivisions.most_specific.iso_code,
            city=record.city.name,
        )


def get_geo_lookup() -> GeoLookup:
    if not settings.GEOIP_DATABASE_PATH:
        return NullGeoLookup()
    logger.info("Using GeoIP database %s", settings.GEOIP_DATABASE_PATH)
    return GeoIP2Lookup.from_path(settings.GEOIP_DATABASE_PATH)


def _is_local(ip: str) -> bool:
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return address.is_private or address.is_loopback


def resolve_client_ip(forwarded_for: Optional[str], remote_addr: Optional[str]) -> Optional[str]:
    """First ``X-Forwarded-For`` hop, else the socket address.

    Private and loopback addresses are replaced with ``GEO_FALLBACK_IP`` so
    local traffic still geolocates.
    """
    ip = forwarded_for.split(",")[0].strip() if forwarded_for else remote_addr
    if not ip:
        return None
    if _is_local(ip):
        return settings.GEO_FALLBACK_IP
    return ip


def locate(lookup: GeoLookup, ip: Optional[str]) -> GeoInfo:
    if not ip:
        return GeoInfo()
    found = lookup.lookup(ip)
    if not found:
        return GeoInfo(ip=ip)
    return GeoInfo(
        ip=ip,
        country=found.country or UNKNOWN_COUNTRY,
        region=found.region,
        city=found.city,
    )
