# fixapp/services/location.py
"""Device location seam.

The mobile client owns the GPS; the service only sees what a provider hands
over. Tests and the HTTP layer use ``StaticLocationProvider``.
"""
from typing import NamedTuple, Optional, Protocol
from fixapp.core.errors import LocationError


class LocationFix(NamedTuple):
    latitude: float
    longitude: float


class LocationProvider(Protocol):
    def current_fix(self) -> LocationFix: ...


class StaticLocationProvider:
    """Returns a fixed fix, or raises the recorded denial reason."""

    def __init__(self, fix: Optional[LocationFix] = None, denied: Optional[str] = None):
        self.fix = fix
        self.denied = denied

    def current_fix(self) -> LocationFix:
        if self.denied:
            raise LocationError(self.denied)
        if self.fix is None:
            raise LocationError("location unavailable")
        return self.fix


def request_fix(provider: LocationProvider) -> LocationFix:
    try:
        return provider.current_fix()
    except LocationError:
        raise
    except Exception as e:
        raise LocationError(f"location provider failed: {e}") from e
