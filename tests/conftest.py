import math

import httpx
import jax.numpy as jnp
import pytest

from orbitview.catalog import ElementSet, compute_checksum
from orbitview.config import set_dtype
from orbitview.constants import GM_EARTH_KM, WGS84_a


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    The library default is float32 (renderer buffers); tests compare against
    reference values at double precision unless they explicitly override it
    (test_config.py has its own autouse fixture that sets float32).
    """
    set_dtype(jnp.float64)


def circular_mean_motion(altitude_km: float) -> float:
    """Two-body mean motion [rev/day] of a circular orbit above the equatorial radius."""
    a = WGS84_a / 1000.0 + altitude_km
    return math.sqrt(GM_EARTH_KM / a**3) * 86400.0 / (2.0 * math.pi)


def make_element_set(
    catnum: int,
    mean_anomaly: float = 0.0,
    mean_motion: float | None = None,
    altitude_km: float = 500.0,
    inclination: float = 0.0,
    eccentricity: float = 0.0,
    raan: float = 0.0,
    arg_perigee: float = 0.0,
    bstar: str = " 00000-0",
    name: str = "",
) -> ElementSet:
    """Build a well-formed element set with epoch 2024-01-01 00:00 UTC."""
    if mean_motion is None:
        mean_motion = circular_mean_motion(altitude_km)

    body1 = (
        f"1 {catnum:05d}U 24001A   24001.00000000  .00000000  00000-0 {bstar} 0  999"
    )
    body2 = (
        f"2 {catnum:05d} {inclination:8.4f} {raan:8.4f} {round(eccentricity * 1e7):07d} "
        f"{arg_perigee:8.4f} {mean_anomaly:8.4f} {mean_motion:11.8f}    1"
    )
    line1 = body1 + str(compute_checksum(body1))
    line2 = body2 + str(compute_checksum(body2))
    return ElementSet(f"{catnum:05d}", line1, line2, name or f"TEST {catnum}")


@pytest.fixture
def element_set_factory():
    return make_element_set


@pytest.fixture
def equatorial_trio():
    """Three circular equatorial satellites at 500 km, 10 deg apart in mean anomaly."""
    return [make_element_set(90001 + k, mean_anomaly=10.0 * k) for k in range(3)]


@pytest.fixture
def iss_element_set():
    return ElementSet(
        "25544",
        "1 25544U 98067A   23351.58334491  .00016717  00000-0  30142-3 0  9999",
        "2 25544  51.6416 250.7541 0004124 163.7645 282.8447 15.49520176430335",
        "ISS (ZARYA)",
    )


@pytest.fixture
def mock_transport(monkeypatch):
    """Route every httpx.Client through a MockTransport answering from a dict."""
    responses: dict[str, httpx.Response] = {}
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        requested.append(url)
        if url not in responses:
            raise httpx.ConnectError("unreachable", request=request)
        return responses[url]

    real_client = httpx.Client

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "Client", client_factory)
    return responses, requested
