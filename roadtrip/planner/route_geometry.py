"""Route geometry validation for the map widget.

Pure and non-failing: malformed input degrades to an empty geometry, which
the map renders as "no route drawn".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from roadtrip.adapters.payloads import coordinate_from
from roadtrip.domain.models import BoundingRegion, LatLng, Marker, RouteGeometry

UNKNOWN_LABEL = "Unknown"
_LOGGER = logging.getLogger("road-trip.geometry")


def _filter_points(raw: list | tuple) -> list[LatLng]:
    points: list[LatLng] = []
    dropped = 0
    for item in raw:
        coord = coordinate_from(item)
        if coord is None:
            dropped += 1
            _LOGGER.warning("dropping invalid route point: %r", item)
            continue
        points.append(coord.as_latlng())
    if dropped:
        _LOGGER.info("kept %d of %d route points", len(points), len(raw))
    return points


def _explicit_marker(info: Any) -> Optional[Marker]:
    if not isinstance(info, Mapping):
        return None
    coord = coordinate_from(info.get("coordinates"))
    if coord is None:
        return None
    name = info.get("name")
    label = name if isinstance(name, str) and name.strip() else UNKNOWN_LABEL
    return Marker(lat=coord.lat, lng=coord.lon, label=label)


def _bounds(points: list[LatLng]) -> BoundingRegion:
    lats = [p[0] for p in points]
    lngs = [p[1] for p in points]
    return BoundingRegion(min_lat=min(lats), min_lng=min(lngs), max_lat=max(lats), max_lng=max(lngs))


def normalize_route_geometry(
    raw_geometry: Any,
    origin_info: Any = None,
    destination_info: Any = None,
) -> RouteGeometry:
    """[lon, lat] sequence → (lat, lng) polyline with markers and bounds.

    ``origin_info``/``destination_info`` are ``{"coordinates": [lon, lat],
    "name": str}`` mappings; when absent or invalid the marker is derived from
    the first/last valid polyline point and left unlabeled.
    """
    if isinstance(raw_geometry, (str, bytes)) or not isinstance(raw_geometry, (list, tuple)):
        _LOGGER.warning("route geometry is not a sequence: %s", type(raw_geometry).__name__)
        return RouteGeometry()

    points = _filter_points(raw_geometry)
    if not points:
        _LOGGER.warning("no valid route points after filtering")
        return RouteGeometry()

    origin = _explicit_marker(origin_info)
    if origin is None:
        origin = Marker(lat=points[0][0], lng=points[0][1])
    destination = _explicit_marker(destination_info)
    if destination is None:
        destination = Marker(lat=points[-1][0], lng=points[-1][1])

    return RouteGeometry(
        polyline=points,
        origin_marker=origin,
        destination_marker=destination,
        bounds=_bounds(points),
    )
