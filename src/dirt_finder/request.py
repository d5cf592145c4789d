"""Validation of raw search input into a ``SearchRequest``.

Everything here runs before any search work starts; every problem surfaces as
a ``RequestError`` carrying a user-facing message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .bits import INT32_MAX, INT32_MIN
from .models import Constraint, Direction, Facing, SearchVolume
from .orientation import ORIENTATION_COUNT
from .predicate import Predicate, rotation_constraints

_INT_RE = re.compile(r"[+-]?\d+")
CONSTRAINT_KEYS = ("dx", "dy", "dz", "r")


class RequestError(ValueError):
    """Invalid search input."""


@dataclass(frozen=True, slots=True)
class SearchRequest:
    facing: Facing
    direction: Direction
    predicate: Predicate
    volume: SearchVolume
    workers: int | None = None

    @property
    def normalized_predicate(self) -> Predicate:
        """Predicate with the facing rotation folded into every expected value."""
        return self.predicate.normalized(self.facing)


def parse_int(raw: str | int, what: str) -> int:
    if isinstance(raw, int):
        return raw
    text = raw.strip()
    if not _INT_RE.fullmatch(text):
        raise RequestError(f"Invalid integer for {what}: {raw!r}")
    return int(text)


def _check_rotation(value: int) -> int:
    if not 0 <= value < ORIENTATION_COUNT:
        raise RequestError(f"Rotation must be one of 0, 1, 2, 3; got {value}")
    return value


def parse_rotations(text: str) -> list[int]:
    """Parse a comma-separated rotation list such as ``"0,3,2"``."""
    return [_check_rotation(parse_int(token, "rotation")) for token in text.split(",") if token.strip()]


def _parse_constraint_object(body: str) -> Constraint:
    fields: dict[str, int] = {}
    for item in body.split(","):
        if not item.strip():
            continue
        key, sep, raw = item.partition(":")
        if not sep:
            raise RequestError(f"Malformed constraint field: {item.strip()!r}")
        key = key.strip().strip("\"'")
        if key not in CONSTRAINT_KEYS:
            raise RequestError(f"Unknown constraint key: {key!r}")
        if key in fields:
            raise RequestError(f"Duplicate constraint key: {key!r}")
        fields[key] = parse_int(raw, key)

    missing = [key for key in CONSTRAINT_KEYS if key not in fields]
    if missing:
        raise RequestError(f"Incomplete constraint object, missing: {', '.join(missing)}")
    return Constraint(dx=fields["dx"], dy=fields["dy"], dz=fields["dz"], rotation=_check_rotation(fields["r"]))


def parse_constraints(text: str) -> list[Constraint]:
    """Parse ``[{dx:0,dy:1,dz:0,r:2}, ...]``; keys may be quoted, the brackets are optional."""
    chunks = text.split("}")
    constraints: list[Constraint] = []
    for position, chunk in enumerate(chunks):
        body = chunk.strip().lstrip("[,").strip()
        if body in ("", "]"):
            continue
        if position == len(chunks) - 1:
            raise RequestError(f"Incomplete constraint object: {body!r}")
        if not body.startswith("{"):
            raise RequestError(f"Malformed constraint object: {body!r}")
        constraints.append(_parse_constraint_object(body[1:]))
    return constraints


def _parse_facing(facing: str | Facing | None) -> Facing:
    if facing is None or (isinstance(facing, str) and not facing.strip()):
        raise RequestError("Missing facing option")
    try:
        return Facing(facing.strip().lower() if isinstance(facing, str) else facing)
    except ValueError:
        raise RequestError(f"Unsupported facing: {facing!r}") from None


def _parse_direction(direction: str | Direction | None) -> Direction:
    if direction is None:
        return Direction.Y
    try:
        return Direction(direction.strip().lower() if isinstance(direction, str) else direction)
    except ValueError:
        raise RequestError(f"Unsupported direction: {direction!r}") from None


def _parse_bound(raw: str | int | None, name: str) -> int:
    if raw is None:
        raise RequestError(f"Missing {name}")
    value = parse_int(raw, name)
    if not INT32_MIN <= value <= INT32_MAX:
        raise RequestError(f"{name} must fit in a signed 32-bit integer, got {value}")
    return value


def build_search_request(
    *,
    facing: str | Facing | None,
    direction: str | Direction | None = None,
    rotations: str | None = None,
    constraints: str | None = None,
    min_x: str | int | None = None,
    max_x: str | int | None = None,
    min_y: str | int | None = None,
    max_y: str | int | None = None,
    min_z: str | int | None = None,
    max_z: str | int | None = None,
    workers: str | int | None = None,
) -> SearchRequest:
    """Validate raw option values and assemble a ``SearchRequest``."""
    if rotations is not None and constraints is not None:
        raise RequestError("Use either a rotation list or constraint objects, not both")

    resolved_direction = _parse_direction(direction)
    if constraints is not None:
        parsed = parse_constraints(constraints)
    else:
        parsed = rotation_constraints(parse_rotations(rotations or ""), resolved_direction)
    if not parsed:
        raise RequestError("Predicate is empty")

    resolved_facing = _parse_facing(facing)

    bounds = {
        "minX": _parse_bound(min_x, "minX"),
        "maxX": _parse_bound(max_x, "maxX"),
        "minY": _parse_bound(min_y, "minY"),
        "maxY": _parse_bound(max_y, "maxY"),
        "minZ": _parse_bound(min_z, "minZ"),
        "maxZ": _parse_bound(max_z, "maxZ"),
    }
    if bounds["minX"] > bounds["maxX"] or bounds["minY"] > bounds["maxY"] or bounds["minZ"] > bounds["maxZ"]:
        raise RequestError("Invalid block range: every min must be <= its max")

    worker_count = None if workers is None else parse_int(workers, "workers")
    if worker_count is not None and worker_count < 1:
        raise RequestError(f"Worker count must be >= 1, got {worker_count}")

    return SearchRequest(
        facing=resolved_facing,
        direction=resolved_direction,
        predicate=Predicate.of(parsed),
        volume=SearchVolume(
            min_x=bounds["minX"],
            max_x=bounds["maxX"],
            min_y=bounds["minY"],
            max_y=bounds["maxY"],
            min_z=bounds["minZ"],
            max_z=bounds["maxZ"],
        ),
        workers=worker_count,
    )
