"""
Pipe specification table and lookup.

The table lists outside diameter and wall thickness per schedule and
nominal size (ASME B36.10 / ASTM D1785 dimensions), together with the
connection engagement length and thread pitch used for every endpoint.
Thread length is the ASME B1.20.1 effective thread length L2 and the pitch
is the NPT pitch, both converted to mm.

Sources:
- https://en.wikipedia.org/wiki/Nominal_Pipe_Size
- https://www.engineersedge.com/hardware/taper-pipe-threads.htm
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import AmbiguousMatch, InvalidSchedule, MissingSelector, NoMatch

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_THREAD_LENGTH = 10.0  # mm, used when a record carries no thread length
DEFAULT_THREAD_PITCH = 0.940816  # mm, 27 TPI (1/8" NPT)

SELECTOR_FIELDS = ("name", "dn", "od", "wall", "thread_length", "thread_pitch")


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class PipeSpec:
    """One row of the specification table (all dimensions in mm).

    Records are immutable; use ``dataclasses.replace`` (or the accessor
    functions' ``update=`` mode) to derive a modified copy.
    """

    schedule: int
    name: str  # Nominal pipe size, e.g. "3/4"
    od: float  # Outside diameter
    wall: float  # Wall thickness
    dn: str  # Metric diameter name, e.g. "DN20"
    thread_length: float | None = DEFAULT_THREAD_LENGTH  # Engagement length of an endpoint
    thread_pitch: float | None = DEFAULT_THREAD_PITCH

    def __post_init__(self):
        if self.od <= 2 * self.wall:
            raise ValueError(
                f"Spec {self.name} (schedule {self.schedule}): od={self.od} must exceed 2*wall={2 * self.wall}"
            )

    @property
    def id(self) -> float:
        """Inside diameter."""
        return self.od - 2 * self.wall

    @property
    def socket_id(self) -> float:
        """Inside diameter of a socket that receives this pipe."""
        return self.od

    @property
    def socket_od(self) -> float:
        """Outside diameter of a socket that receives this pipe."""
        return self.socket_id + 2 * self.wall

    @property
    def tl(self) -> float:
        """Thread length, falling back to the default when unset."""
        return DEFAULT_THREAD_LENGTH if self.thread_length is None else self.thread_length

    @property
    def pitch(self) -> float:
        """Thread pitch, falling back to the default when unset."""
        return DEFAULT_THREAD_PITCH if self.thread_pitch is None else self.thread_pitch


# name: (dn, od, thread_length, thread_pitch)
_NOMINAL_SIZES: dict[str, tuple[str, float, float, float]] = {
    "1/8": ("DN6", 10.3, 6.63194, 0.940816),
    "1/4": ("DN8", 13.7, 10.20572, 1.411224),
    "3/8": ("DN10", 17.1, 10.35812, 1.411224),
    "1/2": ("DN15", 21.3, 13.55598, 1.814322),
    "3/4": ("DN20", 26.7, 13.86078, 1.814322),
    "1": ("DN25", 33.4, 17.34312, 2.208784),
    "1-1/4": ("DN32", 42.2, 17.95272, 2.208784),
    "1-1/2": ("DN40", 48.3, 18.3769, 2.208784),
    "2": ("DN50", 60.3, 19.2151, 2.208784),
    "2-1/2": ("DN65", 73.0, 28.8925, 3.175),
    "3": ("DN80", 88.9, 30.48, 3.175),
    "3-1/2": ("DN90", 101.6, 31.75, 3.175),
    "4": ("DN100", 114.3, 33.02, 3.175),
    "5": ("DN125", 141.3, 35.72002, 3.175),
    "6": ("DN150", 168.3, 38.4175, 3.175),
    "8": ("DN200", 219.1, 43.4975, 3.175),
    "10": ("DN250", 273.0, 48.895, 3.175),
    "12": ("DN300", 323.8, 53.975, 3.175),
}

# schedule: {name: wall}
_WALLS: dict[int, dict[str, float]] = {
    40: {
        "1/8": 1.73, "1/4": 2.4, "3/8": 2.4, "1/2": 2.77, "3/4": 2.87,
        "1": 3.38, "1-1/4": 3.56, "1-1/2": 3.68, "2": 3.91, "2-1/2": 5.16,
        "3": 5.49, "3-1/2": 5.74, "4": 6.02, "5": 6.55, "6": 7.11,
        "8": 8.18, "10": 9.27, "12": 10.31,
    },
    80: {
        "1/8": 2.41, "1/4": 3.02, "3/8": 3.2, "1/2": 3.73, "3/4": 3.91,
        "1": 4.55, "1-1/4": 4.85, "1-1/2": 5.08, "2": 5.54, "2-1/2": 7.01,
        "3": 7.62, "3-1/2": 8.08, "4": 8.56, "5": 9.53, "6": 10.97,
        "8": 12.7, "10": 15.09, "12": 17.48,
    },
    120: {
        "4": 11.13, "5": 12.7, "6": 14.27, "8": 18.26, "10": 21.44, "12": 25.4,
    },
}

PIPE_SPECS: tuple[PipeSpec, ...] = tuple(
    PipeSpec(
        schedule=schedule,
        name=name,
        od=_NOMINAL_SIZES[name][1],
        wall=wall,
        dn=_NOMINAL_SIZES[name][0],
        thread_length=_NOMINAL_SIZES[name][2],
        thread_pitch=_NOMINAL_SIZES[name][3],
    )
    for schedule, walls in _WALLS.items()
    for name, wall in walls.items()
)


# =============================================================================
# TABLE
# =============================================================================


class SpecTable:
    """Read-only collection of PipeSpec rows indexed by schedule."""

    def __init__(self, specs: tuple[PipeSpec, ...] | list[PipeSpec], version: str = "1.0"):
        self.version = version
        self._specs = tuple(specs)
        self._by_schedule: dict[int, tuple[PipeSpec, ...]] = {}

        index: dict[int, list[PipeSpec]] = {}
        seen: set[tuple[int, str, str]] = set()
        for spec in self._specs:
            key = (spec.schedule, spec.name, spec.dn)
            if key in seen:
                raise ValueError(
                    f"Duplicate spec name={spec.name!r} dn={spec.dn!r} in schedule {spec.schedule}"
                )
            seen.add(key)
            index.setdefault(spec.schedule, []).append(spec)

        self._by_schedule = {schedule: tuple(rows) for schedule, rows in index.items()}

    def __len__(self) -> int:
        return len(self._specs)

    def __iter__(self):
        return iter(self._specs)

    @property
    def schedules(self) -> tuple[int, ...]:
        """Known schedules, ascending."""
        return tuple(sorted(self._by_schedule))

    def for_schedule(self, schedule: int | str) -> tuple[PipeSpec, ...]:
        """All rows of one schedule, in table order."""
        return self._by_schedule[self._check_schedule(schedule)]

    def _check_schedule(self, schedule: Any) -> int:
        """Normalize ``40`` / ``40.0`` / ``"40"`` to an int and check it is known."""
        message = f"Invalid schedule {schedule!r}. Known schedules: {list(self.schedules)}"
        if isinstance(schedule, bool):
            raise InvalidSchedule(message)
        try:
            number = float(str(schedule).strip())
        except ValueError:
            raise InvalidSchedule(message) from None
        if not number.is_integer():
            raise InvalidSchedule(message)
        value = int(number)
        if value not in self._by_schedule:
            raise InvalidSchedule(message)
        return value

    def lookup(self, schedule: int | str, **selectors: Any) -> PipeSpec:
        """
        Find the single row matching a schedule and selector fields.

        Args:
            schedule: Pipe schedule (e.g. 40)
            **selectors: Any of name, dn, od, wall, thread_length,
                thread_pitch. Values are compared for exact equality;
                ``None`` means "not supplied".

        Returns:
            The matching PipeSpec

        Raises:
            InvalidSchedule: schedule is not in the table
            MissingSelector: no selector was supplied
            NoMatch: no row matches
            AmbiguousMatch: more than one row matches
        """
        value = self._check_schedule(schedule)

        unknown = set(selectors) - set(SELECTOR_FIELDS)
        if unknown:
            raise TypeError(f"Unknown selector(s): {sorted(unknown)}. Valid: {list(SELECTOR_FIELDS)}")

        given = {key: val for key, val in selectors.items() if val is not None}
        if not given:
            raise MissingSelector(
                f"Lookup in schedule {value} needs at least one of: {', '.join(SELECTOR_FIELDS)}"
            )

        matches = [
            spec
            for spec in self._by_schedule[value]
            if all(getattr(spec, key) == val for key, val in given.items())
        ]
        criteria = ", ".join(f"{key}={val!r}" for key, val in given.items())
        if not matches:
            raise NoMatch(f"No spec in schedule {value} matches {criteria}")
        if len(matches) > 1:
            names = [spec.name for spec in matches]
            raise AmbiguousMatch(
                f"{len(matches)} specs in schedule {value} match {criteria}: {names}. Add selectors."
            )
        return matches[0]

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> SpecTable:
        """Load a table from a YAML file with ``version`` and ``specs`` keys."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}
        names = {f.name for f in fields(PipeSpec)}
        specs = []
        for row in data.get("specs", []):
            unknown = set(row) - names
            if unknown:
                raise ValueError(f"Unknown spec field(s) {sorted(unknown)} in {yaml_path}")
            specs.append(PipeSpec(**row))
        return cls(specs, version=str(data.get("version", "1.0")))

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the table to a YAML file."""
        data = {
            "version": self.version,
            "specs": [asdict(spec) for spec in self._specs],
        }
        with open(yaml_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


DEFAULT_TABLE = SpecTable(PIPE_SPECS)
SCHEDULES: tuple[int, ...] = DEFAULT_TABLE.schedules


def lookup_spec(
    schedule: int | str,
    *,
    name: str | None = None,
    dn: str | None = None,
    od: float | None = None,
    wall: float | None = None,
    thread_length: float | None = None,
    thread_pitch: float | None = None,
    table: SpecTable = DEFAULT_TABLE,
) -> PipeSpec:
    """Look up exactly one PipeSpec. See ``SpecTable.lookup``."""
    return table.lookup(
        schedule,
        name=name,
        dn=dn,
        od=od,
        wall=wall,
        thread_length=thread_length,
        thread_pitch=thread_pitch,
    )


def available_names(schedule: int | str, table: SpecTable = DEFAULT_TABLE) -> list[str]:
    """Nominal names available in a schedule."""
    return [spec.name for spec in table.for_schedule(schedule)]
