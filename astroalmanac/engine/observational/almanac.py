"""Year-long rise/set and twilight tables in the USNO fixed-width layout.

Rows are days 1-31 and columns are months.  Each month cell holds two
four-digit ``HHMM`` fields separated by a space (rise/set, or twilight
begin/end), followed by two spaces.  Days when the body never crosses the
threshold show sentinel codes instead:

``****``  object continuously above the horizon
``----``  object continuously below the horizon
``////``  Sun continuously above the twilight limit
``====``  Sun continuously below the twilight limit

A second line is printed for a day when any month has a second event.
"""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from time import perf_counter
from typing import IO, Final

from ...core.bodies import EventType
from ...core.time import degrees_to_dms
from ...errors import InvalidArgumentError
from ...observability import ALMANAC_CELLS, ALMANAC_DURATION
from .events import RiseSetResult, RiseSetSolver, default_solver, validate_site

__all__ = [
    "AlmanacCell",
    "AlmanacFormatter",
    "AlmanacTable",
    "Sink",
    "almanac",
    "format_cell",
    "logger_sink",
    "parameter_line",
    "round_hour",
    "stream_sink",
]

LOG = logging.getLogger(__name__)

Sink = Callable[[str], None]

TITLE: Final[str] = " " * 59 + "Almanac"
MONTH_HEADER: Final[str] = (
    "       Jan.       Feb.       Mar.       Apr.       May        June       July"
    "       Aug.       Sept.      Oct.       Nov.       Dec.  "
)
RISE_SET_HEADER: Final[str] = ("Day" + " Rise  Set " * 12).rstrip()
TWILIGHT_HEADER: Final[str] = ("Day" + " Begin End " * 12).rstrip()
RISE_SET_LEGEND: Final[str] = (
    "    **** Object continuously above horizon"
    "                            ---- Object continuously below horizon"
)
TWILIGHT_LEGEND: Final[str] = (
    "    //// Sun continuously above twilight limit"
    "                        ==== Sun continuously below twilight limit"
)
NOTES_LEGEND: Final[str] = (
    "         Spaces indicate no event"
    "                                          Multiple events in a day are shown as multiple day lines"
)
DST_NOTE: Final[str] = "         Add one hour when daylight savings time is in effect"

FIELD_BLANK: Final[str] = "    "
FIELD_OVERFLOW: Final[str] = "????"
CELL_BLANK: Final[str] = " " * 9
CELL_SPACER: Final[str] = "  "
# Within a minute of midnight no rounding is applied so the time stays on this day.
_LAST_MINUTE: Final[float] = 23.9833333


def round_hour(hours: float) -> str:
    """Format hours after midnight as ``HHMM``, rounded to the nearest minute."""

    if not math.isfinite(hours) or hours < 0.0:
        return "XXXX"
    milliseconds = round(hours * 3_600_000.0)
    if hours < _LAST_MINUTE:
        milliseconds += 30_000
    minutes = milliseconds // 60_000
    return f"{(minutes // 60) % 24:02d}{minutes % 60:02d}"


def _field(times: list[float], index: int) -> str:
    if len(times) > 2:
        return FIELD_OVERFLOW
    if index < len(times):
        return round_hour(times[index])
    return FIELD_BLANK


@dataclass(frozen=True, slots=True)
class AlmanacCell:
    """One day/month cell: first-event line, second-event line and how it was filled."""

    primary: str
    secondary: str = CELL_BLANK
    outcome: str = "events"


_SKIPPED_CELL: Final[AlmanacCell] = AlmanacCell(CELL_BLANK, CELL_BLANK, "skipped")
_FAILED_CELL: Final[AlmanacCell] = AlmanacCell(CELL_BLANK, CELL_BLANK, "failed")


def format_cell(event: EventType, result: RiseSetResult) -> AlmanacCell:
    """Render a :class:`RiseSetResult` as a nine-character cell pair."""

    if result.has_events:
        primary = f"{_field(result.rises, 0)} {_field(result.sets, 0)}"
        secondary = f"{_field(result.rises, 1)} {_field(result.sets, 1)}"
        return AlmanacCell(primary, secondary, "events")
    if result.above_threshold_at_midnight:
        code = "****" if event.is_rise_set else "////"
        return AlmanacCell(f"{code} {code}", CELL_BLANK, "above")
    code = "----" if event.is_rise_set else "===="
    return AlmanacCell(f"{code} {code}", CELL_BLANK, "below")


@dataclass(slots=True)
class AlmanacTable:
    """Grid of :class:`AlmanacCell` indexed by day (1-31) and month (1-12)."""

    event: EventType
    year: int
    latitude: float
    longitude: float
    time_zone: float
    rows: list[list[AlmanacCell]] = field(default_factory=list)

    def cell(self, day: int, month: int) -> AlmanacCell:
        return self.rows[day - 1][month - 1]

    def day_lines(self, day: int) -> list[str]:
        return _day_lines(day, self.rows[day - 1])


def _day_lines(day: int, cells: list[AlmanacCell]) -> list[str]:
    primary = "".join(cell.primary + CELL_SPACER for cell in cells)
    secondary = "".join(cell.secondary + CELL_SPACER for cell in cells)
    lines = [f"{day:02d}  {primary}"]
    if secondary.strip():
        lines.append(f"{day:02d}  {secondary}")
    return lines


def parameter_line(
    event: EventType, year: int, latitude: float, longitude: float, time_zone: float
) -> str:
    """Describe the site, zone, year and event kind of a table."""

    lat = f"{degrees_to_dms(abs(latitude))} {'N' if latitude >= 0.0 else 'S'}"
    lon = f"{degrees_to_dms(abs(longitude))} {'E' if longitude >= 0.0 else 'W'}"
    zone = f"{abs(time_zone):g} hours {'West' if time_zone <= 0.0 else 'East'} of Greenwich"
    return (
        f"Latitude: {lat},   Longitude: {lon},   Time Zone: {zone},   "
        f"Year: {year},   Event: {event.value}"
    )


class AlmanacFormatter:
    """Drive a :class:`RiseSetSolver` across a year and lay out the results."""

    def __init__(
        self,
        solver: RiseSetSolver | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._solver = solver
        self._log = logger or LOG

    @property
    def solver(self) -> RiseSetSolver:
        if self._solver is None:
            self._solver = default_solver()
        return self._solver

    def _cell(
        self,
        event: EventType,
        day: int,
        month: int,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
    ) -> AlmanacCell:
        try:
            outcome = self.solver.try_event_times(
                event, day, month, year, latitude, longitude, time_zone
            )
        except InvalidArgumentError:
            raise
        except Exception:
            self._log.exception(
                "Almanac cell failed for day %d month %d of %d", day, month, year
            )
            cell = _FAILED_CELL
        else:
            if outcome.skipped:
                self._log.debug("Skipping day %d month %d: %s", day, month, outcome.skip_reason)
                cell = _SKIPPED_CELL
            else:
                cell = format_cell(event, outcome.result)
        ALMANAC_CELLS.labels(outcome=cell.outcome).inc()
        return cell

    def _rows(
        self,
        event: EventType,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
    ) -> Iterator[tuple[int, list[AlmanacCell]]]:
        # Day-major order matches the printed layout, so rows can stream out.
        for day in range(1, 32):
            yield day, [
                self._cell(event, day, month, year, latitude, longitude, time_zone)
                for month in range(1, 13)
            ]

    def table(
        self,
        event: EventType | str,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
    ) -> AlmanacTable:
        """Compute every cell of the year and return the grid."""

        kind = validate_site(event, year, latitude, longitude, time_zone)
        table = AlmanacTable(kind, year, float(latitude), float(longitude), float(time_zone))
        start = perf_counter()
        for _, cells in self._rows(kind, year, latitude, longitude, time_zone):
            table.rows.append(cells)
        ALMANAC_DURATION.labels(event=kind.value).observe(perf_counter() - start)
        return table

    def render(
        self,
        event: EventType | str,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
    ) -> Iterator[str]:
        """Return an iterator over the almanac lines.

        Arguments are validated immediately; rows are computed lazily as
        the iterator is consumed.
        """

        kind = validate_site(event, year, latitude, longitude, time_zone)
        return self._render(kind, year, float(latitude), float(longitude), float(time_zone))

    def _render(
        self,
        event: EventType,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
    ) -> Iterator[str]:
        yield TITLE
        yield ""
        yield parameter_line(event, year, latitude, longitude, time_zone)
        yield ""
        yield MONTH_HEADER
        yield RISE_SET_HEADER if event.is_rise_set else TWILIGHT_HEADER

        start = perf_counter()
        for day, cells in self._rows(event, year, latitude, longitude, time_zone):
            yield from _day_lines(day, cells)
        ALMANAC_DURATION.labels(event=event.value).observe(perf_counter() - start)

        yield ""
        yield RISE_SET_LEGEND if event.is_rise_set else TWILIGHT_LEGEND
        yield NOTES_LEGEND
        yield ""
        yield DST_NOTE
        yield ""

    def write(
        self,
        event: EventType | str,
        year: int,
        latitude: float,
        longitude: float,
        time_zone: float,
        sink: Sink,
    ) -> None:
        """Stream the almanac to ``sink`` one line at a time."""

        if sink is None or not callable(sink):
            raise InvalidArgumentError("An output sink accepting lines is required")
        for line in self.render(event, year, latitude, longitude, time_zone):
            sink(line)


def almanac(
    event: EventType | str,
    year: int,
    latitude: float,
    longitude: float,
    time_zone: float,
    sink: Sink,
    *,
    solver: RiseSetSolver | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Write a full-year almanac for ``event`` at the given site to ``sink``."""

    AlmanacFormatter(solver, logger=logger).write(
        event, year, latitude, longitude, time_zone, sink
    )


def stream_sink(stream: IO[str] | None = None) -> Sink:
    """Return a sink that writes each line to ``stream`` (stdout by default)."""

    target = stream if stream is not None else sys.stdout

    def _write(line: str) -> None:
        target.write(line + "\n")

    return _write


def logger_sink(logger: logging.Logger, level: int = logging.INFO) -> Sink:
    """Return a sink that emits each line as a log record."""

    def _emit(line: str) -> None:
        logger.log(level, "%s", line)

    return _emit
