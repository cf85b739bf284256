"""
Record Parser
=============

Parses one line of the traffic log into an Observation.

Line Layouts:
    hourly:  <time> <light_id> <car_count>
    daily:   <date> <time> <light_id> <car_count>
    auto:    daily when the first field looks like YYYY-MM-DD, else hourly

Rules:
    - Fields are whitespace separated; fields past the layout are ignored
    - The hour is the leading integer of the time field ("14:30" -> 14)
    - car_count is a non-negative decimal integer without sign
    - No length limits on light_id or date
"""

import re
from enum import Enum
from typing import Union

from traffic_census.models.observation import Observation


_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
_LEADING_INT_RE = re.compile(r"^([0-9]+)")
_COUNT_RE = re.compile(r"^[0-9]+$")


class ParseError(ValueError):
    """A single malformed observation line."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class RecordSchema(str, Enum):
    """Positional layout of an input line."""

    HOURLY = "hourly"
    DAILY = "daily"
    AUTO = "auto"


class RecordParser:
    """
    Stateless parser for traffic log lines.

    Example:
        parser = RecordParser(RecordSchema.HOURLY)
        obs = parser.parse("08:15 L1 5")
        assert obs.hour == 8 and obs.car_count == 5
    """

    def __init__(self, schema: Union[RecordSchema, str] = RecordSchema.AUTO) -> None:
        self.schema = RecordSchema(schema)

    def parse(self, line: str) -> Observation:
        """
        Parse one line.

        Raises:
            ParseError: Missing fields, bad hour, bad car_count or bad date
        """
        fields = line.split()
        if not fields:
            raise ParseError(line, "empty line")

        schema = self.schema
        if schema is RecordSchema.AUTO:
            schema = RecordSchema.DAILY if _DATE_RE.match(fields[0]) else RecordSchema.HOURLY

        if schema is RecordSchema.DAILY:
            if len(fields) < 4:
                raise ParseError(line, f"expected 4 fields, got {len(fields)}")
            day = fields[0]
            if not _DATE_RE.match(day):
                raise ParseError(line, f"invalid date {day!r}")
            time_field, light_id, count_field = fields[1:4]
        else:
            if len(fields) < 3:
                raise ParseError(line, f"expected 3 fields, got {len(fields)}")
            day = None
            time_field, light_id, count_field = fields[0:3]

        return Observation(
            hour=self._parse_hour(line, time_field),
            light_id=light_id,
            car_count=self._parse_count(line, count_field),
            day=day,
        )

    @staticmethod
    def _parse_hour(line: str, time_field: str) -> int:
        match = _LEADING_INT_RE.match(time_field)
        if match is None:
            raise ParseError(line, f"invalid time {time_field!r}")
        hour = int(match.group(1))
        if hour > 23:
            raise ParseError(line, f"hour out of range: {hour}")
        return hour

    @staticmethod
    def _parse_count(line: str, count_field: str) -> int:
        if not _COUNT_RE.match(count_field):
            raise ParseError(line, f"invalid car count {count_field!r}")
        return int(count_field)
