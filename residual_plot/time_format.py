"""Locale-aware hour labels for the time axis and for chart points.

The 12/24-hour convention is read from the user's time locale once, when a
``TimeLabelFormatter`` is built, and kept for the formatter's lifetime.
"""

from __future__ import annotations

import datetime as dt
import locale
import logging


LOGGER = logging.getLogger(__name__)

DEFAULT_TIME_TEMPLATE = "%H:%M:%S"

# strftime directives that only make sense on a 12-hour clock.
_MERIDIEM_DIRECTIVES = ("%p", "%P", "%I", "%l", "%r")

AXIS_PATTERN_12H = "h A"
AXIS_PATTERN_24H = "H:mm"
POINT_PATTERN_12H = "h:mm A"
POINT_PATTERN_24H = "H:mm"


def locale_time_template() -> str:
    """Return the time template of the user's ``LC_TIME`` locale.

    Python only adopts ``LC_CTYPE`` from the environment at startup, so the
    environment's ``LC_TIME`` is applied for the lookup and the previous
    setting is restored afterwards.
    """

    if not hasattr(locale, "nl_langinfo"):
        return DEFAULT_TIME_TEMPLATE
    previous = locale.setlocale(locale.LC_TIME)
    try:
        try:
            locale.setlocale(locale.LC_TIME, "")
        except locale.Error:
            LOGGER.debug("environment time locale is not installed; using %r", previous)
        template = locale.nl_langinfo(locale.T_FMT)
    finally:
        locale.setlocale(locale.LC_TIME, previous)
    return template or DEFAULT_TIME_TEMPLATE


def uses_meridiem(template: str) -> bool:
    """Return True when an hour template implies a 12-hour clock.

    Accepts strftime templates (``%I:%M %p``) and CLDR-style patterns
    (``h a``), where the ``a`` field is the meridiem marker.
    """

    if "%" in template:
        return any(directive in template for directive in _MERIDIEM_DIRECTIVES)
    return "a" in _strip_quoted_literals(template)


def _strip_quoted_literals(pattern: str) -> str:
    parts = pattern.split("'")
    return "".join(parts[0::2])


class TimeLabelFormatter:
    def __init__(self, time_template: str | None = None) -> None:
        template = time_template if time_template is not None else locale_time_template()
        self._twelve_hour = uses_meridiem(template)
        LOGGER.debug("resolved hour template %r as %s-hour clock", template, 12 if self._twelve_hour else 24)

    @property
    def is_twelve_hour(self) -> bool:
        return self._twelve_hour

    @property
    def axis_pattern(self) -> str:
        return AXIS_PATTERN_12H if self._twelve_hour else AXIS_PATTERN_24H

    @property
    def point_pattern(self) -> str:
        return POINT_PATTERN_12H if self._twelve_hour else POINT_PATTERN_24H

    def axis_label(self, when: dt.datetime) -> str:
        if self._twelve_hour:
            return f"{_hour12(when)} {_meridiem(when)}"
        return f"{when.hour}:{when.minute:02d}"

    def point_label(self, when: dt.datetime) -> str:
        if self._twelve_hour:
            return f"{_hour12(when)}:{when.minute:02d} {_meridiem(when)}"
        return f"{when.hour}:{when.minute:02d}"

    def axis_label_for_scalar(self, seconds: float, tz: dt.tzinfo) -> str:
        return self.axis_label(dt.datetime.fromtimestamp(seconds, tz=tz))


def _hour12(when: dt.datetime) -> int:
    return when.hour % 12 or 12


def _meridiem(when: dt.datetime) -> str:
    return "AM" if when.hour < 12 else "PM"
