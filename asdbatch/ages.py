"""Turn the birth data each carrier returns into an age in full years."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, Mapping

from asdbatch.formats import LGUPUserInfo

_log = logging.getLogger(__name__)

UNKNOWN_AGE = -1
"""Age recorded when a carrier reply cannot be turned into an age."""

_INTEGER = re.compile(r"[+-]?[0-9]+\Z")


class Telecom(IntEnum):
    SKT = 0
    KT = 1
    LGUP = 2


def _atoi(text: str) -> int:
    if not _INTEGER.match(text):
        raise ValueError(f"invalid integer: {text!r}")
    return int(text)


def _normalized_date(year: int, month: int, day: int) -> date:
    """Build a date, carrying out-of-range months and days into the next unit."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return date(year, month, 1) + timedelta(days=day - 1)
    except OverflowError as exc:
        raise ValueError(f"date out of range: {year}-{month}-{day}") from exc


def age_on(birth: date, today: date) -> int:
    """Full years between ``birth`` and ``today``."""
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def skt_age(ssn_birth_dt: str, today: date | None = None) -> int:
    """Age from a YYYYMMDD birth date; ``today`` defaults to the UTC date."""
    if len(ssn_birth_dt) != 8:
        raise ValueError("SSN_BIRTH_DT must be in YYYYMMDD format")
    year = _atoi(ssn_birth_dt[:4])
    month = _atoi(ssn_birth_dt[4:6])
    day = _atoi(ssn_birth_dt[6:8])
    birth = _normalized_date(year, month, day)
    if today is None:
        today = datetime.now(timezone.utc).date()
    return age_on(birth, today)


def kt_age(user_ssn_front: str, today: date | None = None) -> int:
    """Age from a YYMMDD birth date; years up to 25 are in the 2000s."""
    if len(user_ssn_front) != 6:
        raise ValueError(f"USER_SSN_FRONT format invalid: {user_ssn_front!r}")
    year = _atoi(user_ssn_front[0:2])
    year += 2000 if year <= 25 else 1900
    month = _atoi(user_ssn_front[2:4])
    day = _atoi(user_ssn_front[4:6])
    birth = _normalized_date(year, month, day)
    if today is None:
        today = date.today()
    age = today.year - birth.year
    if today < _normalized_date(year + age, month, day):
        age -= 1
    return age


def extract_age(data: Mapping[str, Any], telecom: int, today: date | None = None) -> int:
    """Age from a parsed TCRS reply, or UNKNOWN_AGE if it holds none."""
    try:
        carrier = Telecom(telecom)
    except ValueError:
        _log.error("extract_age: unknown telecom %r", telecom)
        return UNKNOWN_AGE

    if carrier is Telecom.SKT:
        body = data.get("BodyInfo")
        if not isinstance(body, Mapping):
            _log.error("SKT: reply body missing")
            return UNKNOWN_AGE
        ssn = body.get("SSN_BIRTH_DT", "")
        if not isinstance(ssn, str) or len(ssn) < 8:
            _log.error("SKT: TCRS error: SSN_BIRTH_DT %r", ssn)
            return UNKNOWN_AGE
        try:
            result = skt_age(ssn, today)
        except ValueError as exc:
            _log.error("SKT: %s", exc)
            return UNKNOWN_AGE
        _log.debug("SKT: %s age: %d", ssn, result)
        return result

    if carrier is Telecom.KT:
        body = data.get("Body")
        if not isinstance(body, Mapping):
            _log.error("KT: TCRS error: reply body missing")
            return UNKNOWN_AGE
        front = body.get("USER_SSN_FRONT", "")
        if not isinstance(front, str) or len(front) < 2:
            _log.error("KT: TCRS error: USER_SSN_FRONT too short")
            return UNKNOWN_AGE
        try:
            result = kt_age(front, today)
        except ValueError as exc:
            _log.error("KT: %s", exc)
            return UNKNOWN_AGE
        _log.debug("KT: %s age: %d", front, result)
        return result

    body = data.get("Body")
    if not isinstance(body, LGUPUserInfo):
        _log.error("LGUP: TCRS error: reply body missing")
        return UNKNOWN_AGE
    try:
        result = _atoi(body.age)
    except ValueError:
        _log.error("LGUP: TCRS error: age is not a number: %r", body.age)
        return UNKNOWN_AGE
    _log.debug("LGUP: age: %d", result)
    return result