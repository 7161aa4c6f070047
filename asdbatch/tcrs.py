"""Client for the TCRS carrier gateway's user-information lookup."""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Callable, Mapping

from asdbatch.formats import LGUPUserInfo

_log = logging.getLogger(__name__)

_TELECOM_NAMES = {"0": "SKT", "1": "KT", "2": "LGUP"}

Sender = Callable[[str, Mapping[str, Any]], bytes]


class TcrsError(Exception):
    """A request to the TCRS gateway could not be completed."""


def telecom_name(telecom: str) -> str:
    """Carrier name for a telecom code; other values are names already."""
    return _TELECOM_NAMES.get(telecom, telecom)


def build_request(telecom: str, pnumber: str) -> dict[str, Any]:
    """Request document asking for a subscriber's user information."""
    cmd_type = "USERINFOANDKWAYS" if telecom == "1" else "USERINFO"
    return {"Header": {"CmdType": cmd_type}, "Body": {"PNumber": pnumber}}


def _split(raw: bytes) -> tuple[dict[str, Any], dict[str, Any]]:
    try:
        doc = json.loads(raw)
    except (TypeError, ValueError):
        return {}, {}
    if not isinstance(doc, dict):
        return {}, {}
    header = doc.get("Header")
    body = doc.get("Body")
    return (
        header if isinstance(header, dict) else {},
        body if isinstance(body, dict) else {},
    )


def parse_response(tele_name: str, raw: bytes) -> dict[str, Any]:
    """Split a reply into its header and carrier-specific body.

    An empty or malformed reply gives empty parts; an unknown carrier
    gives an empty result.
    """
    header, body = _split(raw)
    name = tele_name.upper()
    if name == "SKT":
        info = body.get("Body")
        return {
            "Header": header,
            "Body": body,
            "BodyInfo": info if isinstance(info, dict) else {},
        }
    if name == "KT":
        return {"Header": header, "Body": body}
    if name == "LGUP":
        try:
            info = LGUPUserInfo.from_dict(body)
        except ValueError as exc:
            _log.error("LGUP: malformed reply body: %s", exc)
            info = LGUPUserInfo()
        return {"Header": header, "Body": info}
    return {}


def send_json(url: str, payload: Mapping[str, Any], timeout: float = 5.0) -> bytes:
    """POST ``payload`` as JSON and return the reply body, whatever its status."""
    request = urllib.request.Request(
        url,
        data=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            return response.read()
    except urllib.error.HTTPError as exc:
        try:
            return exc.read()
        finally:
            exc.close()
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
        raise TcrsError(f"request to {url} failed: {exc}") from exc


def get_member_info(
    tcrs_url: str, telecom: str, pnumber: str, sender: Sender | None = None
) -> dict[str, Any]:
    """Look up a subscriber; a failed request yields an empty reply."""
    send = sender or send_json
    name = telecom_name(telecom)
    try:
        raw = send(tcrs_url + name, build_request(telecom, pnumber))
    except TcrsError as exc:
        _log.error("TCRS request failed: %s", exc)
        raw = b""
    return parse_response(name, raw)