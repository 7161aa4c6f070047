"""Calls to the member database relay (DMRS) used by the age batch."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable

from asdbatch.formats import AsdMember
from asdbatch.tcrs import Sender, TcrsError, send_json

SELECT_QUERY = "DBMW_00010"
INSERT_QUERY = "DBMW_00020"
EXECUTE_QUERY = "DBMW_00030"

CALL_APP = "ASD"


class DmrsError(Exception):
    """A DMRS request failed or its reply could not be understood."""


@dataclass(frozen=True)
class DmrsHeader:
    """Request header naming the query to run and the kind of command."""

    transaction_id: str
    query: str
    cmd_type: str
    call_app: str = CALL_APP
    xml_name: str = CALL_APP

    def to_dict(self) -> dict[str, str]:
        return {
            "TransactionID": self.transaction_id,
            "CallApp": self.call_app,
            "XMLName": self.xml_name,
            "CmdType": self.cmd_type,
            "Query": self.query,
        }


def make_header(request_id: str, query: str, cmd_type: str) -> DmrsHeader:
    """Header for running ``query`` as a ``cmd_type`` command."""
    return DmrsHeader(transaction_id=request_id, query=query, cmd_type=cmd_type)


def dmrs_call(
    dmrs_url: str,
    header: DmrsHeader,
    params: Iterable[Any],
    sender: Sender | None = None,
) -> tuple[dict[str, Any], Any]:
    """Run a query and return the reply's header and body."""
    send = sender or send_json
    payload = {"Header": header.to_dict(), "Data": list(params)}
    try:
        raw = send(dmrs_url, payload)
    except TcrsError as exc:
        raise DmrsError(str(exc)) from exc
    try:
        doc = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise DmrsError(f"malformed reply from {dmrs_url}") from exc
    if not isinstance(doc, dict):
        raise DmrsError(f"reply from {dmrs_url} is not a JSON object")
    rsp_header = doc.get("Header")
    return (rsp_header if isinstance(rsp_header, dict) else {}), doc.get("Body")


def select_asd_members(
    request_id: str,
    dmrs_url: str,
    telecom: int,
    max_members: int,
    sender: Sender | None = None,
) -> list[AsdMember]:
    """Up to ``max_members`` members of ``telecom`` whose age is to be checked."""
    header = make_header(request_id, "SelectAsdMember", SELECT_QUERY)
    _, body = dmrs_call(dmrs_url, header, [telecom, max_members], sender)
    if body is None:
        return []
    if not isinstance(body, list):
        raise DmrsError("member list reply body is not a list")
    try:
        return [AsdMember.from_dict(row) for row in body]
    except ValueError as exc:
        raise DmrsError(f"malformed member record: {exc}") from exc


def update_age(
    request_id: str,
    dmrs_url: str,
    pnumber: str,
    age: int,
    sender: Sender | None = None,
) -> dict[str, Any]:
    """Store a member's age; returns the reply header."""
    header = make_header(request_id, "UpdateAgeCheck", EXECUTE_QUERY)
    rsp_header, _ = dmrs_call(dmrs_url, header, [age, pnumber], sender)
    return rsp_header