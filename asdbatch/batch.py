"""Per-carrier batch that looks up members' ages and stores them."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from asdbatch import dmrs
from asdbatch.ages import Telecom, extract_age
from asdbatch.dmrs import DmrsError
from asdbatch.formats import AsdMember
from asdbatch.tcrs import Sender, get_member_info

_log = logging.getLogger(__name__)

Lookup = Callable[[str, str, str], Any]


class MemberStore(Protocol):
    """Where members awaiting an age check come from and ages go to."""

    def select_members(self, request_id: str, telecom: int, max_members: int) -> list[AsdMember]:
        """Up to ``max_members`` members of ``telecom`` awaiting an age check."""

    def update_age(self, request_id: str, pnumber: str, age: int) -> None:
        """Record ``age`` for the member with number ``pnumber``."""


@dataclass
class DmrsMemberStore:
    """Member store reached through the DMRS relay."""

    dmrs_url: str
    sender: Sender | None = None

    def select_members(self, request_id: str, telecom: int, max_members: int) -> list[AsdMember]:
        return dmrs.select_asd_members(request_id, self.dmrs_url, telecom, max_members, self.sender)

    def update_age(self, request_id: str, pnumber: str, age: int) -> None:
        dmrs.update_age(request_id, self.dmrs_url, pnumber, age, self.sender)


@dataclass
class TelecomBatch:
    """Checks the ages of one carrier's members until none are left."""

    telecom: Telecom
    store: MemberStore
    tcrs_url: str
    delay_ms: int = 0
    max_members: int = 0
    lookup: Lookup = get_member_info
    sleep: Callable[[float], Any] = time.sleep
    logger: logging.Logger | None = None

    @property
    def _logger(self) -> logging.Logger:
        return self.logger or _log

    def run_once(self, request_id: str) -> list[AsdMember]:
        """Handle one page of members; returns them with their new ages."""
        carrier = Telecom(self.telecom)
        try:
            members = self.store.select_members(request_id, int(carrier), self.max_members)
        except DmrsError as exc:
            self._logger.error("%s: member selection failed: %s", carrier.name, exc)
            return []
        for member in members:
            self.sleep(self.delay_ms / 1000)
            data = self.lookup(self.tcrs_url, str(int(carrier)), member.pnumber)
            member.age = extract_age(data, carrier)
            try:
                self.store.update_age(request_id, member.pnumber, member.age)
            except DmrsError as exc:
                self._logger.error("%s: age update failed: %s", carrier.name, exc)
        return members

    def process(self, request_id: str) -> int:
        """Run pages until the store has no more members; returns how many were handled."""
        total = 0
        while members := self.run_once(request_id):
            total += len(members)
        self._logger.info("***************** %s lookup finished *****************", Telecom(self.telecom).name)
        return total