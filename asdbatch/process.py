"""Runs the enabled carriers' age batches side by side."""

from __future__ import annotations

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable

from asdbatch.ages import Telecom
from asdbatch.batch import DmrsMemberStore, Lookup, MemberStore, TelecomBatch
from asdbatch.config import Factory, ServiceConfig
from asdbatch.tcrs import get_member_info

_CARRIERS = (
    (Telecom.SKT, "skt_process", "delay_sec_skt"),
    (Telecom.KT, "kt_process", "delay_sec_kt"),
    (Telecom.LGUP, "lgup_process", "delay_sec_lgup"),
)


def gen_trans_id() -> str:
    """A fresh transaction identifier."""
    return uuid.uuid4().hex


def _wait_forever() -> None:
    threading.Event().wait()


@dataclass
class ASDProcess:
    """The age-check process for the service enabled in the configuration."""

    factory: Factory
    store: MemberStore | None = None
    lookup: Lookup | None = None
    idle: Callable[[], Any] = _wait_forever

    def batches(self) -> list[TelecomBatch]:
        """One batch for each enabled carrier, in the order SKT, KT, LGUP."""
        config = self.factory.config
        service = config.service_config() or ServiceConfig()
        store = self.store if self.store is not None else DmrsMemberStore(service.dmrs_url)
        return [
            TelecomBatch(
                telecom=telecom,
                store=store,
                tcrs_url=service.tcrs_url,
                delay_ms=getattr(config, delay),
                max_members=config.max_member_list,
                lookup=self.lookup or get_member_info,
                logger=self.factory.logger,
            )
            for telecom, enabled, delay in _CARRIERS
            if getattr(config, enabled)
        ]

    def processing(self, request_id: str | None = None) -> dict[Telecom, int]:
        """Run every enabled carrier's batch and wait for all of them.

        With no service enabled, waits in ``idle`` instead so the process
        stays up. Returns how many members each carrier handled.
        """
        request_id = request_id or gen_trans_id()
        service = self.factory.config.active_service()
        if service is None:
            self.factory.print("all processes are disabled")
            self.idle()
            return {}

        self.factory.print(service, "age lookup started")
        batches = self.batches()
        if not batches:
            return {}
        with ThreadPoolExecutor(max_workers=len(batches)) as pool:
            futures = {batch.telecom: pool.submit(batch.process, request_id) for batch in batches}
        return {telecom: future.result() for telecom, future in futures.items()}