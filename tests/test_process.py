import string
import threading

from asdbatch.ages import UNKNOWN_AGE, Telecom
from asdbatch.batch import DmrsMemberStore
from asdbatch.config import Config, Factory, ServiceConfig
from asdbatch.formats import AsdMember, LGUPUserInfo
from asdbatch.process import ASDProcess, gen_trans_id


class FakeStore:
    def __init__(self, pages):
        self.pages = {k: list(v) for k, v in pages.items()}
        self.updates = []
        self.selects = []
        self.lock = threading.Lock()

    def select_members(self, request_id, telecom, max_members):
        with self.lock:
            self.selects.append((request_id, telecom, max_members))
            queue = self.pages.get(telecom, [])
            return [AsdMember(pnumber=p) for p in queue.pop(0)] if queue else []

    def update_age(self, request_id, pnumber, age):
        with self.lock:
            self.updates.append((request_id, pnumber, age))


def lookup(url, telecom, pnumber):
    if telecom == "2":
        return {"Header": {}, "Body": LGUPUserInfo(age="27")}
    return {}


def make_factory(**flags):
    config = Config(
        saturn=ServiceConfig(middle_conf={"DMRSURL": "http://dmrs.example.com/"},
                             tcrs_url="http://tcrs.example.com/"),
        max_member_list=5,
        delay_sec_lgup=0,
        **flags,
    )
    return Factory(config=config)


def test_batches_follow_enabled_carriers():
    factory = make_factory(saturn_process=True, skt_process=True, lgup_process=True)
    store = FakeStore({})
    batches = ASDProcess(factory, store=store).batches()
    assert [b.telecom for b in batches] == [Telecom.SKT, Telecom.LGUP]
    assert all(b.tcrs_url == "http://tcrs.example.com/" for b in batches)
    assert all(b.max_members == 5 and b.store is store for b in batches)


def test_batches_default_to_dmrs_store():
    factory = make_factory(saturn_process=True, kt_process=True)
    (batch,) = ASDProcess(factory).batches()
    assert isinstance(batch.store, DmrsMemberStore)
    assert batch.store.dmrs_url == "http://dmrs.example.com/"


def test_processing_waits_when_no_service_enabled():
    idled = []
    store = FakeStore({0: [["m"]]})
    factory = make_factory(skt_process=True)
    result = ASDProcess(factory, store=store, idle=lambda: idled.append(True)).processing("r")
    assert result == {}
    assert idled == [True]
    assert store.selects == []


def test_processing_runs_every_batch():
    store = FakeStore({0: [["s1"]], 2: [["l1", "l2"]]})
    factory = make_factory(saturn_process=True, skt_process=True, lgup_process=True)
    proc = ASDProcess(factory, store=store, lookup=lookup, idle=lambda: None)
    for batch in proc.batches():
        assert batch.delay_ms == 0
    result = proc.processing("req-7")
    assert result == {Telecom.SKT: 1, Telecom.LGUP: 2}
    assert sorted(store.updates) == sorted(
        [("req-7", "s1", UNKNOWN_AGE), ("req-7", "l1", 27), ("req-7", "l2", 27)]
    )


def test_processing_generates_request_id():
    store = FakeStore({1: [["k1"]]})
    factory = make_factory(saturn_process=True, kt_process=True)
    ASDProcess(factory, store=store, lookup=lookup).processing()
    request_id = store.selects[0][0]
    assert len(request_id) == 32
    assert set(request_id) <= set(string.hexdigits)


def test_gen_trans_id_is_unique_hex():
    first, second = gen_trans_id(), gen_trans_id()
    assert first != second
    assert set(first + second) <= set(string.hexdigits)