import pytest
from typing import List

from accounting.controller import AccountingController
from accounting.sampler import ResourceSampler
from accounting.snapshot import Snapshot, TimeVal, Usage
from observability.record import AccessLogRecord
from observability.sink import AccessLogSink
from schemas.request import RequestNode


class ScriptedSampler(ResourceSampler):
    """Returns pre-built snapshots in order instead of asking the OS."""

    def __init__(self, snapshots: List[Snapshot]):
        super().__init__()
        self.snapshots = list(snapshots)
        self.phases: List[str] = []

    def capture(self, phase: str = "begin") -> Snapshot:
        self.phases.append(phase)
        return self.snapshots.pop(0)


class RecordingSink(AccessLogSink):
    def __init__(self):
        self.records: List[AccessLogRecord] = []

    def emit(self, record: AccessLogRecord) -> None:
        self.records.append(record)


def make_snapshot(
    time: float = 0.0,
    utime: float = 0.0,
    stime: float = 0.0,
    inblock: int = 0,
    oublock: int = 0,
    children: Usage = Usage(),
) -> Snapshot:
    return Snapshot(
        time=TimeVal.from_seconds(time),
        self_usage=Usage(
            utime=TimeVal.from_seconds(utime),
            stime=TimeVal.from_seconds(stime),
            inblock=inblock,
            oublock=oublock,
        ),
        children_usage=children,
    )


@pytest.fixture
def begin_snapshot() -> Snapshot:
    return make_snapshot(time=1000.0, utime=0.5, stime=0.1, inblock=10, oublock=5)


@pytest.fixture
def end_snapshot() -> Snapshot:
    return make_snapshot(time=1002.25, utime=0.8, stime=0.15, inblock=12, oublock=9)


@pytest.fixture
def scripted_controller(begin_snapshot, end_snapshot):
    """Controller whose first capture is begin_snapshot and second end_snapshot."""
    sampler = ScriptedSampler([begin_snapshot, end_snapshot])
    return AccountingController(sampler=sampler, reaper=None)


@pytest.fixture
def redirect_chain():
    """
    root -> redirect1 -> redirect2 (internal redirects),
    with a sub-request generated by redirect1.
    """
    root = RequestNode(uri="/start")
    redirect1 = RequestNode(uri="/first", previous=root)
    root.next = redirect1
    redirect2 = RequestNode(uri="/second", previous=redirect1)
    redirect1.next = redirect2
    sub = RequestNode(uri="/include", parent=redirect1)
    return {"root": root, "redirect1": redirect1, "redirect2": redirect2, "sub": sub}


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()
