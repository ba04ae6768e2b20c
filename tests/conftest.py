"""Shared fixtures. No test touches the network."""

import pytest

from ledger_sync.config import LedgerSettings
from ledger_sync.models.entry import Entry, EntryKind
from ledger_sync.services.storage import LocalStore, MemoryKeyValueStore


@pytest.fixture
def settings(tmp_path):
    return LedgerSettings(
        data_dir=tmp_path,
        cors_proxies=["https://api.cors.lol/?url=", "https://corsproxy.io/?url="],
        proxied_hosts=["script.google.com"],
        proxy_markers=["corsproxy.io", "cors.sh", "cors.lol"],
    )


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return LocalStore(kv)


@pytest.fixture
def lunch():
    return Entry(
        id="e-lunch",
        description="Lunch",
        amount=120,
        kind=EntryKind.EXPENSE,
        category="飲食",
        date="2024-05-01",
    )


@pytest.fixture
def salary():
    return Entry(
        id="e-salary",
        description="Salary",
        amount=50000,
        kind=EntryKind.INCOME,
        category="薪水",
        date="2024-05-01",
    )
