from datetime import datetime

import pytest

from sql_localizer.models import Entry


def make_entry(entry_id="entry-1", key1="BANK", key2="DEPOSIT", **translations):
    return Entry(
        id=entry_id,
        created_at=datetime(2026, 1, 2, 3, 4, 5),
        key1=key1,
        key2=key2,
        translations=translations or {"en": "Deposit", "cn": "充值"},
    )


@pytest.fixture
def deposit_entry():
    return make_entry()
