"""
Transaction Service Tests

Auto-save arithmetic and ledger bookkeeping for credits, debits and batches.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select

from kosh.core.exceptions import ValidationException
from kosh.models.settings import UserSettings
from kosh.models.transaction import TransactionType
from kosh.models.treasury import EntryKind, TreasuryEntry
from kosh.services.transaction_service import TransactionService, compute_auto_save


def make_settings(rate="3.5", threshold="100") -> UserSettings:
    return UserSettings(
        user_id=1,
        auto_save_rate=Decimal(rate),
        weekly_top_up=Decimal("500"),
        min_threshold=Decimal(threshold),
        round_ups_enabled=True,
    )


@pytest.mark.parametrize(
    "amount,rate,threshold,expected",
    [
        ("1000", "3.5", "100", "35"),
        ("500", "3.5", "100", "18"),     # 17.5 rounds half up
        ("99", "3.5", "100", "0"),       # below threshold
        ("100", "3.5", "100", "4"),      # threshold is inclusive
        ("1000", "0", "100", "0"),
        ("10", "3.5", "100", "0"),
        ("200", "100", "0", "200"),
    ],
)
def test_compute_auto_save(amount, rate, threshold, expected):
    _, saved = compute_auto_save(Decimal(amount), make_settings(rate, threshold))
    assert saved == Decimal(expected)


def test_compute_auto_save_without_settings_saves_nothing():
    assert compute_auto_save(Decimal("1000"), None) == (Decimal("0"), Decimal("0"))


async def test_credit_auto_saves_into_treasury(test_db, demo_user):
    """A qualifying credit moves the saved share into the treasury with a linked save entry."""
    # Arrange
    service = TransactionService(test_db)

    # Act
    transaction, saved, balance = await service.credit(demo_user.id, 1000, "Order #1")

    # Assert
    assert transaction.type == TransactionType.CREDIT
    assert saved == Decimal("35")
    assert balance == Decimal("35.00")

    entries = (await test_db.execute(select(TreasuryEntry))).scalars().all()
    assert len(entries) == 1
    assert entries[0].kind == EntryKind.SAVE
    assert entries[0].transaction_id == transaction.id
    assert entries[0].description == "Auto-saved 3.5% of ₹1000"


async def test_credit_below_threshold_leaves_treasury_untouched(test_db, demo_user):
    service = TransactionService(test_db)

    _, saved, balance = await service.credit(demo_user.id, 50)

    assert saved == Decimal("0")
    assert balance == Decimal("0")
    assert (await test_db.execute(select(TreasuryEntry))).scalars().all() == []


@pytest.mark.parametrize("amount", [0, -10, None, "abc", True])
async def test_credit_rejects_invalid_amount(test_db, demo_user, amount):
    service = TransactionService(test_db)

    with pytest.raises(ValidationException) as exc_info:
        await service.credit(demo_user.id, amount)

    assert exc_info.value.message == "amount must be a positive number"
    assert await service.list_recent(demo_user.id) == []


async def test_debit_does_not_touch_treasury(test_db, demo_user):
    service = TransactionService(test_db)

    transaction = await service.debit(demo_user.id, 400, "Supplier")

    assert transaction.type == TransactionType.DEBIT
    assert await service.treasury.get_balance(demo_user.id) == Decimal("0")


async def test_batch_credit_skips_invalid_entries(test_db, demo_user):
    """Invalid entries are counted as skipped; valid ones become credits."""
    service = TransactionService(test_db)

    processed, skipped, saved, balance = await service.batch_credit(
        demo_user.id, [1000, "abc", -5, 0, 500, "200", None]
    )

    assert (processed, skipped) == (3, 4)
    # 35 + 18 + 7
    assert saved == Decimal("60")
    assert balance == Decimal("60.00")

    history = await service.list_recent(demo_user.id)
    assert len(history) == 3
    assert {tx.description for tx in history} == {"Batch credit"}


@pytest.mark.parametrize("amounts", [[], None, "1000", {"a": 1}])
async def test_batch_credit_requires_non_empty_list(test_db, demo_user, amounts):
    service = TransactionService(test_db)

    with pytest.raises(ValidationException):
        await service.batch_credit(demo_user.id, amounts)


async def test_list_recent_is_newest_first(test_db, demo_user):
    service = TransactionService(test_db)
    first = await service.credit(demo_user.id, 10)
    second = await service.debit(demo_user.id, 20)

    history = await service.list_recent(demo_user.id)

    assert [tx.id for tx in history] == [second.id, first[0].id]
