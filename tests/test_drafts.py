"""Tests for transaction form drafts."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from ledgerview.errors import ValidationFailure
from ledgerview.services.drafts import TransactionDraft
from tests.conftest import FOOD, make_tx


def test_payload_shape():
    draft = TransactionDraft(
        type="income",
        amount="1500.25",
        description="  March salary ",
        category_id="c-salary",
        transaction_date=date(2024, 3, 1),
    )

    assert draft.to_payload() == {
        "type": "income",
        "amount": 1500.25,
        "description": "March salary",
        "category_id": "c-salary",
        "transaction_date": "2024-03-01",
    }


def test_blank_optional_fields_are_sent_as_null():
    payload = TransactionDraft(amount="3", description="   ", category_id="", transaction_date="2024-03-01").to_payload()

    assert payload["description"] is None
    assert payload["category_id"] is None


def test_prefill_from_existing_transaction():
    tx = make_tx(42, category=FOOD, description="Lunch", when=date(2024, 1, 5), id="t-1")

    draft = TransactionDraft.from_transaction(tx)

    assert draft.amount == Decimal("42")
    assert draft.category_id == FOOD.id
    assert draft.description == "Lunch"
    assert draft.transaction_date == date(2024, 1, 5)


def test_new_draft_defaults_to_todays_expense():
    draft = TransactionDraft()

    assert draft.type == "expense"
    assert draft.transaction_date == date.today()


@pytest.mark.parametrize(
    "fields, message",
    [
        ({"type": "transfer", "amount": "5"}, "Choose either income or expense"),
        ({"amount": ""}, "Amount must be greater than zero"),
        ({"amount": "0"}, "Amount must be greater than zero"),
        ({"amount": "-3"}, "Amount must be greater than zero"),
        ({"amount": "ten"}, "Amount must be greater than zero"),
        ({"amount": "5", "transaction_date": "03/01/2024"}, "Use YYYY-MM-DD for the date"),
        ({"amount": "5", "transaction_date": None}, "Please select a date"),
    ],
)
def test_validation_messages(fields, message):
    with pytest.raises(ValidationFailure) as excinfo:
        TransactionDraft(**fields).validate()

    assert excinfo.value.user_message() == message
