"""
Tests for AccountRecordSelector and the LedgerAccount model.

Runs against the in-memory SQLite session from conftest.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from statement_kernel.domain.records import AccountRecord, AccountType
from statement_kernel.exceptions import InvalidAccountRecordError
from statement_kernel.models.account import LedgerAccount
from statement_kernel.selectors.account_selector import AccountRecordSelector


def _store(session, *rows: dict) -> None:
    for position, data in enumerate(rows):
        session.add(LedgerAccount.from_record(AccountRecord.from_dict(data), position=position))
    session.flush()


class TestLedgerAccount:

    def test_round_trip_to_record(self, session):
        _store(session, {
            "id": "1010",
            "subAccountId": "1000",
            "accountType": "cash",
            "accountName": "Checking",
            "balance": "120.50",
        })
        row = session.query(LedgerAccount).one()
        record = row.to_record()
        assert record.account_id == "1010"
        assert record.parent_id == "1000"
        assert record.account_type == AccountType.CASH
        assert record.value("balance") == "120.50"

    def test_account_id_unique(self, session):
        _store(session, {"id": "a", "accountType": "asset"})
        session.add(LedgerAccount(account_id="a", account_type="asset", position=1, fields={}))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_unknown_stored_type_rejected(self, session):
        session.add(LedgerAccount(account_id="x", account_type="equity", position=0, fields={}))
        session.flush()
        with pytest.raises(InvalidAccountRecordError):
            session.query(LedgerAccount).one().to_record()


class TestAccountRecordSelector:

    def test_all_records_in_position_order(self, session):
        _store(
            session,
            {"id": "z", "accountType": "asset"},
            {"id": "a", "accountType": "cash"},
            {"id": "m", "accountType": "income"},
        )
        records = AccountRecordSelector(session).all_records()
        assert [r.account_id for r in records] == ["z", "a", "m"]

    def test_records_of_type_filters(self, session):
        _store(
            session,
            {"id": "c", "accountType": "cash"},
            {"id": "i", "accountType": "income"},
            {"id": "l", "accountType": "liability"},
        )
        selector = AccountRecordSelector(session)
        records = selector.records_of_type(AccountType.CASH, AccountType.LIABILITY)
        assert [r.account_id for r in records] == ["c", "l"]

    def test_records_of_no_type_is_empty(self, session):
        _store(session, {"id": "c", "accountType": "cash"})
        assert AccountRecordSelector(session).records_of_type() == []

    def test_empty_store(self, session):
        selector = AccountRecordSelector(session)
        assert selector.all_records() == []
        assert selector.count() == 0

    def test_selector_does_not_write(self, session):
        _store(session, {"id": "c", "accountType": "cash"})
        selector = AccountRecordSelector(session)
        selector.all_records()
        assert not session.new
        assert not session.dirty
