"""Tests for the account record type and its external-shape parser."""

import pytest

from statement_kernel.domain.records import AccountRecord, AccountType
from statement_kernel.exceptions import InvalidAccountRecordError


class TestAccountRecordFromDict:

    def test_parses_structural_keys(self):
        record = AccountRecord.from_dict(
            {"id": "1010", "subAccountId": "1000", "accountType": "cash", "accountName": "Checking"}
        )
        assert record.account_id == "1010"
        assert record.parent_id == "1000"
        assert record.account_type == AccountType.CASH

    def test_dynamic_columns_land_in_fields(self):
        record = AccountRecord.from_dict(
            {"id": 7, "subAccountId": None, "accountType": "asset", "accountName": "AR", "balance": "12.00"}
        )
        assert record.account_id == "7"
        assert dict(record.fields) == {"accountName": "AR", "balance": "12.00"}
        assert record.value("balance") == "12.00"
        assert record.value("missing") is None

    def test_blank_parent_is_root(self):
        record = AccountRecord.from_dict({"id": "a", "subAccountId": "", "accountType": "asset"})
        assert record.parent_id is None

    def test_missing_id_rejected(self):
        with pytest.raises(InvalidAccountRecordError) as exc_info:
            AccountRecord.from_dict({"accountType": "asset"})
        assert exc_info.value.code == "INVALID_ACCOUNT_RECORD"

    def test_unknown_account_type_rejected(self):
        with pytest.raises(InvalidAccountRecordError) as exc_info:
            AccountRecord.from_dict({"id": "a", "accountType": "equity"})
        assert exc_info.value.account_id == "a"

    def test_fields_are_read_only(self):
        record = AccountRecord.from_dict({"id": "a", "accountType": "asset", "balance": 1})
        with pytest.raises(TypeError):
            record.fields["balance"] = 2  # type: ignore[index]

    def test_records_are_frozen(self):
        record = AccountRecord("a", None, AccountType.ASSET)
        with pytest.raises(AttributeError):
            record.account_id = "b"  # type: ignore[misc]
