"""Unit tests for the Account entity."""

from sms_confirmable.domain.entities.account import Account


def test_defaults():
    account = Account()

    assert account.id is None
    assert account.persisted is False
    assert account.confirmed_at is None
    assert account.confirmation_token is None
    assert account.lock_version == 0


def test_persisted_once_id_is_assigned():
    assert Account(id=1).persisted is True


def test_mask_phone_number():
    account = Account(phone_number="+15550100")

    assert account.mask_phone_number() == "*****0100"
    assert account.mask_phone_number("+15550199") == "*****0199"
    assert Account().mask_phone_number() is None


def test_table_constraints():
    table = Account.__table__

    assert table.name == "accounts"
    assert table.c.phone_number.unique is True
    assert table.c.confirmation_token.unique is True
    assert table.c.unconfirmed_phone_number.unique is not True
