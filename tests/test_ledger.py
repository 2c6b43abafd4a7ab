import pytest

from fa12_types import errors as Errors
from fa12_types.account import Account
from helpers.accounts import JOHN, alice, bob
from ledger import CheckOrder, Ledger


ALICE = alice.pkh
BOB = bob.pkh


def delegated_ledger(check_order=CheckOrder.BALANCE_FIRST):
    # ALICE holds 150 tokens and lets BOB spend 100 of them
    ledger = Ledger(
        total_supply=150,
        accounts={ALICE: {"balance": 150, "allowances": {}}, BOB: {"balance": 0, "allowances": {}}},
        check_order=check_order,
    )
    ledger.approve(ALICE, BOB, 100)
    return ledger


##########
# storage
##########


def test_initial_storage_is_seeded(ledger):
    assert ledger.get_total_supply() == 350
    assert ledger.get_balance(ALICE) == 200
    assert ledger.get_balance(BOB) == 150


def test_total_supply_must_match_balances():
    with pytest.raises(ValueError):
        Ledger(total_supply=10, accounts={ALICE: {"balance": 5, "allowances": {}}})


def test_negative_initial_balance_is_rejected():
    with pytest.raises(ValueError):
        Ledger(total_supply=0, accounts={ALICE: Account(balance=-1)})


def test_storage_is_a_snapshot(ledger):
    storage = ledger.storage()
    ledger.transfer(ALICE, ALICE, BOB, 10)

    assert storage["ledger"][ALICE]["balance"] == 200
    assert ledger.storage()["ledger"][ALICE]["balance"] == 190


def test_absent_and_empty_accounts_differ(ledger):
    assert ledger.get_account(JOHN) is None
    assert JOHN not in ledger

    ledger.approve(JOHN, ALICE, 0)

    assert ledger.get_account(JOHN) == Account(balance=0, allowances={ALICE: 0})
    assert JOHN in ledger


##########
# approve
##########


def test_approve_sets_allowance(ledger):
    ledger.approve(ALICE, BOB, 100)

    assert ledger.get_allowance(ALICE, BOB) == 100
    assert ledger.get_balance(ALICE) == 200


def test_approve_replaces_allowance(ledger):
    ledger.approve(ALICE, BOB, 100)
    ledger.approve(ALICE, BOB, 40)

    assert ledger.get_allowance(ALICE, BOB) == 40


def test_approve_rejects_negative_value(ledger):
    with pytest.raises(ValueError):
        ledger.approve(ALICE, BOB, -1)


def test_getters_default_to_zero(ledger):
    assert ledger.get_balance(JOHN) == 0
    assert ledger.get_allowance(JOHN, ALICE) == 0
    assert ledger.get_allowance(ALICE, JOHN) == 0


###########
# transfer
###########


def test_transfer_moves_tokens(ledger):
    ledger.transfer(ALICE, ALICE, BOB, 10)

    assert ledger.get_balance(ALICE) == 190
    assert ledger.get_balance(BOB) == 160
    assert ledger.get_total_supply() == 350


def test_transfer_creates_receiver(ledger):
    ledger.transfer(BOB, BOB, JOHN, 150)

    assert ledger.get_balance(BOB) == 0
    assert ledger.get_account(JOHN) == Account(balance=150)


@pytest.mark.parametrize("value", [0, 100, 1000])
def test_self_transfer_is_rejected(ledger, value):
    with pytest.raises(Errors.InvalidSelfToSelfTransfer) as err:
        ledger.transfer(ALICE, ALICE, ALICE, value)

    assert str(err.value) == "InvalidSelfToSelfTransfer"


def test_self_transfer_is_rejected_for_spender(ledger):
    ledger.approve(ALICE, BOB, 100)

    with pytest.raises(Errors.InvalidSelfToSelfTransfer):
        ledger.transfer(BOB, ALICE, ALICE, 10)


def test_transfer_rejects_insufficient_balance(ledger):
    with pytest.raises(Errors.NotEnoughBalance) as err:
        ledger.transfer(BOB, BOB, ALICE, 151)

    assert str(err.value) == "NotEnoughBalance"
    assert ledger.get_balance(BOB) == 150


def test_transfer_from_absent_account(ledger):
    with pytest.raises(Errors.NotEnoughBalance):
        ledger.transfer(JOHN, JOHN, ALICE, 1)

    assert JOHN not in ledger


def test_delegated_transfer_above_balance_and_allowance():
    ledger = delegated_ledger()

    with pytest.raises(Errors.NotEnoughBalance):
        ledger.transfer(BOB, ALICE, BOB, 300)


def test_delegated_transfer_above_allowance():
    ledger = delegated_ledger()

    with pytest.raises(Errors.NotEnoughAllowance) as err:
        ledger.transfer(BOB, ALICE, BOB, 150)

    assert str(err.value) == "NotEnoughAllowance"


def test_delegated_transfer_without_approval(ledger):
    with pytest.raises(Errors.NotEnoughAllowance):
        ledger.transfer(JOHN, ALICE, JOHN, 1)


def test_delegated_zero_transfer_without_approval(ledger):
    ledger.transfer(JOHN, ALICE, JOHN, 0)

    assert ledger.get_allowance(ALICE, JOHN) == 0
    assert ledger.get_balance(ALICE) == 200
    assert ledger.get_account(JOHN) == Account(balance=0)


def test_delegated_transfer_spends_allowance():
    ledger = delegated_ledger()

    ledger.transfer(BOB, ALICE, BOB, 50)

    assert ledger.get_allowance(ALICE, BOB) == 50
    assert ledger.get_balance(ALICE) == 100
    assert ledger.get_balance(BOB) == 50
    assert ledger.get_total_supply() == 150


def test_delegated_transfer_to_third_party():
    ledger = delegated_ledger()

    ledger.transfer(BOB, ALICE, JOHN, 100)

    assert ledger.get_allowance(ALICE, BOB) == 0
    assert ledger.get_balance(JOHN) == 100


def test_allowance_first_order():
    ledger = delegated_ledger(check_order=CheckOrder.ALLOWANCE_FIRST)

    with pytest.raises(Errors.NotEnoughAllowance):
        ledger.transfer(BOB, ALICE, BOB, 300)


def test_check_order_from_config_value():
    assert Ledger(check_order="allowance").check_order is CheckOrder.ALLOWANCE_FIRST


def test_failed_transfer_leaves_storage_untouched():
    ledger = delegated_ledger()
    before = ledger.storage()

    for value in (150, 300):
        with pytest.raises(Errors.LedgerError):
            ledger.transfer(BOB, ALICE, BOB, value)

    assert ledger.storage() == before


def test_balances_always_sum_to_total_supply(ledger):
    ledger.approve(ALICE, BOB, 80)
    ledger.transfer(ALICE, ALICE, BOB, 10)
    ledger.transfer(BOB, ALICE, JOHN, 80)
    ledger.transfer(JOHN, JOHN, BOB, 30)

    storage = ledger.storage()
    assert sum(account["balance"] for account in storage["ledger"].values()) == storage["totalSupply"]
    assert all(account["balance"] >= 0 for account in storage["ledger"].values())


@pytest.mark.parametrize("value", [-1, 1.5, True, "10"])
def test_transfer_rejects_invalid_value(ledger, value):
    with pytest.raises((TypeError, ValueError)):
        ledger.transfer(ALICE, ALICE, BOB, value)
