# Deploys the FA12 token with two seeded accounts.
#
# Running this file with SmartPy compiles the contract together with its initial storage.

import logging

import config
from helpers.accounts import alice, bob
from ledger import CheckOrder

logger = logging.getLogger(__name__)


def initial_storage(alice_balance=None, bob_balance=None):
    """
    Storage the token is originated with. totalSupply is the sum of the seeded balances.
    """
    if alice_balance is None:
        alice_balance = config.ALICE_BALANCE
    if bob_balance is None:
        bob_balance = config.BOB_BALANCE

    return {
        "totalSupply": alice_balance + bob_balance,
        "ledger": {
            alice.pkh: {"balance": alice_balance, "allowances": {}},
            bob.pkh: {"balance": bob_balance, "allowances": {}},
        },
    }


def deploy(sandbox, storage=None, check_order=None):
    if storage is None:
        storage = initial_storage()
    check_order = CheckOrder(check_order or config.CHECK_ORDER)

    contract = sandbox.originate(storage, check_order=check_order)
    logger.info("FA12token deployed at %s with totalSupply %d", contract.address, storage["totalSupply"])
    return contract


def contract_from_storage(storage):
    """
    Build the SmartPy FA12 contract for an initial storage value.
    """
    import smartpy as sp

    from fa12_token import main

    ledger = {}
    for pkh, account in storage["ledger"].items():
        ledger[sp.address(pkh)] = sp.record(
            balance=sp.nat(account["balance"]),
            allowances={sp.address(spender): sp.nat(value) for spender, value in account["allowances"].items()},
        )

    return main.FA12(ledger=sp.big_map(ledger), total_supply=sp.nat(storage["totalSupply"]))


if "main" in __name__:
    import smartpy as sp

    from fa12_token import main

    logging.basicConfig(level=config.LOG_LEVEL)

    @sp.add_test()
    def test():
        scenario = sp.test_scenario("Deploy FA12token", main)
        storage = initial_storage()

        token = contract_from_storage(storage)
        scenario += token

        scenario.verify(token.data.totalSupply == storage["totalSupply"])
        logger.info("Compiled FA12token with storage %s", storage)
