# Fungible Assets - FA12
# Inspired by https://gitlab.com/tzip/tzip/blob/master/A/FA1.2.md

# The ledger keeps one record per address holding its balance and the allowances it granted.
# Supply is fixed at origination: there is no mint, burn, pause or administrator.

import smartpy as sp

from helpers import accounts as Accounts

ALICE = sp.address(Accounts.alice.pkh)
BOB = sp.address(Accounts.bob.pkh)
JOHN = sp.address(Accounts.JOHN)


@sp.module
def main():
    # params:
    #   balance     : Number of tokens held by the address
    #   allowances  : mapping of spender address => number of tokens the spender may transfer
    account_type: type = sp.record(
        balance=sp.nat,
        allowances=sp.map[sp.address, sp.nat],
    ).layout(("balance", "allowances"))

    class FA12(sp.Contract):
        def __init__(self, ledger, total_supply):
            sp.cast(ledger, sp.big_map[sp.address, account_type])
            sp.cast(total_supply, sp.nat)
            self.data.ledger = ledger
            self.data.totalSupply = total_supply

        @sp.entrypoint
        def transfer(self, params):
            sp.cast(
                params,
                sp.record(from_=sp.address, to_=sp.address, value=sp.nat).layout(
                    ("from_ as from", ("to_ as to", "value"))
                ),
            )

            # An address may not transfer to itself, whoever the sender is
            assert params.from_ != params.to_, "InvalidSelfToSelfTransfer"

            if not self.data.ledger.contains(params.from_):
                self.data.ledger[params.from_] = sp.record(balance=0, allowances={})
            if not self.data.ledger.contains(params.to_):
                self.data.ledger[params.to_] = sp.record(balance=0, allowances={})

            # Balance is checked before the allowance
            assert self.data.ledger[params.from_].balance >= params.value, "NotEnoughBalance"

            if params.from_ != sp.sender:
                allowance = self.data.ledger[params.from_].allowances.get(sp.sender, default=0)
                assert allowance >= params.value, "NotEnoughAllowance"
                self.data.ledger[params.from_].allowances[sp.sender] = sp.as_nat(allowance - params.value)

            self.data.ledger[params.from_].balance = sp.as_nat(
                self.data.ledger[params.from_].balance - params.value
            )
            self.data.ledger[params.to_].balance += params.value

        @sp.entrypoint
        def approve(self, params):
            sp.cast(params, sp.record(spender=sp.address, value=sp.nat).layout(("spender", "value")))
            if not self.data.ledger.contains(sp.sender):
                self.data.ledger[sp.sender] = sp.record(balance=0, allowances={})
            self.data.ledger[sp.sender].allowances[params.spender] = params.value

        @sp.onchain_view()
        def getBalance(self, owner):
            sp.cast(owner, sp.address)
            if self.data.ledger.contains(owner):
                return self.data.ledger[owner].balance
            else:
                return sp.nat(0)

        @sp.onchain_view()
        def getAllowance(self, params):
            sp.cast(params, sp.record(owner=sp.address, spender=sp.address).layout(("owner", "spender")))
            if self.data.ledger.contains(params.owner):
                return self.data.ledger[params.owner].allowances.get(params.spender, default=0)
            else:
                return sp.nat(0)

        @sp.onchain_view()
        def getTotalSupply(self):
            return self.data.totalSupply


def initial_ledger(balances):
    """
    Helper function to build the ledger big_map from a mapping of pkh => balance.
    """
    return sp.big_map(
        {sp.address(pkh): sp.record(balance=sp.nat(balance), allowances={}) for pkh, balance in balances.items()}
    )


if "main" in __name__:

    def deploy(scenario, alice_balance=200, bob_balance=150):
        balances = {Accounts.alice.pkh: alice_balance, Accounts.bob.pkh: bob_balance}
        token = main.FA12(
            ledger=initial_ledger(balances),
            total_supply=sp.nat(sum(balances.values())),
        )
        scenario += token
        return token

    ###########
    # approve
    ###########

    @sp.add_test()
    def test_approve_sets_allowance():
        scenario = sp.test_scenario("approve sets the allowance of a spender", main)
        token = deploy(scenario)

        # ALICE approves 100 tokens for BOB
        token.approve(sp.record(spender=BOB, value=100), _sender=ALICE)
        scenario.verify(token.data.ledger[ALICE].allowances[BOB] == 100)

        # A second approval replaces the first one
        token.approve(sp.record(spender=BOB, value=30), _sender=ALICE)
        scenario.verify(token.data.ledger[ALICE].allowances[BOB] == 30)

        # Balances are untouched
        scenario.verify(token.data.ledger[ALICE].balance == 200)
        scenario.verify(token.data.ledger[BOB].balance == 150)

    @sp.add_test()
    def test_approve_adds_unknown_sender():
        scenario = sp.test_scenario("approve adds the sender to the ledger", main)
        token = deploy(scenario)

        token.approve(sp.record(spender=ALICE, value=5), _sender=JOHN)

        scenario.verify(token.data.ledger[JOHN].balance == 0)
        scenario.verify(token.data.ledger[JOHN].allowances[ALICE] == 5)

    ###########
    # transfer
    ###########

    @sp.add_test()
    def test_transfer_moves_tokens():
        scenario = sp.test_scenario("transfer moves tokens from sender", main)
        token = deploy(scenario)

        # ALICE transfers 10 tokens to BOB
        token.transfer(sp.record(from_=ALICE, to_=BOB, value=10), _sender=ALICE)

        scenario.verify(token.data.ledger[ALICE].balance == 190)
        scenario.verify(token.data.ledger[BOB].balance == 160)
        scenario.verify(token.data.totalSupply == 350)

    @sp.add_test()
    def test_transfer_to_new_address():
        scenario = sp.test_scenario("transfer adds the receiver to the ledger", main)
        token = deploy(scenario)

        token.transfer(sp.record(from_=BOB, to_=JOHN, value=150), _sender=BOB)

        scenario.verify(token.data.ledger[BOB].balance == 0)
        scenario.verify(token.data.ledger[JOHN].balance == 150)

    @sp.add_test()
    def test_transfer_rejects_self_transfer():
        scenario = sp.test_scenario("transfer fails for a self to self transfer", main)
        token = deploy(scenario)

        token.transfer(
            sp.record(from_=ALICE, to_=ALICE, value=100),
            _sender=ALICE,
            _valid=False,
            _exception="InvalidSelfToSelfTransfer",
        )

        # Rejected even when the value exceeds the balance
        token.transfer(
            sp.record(from_=ALICE, to_=ALICE, value=1000),
            _sender=ALICE,
            _valid=False,
            _exception="InvalidSelfToSelfTransfer",
        )

    @sp.add_test()
    def test_transfer_rejects_insufficient_balance():
        scenario = sp.test_scenario("transfer fails if balance is insufficient", main)
        token = deploy(scenario)

        token.transfer(
            sp.record(from_=BOB, to_=ALICE, value=151),
            _sender=BOB,
            _valid=False,
            _exception="NotEnoughBalance",
        )

        scenario.verify(token.data.ledger[BOB].balance == 150)

    @sp.add_test()
    def test_delegated_transfer():
        scenario = sp.test_scenario("transfer lets a spender use its allowance", main)
        token = deploy(scenario, alice_balance=150, bob_balance=0)

        token.approve(sp.record(spender=BOB, value=100), _sender=ALICE)

        # Value above both ALICE's balance and BOB's allowance
        token.transfer(
            sp.record(from_=ALICE, to_=BOB, value=300),
            _sender=BOB,
            _valid=False,
            _exception="NotEnoughBalance",
        )

        # Value within ALICE's balance but above BOB's allowance
        token.transfer(
            sp.record(from_=ALICE, to_=BOB, value=150),
            _sender=BOB,
            _valid=False,
            _exception="NotEnoughAllowance",
        )

        # BOB spends half of his allowance
        token.transfer(sp.record(from_=ALICE, to_=BOB, value=50), _sender=BOB)

        scenario.verify(token.data.ledger[ALICE].allowances[BOB] == 50)
        scenario.verify(token.data.ledger[ALICE].balance == 100)
        scenario.verify(token.data.ledger[BOB].balance == 50)
        scenario.verify(token.data.totalSupply == 150)

    @sp.add_test()
    def test_delegated_transfer_without_approval():
        scenario = sp.test_scenario("transfer fails for a spender without allowance", main)
        token = deploy(scenario)

        token.transfer(
            sp.record(from_=ALICE, to_=JOHN, value=1),
            _sender=JOHN,
            _valid=False,
            _exception="NotEnoughAllowance",
        )

        # A zero value needs no allowance
        token.transfer(sp.record(from_=ALICE, to_=JOHN, value=0), _sender=JOHN)

        scenario.verify(token.data.ledger[ALICE].allowances[JOHN] == 0)
        scenario.verify(token.data.ledger[ALICE].balance == 200)

    ########
    # Views
    ########

    @sp.add_test()
    def test_views():
        scenario = sp.test_scenario("views return balances, allowances and supply", main)
        token = deploy(scenario)

        token.approve(sp.record(spender=BOB, value=100), _sender=ALICE)

        scenario.verify(sp.View(token, "getBalance")(ALICE) == 200)
        scenario.verify(sp.View(token, "getBalance")(JOHN) == 0)
        scenario.verify(sp.View(token, "getAllowance")(sp.record(owner=ALICE, spender=BOB)) == 100)
        scenario.verify(sp.View(token, "getAllowance")(sp.record(owner=JOHN, spender=BOB)) == 0)
        scenario.verify(sp.View(token, "getTotalSupply")(()) == 350)
