# FA1.2 token ledger
# Mirrors the entry points of the FA12 contract in fa12_token.py, with the
# authenticated caller passed explicitly to every entry point instead of sp.sender.

import copy
import enum
import logging

from fa12_types import errors as Errors
from fa12_types.account import Account

logger = logging.getLogger(__name__)


class CheckOrder(enum.Enum):
    """Which guard a delegated transfer evaluates first when both would fail."""

    BALANCE_FIRST = "balance"
    ALLOWANCE_FIRST = "allowance"


def _check_identity(identity, what):
    if not isinstance(identity, str) or not identity:
        raise TypeError(f"{what} must be a non-empty address string")


def _check_amount(amount, what="amount"):
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"{what} must be an int")
    if amount < 0:
        raise ValueError(f"{what} must be non-negative")


class Ledger:
    def __init__(self, total_supply=0, accounts=None, check_order=CheckOrder.BALANCE_FIRST):
        _check_amount(total_supply, "totalSupply")
        self.check_order = CheckOrder(check_order)
        self.total_supply = total_supply
        self.accounts = {}

        for identity, account in (accounts or {}).items():
            _check_identity(identity, "account")
            if not isinstance(account, Account):
                account = Account.from_storage(account)
            _check_amount(account.balance, "balance")
            for spender, allowance in account.allowances.items():
                _check_identity(spender, "spender")
                _check_amount(allowance, "allowance")
            self.accounts[identity] = copy.deepcopy(account)

        held = sum(account.balance for account in self.accounts.values())
        if held != total_supply:
            raise ValueError(f"totalSupply {total_supply} does not match the sum of balances {held}")

    @classmethod
    def from_storage(cls, storage, check_order=CheckOrder.BALANCE_FIRST):
        """
        Build a ledger from an initial storage value shaped as
        ``{"totalSupply": int, "ledger": {address: {"balance": int, "allowances": {address: int}}}}``.
        """
        return cls(
            total_supply=storage["totalSupply"],
            accounts=storage.get("ledger", {}),
            check_order=check_order,
        )

    ###############
    # Entry points
    ###############

    def transfer(self, caller, from_, to_, value):
        _check_identity(caller, "caller")
        _check_identity(from_, "from")
        _check_identity(to_, "to")
        _check_amount(value, "value")

        if from_ == to_:
            raise Errors.InvalidSelfToSelfTransfer()

        source = self.accounts.get(from_, Account())
        delegated = caller != from_

        guards = [self._verify_balance, self._verify_allowance]
        if self.check_order is CheckOrder.ALLOWANCE_FIRST:
            guards.reverse()
        for guard in guards:
            guard(source, caller, value, delegated)

        # Every guard has passed, nothing below can fail
        self._add_address_if_necessary(from_)
        self._add_address_if_necessary(to_)
        self.accounts[from_].balance -= value
        self.accounts[to_].balance += value

        if delegated:
            self.accounts[from_].allowances[caller] = source.allowances.get(caller, 0) - value

        logger.debug("transfer %s -> %s of %d by %s", from_, to_, value, caller)

    def approve(self, caller, spender, value):
        _check_identity(caller, "caller")
        _check_identity(spender, "spender")
        _check_amount(value, "value")

        self._add_address_if_necessary(caller)
        self.accounts[caller].allowances[spender] = value

        logger.debug("approve %s to spend %d of %s", spender, value, caller)

    ##########
    # Getters
    ##########

    def get_balance(self, owner):
        if owner in self.accounts:
            return self.accounts[owner].balance
        return 0

    def get_allowance(self, owner, spender):
        if owner in self.accounts:
            return self.accounts[owner].allowances.get(spender, 0)
        return 0

    def get_total_supply(self):
        return self.total_supply

    def get_account(self, identity):
        # None for an address never referenced, as opposed to a present zero-balance account
        account = self.accounts.get(identity)
        return copy.deepcopy(account) if account is not None else None

    def storage(self):
        return {
            "totalSupply": self.total_supply,
            "ledger": {identity: account.to_storage() for identity, account in self.accounts.items()},
        }

    def __contains__(self, identity):
        return identity in self.accounts

    ##########
    # Helpers
    ##########

    def _add_address_if_necessary(self, identity):
        if identity not in self.accounts:
            self.accounts[identity] = Account()

    @staticmethod
    def _verify_balance(source, caller, value, delegated):
        if source.balance < value:
            raise Errors.NotEnoughBalance()

    @staticmethod
    def _verify_allowance(source, caller, value, delegated):
        if delegated and source.allowances.get(caller, 0) < value:
            raise Errors.NotEnoughAllowance()
