# In-process sandbox node used to drive the token the way a wallet drives a deployed contract:
# operations are signed by the current signer, injected into a mempool and only applied
# when their confirmation is awaited.

import hashlib
import logging

from fa12_types.errors import LedgerError
from ledger import CheckOrder, Ledger

logger = logging.getLogger(__name__)

# Entry points the token contract exposes
ENTRYPOINTS = ("approve", "transfer")

# Operation status
OPERATION_STATUS_PENDING = "pending"
OPERATION_STATUS_APPLIED = "applied"
OPERATION_STATUS_FAILED = "failed"


class SandboxError(Exception):
    pass


class OperationError(Exception):
    """Raised on confirmation of an operation rejected by the contract."""

    def __init__(self, message, operation=None):
        super().__init__(message)
        self.message = message
        self.operation = operation


class Operation:
    def __init__(self, sandbox, source, destination, entrypoint, args):
        self.sandbox = sandbox
        self.source = source
        self.destination = destination
        self.entrypoint = entrypoint
        self.args = args
        self.status = OPERATION_STATUS_PENDING
        self.error = None
        self.level = None

        counter = len(sandbox.mempool) + len(sandbox.history)
        digest = hashlib.sha256(f"{counter}:{source}:{destination}:{entrypoint}:{args}".encode()).hexdigest()
        self.hash = "o" + digest[:50]

    def confirmation(self):
        """
        Wait until the operation is included in a block. Raises `OperationError`
        carrying the contract's failure string if the operation was rejected.
        """
        if self.status == OPERATION_STATUS_PENDING:
            self.sandbox.bake()
        if self.status == OPERATION_STATUS_FAILED:
            raise OperationError(self.error, operation=self)
        return self


class ContractCall:
    def __init__(self, contract, entrypoint, args):
        self.contract = contract
        self.entrypoint = entrypoint
        self.args = args

    def send(self):
        return self.contract.sandbox.inject(self.contract.address, self.entrypoint, self.args)


class ContractMethods:
    def __init__(self, contract):
        self._contract = contract

    def approve(self, spender, value):
        return ContractCall(self._contract, "approve", (spender, value))

    def transfer(self, from_, to_, value):
        return ContractCall(self._contract, "transfer", (from_, to_, value))


class ContractInstance:
    def __init__(self, sandbox, address, ledger):
        self.sandbox = sandbox
        self.address = address
        self.ledger = ledger
        self.methods = ContractMethods(self)

    def storage(self):
        return self.ledger.storage()


class Sandbox:
    def __init__(self):
        self.contracts = {}
        self.mempool = []
        self.history = []
        self.level = 0
        self.signer = None

    def set_signer(self, account):
        self.signer = account
        logger.debug("signer set to %s", account.pkh)

    def originate(self, storage, check_order=CheckOrder.BALANCE_FIRST):
        ledger = Ledger.from_storage(storage, check_order=check_order)
        address = self._contract_address(len(self.contracts))
        self.contracts[address] = ContractInstance(self, address, ledger)
        logger.info("Contract originated at %s", address)
        return self.contracts[address]

    def at(self, address):
        if address not in self.contracts:
            raise SandboxError(f"No contract at {address}")
        return self.contracts[address]

    def inject(self, destination, entrypoint, args):
        if self.signer is None:
            raise SandboxError("No signer set")
        if destination not in self.contracts:
            raise SandboxError(f"No contract at {destination}")
        if entrypoint not in ENTRYPOINTS:
            raise SandboxError(f"Unknown entrypoint {entrypoint}")
        operation = Operation(self, self.signer.pkh, destination, entrypoint, args)
        self.mempool.append(operation)
        return operation

    def bake(self):
        """Apply every pending operation in injection order and close the block."""
        self.level += 1
        applied = []

        # Operations leave the mempool one at a time, so anything not yet applied stays queued
        while self.mempool:
            operation = self.mempool.pop(0)
            try:
                self._apply(operation)
            except Exception as err:
                operation.status = OPERATION_STATUS_FAILED
                operation.error = repr(err)
                raise
            finally:
                operation.level = self.level
                self.history.append(operation)
                applied.append(operation)

        logger.info("Baked level %d with %d operation(s)", self.level, len(applied))
        return applied

    def _apply(self, operation):
        ledger = self.contracts[operation.destination].ledger
        entrypoint = getattr(ledger, operation.entrypoint)

        try:
            entrypoint(operation.source, *operation.args)
        except (LedgerError, TypeError, ValueError) as err:
            # Ill-typed parameters are rejected like a failing guard, the block still closes
            operation.status = OPERATION_STATUS_FAILED
            operation.error = str(err)
            logger.warning("Operation %s failed with %s", operation.hash, operation.error)
        else:
            operation.status = OPERATION_STATUS_APPLIED

    @staticmethod
    def _contract_address(index):
        digest = hashlib.sha256(f"origination:{index}".encode()).hexdigest()
        return "KT1" + digest[:33]
