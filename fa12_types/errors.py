# Transfer source and destination are the same address
INVALID_SELF_TO_SELF_TRANSFER = "InvalidSelfToSelfTransfer"

# Source account balance is lower than the transferred value
NOT_ENOUGH_BALANCE = "NotEnoughBalance"

# Spender allowance is lower than the transferred value
NOT_ENOUGH_ALLOWANCE = "NotEnoughAllowance"


class LedgerError(Exception):
    """
    Raised when an entry point rejects a call. The message is the failure name,
    so callers can tell the failure kinds apart with ``str(err)``.
    """

    message = None

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def name(self):
        return self.args[0]


class InvalidSelfToSelfTransfer(LedgerError):
    message = INVALID_SELF_TO_SELF_TRANSFER


class NotEnoughBalance(LedgerError):
    message = NOT_ENOUGH_BALANCE


class NotEnoughAllowance(LedgerError):
    message = NOT_ENOUGH_ALLOWANCE
