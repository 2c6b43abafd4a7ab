from typing import NamedTuple

# This file contains the flextesa sandbox accounts used by the migration and the tests.


class SandboxAccount(NamedTuple):
    name: str
    pkh: str
    sk: str


alice = SandboxAccount(
    name="alice",
    pkh="tz1VSUr8wwNhLAzempoch5d6hLRiTh8Cjcjb",
    sk="edsk3QoqBuvdamxouPhin7swCvkQNgq4jP5KZPbwWNnwdZpSpJiEbq",
)
bob = SandboxAccount(
    name="bob",
    pkh="tz1aSkwEot3L2kmUvcoxzjMomb9mvBNuzFK6",
    sk="edsk3RFfvaFaxbHx8BMtEW1rKQcPtDML3LXjNqMNLCzC3wLC1bWbAt",
)

ACCOUNTS = (alice, bob)


def by_secret_key(sk):
    for account in ACCOUNTS:
        if account.sk == sk:
            return account
    raise KeyError("Unknown sandbox secret key")

# An address with no sandbox key, never seeded in the initial storage.
JOHN = "tz1R6Ej25VSerE3MkSoEEeBjKHCDTFbpKuSX"
