import pytest

from helpers.accounts import alice
from ledger import Ledger
from migrations.deploy_token import initial_storage
from sandbox import Sandbox


@pytest.fixture
def ledger():
    return Ledger.from_storage(initial_storage(alice_balance=200, bob_balance=150))


@pytest.fixture
def sandbox():
    node = Sandbox()
    node.set_signer(alice)
    return node
