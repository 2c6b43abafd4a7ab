import os

# Initial token balances seeded by the deployment migration
ALICE_BALANCE = int(os.environ.get('ALICE_BALANCE') or 200)
BOB_BALANCE = int(os.environ.get('BOB_BALANCE') or 150)

# Which guard `transfer` evaluates first for a delegated spend: "balance" or "allowance"
CHECK_ORDER = os.environ.get('CHECK_ORDER') or "balance"

LOG_LEVEL = os.environ.get('LOG_LEVEL') or "INFO"
