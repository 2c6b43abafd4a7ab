from dataclasses import dataclass, field
from typing import Dict

# params:
#   balance     : Number of tokens held by the account
#   allowances  : mapping of spender address => number of tokens the spender may transfer
@dataclass
class Account:
    balance: int = 0
    allowances: Dict[str, int] = field(default_factory=dict)

    def to_storage(self):
        return {"balance": self.balance, "allowances": dict(self.allowances)}

    @classmethod
    def from_storage(cls, value):
        return cls(balance=value["balance"], allowances=dict(value.get("allowances", {})))
