# billboard_billing/engine/ledger.py

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List

from billboard_billing.engine.types import PaymentEntry


@dataclass(frozen=True)
class Ledger:
    """
    One customer's entries split into contract-level and account-level.

    An entry is account-level when it has no contract number or is an
    ``account_payment``; every other entry sits under its contract number.
    Input order is preserved within each group.
    """

    by_contract: Dict[str, List[PaymentEntry]] = field(default_factory=dict)
    account_level: List[PaymentEntry] = field(default_factory=list)

    @property
    def entries(self) -> List[PaymentEntry]:
        out = list(self.account_level)
        for group in self.by_contract.values():
            out.extend(group)
        return out

    def for_contract(self, contract_number: str) -> List[PaymentEntry]:
        return self.by_contract.get(str(contract_number), [])


def group(entries: Iterable[PaymentEntry]) -> Ledger:
    by_contract: Dict[str, List[PaymentEntry]] = {}
    account_level: List[PaymentEntry] = []
    for entry in entries:
        if entry.is_account_level:
            account_level.append(entry)
        else:
            by_contract.setdefault(str(entry.contract_number), []).append(entry)
    return Ledger(by_contract=by_contract, account_level=account_level)


def sum_amounts(entries: Iterable[PaymentEntry]) -> Decimal:
    return sum((e.amount for e in entries), Decimal("0"))
