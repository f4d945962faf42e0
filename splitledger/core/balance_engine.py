from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List

from splitledger.core.entities import Expense, Settlement
from splitledger.core.utils import qround, TOLERANCE, ZERO


@dataclass
class BalanceRecord:
    balance: Decimal = ZERO
    owes: Dict[str, Decimal] = field(default_factory=dict)
    owed_by: Dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class Transfer:
    from_user_id: str
    to_user_id: str
    amount: Decimal


def _net_positions(expenses: Iterable[Expense], settlements: Iterable[Settlement]) -> Dict[str, Decimal]:
    net: Dict[str, Decimal] = {}

    for expense in expenses:
        for payment in expense.payer_entries():
            net[payment.user_id] = net.get(payment.user_id, ZERO) + payment.amount
        for split in expense.splits:
            net[split.user_id] = net.get(split.user_id, ZERO) - split.share_amount

    # Paying someone back buys equity back from them
    for settlement in settlements:
        net[settlement.from_user_id] = net.get(settlement.from_user_id, ZERO) + settlement.amount
        net[settlement.to_user_id] = net.get(settlement.to_user_id, ZERO) - settlement.amount

    return net


def compute_balances(expenses: Iterable[Expense], settlements: Iterable[Settlement] = ()) -> Dict[str, BalanceRecord]:
    """
    Net every user's position in a ledger and suggest who should pay whom.

    Positive balance means the group owes the user. The owes/owed_by maps
    come from greedily matching the largest debtor with the largest
    creditor until one side runs out.
    """
    net = {uid: qround(amount) for uid, amount in _net_positions(expenses, settlements).items()}
    balances = {uid: BalanceRecord(balance=amount) for uid, amount in net.items()}

    debtors = [[uid, -amt] for uid, amt in net.items() if amt < -TOLERANCE]
    creditors = [[uid, amt] for uid, amt in net.items() if amt > TOLERANCE]

    # list.sort is stable, ties keep ledger order
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)

    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debt_id, debt_amt = debtors[i]
        cred_id, cred_amt = creditors[j]

        pay_amt = qround(min(debt_amt, cred_amt))

        if pay_amt > ZERO:
            owes = balances[debt_id].owes
            owed_by = balances[cred_id].owed_by
            owes[cred_id] = owes.get(cred_id, ZERO) + pay_amt
            owed_by[debt_id] = owed_by.get(debt_id, ZERO) + pay_amt

        debtors[i][1] = debt_amt - pay_amt
        creditors[j][1] = cred_amt - pay_amt

        if debtors[i][1] < TOLERANCE:
            i += 1
        if creditors[j][1] < TOLERANCE:
            j += 1

    return balances


def settlement_plan(balances: Dict[str, BalanceRecord]) -> List[Transfer]:
    return [
        Transfer(from_user_id=uid, to_user_id=creditor_id, amount=qround(amount))
        for uid, record in balances.items()
        for creditor_id, amount in record.owes.items()
    ]
