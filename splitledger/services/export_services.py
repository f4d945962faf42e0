"""
Group reports in JSON and CSV.

Both formats carry the group's expenses, settlements and the balances
computed from them at export time.
"""
import csv
import io

from splitledger.core.entities import Expense, Group, Settlement, utcnow
from splitledger.repositories.base import Stores
from splitledger.services.balance_services import format_balances, format_plan, load_group_balances
from splitledger.services.group_services import user_names

def _summary(entries, amount_key: str) -> str:
    return "; ".join(f"{e['name'] or e['user_id']}:{e[amount_key]}" for e in entries)

async def build_report(stores: Stores, group: Group):
    expenses = await stores.expenses.list(group_id=group.id)
    settlements = await stores.settlements.list(group_id=group.id)
    balances = await load_group_balances(stores, group)

    user_ids = set(balances)
    for e in expenses:
        user_ids |= e.participant_ids()
    names = await user_names(stores, user_ids)

    return {
        "group": {"id": group.id, "name": group.name, "type": group.type},
        "exported_at": utcnow().isoformat(),
        "expenses": [_expense_row(e, names) for e in expenses],
        "settlements": [_settlement_row(s, names) for s in settlements],
        "balances": format_balances(balances, names),
        "settlement_plan": format_plan(balances, names),
    }

def _expense_row(e: Expense, names):
    return {
        "id": e.id,
        "date": e.created_at.isoformat(),
        "description": e.description,
        "category": e.category,
        "amount": str(e.amount),
        "paid_by": [{"user_id": p.user_id, "name": names.get(p.user_id), "amount": str(p.amount)} for p in e.payer_entries()],
        "splits": [{"user_id": s.user_id, "name": names.get(s.user_id), "share_amount": str(s.share_amount)} for s in e.splits],
    }

def _settlement_row(s: Settlement, names):
    return {
        "id": s.id,
        "date": s.created_at.isoformat(),
        "from_user_id": s.from_user_id,
        "from_name": names.get(s.from_user_id),
        "to_user_id": s.to_user_id,
        "to_name": names.get(s.to_user_id),
        "amount": str(s.amount),
        "method": s.method,
    }

async def export_group_json(stores: Stores, group: Group) -> dict:
    report = await build_report(stores, group)

    # Amounts travel as strings, like everywhere else in the API
    for row in report["balances"]:
        row["balance"] = str(row["balance"])
        for side in ("owes", "owed_by"):
            for edge in row[side]:
                edge["amount"] = str(edge["amount"])
    for t in report["settlement_plan"]:
        t["amount"] = str(t["amount"])
    return report

async def export_group_csv(stores: Stores, group: Group) -> str:
    report = await build_report(stores, group)

    buf = io.StringIO()
    writer = csv.writer(buf)

    writer.writerow(["Group", report["group"]["name"]])
    writer.writerow(["Exported At", report["exported_at"]])
    writer.writerow([])

    writer.writerow(["Expenses"])
    writer.writerow(["id", "date", "description", "category", "amount", "paid_by", "splits"])
    for e in report["expenses"]:
        writer.writerow([
            e["id"],
            e["date"],
            e["description"] or "",
            e["category"] or "",
            e["amount"],
            _summary(e["paid_by"], "amount"),
            _summary(e["splits"], "share_amount"),
        ])
    writer.writerow([])

    writer.writerow(["Settlements"])
    writer.writerow(["id", "date", "from", "to", "amount", "method"])
    for s in report["settlements"]:
        writer.writerow([
            s["id"], s["date"], s["from_name"] or s["from_user_id"],
            s["to_name"] or s["to_user_id"], s["amount"], s["method"],
        ])
    writer.writerow([])

    writer.writerow(["Balances"])
    writer.writerow(["user_id", "name", "balance"])
    for row in report["balances"]:
        writer.writerow([row["user_id"], row["user_name"] or "", row["balance"]])
    writer.writerow([])

    writer.writerow(["Settlement Plan"])
    writer.writerow(["from", "to", "amount"])
    for t in report["settlement_plan"]:
        writer.writerow([t["from_name"] or t["from_user_id"], t["to_name"] or t["to_user_id"], t["amount"]])

    return buf.getvalue()
