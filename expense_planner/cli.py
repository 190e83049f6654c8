"""CLI helpers for Expense Planner."""

import argparse
import asyncio
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence

from .config import settings
from .models import EXPENSE_CATEGORIES, LedgerEntry
from .planner import FinancePlanner


def format_money(amount: float) -> str:
    return f"${amount:.2f}"


def format_history_row(entry: LedgerEntry) -> str:
    sign = "+" if entry.is_income else "-"
    return (
        f"{entry.date:%Y-%m-%d} | {entry.category} - {entry.description} | "
        f"{sign}{format_money(entry.amount)}"
    )


def render_summary(planner: FinancePlanner) -> List[str]:
    lines = [
        f"Income: {format_money(planner.total_income())}",
        f"Expense: {format_money(planner.total_expenses())}",
    ]
    distribution = planner.expense_distribution()
    if distribution:
        lines.append("Expense Distribution:")
        for category, share in distribution.items():
            lines.append(f"  {category} ({share:.0f}%)")
    return lines


def _parse_date(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date: {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Track income and expenses with AI budget tips")
    parser.add_argument(
        "--db",
        default=settings.db_path,
        help=f"Path to the ledger database (default: {settings.db_path})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    income = subparsers.add_parser("add-income", help="Record an income entry")
    income.add_argument("amount", help="Positive amount")
    income.add_argument("--date", type=_parse_date, default=None, help="ISO date")

    expense = subparsers.add_parser("add-expense", help="Record an expense entry")
    expense.add_argument("category", choices=EXPENSE_CATEGORIES)
    expense.add_argument("amount", help="Positive amount")
    expense.add_argument("--description", default="", help="What did you spend on?")
    expense.add_argument("--date", type=_parse_date, default=None, help="ISO date")

    subparsers.add_parser("history", help="List all entries in the order recorded")
    subparsers.add_parser("summary", help="Show totals and expense distribution")
    subparsers.add_parser("tips", help="Fetch smart budget tips")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    planner = FinancePlanner.from_config(replace(settings, db_path=args.db))

    if args.command == "add-income":
        entry = planner.add_income(args.amount, date=args.date)
    elif args.command == "add-expense":
        entry = planner.add_expense(args.category, args.description, args.amount, date=args.date)
    elif args.command == "history":
        for entry in planner.entries:
            print(format_history_row(entry))
        return 0
    elif args.command == "summary":
        print("\n".join(render_summary(planner)))
        return 0
    elif args.command == "tips":
        asyncio.run(planner.fetch_budget_tips())
        print("Smart Budget Tips:")
        for tip in planner.budget_tips:
            print(f"• {tip}")
        return 0
    else:
        import uvicorn

        from .service import create_app

        uvicorn.run(create_app(planner), host=args.host, port=args.port)
        return 0

    if entry is None:
        print("Amount must be a positive number.")
        return 1
    print(f"Added {format_history_row(entry)}")
    return 0
