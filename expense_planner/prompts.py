"""Prompt templates for the budget tips request."""

from textwrap import dedent
from typing import Dict, List, Mapping

from .aggregator import FinancialSnapshot

TIP_INSTRUCTIONS = dedent(
    """
    Based on the following financial summary, provide concise financial tips as plain text sentences, one per line, without using Markdown formatting. Include a mix of budget tips and investment suggestions:

    - Budget Tips: Focus on high-spending categories, mention the percentage of total income spent on that category, and provide a practical suggestion for reducing expenses. Format like: "Housing Dominates: your housing costs 47% of your income are excessively high, you can explore other housing options, cheaper house, a roommate".

    - Investment Tips: Based on the savings or financial surplus, suggest ways to grow wealth or save for the future. Tailor the advice to the data, e.g., "With $X in savings, consider allocating Y% to a low-risk investment like a savings account or bonds".
    """
).strip()


def format_distribution(distribution: Mapping[str, float]) -> str:
    return ", ".join(f"{category}: {value}%" for category, value in distribution.items())


def build_tip_prompt(snapshot: FinancialSnapshot) -> str:
    """Render the instruction block sent to the tips API."""

    facts = "\n".join(
        [
            "Use the data provided to make the tips specific and actionable:",
            f"- Total Income: ${snapshot.total_income}",
            f"- Total Expenses: ${snapshot.total_expenses}",
            f"- Savings: ${snapshot.savings}",
            f"- Expense Distribution: {format_distribution(snapshot.distribution)}".rstrip(),
        ]
    )
    return f"{TIP_INSTRUCTIONS}\n\n{facts}"


def build_request_body(prompt: str) -> Dict[str, List[Dict[str, List[Dict[str, str]]]]]:
    return {"contents": [{"parts": [{"text": prompt}]}]}
