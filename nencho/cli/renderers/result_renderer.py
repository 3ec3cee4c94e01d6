"""Rich renderer for reconciliation results and bracket tables.

Transforms SDK models into formatted Rich tables for terminal output.
"""

import math

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nencho.sdk import ReconciliationInput, ReconciliationResult
from nencho.sdk.taxes import BracketTable


def _yen(amount: int) -> str:
    return f"¥{amount:,}"


def render_result(console: Console, result: ReconciliationResult) -> None:
    """Render one reconciliation result.

    Args:
        console: Rich Console instance
        result: Output of reconcile()
    """
    table = Table(show_header=False, box=box.SIMPLE, padding=(0, 2))
    table.add_column("item")
    table.add_column("amount", justify="right")

    table.add_row("Total income", _yen(result.total_income))
    table.add_row("Employment income deduction", _yen(result.employment_income_deduction))
    table.add_row("Income after deduction", _yen(result.income_after_employment_deduction))
    table.add_row("Total deductions", _yen(result.total_deductions))
    table.add_row("Taxable income", _yen(result.taxable_income))
    table.add_row("Tax before credit", _yen(result.details.tax_before_credit))
    if result.details.housing_loan_credit_applied:
        table.add_row("Housing loan credit", f"-{_yen(result.details.housing_loan_credit_applied)}")
    table.add_row("Annual tax", _yen(result.annual_tax_amount))
    table.add_row("Withheld", _yen(result.details.withheld_tax))

    if result.is_refund:
        label, style = "Refund", "green"
    else:
        label, style = "Additional payment", "yellow"
    table.add_row(f"[bold]{label}[/bold]", f"[bold {style}]{_yen(result.adjustment_amount)}[/bold {style}]")

    console.print(Panel(
        table,
        title=f"{result.employee_id} ({result.year})",
        border_style=style,
    ))


def render_warnings(console: Console, warnings: list[str]) -> None:
    for warning in warnings:
        console.print(Panel(
            f"[yellow]{warning}[/yellow]",
            title="Note",
            border_style="yellow",
        ))


def _bound(value: float) -> str:
    return "∞" if value == math.inf else f"{int(value):,}"


def render_brackets(console: Console, employment: BracketTable, tax: BracketTable) -> None:
    """Render the employment deduction and tax rate tables."""
    emp_table = Table(title="Employment income deduction", box=box.SIMPLE_HEAD)
    emp_table.add_column("From", justify="right")
    emp_table.add_column("To (exclusive)", justify="right")
    emp_table.add_column("Deduction")
    for b in employment:
        if b.rate:
            sign = "+" if b.offset >= 0 else "-"
            formula = f"income × {b.rate:g} {sign} {abs(int(b.offset)):,}"
        else:
            formula = f"{int(b.offset):,} (flat)"
        emp_table.add_row(_bound(b.lower), _bound(b.upper), formula)
    console.print(emp_table)

    tax_table = Table(title="Income tax rates", box=box.SIMPLE_HEAD)
    tax_table.add_column("From", justify="right")
    tax_table.add_column("To (exclusive)", justify="right")
    tax_table.add_column("Rate", justify="right")
    tax_table.add_column("Subtracted", justify="right")
    for b in tax:
        tax_table.add_row(_bound(b.lower), _bound(b.upper), f"{b.rate:.0%}", f"{int(b.subtracted):,}")
    console.print(tax_table)


def render_deductions(console: Console, params: ReconciliationInput) -> None:
    """Render deductions derived from evidence for one employee."""
    d = params.deductions
    table = Table(show_header=False, box=box.SIMPLE, padding=(0, 2))
    table.add_column("item")
    table.add_column("amount", justify="right")

    table.add_row("Basic", _yen(d.basic))
    table.add_row("Spouse", _yen(d.spouse))
    table.add_row("Spouse special", _yen(d.spouse_special))
    table.add_row(f"Dependents ({d.dependent_count})", _yen(d.dependent))
    table.add_row("Social insurance", _yen(d.social_insurance))
    table.add_row("Life insurance", _yen(d.life_insurance))
    table.add_row("Earthquake insurance", _yen(d.earthquake_insurance))
    table.add_row("Medical expense", _yen(d.medical_expense))
    table.add_row("Other", _yen(d.other))
    table.add_row("[bold]Housing loan credit[/bold]", f"[bold]{_yen(d.housing_loan)}[/bold]")

    console.print(Panel(
        table,
        title=f"{params.employee_id} ({params.year}) - income {_yen(params.total_income)}",
        border_style="cyan",
    ))
