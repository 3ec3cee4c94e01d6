"""Nencho CLI - Command-line interface for year-end tax reconciliation."""

import json
from pathlib import Path

import click
from rich.console import Console

from nencho import __version__
from nencho.sdk import (
    DependentCounts,
    EvidenceInput,
    InputFileError,
    build_reconciliation_input,
    configure_logging,
    get_output_format,
    load_inputs,
    reconcile,
    reconcile_checked,
    calc_dependent_deduction,
    calc_spouse_deduction,
    to_reconciliation_input,
    validate_dependent_counts,
    validate_evidence_input,
)
from nencho.sdk.taxes import (
    EMPLOYMENT_INCOME_DEDUCTION_TABLE,
    TAX_RATE_TABLE,
    find_capped_deductions,
)

from .renderers.result_renderer import (
    render_brackets,
    render_deductions,
    render_result,
    render_warnings,
)
from .settings_commands import settings as settings_group


FORMAT_OPTION_HELP = "Output format (default: settings.json default_output_format, else text)"


def _resolve_format(output_format):
    return output_format or get_output_format()


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@click.group()
@click.version_option(version=__version__, prog_name="nencho")
def cli():
    """Nencho - Year-end tax reconciliation (年末調整).

    Computes employment income deduction, taxable income, annual income
    tax and the refund or additional payment for each employee.

    Settings are loaded from (in order):

    \b
    1. NENCHO_CONFIG_PATH environment variable
    2. ~/.config/nencho/settings.json (XDG default)
    """
    configure_logging()


cli.add_command(settings_group)


@cli.command("reconcile")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help=FORMAT_OPTION_HELP)
@click.option("--strict", is_flag=True, help="Reject negative amounts instead of computing with them.")
def reconcile_cmd(input_file, output_format, strict):
    """Run the year-end adjustment for every employee in INPUT_FILE.

    INPUT_FILE is YAML or JSON holding one input, a list of inputs, or a
    mapping with an 'employees' list. Each input carries either
    precomputed 'deductions' or raw 'evidence'.

    JSON output is a list of results. With --strict it is always an object
    with 'results' and 'rejected' lists.

    \b
    Examples:
      nencho reconcile 2025_employees.yaml
      nencho reconcile alice.json --format json --strict
    """
    output_format = _resolve_format(output_format)

    try:
        inputs = load_inputs(input_file)
    except InputFileError as e:
        raise click.ClickException(str(e))

    warnings = []
    for record in inputs:
        params = to_reconciliation_input(record)
        for name, (value, cap) in find_capped_deductions(params.deductions).items():
            warnings.append(
                f"{params.employee_id}: {name} {value:,} exceeds cap {cap:,}; {cap:,} will be used"
            )

    results = []
    rejected = []
    for record in inputs:
        if strict:
            outcome = reconcile_checked(record)
            if not outcome.ok:
                rejected.append((record, outcome.issues))
                continue
            results.append(outcome.result)
        else:
            results.append(reconcile(to_reconciliation_input(record)))

    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)

    if output_format == "json":
        payload = [r.model_dump() for r in results]
        if strict:
            payload = {
                "results": payload,
                "rejected": [
                    {
                        "employee_id": params.employee_id,
                        "year": params.year,
                        "issues": [i.model_dump() for i in issues],
                    }
                    for params, issues in rejected
                ],
            }
        _echo_json(payload)
    else:
        console = Console()
        for result in results:
            render_result(console, result)
        render_warnings(console, [
            f"{params.employee_id} ({params.year}) rejected: "
            + "; ".join(f"{i.field} {i.message}" for i in issues)
            for params, issues in rejected
        ])

    if rejected:
        raise click.ClickException(f"{len(rejected)} of {len(inputs)} input(s) rejected")


@cli.command("deductions")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help=FORMAT_OPTION_HELP)
@click.option("--strict", is_flag=True, help="Reject negative evidence values.")
def deductions_cmd(input_file, output_format, strict):
    """Derive deductions from the raw evidence in INPUT_FILE.

    Only entries with an 'evidence' section are shown; entries that
    already carry 'deductions' are skipped.

    \b
    Examples:
      nencho deductions 2025_declarations.yaml
      nencho deductions alice.yaml --format json
    """
    output_format = _resolve_format(output_format)

    try:
        inputs = load_inputs(input_file)
    except InputFileError as e:
        raise click.ClickException(str(e))

    declarations = [record for record in inputs if isinstance(record, EvidenceInput)]
    if not declarations:
        raise click.ClickException(f"No entries with 'evidence' in {input_file.name}")

    if strict:
        problems = []
        for declaration in declarations:
            issues = validate_evidence_input(declaration)
            if issues:
                problems.append(
                    f"{declaration.employee_id}: "
                    + "; ".join(f"{i.field} {i.message}" for i in issues)
                )
        if problems:
            raise click.ClickException("\n".join(problems))

    built = [build_reconciliation_input(declaration) for declaration in declarations]

    if output_format == "json":
        _echo_json([
            {
                "employee_id": params.employee_id,
                "year": params.year,
                "total_income": params.total_income,
                "deductions": params.deductions.model_dump(),
            }
            for params in built
        ])
        return

    console = Console()
    for params in built:
        render_deductions(console, params)


@cli.command("spouse")
@click.argument("employee_income", type=int)
@click.argument("spouse_income", type=int)
@click.option("--elderly", is_flag=True, help="Spouse is 70 or older (老人控除対象配偶者).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help=FORMAT_OPTION_HELP)
def spouse_cmd(employee_income, spouse_income, elderly, output_format):
    """Compute spouse deduction and spouse special deduction.

    EMPLOYEE_INCOME is the employee's own income; SPOUSE_INCOME the spouse's.
    """
    result = calc_spouse_deduction(employee_income, spouse_income, elderly=elderly)

    if _resolve_format(output_format) == "json":
        _echo_json(result.model_dump())
        return

    click.echo(f"Spouse deduction:         {result.spouse_deduction:>12,}")
    click.echo(f"Spouse special deduction: {result.spouse_special_deduction:>12,}")


@cli.command("dependents")
@click.option("--general", type=int, default=0, help="General dependents (一般)")
@click.option("--specified", type=int, default=0, help="Specified dependents, age 19-22 (特定)")
@click.option("--elderly", type=int, default=0, help="Elderly dependents, age 70+ (老人)")
@click.option("--elderly-living", type=int, default=0, help="Co-residing elderly parents (同居老親等)")
@click.option("--strict", is_flag=True, help="Reject negative counts.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help=FORMAT_OPTION_HELP)
def dependents_cmd(general, specified, elderly, elderly_living, strict, output_format):
    """Compute the dependent deduction from head counts."""
    counts = DependentCounts(
        general=general,
        specified=specified,
        elderly=elderly,
        elderly_living=elderly_living,
    )
    if strict:
        issues = validate_dependent_counts(counts)
        if issues:
            raise click.ClickException("; ".join(f"{i.field} {i.message}" for i in issues))

    amount = calc_dependent_deduction(counts)

    if _resolve_format(output_format) == "json":
        _echo_json({"counts": counts.model_dump(), "dependent_deduction": amount})
        return

    click.echo(f"Dependent deduction: {amount:,}")


@cli.command("brackets")
def brackets_cmd():
    """Show the employment income deduction and income tax rate tables."""
    render_brackets(Console(), EMPLOYMENT_INCOME_DEDUCTION_TABLE, TAX_RATE_TABLE)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
