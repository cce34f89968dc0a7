"""Command-line interface for column sizing.

Usage::

    column-sizing run <input_yaml> [-o output_dir] [--no-pdf] [--plots]
    column-sizing solve --ned -9000 --fck 20 --rho 2 --l0 3 [--m1 75 --m2 2]
    column-sizing template
    column-sizing validate <input_yaml>
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from .column import ColumnDesignProblem
from .input_parser import InputError, generate_template, parse_input
from .logging_utils import configure_logging
from .solver import DimensionConvergenceSolver
from .utils import n_to_kn, nmm_to_knm


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="column-sizing")
@click.option("-v", "--verbose", is_flag=True, help="Log every solver iteration.")
def main(verbose: bool) -> None:
    """Minimum concrete column dimensions - NEN-EN 1992-1-1."""
    configure_logging(verbose=verbose)


def _print_summary(problem: ColumnDesignProblem) -> None:
    click.echo("")
    click.secho("=" * 60, bold=True)
    click.secho("  COLUMN SIZING SUMMARY", bold=True)
    click.secho("=" * 60, bold=True)

    if problem.label:
        click.echo(f"\n  Column        : {problem.label}")
    click.echo(f"  NEd           : {n_to_kn(problem.NEd):.1f} kN")
    click.echo(f"  M0Ed          : {nmm_to_knm(problem.M0Ed):.1f} kN.m")

    if not problem.is_assigned:
        click.secho("\n  No section found: iteration diverged.", fg="red")
        click.secho("=" * 60, bold=True)
        return

    click.echo(f"\n  Width x height: {problem.width:.0f} x {problem.height:.0f} mm")
    click.echo(f"  As per layer  : {problem.As:.0f} mm2")
    click.echo(f"  NRd           : {n_to_kn(problem.NRd):.1f} kN")
    click.echo(f"  MRd           : {nmm_to_knm(problem.MRd):.1f} kN.m")
    click.echo(f"  M0Ed + M2     : {nmm_to_knm(problem.M0Ed_M2):.1f} kN.m")
    click.echo(f"  Phase         : {problem.phase} ({problem.iterations} iterations)")
    click.echo("  Status        : ", nl=False)
    if problem.validity:
        click.secho("OK", fg="green")
    else:
        click.secho("NOT VALID (iteration cap reached)", fg="red")
    click.secho("=" * 60, bold=True)


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

@main.command()
@click.argument("input_file", type=click.Path(exists=True))
@click.option(
    "-o", "--output",
    default="./output",
    show_default=True,
    help="Output directory for results.",
)
@click.option("--pdf/--no-pdf", default=True, show_default=True, help="Write the PDF report.")
@click.option("--plots", is_flag=True, help="Write cross-section and convergence PNGs.")
def run(input_file: str, output: str, pdf: bool, plots: bool) -> None:
    """Size the column described in INPUT_FILE."""
    input_path = Path(input_file)
    output_dir = Path(output)
    output_dir.mkdir(parents=True, exist_ok=True)

    click.echo(f"Reading input file: {input_path}")
    try:
        config = parse_input(input_path)
        problem = config.to_problem()
    except (InputError, ValueError) as exc:
        click.secho(f"Error parsing input: {exc}", fg="red", err=True)
        raise SystemExit(1) from exc

    click.echo("Solving ...")
    solver = DimensionConvergenceSolver()
    solver.solve(problem)
    _print_summary(problem)

    from .report import results_to_dict

    results_file = output_dir / "results.json"
    with open(results_file, "w", encoding="utf-8") as fh:
        json.dump(
            {"project": config.project.model_dump(), **results_to_dict(problem, solver.history)},
            fh, indent=2, default=str,
        )
    click.echo(f"\nResults saved to {results_file.resolve()}")

    if plots:
        from .diagrams import plot_convergence, plot_cross_section, save_figure

        save_figure(plot_convergence(solver.history), output_dir / "convergence.png")
        if problem.validity:
            save_figure(plot_cross_section(problem), output_dir / "cross_section.png")
        click.echo(f"Plots saved to {output_dir.resolve()}")

    if pdf:
        click.echo("Generating PDF report ...")
        from .report import generate_report

        pdf_path = output_dir / f"{config.project.name}_{config.project.column_id}.pdf"
        generate_report(str(pdf_path), config, problem, solver.history)
        click.secho(f"Report saved to {pdf_path.resolve()}", fg="green")

    if not problem.validity:
        raise SystemExit(2)


# ---------------------------------------------------------------------------
# solve
# ---------------------------------------------------------------------------

@main.command()
@click.option("--m1", default=0.0, show_default=True, help="End moment M1 [kN.m].")
@click.option("--m2", default=0.0, show_default=True, help="End moment M2 [kN.m].")
@click.option("--ned", required=True, type=float, help="Axial force [kN], negative in compression.")
@click.option("--fck", required=True, type=float, help="Concrete strength [MPa].")
@click.option("--rho", required=True, type=float, help="Reinforcement ratio [%].")
@click.option("--l0", required=True, type=float, help="Effective length [m].")
@click.option("--phi-eff", default=1.0, show_default=True, help="Effective creep ratio.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def solve(m1, m2, ned, fck, rho, l0, phi_eff, as_json) -> None:
    """Size a single column from command-line values."""
    try:
        problem = ColumnDesignProblem.from_engineering_units(
            M1=m1, M2=m2, NEd=ned, fck=fck, rho=rho, l0=l0, phi_eff=phi_eff,
        )
    except ValueError as exc:
        click.secho(f"Invalid input: {exc}", fg="red", err=True)
        raise SystemExit(1) from exc

    solver = DimensionConvergenceSolver()
    solver.solve(problem)

    if as_json:
        from .report import results_to_dict

        click.echo(json.dumps(results_to_dict(problem)["result"], indent=2))
    else:
        _print_summary(problem)

    if not problem.validity:
        raise SystemExit(2)


# ---------------------------------------------------------------------------
# template
# ---------------------------------------------------------------------------

@main.command()
def template() -> None:
    """Print a sample input YAML to stdout."""
    click.echo(generate_template())


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------

@main.command()
@click.argument("input_file", type=click.Path(exists=True))
def validate(input_file: str) -> None:
    """Validate an input YAML file without running the design."""
    input_path = Path(input_file)
    click.echo(f"Validating: {input_path}")

    try:
        config = parse_input(input_path)
        config.to_problem()
    except InputError as exc:
        click.secho(f"\n{exc}", fg="yellow")
        raise SystemExit(1) from exc
    except ValueError as exc:
        click.secho(f"\nInvalid input: {exc}", fg="yellow")
        raise SystemExit(1) from exc

    click.secho("\nInput file is valid.", fg="green")


# ---------------------------------------------------------------------------
# Allow ``python -m column_sizing.cli``
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
