from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import click
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from .analyze import ColorAnalysis, analysis_report, format_profile
from .config import ColorsConfig, load_config, merge_options
from .errors import BrandscaleError
from .hues import STEPS
from .palette import Palette, generate_palette
from .validate import ContrastReport, format_report, validate_contrast

MODE_CHOICES = click.Choice(["light", "dark", "both"])


# ============================================================
# Rendering
# ============================================================


def _swatch(hex_: str, mark: bool = False, dark_mark: bool = True) -> Text:
    fg = "black" if dark_mark else "white"
    return Text(" ● " if mark else "   ", style=Style(color=fg, bgcolor=hex_))


def render_analysis(analyses: Sequence[ColorAnalysis], profile_line: str) -> None:
    console = Console()
    table = Table(title="Brand analysis")

    table.add_column("Input", style="cyan", no_wrap=True)
    table.add_column(" ")
    table.add_column("L", justify="right")
    table.add_column("C", justify="right")
    table.add_column("Hue", justify="right")
    table.add_column("Slot", no_wrap=True)
    table.add_column("Step", justify="right")
    table.add_column("Result")

    for a in analyses:
        if a.reason is None:
            result = "[green]✓ anchored[/green]"
        else:
            result = f"[yellow]✗ {a.reason}[/yellow]"
        table.add_row(
            a.input,
            _swatch(a.hex),
            f"{a.color.l:.3f}",
            f"{a.color.c:.3f}",
            f"{a.color.h:.0f}°",
            a.slot,
            str(a.step),
            result,
        )

    console.print(table)
    console.print(profile_line)


def render_palette(palette: Palette) -> None:
    console = Console()
    table = Table(title=f"Palette ({palette.mode})")

    table.add_column("Hue", style="cyan", no_wrap=True)
    for step in STEPS:
        table.add_column(str(step), justify="center", no_wrap=True)
    table.add_column("Notes")

    for scale in palette.scales:
        cells = [
            _swatch(scale[step], step in scale.pinned_steps, scale.color(step).l > 0.6)
            for step in STEPS
        ]
        fails = sum(1 for n in scale.notes if n.severity == "fail")
        warns = len(scale.notes) - fails
        notes = []
        if fails:
            notes.append(f"[red]{fails} fail[/red]")
        if warns:
            notes.append(f"[dim]{warns} warn[/dim]")
        label = f"{scale.key} *" if scale.is_custom else scale.key
        table.add_row(label, *cells, " ".join(notes))

    console.print(table)


def render_report(report: ContrastReport) -> None:
    console = Console()
    table = Table(title="Contrast by hue")

    table.add_column("Hue", style="cyan", no_wrap=True)
    table.add_column("Checks", justify="right")
    table.add_column("Passed", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Warnings", justify="right")

    for hue, row in report.summary_by_hue.iterrows():
        failed = f"[red]{row['failed']}[/red]" if row["failed"] else "0"
        table.add_row(
            str(hue), str(row["checks"]), str(row["passed"]), failed, str(row["warnings"])
        )

    console.print(table)


# ============================================================
# Option handling
# ============================================================


def _resolve(
    colors: Tuple[str, ...],
    colors_opt: Optional[str],
    config_path: Optional[Path],
    mode: Optional[str],
) -> ColorsConfig:
    try:
        config = load_config(config_path)
        merged = merge_options(config, colors=colors_opt or list(colors), mode=mode)
    except BrandscaleError as e:
        raise click.ClickException(str(e))
    if not merged.brand_colors:
        raise click.ClickException(
            "No brand colors given (pass them as arguments, --colors, or a colors.config.json)"
        )
    return merged


def _palettes(config: ColorsConfig) -> List[Palette]:
    try:
        return [generate_palette(config.brand_colors, mode) for mode in config.modes]
    except BrandscaleError as e:
        raise click.ClickException(str(e))


_colors_argument = click.argument("colors", nargs=-1)
_colors_option = click.option(
    "--colors", "colors_opt", default=None, help="Comma-separated brand colors."
)
_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: nearest colors.config.json or colors.json).",
)


# ============================================================
# CLI
# ============================================================


@click.group()
def main():
    """Generate accessible 12-step color scales from brand colors."""


@main.command()
@_colors_argument
@click.option("--mode", type=click.Choice(["light", "dark"]), default="light", show_default=True)
def analyze(colors: Tuple[str, ...], mode: str):
    """Show how each brand color maps onto the hue taxonomy."""
    if not colors:
        raise click.ClickException("At least one brand color is required")
    try:
        report = analysis_report(colors, mode)
    except BrandscaleError as e:
        raise click.ClickException(str(e))

    render_analysis(report.analyses, format_profile(report.profile))
    for slot, inputs in report.profile.conflicts.items():
        click.echo(f"! {slot} is claimed by {', '.join(inputs)}")


@main.command()
@_colors_argument
@_colors_option
@_config_option
@click.option("--mode", type=MODE_CHOICES, default=None, help="Appearance mode(s) to generate.")
@click.option(
    "--out-json",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the palette(s) as JSON (default with a config file: <outputDir>/palette.json).",
)
@click.option(
    "--no-render", is_flag=True, default=False, help="Disable rich table output."
)
def generate(
    colors: Tuple[str, ...],
    colors_opt: Optional[str],
    config_path: Optional[Path],
    mode: Optional[str],
    out_json: Optional[Path],
    no_render: bool,
):
    """Generate the palette for one or both appearance modes."""
    config = _resolve(colors, colors_opt, config_path, mode)
    palettes = _palettes(config)

    if not no_render:
        for palette in palettes:
            render_palette(palette)

    if out_json is None and config.path is not None:
        out_json = config.output_dir / "palette.json"

    if out_json is not None:
        out_json.parent.mkdir(parents=True, exist_ok=True)
        payload = {p.mode: p.to_dict() for p in palettes}
        out_json.write_text(json.dumps(payload, indent=2))
        click.echo(f"✓ Wrote {out_json}")


@main.command()
@_colors_argument
@_colors_option
@_config_option
@click.option("--errors-only", is_flag=True, default=False, help="Skip white-text warnings.")
@click.option("--hue", "hues", multiple=True, help="Only audit these scales (repeatable).")
@click.option(
    "--no-render", is_flag=True, default=False, help="Disable rich table output."
)
def validate(
    colors: Tuple[str, ...],
    colors_opt: Optional[str],
    config_path: Optional[Path],
    errors_only: bool,
    hues: Tuple[str, ...],
    no_render: bool,
):
    """Audit the generated scales for APCA contrast; fails when errors remain."""
    config = _resolve(colors, colors_opt, config_path, None)
    palettes = _palettes(config)

    report = validate_contrast(palettes, hues=hues or None, errors_only=errors_only)

    if not no_render:
        render_report(report)
    click.echo(format_report(report))

    if not report.passed:
        raise click.ClickException(f"{len(report.errors)} contrast checks failed")


if __name__ == "__main__":
    main()
