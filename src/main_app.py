"""Serves as the command line entry point of the hex tilemap generator."""

from __future__ import annotations

import random
import sys

import click

import constants
from enums import PropagationMode, SelectionPolicyType
from logging_config import setup_logging
from model.selection_policy import create_policy
from model.tile_catalog import TileCatalog, TileCatalogError
from model.tilemap_renderer import save_tilemap_csv, TilemapRenderer
from model.wave_function import WaveFunction
from model.wfc_runner import PolicyStalledError, WFCRunner


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=constants.LOG_LEVEL_DEFAULT,
    show_default=True,
    help="Verbosity of the log output on stderr.",
)
def cli(log_level: str) -> None:
    """Hex Wave Function Collapse tilemap generator"""
    setup_logging(log_level)


@cli.command()
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(exists=True, dir_okay=False),
    default=constants.EXAMPLE_CATALOG_PATH,
    show_default=True,
    help="Tile catalog (.json).",
)
@click.option(
    "--rows",
    type=click.IntRange(constants.GRID_SIZE_MIN_LIMIT, constants.GRID_SIZE_MAX_LIMIT),
    default=constants.GRID_SIZE_DEFAULT,
    show_default=True,
)
@click.option(
    "--cols",
    type=click.IntRange(constants.GRID_SIZE_MIN_LIMIT, constants.GRID_SIZE_MAX_LIMIT),
    default=constants.GRID_SIZE_DEFAULT,
    show_default=True,
)
@click.option(
    "--seed",
    type=click.IntRange(0, constants.RANDOM_SEED_MAX),
    default=None,
    help="Random seed. A random seed is drawn and reported if omitted.",
)
@click.option(
    "--policy",
    type=click.Choice([policy_type.value for policy_type in SelectionPolicyType]),
    default=constants.SELECTION_POLICY_DEFAULT.value,
    show_default=True,
    help="Strategy choosing the next tile to place.",
)
@click.option(
    "--propagation",
    type=click.Choice([mode.value for mode in PropagationMode]),
    default=constants.PROPAGATION_MODE_DEFAULT.value,
    show_default=True,
    help="Which cells emit constraints during propagation.",
)
@click.option(
    "--attempts",
    type=click.IntRange(min=1),
    default=constants.WFC_MAX_ATTEMPTS,
    show_default=True,
    help="Maximum number of restarts after a contradiction.",
)
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), default=None, help="Save the tilemap (.csv).")
@click.option("--png", "png_path", type=click.Path(dir_okay=False), default=None, help="Save the tilemap image (.png).")
@click.option(
    "--tile-size",
    type=click.IntRange(constants.TILE_SIZE_MIN_LIMIT, constants.TILE_SIZE_MAX_LIMIT),
    default=constants.TILE_SIZE_DEFAULT,
    show_default=True,
    help="Hexagon width in pixels for the image.",
)
def generate(
    catalog_path: str,
    rows: int,
    cols: int,
    seed: int | None,
    policy: str,
    propagation: str,
    attempts: int,
    csv_path: str | None,
    png_path: str | None,
    tile_size: int,
) -> None:
    """Generate a hex tilemap with Wave Function Collapse."""
    catalog = _load_catalog(catalog_path)

    if seed is None:
        seed = random.randint(0, constants.RANDOM_SEED_MAX)
    rng = random.Random(seed)

    wave_function = WaveFunction(catalog, rows, cols, rng=rng, propagation_mode=PropagationMode(propagation))
    runner = WFCRunner(wave_function, create_policy(SelectionPolicyType(policy), rng), max_attempts=attempts)
    try:
        result = runner.run()
    except PolicyStalledError as e:
        raise click.ClickException(str(e)) from e

    click.echo(
        f"{result.status.value} after {result.attempts} attempt(s), {result.steps} collapses "
        f"({rows}x{cols} cells, seed {seed})"
    )
    for tile, usage_ratio in zip(catalog.tiles, result.stats.usage_ratios):
        click.echo(f"  {tile.name}: {usage_ratio:.1%}")

    if csv_path is not None:
        save_tilemap_csv(result.tilemap, csv_path)
        click.echo(f"Saved tilemap to {csv_path}")
    if png_path is not None:
        renderer = TilemapRenderer(catalog, tile_size)
        renderer.save_tilemap_img(renderer.get_tilemap_img(result.tilemap), png_path)
        click.echo(f"Saved tilemap image to {png_path}")

    if not result.successful:
        sys.exit(1)


@cli.command("derive-catalog")
@click.argument("sample_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_path", type=click.Path(dir_okay=False))
def derive_catalog(sample_path: str, output_path: str) -> None:
    """Derive a tile catalog from a sample hex tilemap (.csv of tile indices)."""
    try:
        catalog = TileCatalog.from_sample_csv(sample_path)
    except TileCatalogError as e:
        raise click.ClickException(str(e)) from e

    catalog.save_json(output_path)
    click.echo(f"Derived {catalog.tile_count} tile types from {sample_path}, saved to {output_path}")


def _load_catalog(catalog_path: str) -> TileCatalog:
    """Loads a tile catalog, reporting problems as CLI errors."""
    try:
        return TileCatalog.from_json(catalog_path)
    except TileCatalogError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    cli()
