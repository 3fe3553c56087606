import logging
import random
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError

from monstercr.engine import challenge
from monstercr.engine.challenge import CR
from monstercr.engine.dice import die_results, parse_dice
from monstercr.engine.loader import Bestiary, load_bestiary
from monstercr.engine.rating import rate
from monstercr.engine.settings import SETTINGS_PATH, AppSettings, load_settings
from monstercr.tools.export_schemas import export_schemas
from monstercr.tools.validate import validate_content
from monstercr.util.paths import content_dir

app = typer.Typer(add_completion=False)

@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

def _settings_or_exit(path: Path) -> AppSettings:
    try:
        return load_settings(path)
    except (ValidationError, OSError) as e:
        typer.echo(f"[ERROR] settings {path}: {e}", err=True)
        raise typer.Exit(code=1)

def _bestiary_or_exit(base: Path) -> Bestiary:
    try:
        return load_bestiary(base)
    except (ValidationError, RuntimeError, ValueError, yaml.YAMLError) as e:
        typer.echo(f"[ERROR] {e}", err=True)
        raise typer.Exit(code=1)

def _parse_or_exit(notation: str):
    try:
        return parse_dice(notation)
    except ValueError as e:
        typer.echo(f"[ERROR] {e}", err=True)
        raise typer.Exit(code=1)

@app.command()
def roll(
    notation: str,
    seed: Optional[int] = typer.Option(None, "--seed"),
    settings_path: Path = typer.Option(SETTINGS_PATH, "--settings"),
):
    """Roll dice notation once, e.g. 8d10+16."""
    expr = _parse_or_exit(notation)
    if seed is None:
        seed = _settings_or_exit(settings_path).rng_seed
    dr = expr.roll(random.Random(seed))
    typer.echo(f"{expr} = {dr.value()}  {die_results(dr)}")

@app.command()
def expected(notation: str):
    """Exact expected value and range of dice notation."""
    expr = _parse_or_exit(notation)
    lo, hi = expr.bounds()
    typer.echo(f"{expr}: expected {expr.expected():g} (range {lo}-{hi})")

@app.command()
def table(cr: str):
    """Calibrated numbers for a CR."""
    try:
        level = CR(cr)
    except ValueError:
        typer.echo(f"[ERROR] unknown CR '{cr}'", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"CR {level.value}: prof +{challenge.proficiency_bonus(level)}, AC {challenge.expected_ac(level)}, "
               f"attack +{challenge.to_hit_bonus(level)}, save DC {challenge.save_dc(level)}")

@app.command("rate")
def rate_cmd(
    monster_id: str,
    content: Optional[Path] = typer.Option(None, "--content-dir"),
    rounds: Optional[int] = typer.Option(None, "--rounds", min=1),
    settings_path: Path = typer.Option(SETTINGS_PATH, "--settings"),
):
    """Derive the CR of a statblock and explain each step."""
    settings = _settings_or_exit(settings_path)
    bestiary = _bestiary_or_exit(content or content_dir(settings.content_dir))
    try:
        sb = bestiary.get(monster_id)
    except KeyError:
        typer.echo(f"[ERROR] unknown monster '{monster_id}'; known: {', '.join(bestiary.ids())}", err=True)
        raise typer.Exit(code=1)
    combat = settings.combat
    if rounds is not None:
        combat = combat.model_copy(update={"rounds": rounds})
    result = rate(sb.to_creature(), combat, cr=sb.cr)
    for line in result.logs:
        typer.echo(line)
    typer.echo(f"CR {result.cr.value}")

app.command("validate")(validate_content)

@app.command("export-schemas")
def export_schemas_cmd(out: Path = typer.Option(Path("docs/schemas"), "--out")):
    export_schemas(out)
    typer.echo(f"Exported schemas to {out}")

if __name__ == "__main__":
    app()
