from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional
import typer
import yaml
from pydantic import ValidationError
from monstercr.engine.loader import StatblockAdapter, iter_files, load_file
from monstercr.engine.rating import rate
from monstercr.engine.settings import SETTINGS_PATH, load_settings
from monstercr.util.paths import content_dir

def validate_content(
    content: Optional[Path] = typer.Option(None, "--content-dir", help="Directory holding monsters/ (default: bundled content)"),
    rate_all: bool = typer.Option(False, "--rate", help="Also rate every statblock and warn when the declared CR differs"),
    settings_path: Path = typer.Option(SETTINGS_PATH, "--settings", help="Settings file (content dir and combat assumptions)"),
):
    """Validate every statblock: schema, unique ids and (optionally) CR agreement."""
    try:
        settings = load_settings(settings_path)
    except (ValidationError, OSError) as e:
        typer.echo(f"[ERROR] settings {settings_path}: {e}", err=True)
        raise typer.Exit(code=1)
    base = content or content_dir(settings.content_dir)
    ok = True
    seen: Dict[str, Path] = {}
    warnings: List[str] = []
    for fp in iter_files(base / "monsters"):
        try:
            sb = StatblockAdapter.validate_python(load_file(fp))
        except (ValidationError, ValueError, yaml.YAMLError) as e:
            ok = False
            typer.echo(f"[ERROR] {fp}: {e}", err=True)
            continue
        if sb.id in seen:
            ok = False
            typer.echo(f"[ERROR] Duplicate monster id '{sb.id}' in {fp} (first in {seen[sb.id]})", err=True)
            continue
        seen[sb.id] = fp
        if rate_all:
            r = rate(sb.to_creature(), settings.combat, cr=sb.cr)
            if sb.cr is not None and r.cr != sb.cr:
                warnings.append(f"[WARN] {sb.id}: declared CR {sb.cr.value}, computed CR {r.cr.value}")

    for w in warnings:
        typer.echo(w)
    if not ok:
        raise typer.Exit(code=1)
    typer.echo(f"Validated {len(seen)} statblock(s) successfully.")
