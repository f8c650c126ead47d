"""Typer CLI entrypoint for treereg."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from .config import load_upload_config
from .engine import RecordStore, apply_patches, load_interventions, load_patches
from .engine.store import RecordPredicate, any_invalid, missing_geometry
from .exceptions import ConfigError, TreeregError
from .geometry import GeometryError, read_geometry_file
from .records import IngestionError, NothingToDeleteError, RecordPatchError
from .upload import InterventionUploader, UploadProgress, build_summary, write_results


EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 2
EXIT_IO_ERROR = 4
EXIT_CONFIG_ERROR = 5


logger = logging.getLogger("treereg")

app = typer.Typer(help="Bulk tree-planting intervention uploader")


@app.callback()
def main_callback(
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase log output (-v for progress, -vv for debug)",
    ),
) -> None:
    """Configure logging shared by all commands."""

    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


GEOMETRY_DIR_OPTION = typer.Option(
    None,
    "--geometry-dir",
    "-g",
    file_okay=False,
    dir_okay=True,
    help="Folder of folio_<FOLIO>.geojson files to match against records",
)
PATCHES_OPTION = typer.Option(
    None,
    "--patches",
    help="TOML file of [[patch]] edits applied after loading",
)
ATTACH_OPTION = typer.Option(
    None,
    "--attach",
    help="Attach a geometry file to one record, as FOLIO=PATH (repeatable)",
)


@app.command("inspect")
def inspect_command(
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    geometry_dir: Optional[Path] = GEOMETRY_DIR_OPTION,
    patches: Optional[Path] = PATCHES_OPTION,
    attach: Optional[List[str]] = ATTACH_OPTION,
) -> None:
    """Load, validate and report on an intervention CSV without uploading."""

    store = _prepare_store(csv_path, geometry_dir, patches, attach or [])
    stats = store.stats()
    payload = {
        "stats": stats.as_dict(),
        "records": [record.as_dict() for record in store],
    }
    typer.echo(json.dumps(payload, indent=2))

    if stats.invalid:
        raise typer.Exit(EXIT_VALIDATION_ERROR)


@app.command("upload")
def upload_command(
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    config_path: Path = typer.Option(
        Path("treereg.toml"),
        "--config",
        "-c",
        help="Path to the upload configuration TOML",
    ),
    geometry_dir: Optional[Path] = GEOMETRY_DIR_OPTION,
    patches: Optional[Path] = PATCHES_OPTION,
    attach: Optional[List[str]] = ATTACH_OPTION,
    drop_missing_geometry: bool = typer.Option(
        False,
        "--drop-missing-geometry",
        help="Delete records that still have no geometry document",
    ),
    drop_invalid: bool = typer.Option(
        False,
        "--drop-invalid",
        help="Delete every record that is not ready for upload",
    ),
    out_dir: Path = typer.Option(
        Path("upload-results"),
        "--out",
        "-o",
        file_okay=False,
        dir_okay=True,
        writable=True,
        help="Directory for logs, failed rows and the summary",
    ),
    delay: Optional[float] = typer.Option(
        None,
        "--delay",
        min=0,
        help="Seconds between requests (defaults to request_delay from the config)",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with a validation error code if any record failed to upload",
    ),
) -> None:
    """Submit every ready record to the registration service."""

    try:
        config = load_upload_config(config_path)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    missing = config.missing_fields()
    if missing:
        typer.echo(f"Config error: missing {', '.join(missing)}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR)

    store = _prepare_store(csv_path, geometry_dir, patches, attach or [])
    if drop_missing_geometry:
        _drop(store, missing_geometry)
    if drop_invalid:
        _drop(store, any_invalid)

    stats = store.stats()
    if stats.invalid:
        typer.echo(
            f"{stats.invalid} records are not ready for upload; fix them or pass "
            "--drop-invalid / --drop-missing-geometry",
            err=True,
        )
        raise typer.Exit(EXIT_VALIDATION_ERROR)

    uploader = InterventionUploader(delay=delay)
    result = uploader.run(store.records(), config, on_progress=_log_progress)

    try:
        written = write_results(result, config, out_dir)
    except OSError as exc:
        typer.echo(f"Failed to write results to {out_dir}: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc

    payload = build_summary(result, config, uploader.clock())
    payload["artifacts"] = [str(path) for path in written]
    payload["deleted"] = stats.deleted
    typer.echo(json.dumps(payload, indent=2))

    if strict and result.error_count:
        raise typer.Exit(EXIT_VALIDATION_ERROR)


def _prepare_store(
    csv_path: Path,
    geometry_dir: Optional[Path],
    patches: Optional[Path],
    attach: List[str],
) -> RecordStore:
    try:
        store = load_interventions(csv_path, geometry_dir)
        for folio_no, geometry_path in _parse_attachments(attach):
            record = store.by_folio(folio_no)
            if record is None:
                raise RecordPatchError(f"no record with folio number {folio_no}")
            store.attach_geometry(record.id, read_geometry_file(geometry_path))
        if patches is not None:
            apply_patches(store, load_patches(patches))
    except IngestionError as exc:
        typer.echo(f"Ingestion error: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc
    except GeometryError as exc:
        typer.echo(f"Geometry error: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc
    except RecordPatchError as exc:
        typer.echo(f"Edit error: {exc}", err=True)
        raise typer.Exit(EXIT_VALIDATION_ERROR) from exc
    except TreeregError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc
    return store


def _parse_attachments(values: List[str]) -> List[tuple[str, Path]]:
    parsed: List[tuple[str, Path]] = []
    for value in values:
        folio_no, sep, path = value.partition("=")
        if not sep or not folio_no or not path:
            raise typer.BadParameter(f"expected FOLIO=PATH, got '{value}'", param_hint="--attach")
        parsed.append((folio_no, Path(path)))
    return parsed


def _drop(store: RecordStore, predicate: RecordPredicate) -> None:
    try:
        removed = store.delete_where(predicate)
    except NothingToDeleteError as exc:
        logger.info("Nothing to delete: %s", exc)
        return
    logger.info(
        "Dropped %d records: %s",
        len(removed),
        ", ".join(record.folio_no for record in removed),
    )


def _log_progress(progress: UploadProgress) -> None:
    logger.info("Upload progress %d/%d", progress.current, progress.total)
