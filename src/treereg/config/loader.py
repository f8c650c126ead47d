"""Functions for reading and validating the upload configuration file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from pydantic import ValidationError

from ..exceptions import ConfigError
from .models import UploadConfig


TOKEN_ENV_VAR = "TREEREG_BEARER_TOKEN"


def load_upload_config(
    path: Path, *, env: Optional[Mapping[str, str]] = None
) -> UploadConfig:
    """Load the upload configuration from the TOML file at *path*.

    The bearer token may be supplied through ``TREEREG_BEARER_TOKEN`` instead
    of the file; a non-empty environment value wins.
    """

    path = Path(path)
    env = os.environ if env is None else env
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(path, "file not found") from exc
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise ConfigError(path, f"failed to read TOML: {exc}") from exc

    section = data.get("upload", data)
    if not isinstance(section, dict):
        raise ConfigError(path, "[upload] must be a table")
    data = dict(section)
    token = env.get(TOKEN_ENV_VAR, "").strip()
    if token:
        data["bearer_token"] = token

    try:
        return UploadConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(path, format_validation_errors(exc)) from exc


def format_validation_errors(error: ValidationError) -> str:
    """Render pydantic errors as ``patch[0].folio: message`` joined by ``; ``."""

    return "; ".join(_describe_error(err) for err in error.errors(include_context=False))


def _describe_error(err: Mapping[str, Any]) -> str:
    location = ""
    for part in err.get("loc", ()):
        if isinstance(part, int):
            location += f"[{part}]"
        elif location:
            location += f".{part}"
        else:
            location = str(part)
    message = err.get("msg", "invalid value")
    return f"{location}: {message}" if location else message
