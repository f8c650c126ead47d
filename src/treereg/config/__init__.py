"""Public configuration API."""

from .loader import TOKEN_ENV_VAR, load_upload_config
from .models import UploadConfig

__all__ = ["TOKEN_ENV_VAR", "UploadConfig", "load_upload_config"]
