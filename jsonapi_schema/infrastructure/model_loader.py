"""Resource Model Loader — reads the resource model handed over by the host framework.

Invariants:
    - Returns a fully validated, frozen ResourceModel or raises ResourceModelLoadError
    - Never compiles: loading and compiling fail with distinct error codes
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from jsonapi_schema.core.errors import ResourceModelLoadError
from jsonapi_schema.core.resource_model import ResourceModel

logger = logging.getLogger(__name__)


def parse_resource_model(raw: str | bytes, source: str = "<memory>") -> ResourceModel:
    try:
        return ResourceModel.model_validate_json(raw)
    except ValidationError as e:
        raise ResourceModelLoadError(
            f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}", source,
        ) from e


def load_resource_model(path: str | Path) -> ResourceModel:
    """Read and validate a resource model JSON file."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ResourceModelLoadError(f"cannot read file ({e.strerror})", str(path)) from e
    model = parse_resource_model(raw, str(path))
    logger.info(
        f"Loaded resource model with {len(model.resources)} resource(s) from {path}",
        extra={"content_hash": model.content_hash()},
    )
    return model
