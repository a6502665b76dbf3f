"""JSON file persistence for the movie catalog."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .models import Catalog

logger = logging.getLogger(__name__)


class CatalogStore:
    """Loads and saves the whole catalog document.

    The store performs no locking; callers that read, modify and write the
    catalog are responsible for serialising those cycles.
    """

    def __init__(self, catalog_path: Path) -> None:
        self.catalog_path = Path(catalog_path)

    def load(self) -> Catalog:
        """Return the persisted catalog, or an empty one if it is unusable."""

        try:
            raw = self.catalog_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Catalog()
        except OSError as exc:
            logger.warning("Could not read catalog %s: %s", self.catalog_path, exc)
            return Catalog()

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Catalog %s is not valid JSON: %s", self.catalog_path, exc)
            return Catalog()

        if not isinstance(payload, dict) or not isinstance(payload.get("movies"), list):
            logger.warning("Catalog %s has an unexpected shape", self.catalog_path)
            return Catalog()

        try:
            return Catalog.model_validate(payload)
        except ValidationError as exc:
            logger.warning(
                "Catalog %s failed validation: %s", self.catalog_path, exc
            )
            return Catalog()

    def save(self, catalog: Catalog) -> None:
        """Overwrite the persisted document with ``catalog``."""

        self.catalog_path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(catalog.to_document(), indent=2, ensure_ascii=False) + "\n"
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self.catalog_path.name}.", dir=self.catalog_path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.replace(temp_name, self.catalog_path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
