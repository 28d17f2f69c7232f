"""Update list loading.

Reads the static update list from the bundled JSON file or from a file
given in settings.
"""

from importlib import resources
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter
import structlog

from gorilla_archive.core.exceptions import ConfigurationError
from gorilla_archive.models.catalog import Update

logger = structlog.get_logger(__name__)

_updates_adapter = TypeAdapter(List[Update])


def load_updates(path: Optional[str] = None) -> List[Update]:
    """Load the update list.

    Args:
        path: JSON file to read; the bundled list when None.

    Returns:
        List[Update]: Updates in file order.

    Raises:
        ConfigurationError: If the given file does not exist.
    """
    if path is None:
        raw = (resources.files(__package__) / "data" / "updates.json").read_bytes()
        source = "bundled"
    else:
        data_file = Path(path)
        if not data_file.is_file():
            raise ConfigurationError("CATALOG_DATA_FILE", f"Catalog data file not found: {data_file}")
        raw = data_file.read_bytes()
        source = str(data_file)

    updates = _updates_adapter.validate_json(raw)
    logger.info("Loaded update list", source=source, count=len(updates))
    return updates
