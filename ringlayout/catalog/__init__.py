"""Bead catalog — load, validate, query, and serialize catalog/items/*.json."""

from .models import SHAPES, ItemSpec, ValidationError, CatalogResult
from .loader import load_catalog, get_item, CATALOG_DIR
from .serialization import catalog_to_dict, item_to_dict

__all__ = [
    # Models
    "SHAPES", "ItemSpec", "ValidationError", "CatalogResult",
    # Loader
    "load_catalog", "get_item", "CATALOG_DIR",
    # Serialization
    "catalog_to_dict", "item_to_dict",
]
