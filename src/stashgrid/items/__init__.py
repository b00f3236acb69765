'''
Items package: item descriptors, schema validation, and the catalog.
'''
from .catalog import ItemCatalog, default_catalog
from .models import ItemCategory, ItemDescriptor, WILDCARD_SUB_CATEGORY, format_roubles
from .schema import item_schema_errors

__all__ = [
    'ItemCatalog',
    'ItemCategory',
    'ItemDescriptor',
    'WILDCARD_SUB_CATEGORY',
    'default_catalog',
    'format_roubles',
    'item_schema_errors',
]
