from .static_catalog import StaticProductCatalog, DEFAULT_PRODUCTS

__all__ = ["StaticProductCatalog", "DEFAULT_PRODUCTS"]
