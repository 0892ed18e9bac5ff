"""
Plan Catalog for the Enrollment Gateway
"""

from .settings import CatalogSettings, DEFAULT_PLANS, get_catalog_settings
from .catalog import PlanCatalog, get_plan_catalog, load_catalog, validate_plan

__all__ = [
    "CatalogSettings",
    "DEFAULT_PLANS",
    "get_catalog_settings",
    "PlanCatalog",
    "get_plan_catalog",
    "load_catalog",
    "validate_plan",
]
