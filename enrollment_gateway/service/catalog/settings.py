"""
Plan Catalog Settings.

The catalog is a static table loaded once at process start. It can be
replaced via an environment variable holding a JSON array of plans:

    CATALOG_PLANS_JSON='[{"id": "gold", "name": "Gold Plan", ...}]'

All amounts are in kobo.
"""

import json
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from enrollment_gateway.domain.entities import Plan

REQUIRED_PLAN_FIELDS = (
    "id",
    "name",
    "total_amount",
    "installment_count",
    "first_installment_amount",
    "subsequent_installment_amount",
    "interval_months",
)

DEFAULT_PLANS = [
    {
        "id": "gold",
        "name": "Gold Plan",
        "total_amount": 50_000_000,
        "installment_count": 1,
        "first_installment_amount": 50_000_000,
        "subsequent_installment_amount": 0,
        "interval_months": 0,
        "currency": "NGN",
        "discount_percent": 50,
    },
    {
        "id": "silver",
        "name": "Silver Plan",
        "total_amount": 55_000_000,
        "installment_count": 2,
        "first_installment_amount": 27_500_000,
        "subsequent_installment_amount": 27_500_000,
        "interval_months": 3,
        "currency": "NGN",
        "discount_percent": 45,
    },
    {
        "id": "bronze",
        "name": "Bronze Plan",
        "total_amount": 60_000_000,
        "installment_count": 4,
        "first_installment_amount": 15_000_000,
        "subsequent_installment_amount": 15_000_000,
        "interval_months": 3,
        "currency": "NGN",
        "discount_percent": 40,
    },
]


class CatalogSettings(BaseSettings):
    """
    Source table for the plan catalog.

    Overridable via environment variables with the CATALOG_ prefix.
    Shape is checked here; arithmetic consistency is checked when the
    catalog is built.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    plans_json: str = Field(
        default=json.dumps(DEFAULT_PLANS),
        description="Plan table as a JSON array of objects",
    )

    @field_validator("plans_json")
    @classmethod
    def validate_plans_json(cls, v: str) -> str:
        """Validate that the plan table is parseable and well-formed."""
        try:
            plans = json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")

        if not isinstance(plans, list) or not plans:
            raise ValueError("Plans must be a non-empty list")

        for entry in plans:
            if not isinstance(entry, dict):
                raise ValueError("Each plan must be an object")
            missing = [name for name in REQUIRED_PLAN_FIELDS if name not in entry]
            if missing:
                raise ValueError(
                    f"Plan {entry.get('id', '?')} is missing {', '.join(missing)}"
                )
        return v

    @property
    def plans(self) -> List[Plan]:
        """Plan entities in table order."""
        return [
            Plan(
                id=str(entry["id"]).lower(),
                name=entry["name"],
                total_amount=int(entry["total_amount"]),
                installment_count=int(entry["installment_count"]),
                first_installment_amount=int(entry["first_installment_amount"]),
                subsequent_installment_amount=int(entry["subsequent_installment_amount"]),
                interval_months=int(entry["interval_months"]),
                currency=entry.get("currency", "NGN"),
                discount_percent=int(entry.get("discount_percent", 0)),
            )
            for entry in json.loads(self.plans_json)
        ]


@lru_cache
def get_catalog_settings() -> CatalogSettings:
    """Get cached catalog settings instance."""
    return CatalogSettings()
