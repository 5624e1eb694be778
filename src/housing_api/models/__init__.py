"""ORM model registry: import all models so Alembic autogenerate discovers them."""

from housing_api.models.housing_stats import HousingStats
from housing_api.models.zip_county import ZipCounty

__all__ = [
    "HousingStats",
    "ZipCounty",
]
