"""
WbStatsPy - A Python wrapper for the World Bank Indicators API

This package downloads World Bank indicators over the paginated XML API,
joins indicator series on (year, country), and computes and plots the
forest area of countries and regions.
"""

from .client import WorldBankClient
from .exceptions import (
    WorldBankAPIError, IndicatorNotFoundError, InvalidParameterError, DataParsingError
)
from .models import (
    DataRecord, IndicatorPage, IndicatorSeries, Country, RegionCatalog, YearlyStat, ForestReport
)
from .units import Area, Percent, Unit
from .parsing import extract_records, build_series
from .analysis import compute_forest_area, available_regions, yearly_stats

__version__ = "0.1.0"

# Make the main client easily accessible
__all__ = [
    "WorldBankClient",
    "DataRecord",
    "IndicatorPage",
    "IndicatorSeries",
    "Country",
    "RegionCatalog",
    "YearlyStat",
    "ForestReport",
    "Area",
    "Percent",
    "Unit",
    "extract_records",
    "build_series",
    "compute_forest_area",
    "available_regions",
    "yearly_stats",
    "WorldBankAPIError",
    "IndicatorNotFoundError",
    "InvalidParameterError",
    "DataParsingError"
]
