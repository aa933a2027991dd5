"""Data models for the wbstatspy package."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

import pandas as pd

from .units import Area, Percent, Unit

SeriesKey = Tuple[int, str]  # (year, country name)


@dataclass(frozen=True)
class DataRecord:
    """A single observation as found on an indicator page."""
    year: int
    country: str
    value: str  # empty string means "not reported"
    country_code: Optional[str] = None

    @property
    def key(self) -> SeriesKey:
        return (self.year, self.country)

    @property
    def is_empty(self) -> bool:
        return self.value == ""


@dataclass(frozen=True)
class IndicatorPage:
    """One page of an indicator response."""
    page: int
    pages: int  # declared total page count
    records: Tuple[DataRecord, ...] = ()
    per_page: Optional[int] = None
    total: Optional[int] = None

    @property
    def is_last(self) -> bool:
        return self.page >= self.pages


@dataclass
class IndicatorSeries:
    """All values of one indicator keyed by (year, country)."""
    unit: Unit
    values: Dict[SeriesKey, Union[Area, Percent]] = field(default_factory=dict)
    indicator_code: Optional[str] = None

    def __contains__(self, key) -> bool:
        return key in self.values

    def __getitem__(self, key: SeriesKey) -> Union[Area, Percent]:
        return self.values[key]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[SeriesKey]:
        return iter(self.values)

    def keys(self):
        return self.values.keys()

    def get(self, key: SeriesKey, default=None):
        return self.values.get(key, default)

    def years(self) -> List[int]:
        return sorted({year for year, _ in self.values})

    def countries(self) -> List[str]:
        """Country names in first-seen order."""
        return list(dict.fromkeys(country for _, country in self.values))

    def to_dataframe(self) -> pd.DataFrame:
        rows = [
            {'year': year, 'country': country, 'value': float(value)}
            for (year, country), value in self.values.items()
        ]
        return pd.DataFrame(rows, columns=['year', 'country', 'value'])


@dataclass(frozen=True)
class Country:
    """A country or aggregate region from the countries listing."""
    id: str
    name: str
    iso2_code: Optional[str] = None
    region: Optional[str] = None
    income_level: Optional[str] = None
    capital_city: Optional[str] = None

    @property
    def is_aggregate(self) -> bool:
        return self.region == "Aggregates"


@dataclass
class RegionCatalog:
    """Countries in the order the API returned them."""
    countries: List[Country] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [country.name for country in self.countries]

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.countries)

    def __contains__(self, name) -> bool:
        return name in self.names


@dataclass
class YearlyStat:
    """Forest area per qualifying region for one year."""
    year: int
    regions: List[str]
    values: List[Area]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Area]:
        return iter(self.values)

    def as_floats(self) -> List[float]:
        return [float(value) for value in self.values]


@dataclass
class ForestReport:
    """Outcome of the forest area pipeline."""
    years: List[int]
    regions: List[str]  # regions with data for every year
    stats: Dict[int, YearlyStat]
    areas: Optional[IndicatorSeries] = None
    forests: Optional[IndicatorSeries] = None

    def to_dataframe(self) -> pd.DataFrame:
        """Regions as rows, years as columns, forest area in km²."""
        data = {year: self.stats[year].as_floats() for year in self.years}
        df = pd.DataFrame(data, index=pd.Index(self.regions, name='region'))
        return df
