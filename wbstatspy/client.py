"""Main client class for the wbstatspy package."""

from typing import List, Optional, Sequence, Union
import pandas as pd
from matplotlib.figure import Figure
from .countries import CountriesAPI
from .indicators import (
    IndicatorsAPI, FetchRequest, DEFAULT_BASE_URL, DEFAULT_PER_PAGE,
    SURFACE_AREA_INDICATOR, FOREST_AREA_INDICATOR
)
from .analysis import build_forest_report
from .models import ForestReport, IndicatorPage, IndicatorSeries, RegionCatalog
from .plotting import Output, Plotter, RangeY, plot_forest_report
from .units import Unit
from .utils import format_date_range
from .exceptions import InvalidParameterError

DEFAULT_YEARS = (1990, 2000, 2005)


class WorldBankClient:
    """
    Main client for accessing the World Bank Indicators API.

    This class provides a unified interface for listing countries, downloading
    indicator series in parallel, and computing and plotting forest area
    statistics.
    """

    def __init__(self,
                 base_url: str = DEFAULT_BASE_URL,
                 api_key: Optional[str] = None,
                 per_page: int = DEFAULT_PER_PAGE,
                 max_workers: Optional[int] = None,
                 show_progress: bool = False,
                 plot_output: Optional[Output] = None):
        """
        Initialize the World Bank client.

        Args:
            base_url: Base URL of the API
            api_key: API key sent with every request (omitted when None)
            per_page: Number of records per page
            max_workers: Maximum parallel downloads (default: one per request)
            show_progress: Whether to print download progress
            plot_output: Where plots go when no Plotter is given
                (default: an interactive window)
        """
        self.base_url = base_url
        self.api_key = api_key
        self.show_progress = show_progress
        self.plot_output = plot_output

        # Initialize API handlers
        self.countries = CountriesAPI(base_url, api_key, per_page, show_progress)
        self.indicators = IndicatorsAPI(base_url, api_key, per_page, max_workers, show_progress)

        # Region catalogs already downloaded, keyed by (region, exclude_aggregates)
        self._regions_cache = {}

    def get_regions(self,
                    region: Optional[str] = None,
                    exclude_aggregates: bool = False,
                    refresh: bool = False) -> RegionCatalog:
        """
        Get the countries and regions known to the API, in API order.

        Args:
            region: Region code to restrict the listing to, e.g. 'NAC'
            exclude_aggregates: Whether to drop aggregates such as 'World'
            refresh: Whether to download the listing again

        Returns:
            RegionCatalog object
        """
        key = (region, exclude_aggregates)
        if refresh:
            self._regions_cache.pop(key, None)

        if key not in self._regions_cache:
            self._regions_cache[key] = self.countries.get_countries(region, exclude_aggregates)

        return self._regions_cache[key]

    def get_indicator_pages(self, indicator_code: str, date_range: str) -> List[IndicatorPage]:
        """
        Download every page of an indicator for one date range.

        Args:
            indicator_code: World Bank indicator code, e.g. 'AG.LND.FRST.ZS'
            date_range: Date range in 'YYYY:YYYY' format

        Returns:
            List of IndicatorPage objects in page order
        """
        return self.indicators.get_indicator_pages(indicator_code, date_range)

    def download_all(self, fetch_requests: Sequence[FetchRequest]) -> List[List[IndicatorPage]]:
        """
        Download several (indicator, date range) pairs in parallel.

        Results come back in the order of ``fetch_requests``. A failure of
        any single download fails the whole call.
        """
        return self.indicators.download_all(fetch_requests)

    def get_series(self,
                   indicator_code: str,
                   date_ranges: Sequence[str],
                   unit: Union[Unit, str]) -> IndicatorSeries:
        """
        Get an indicator as a series keyed by (year, country).

        Args:
            indicator_code: World Bank indicator code
            date_ranges: Date ranges in 'YYYY:YYYY' format
            unit: Unit of the values, Unit.AREA or Unit.PERCENT

        Returns:
            IndicatorSeries object

        Examples:
            # Forest share for three separate years
            forests = client.get_series(
                'AG.LND.FRST.ZS',
                ['1990:1990', '2000:2000', '2005:2005'],
                Unit.PERCENT
            )
            forests[2000, 'Canada']
        """
        return self.indicators.get_series(indicator_code, date_ranges, unit)

    def get_series_as_dataframe(self,
                                indicator_code: str,
                                date_ranges: Sequence[str],
                                unit: Union[Unit, str] = Unit.PERCENT) -> pd.DataFrame:
        """
        Get an indicator as a pandas DataFrame.

        Returns:
            DataFrame with 'year', 'country', 'value' and 'indicator' columns
        """
        return self.indicators.get_series_as_dataframe(indicator_code, date_ranges, unit)

    def get_forest_report(self,
                          years: Sequence[int] = DEFAULT_YEARS,
                          region: Optional[str] = None,
                          exclude_aggregates: bool = False) -> ForestReport:
        """
        Compute the forest area of every region for the given years.

        Surface area and forest share are downloaded for each year in a single
        parallel batch, joined on (year, country), and the forest area in km²
        is computed for the regions that have both values in every year.

        Args:
            years: Years to compare
            region: Region code restricting the countries, e.g. 'NAC'
            exclude_aggregates: Whether to drop aggregates such as 'World'

        Returns:
            ForestReport object
        """
        years = [int(year) for year in years]
        if not years:
            raise InvalidParameterError("At least one year is required")

        date_ranges = [format_date_range(year) for year in years]
        catalog = self.get_regions(region, exclude_aggregates)

        fetch_requests = [
            (indicator, date_range)
            for indicator in (SURFACE_AREA_INDICATOR, FOREST_AREA_INDICATOR)
            for date_range in date_ranges
        ]
        batches = self.download_all(fetch_requests)

        n = len(date_ranges)
        areas = IndicatorsAPI.build_series_from_batches(
            batches[:n], Unit.AREA, SURFACE_AREA_INDICATOR
        )
        forests = IndicatorsAPI.build_series_from_batches(
            batches[n:], Unit.PERCENT, FOREST_AREA_INDICATOR
        )

        report = build_forest_report(years, catalog.names, areas, forests)

        if self.show_progress:
            print(f"Forest area computed for {len(report.regions)} of {len(catalog)} regions")

        return report

    def plot_forest_report(self,
                           report: ForestReport,
                           plotter: Optional[Plotter] = None,
                           colors: Optional[Sequence[str]] = None,
                           range_y: Optional[RangeY] = None) -> Figure:
        """
        Plot a forest report as grouped histograms, one series per year.

        Args:
            report: Report from get_forest_report
            plotter: Plotter to draw with (default: one writing to plot_output)
            colors: Colors assigned to the years in order
            range_y: Optional fixed y-axis range

        Returns:
            The matplotlib Figure
        """
        if plotter is None and self.plot_output is not None:
            plotter = Plotter(output=self.plot_output)
        return plot_forest_report(report, plotter, colors, range_y)

    def clear_cache(self) -> None:
        """Forget downloaded region catalogs."""
        self._regions_cache = {}
