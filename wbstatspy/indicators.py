"""Indicators API functionality for downloading indicator data."""

from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Sequence, Tuple, Union
import requests
import pandas as pd
from .models import IndicatorPage, IndicatorSeries
from .parsing import parse_indicator_page, extract_records, build_series
from .units import Unit
from .utils import build_query_params, parse_response, validate_date_range
from .exceptions import WorldBankAPIError, InvalidParameterError

DEFAULT_BASE_URL = "https://api.worldbank.org/v2"
DEFAULT_PER_PAGE = 100

SURFACE_AREA_INDICATOR = "AG.SRF.TOTL.K2"  # Surface area (sq. km)
FOREST_AREA_INDICATOR = "AG.LND.FRST.ZS"   # Forest area (% of land area)

FetchRequest = Tuple[str, str]  # (indicator code, date range)


class IndicatorsAPI:
    """Handler for World Bank indicator downloads."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL,
                 api_key: Optional[str] = None,
                 per_page: int = DEFAULT_PER_PAGE,
                 max_workers: Optional[int] = None,
                 show_progress: bool = False):
        if per_page < 1:
            raise InvalidParameterError(f"per_page must be positive, got {per_page}")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.per_page = per_page
        self.max_workers = max_workers
        self.show_progress = show_progress

    def get_page(self, indicator_code: str, date_range: str, page: int = 1,
                 countries: str = "all") -> IndicatorPage:
        """
        Download and parse a single page of an indicator.

        Args:
            indicator_code: World Bank indicator code, e.g. 'AG.LND.FRST.ZS'
            date_range: Date range in 'YYYY:YYYY' format
            page: Page number, starting at 1
            countries: Country codes separated by ';', or 'all'

        Returns:
            IndicatorPage with the records of this page
        """
        url = f"{self.base_url}/country/{countries}/indicator/{indicator_code}"
        params = build_query_params(self.per_page, self.api_key, date=date_range, page=page)

        try:
            response = requests.get(url, params=params)
        except requests.exceptions.RequestException as e:
            raise WorldBankAPIError(f"Failed to get {indicator_code} {date_range} page {page}: {e}")

        root = parse_response(response, indicator_code)
        return parse_indicator_page(root)

    def iter_indicator_pages(self, indicator_code: str, date_range: str,
                             countries: str = "all") -> Iterator[IndicatorPage]:
        """
        Yield the pages of an indicator one by one, starting at page 1.

        The next page is only requested once the current one has been
        parsed and its declared page count is known.
        """
        validate_date_range(date_range)

        page_number = 1
        while True:
            page = self.get_page(indicator_code, date_range, page_number, countries)

            if self.show_progress:
                print(f"Downloaded {indicator_code} {date_range} page {page_number}/{page.pages}")

            yield page

            # A declared total of 0 means the query matched nothing
            if page_number >= page.pages:
                return
            page_number += 1

    def get_indicator_pages(self, indicator_code: str, date_range: str,
                            countries: str = "all") -> List[IndicatorPage]:
        """
        Download every page of an indicator for a date range.

        Args:
            indicator_code: World Bank indicator code
            date_range: Date range in 'YYYY:YYYY' format
            countries: Country codes separated by ';', or 'all'

        Returns:
            List of pages in ascending page order
        """
        return list(self.iter_indicator_pages(indicator_code, date_range, countries))

    def download_all(self, fetch_requests: Sequence[FetchRequest],
                     countries: str = "all") -> List[List[IndicatorPage]]:
        """
        Download several (indicator, date range) combinations in parallel.

        All downloads are started together and the call blocks until every
        one of them has finished. If any download fails, its exception is
        raised and no results are returned.

        Args:
            fetch_requests: (indicator code, date range) pairs
            countries: Country codes separated by ';', or 'all'

        Returns:
            One list of pages per request, in the order the requests were given
        """
        fetch_requests = list(fetch_requests)
        if not fetch_requests:
            return []

        # Validate up front so a bad range never starts a batch
        for _, date_range in fetch_requests:
            validate_date_range(date_range)

        workers = self.max_workers or len(fetch_requests)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = executor.map(
                lambda request: self.get_indicator_pages(request[0], request[1], countries),
                fetch_requests
            )
            return list(results)

    def get_series(self, indicator_code: str, date_ranges: Sequence[str],
                   unit: Union[Unit, str], countries: str = "all") -> IndicatorSeries:
        """
        Download an indicator over several date ranges and build one series.

        Args:
            indicator_code: World Bank indicator code
            date_ranges: Date ranges in 'YYYY:YYYY' format
            unit: Unit tag of the indicator values
            countries: Country codes separated by ';', or 'all'

        Returns:
            IndicatorSeries keyed by (year, country)
        """
        batches = self.download_all([(indicator_code, r) for r in date_ranges], countries)
        return self.build_series_from_batches(batches, unit, indicator_code)

    def get_series_as_dataframe(self, indicator_code: str, date_ranges: Sequence[str],
                                unit: Union[Unit, str] = Unit.PERCENT,
                                countries: str = "all") -> pd.DataFrame:
        """
        Get an indicator as a pandas DataFrame.

        Returns:
            DataFrame with 'year', 'country' and 'value' columns
        """
        series = self.get_series(indicator_code, date_ranges, unit, countries)
        df = series.to_dataframe()
        df['indicator'] = indicator_code
        return df

    @staticmethod
    def build_series_from_batches(batches: Sequence[List[IndicatorPage]],
                                  unit: Union[Unit, str],
                                  indicator_code: Optional[str] = None) -> IndicatorSeries:
        """Concatenate the pages of several downloads and build one series."""
        pages = [page for batch in batches for page in batch]
        return build_series(extract_records(pages), unit, indicator_code)

