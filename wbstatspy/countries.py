"""Countries API functionality for listing countries and regions."""

from typing import List, Optional
import requests
from .models import Country, RegionCatalog
from .parsing import parse_countries_page
from .utils import build_query_params, parse_response
from .exceptions import WorldBankAPIError, InvalidParameterError
from .indicators import DEFAULT_BASE_URL, DEFAULT_PER_PAGE


class CountriesAPI:
    """Handler for the World Bank countries listing."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL,
                 api_key: Optional[str] = None,
                 per_page: int = DEFAULT_PER_PAGE,
                 show_progress: bool = False):
        if per_page < 1:
            raise InvalidParameterError(f"per_page must be positive, got {per_page}")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.per_page = per_page
        self.show_progress = show_progress

    def get_countries(self, region: Optional[str] = None,
                      exclude_aggregates: bool = False) -> RegionCatalog:
        """
        Get the list of countries, in the order the API returns them.

        Args:
            region: Region code to restrict the listing to, e.g. 'NAC'
            exclude_aggregates: Whether to drop aggregates such as 'World'

        Returns:
            RegionCatalog with the countries of every page
        """
        url = f"{self.base_url}/country"

        countries: List[Country] = []
        page_number = 1
        while True:
            params = build_query_params(self.per_page, self.api_key,
                                        region=region, page=page_number)
            try:
                response = requests.get(url, params=params)
            except requests.exceptions.RequestException as e:
                raise WorldBankAPIError(f"Failed to get countries page {page_number}: {e}")

            _, pages, page_countries = parse_countries_page(parse_response(response))
            countries.extend(page_countries)

            if self.show_progress:
                print(f"Downloaded countries page {page_number}/{pages}")

            if page_number >= pages:
                break
            page_number += 1

        if exclude_aggregates:
            countries = [c for c in countries if not c.is_aggregate]

        return RegionCatalog(countries=countries)

    def get_country(self, name: str, region: Optional[str] = None) -> Optional[Country]:
        """
        Look up a country by name or id.

        Returns:
            Country if found, None otherwise
        """
        for country in self.get_countries(region).countries:
            if country.name == name or country.id == name or country.iso2_code == name:
                return country
        return None
