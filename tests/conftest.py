"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import Mock, patch
import tempfile
import shutil

import matplotlib
matplotlib.use("Agg")

# Import the package modules
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import wbstatspy as wb
from wbstatspy.models import Country, DataRecord, IndicatorPage, IndicatorSeries, RegionCatalog
from wbstatspy.units import Area, Percent, Unit


def build_indicator_xml(records, page=1, pages=1, indicator="AG.LND.FRST.ZS"):
    """Build an indicator response body from (country, code, year, value) tuples."""
    items = []
    for country, code, year, value in records:
        value_xml = f"<wb:value>{value}</wb:value>" if value != "" else "<wb:value />"
        items.append(
            f'  <wb:data>\n'
            f'    <wb:indicator id="{indicator}">Indicator</wb:indicator>\n'
            f'    <wb:country id="{code}">{country}</wb:country>\n'
            f'    <wb:countryiso3code>{code}</wb:countryiso3code>\n'
            f'    <wb:date>{year}</wb:date>\n'
            f'    {value_xml}\n'
            f'    <wb:unit />\n'
            f'    <wb:obs_status />\n'
            f'    <wb:decimal>1</wb:decimal>\n'
            f'  </wb:data>'
        )
    return (
        '\ufeff<?xml version="1.0" encoding="utf-8"?>\n'
        f'<wb:data page="{page}" pages="{pages}" per_page="100" total="{len(records)}" '
        'sourceid="2" xmlns:wb="http://www.worldbank.org">\n'
        + "\n".join(items)
        + "\n</wb:data>"
    )


def build_countries_xml(countries, page=1, pages=1):
    """Build a countries response body from (id, iso2, name, region) tuples."""
    items = []
    for country_id, iso2, name, region in countries:
        items.append(
            f'  <wb:country id="{country_id}">\n'
            f'    <wb:iso2Code>{iso2}</wb:iso2Code>\n'
            f'    <wb:name>{name}</wb:name>\n'
            f'    <wb:region id="X">{region}</wb:region>\n'
            f'    <wb:incomeLevel id="HIC">High income</wb:incomeLevel>\n'
            f'    <wb:capitalCity>Capital</wb:capitalCity>\n'
            f'  </wb:country>'
        )
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<wb:countries page="{page}" pages="{pages}" per_page="100" total="{len(countries)}" '
        'xmlns:wb="http://www.worldbank.org">\n'
        + "\n".join(items)
        + "\n</wb:countries>"
    )


def build_error_xml(message_id="120", key="Invalid value",
                    text="The provided parameter value is not valid"):
    """Build a <wb:error> response body."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<wb:error xmlns:wb="http://www.worldbank.org">\n'
        f'  <wb:message id="{message_id}" key="{key}">{text}</wb:message>\n'
        '</wb:error>'
    )


def create_mock_response(text, status_code=200):
    """Create a mock response object."""
    mock_response = Mock()
    mock_response.status_code = status_code
    mock_response.text = text
    return mock_response


SAMPLE_COUNTRIES = [
    ("CAN", "CA", "Canada", "North America"),
    ("MEX", "MX", "Mexico", "Latin America and Caribbean"),
    ("USA", "US", "United States", "North America"),
    ("BMU", "BM", "Bermuda", "North America"),
    ("GRL", "GL", "Greenland", "Europe and Central Asia"),
]

# Surface area in km², Greenland not reported
SAMPLE_AREAS = {
    "Canada": "9984670",
    "Mexico": "1964380",
    "United States": "9831510",
    "Bermuda": "54",
    "Greenland": "",
}

# Forest share in percent per year, Bermuda not reported in 2000
SAMPLE_FORESTS = {
    1990: {"Canada": "38.8", "Mexico": "35.8", "United States": "33.0",
           "Bermuda": "18.5", "Greenland": "0.1"},
    2000: {"Canada": "38.7", "Mexico": "34.7", "United States": "33.1",
           "Bermuda": "", "Greenland": "0.1"},
    2005: {"Canada": "38.7", "Mexico": "34.2", "United States": "33.3",
           "Bermuda": "18.5", "Greenland": "0.1"},
}


def sample_records(indicator, year):
    """Five records for one indicator and year, one of them empty."""
    codes = {name: code for code, _, name, _ in SAMPLE_COUNTRIES}
    if indicator == "AG.SRF.TOTL.K2":
        values = SAMPLE_AREAS
    else:
        values = SAMPLE_FORESTS[year]
    return [(name, codes[name], year, values[name]) for name in values]


@pytest.fixture
def indicator_xml():
    """Factory for indicator response bodies."""
    return build_indicator_xml


@pytest.fixture
def countries_xml():
    """Factory for countries response bodies."""
    return build_countries_xml


@pytest.fixture
def error_xml():
    """Factory for error response bodies."""
    return build_error_xml


@pytest.fixture
def mock_response():
    """Factory for mock HTTP responses."""
    return create_mock_response


@pytest.fixture
def sample_indicator_xml():
    """Single-page forest share response for 2000."""
    return build_indicator_xml(sample_records("AG.LND.FRST.ZS", 2000))


@pytest.fixture
def sample_countries_xml():
    """Single-page countries response."""
    return build_countries_xml(SAMPLE_COUNTRIES)


@pytest.fixture
def world_bank_api():
    """
    Fake API answering every indicator/year and the countries listing.

    Yields the list of requested (url, params) pairs while requests.get
    is patched.
    """
    calls = []

    def fake_get(url, params=None, **kwargs):
        params = dict(params or {})
        calls.append((url, params))

        if url.endswith("/country"):
            return create_mock_response(build_countries_xml(SAMPLE_COUNTRIES))

        indicator = url.rsplit("/", 1)[-1]
        year = int(params["date"].split(":")[0])
        return create_mock_response(
            build_indicator_xml(sample_records(indicator, year), indicator=indicator)
        )

    with patch('requests.get', side_effect=fake_get):
        yield calls


@pytest.fixture
def sample_catalog():
    """RegionCatalog with the sample countries."""
    return RegionCatalog(countries=[
        Country(id=country_id, name=name, iso2_code=iso2, region=region)
        for country_id, iso2, name, region in SAMPLE_COUNTRIES
    ])


@pytest.fixture
def sample_areas():
    """Surface area series for 1990, 2000 and 2005."""
    values = {}
    for year in (1990, 2000, 2005):
        for name, value in SAMPLE_AREAS.items():
            if value:
                values[(year, name)] = Area(float(value))
    return IndicatorSeries(unit=Unit.AREA, values=values, indicator_code="AG.SRF.TOTL.K2")


@pytest.fixture
def sample_forests():
    """Forest share series for 1990, 2000 and 2005."""
    values = {}
    for year, by_country in SAMPLE_FORESTS.items():
        for name, value in by_country.items():
            if value:
                values[(year, name)] = Percent(float(value))
    return IndicatorSeries(unit=Unit.PERCENT, values=values, indicator_code="AG.LND.FRST.ZS")


@pytest.fixture
def sample_page():
    """IndicatorPage with one empty record."""
    return IndicatorPage(
        page=1,
        pages=1,
        records=(
            DataRecord(2000, "Canada", "38.7", "CA"),
            DataRecord(2000, "Bermuda", "", "BM"),
            DataRecord(2000, "Mexico", "34.7", "MX"),
        ),
        per_page=100,
        total=3
    )


@pytest.fixture
def client():
    """WorldBankClient with default settings."""
    return wb.WorldBankClient()


@pytest.fixture
def temp_output_dir():
    """Temporary directory for plot output."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)
