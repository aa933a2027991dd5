"""Parsing of World Bank XML documents into records and series."""

from typing import Iterable, List, Optional, Tuple, Union
from xml.etree import ElementTree

from .models import Country, DataRecord, IndicatorPage, IndicatorSeries
from .units import Unit, UNIT_TYPES
from .utils import wb_tag
from .exceptions import DataParsingError


def _int_attribute(element: ElementTree.Element, name: str,
                   default: Optional[int] = None) -> Optional[int]:
    """Read an integer attribute, falling back to ``default`` when absent."""
    raw = element.get(name)
    if raw is None or raw.strip() == "":
        if default is None:
            raise DataParsingError(f"Missing '{name}' attribute on <{element.tag}>")
        return default

    try:
        return int(raw)
    except ValueError:
        raise DataParsingError(f"Attribute '{name}' is not an integer: {raw!r}")


def _child(node: ElementTree.Element, name: str) -> ElementTree.Element:
    child = node.find(wb_tag(name))
    if child is None:
        raise DataParsingError(f"Missing <{name}> element in record")
    return child


def _child_text(node: ElementTree.Element, name: str) -> str:
    """Text of a required child element; an empty element gives ''."""
    return (_child(node, name).text or "").strip()


def _optional_text(node: ElementTree.Element, name: str) -> Optional[str]:
    child = node.find(wb_tag(name))
    if child is None:
        return None
    return (child.text or "").strip() or None


def parse_record(node: ElementTree.Element) -> DataRecord:
    """
    Read one <wb:data> record.

    Args:
        node: The record element

    Returns:
        DataRecord with the raw value string (possibly empty)
    """
    value = _child_text(node, "value")
    country_node = _child(node, "country")
    country = (country_node.text or "").strip()
    date = _child_text(node, "date")

    try:
        year = int(date)
    except ValueError:
        raise DataParsingError(f"Record date is not a year: {date!r}")

    return DataRecord(
        year=year,
        country=country,
        value=value,
        country_code=country_node.get("id") or None
    )


def parse_indicator_page(root: ElementTree.Element) -> IndicatorPage:
    """Convert the root of an indicator response into an IndicatorPage."""
    if root.tag != wb_tag("data"):
        raise DataParsingError(f"Unexpected root element <{root.tag}> in indicator response")

    pages = _int_attribute(root, "pages")
    page = _int_attribute(root, "page", default=1)
    records = tuple(parse_record(node) for node in root.findall(wb_tag("data")))

    return IndicatorPage(
        page=page,
        pages=pages,
        records=records,
        per_page=_int_attribute(root, "per_page", default=0) or None,
        total=_int_attribute(root, "total", default=len(records))
    )


def parse_countries_page(root: ElementTree.Element) -> Tuple[int, int, List[Country]]:
    """
    Convert the root of a countries response.

    Returns:
        Tuple of (page, declared total pages, countries on this page)
    """
    if root.tag != wb_tag("countries"):
        raise DataParsingError(f"Unexpected root element <{root.tag}> in countries response")

    pages = _int_attribute(root, "pages")
    page = _int_attribute(root, "page", default=1)

    countries = []
    for node in root.findall(wb_tag("country")):
        countries.append(Country(
            id=node.get("id", ""),
            name=_child_text(node, "name"),
            iso2_code=_optional_text(node, "iso2Code"),
            region=_optional_text(node, "region"),
            income_level=_optional_text(node, "incomeLevel"),
            capital_city=_optional_text(node, "capitalCity")
        ))

    return page, pages, countries


def extract_records(pages: Iterable[IndicatorPage]) -> List[DataRecord]:
    """
    Collect the reported records of every page, in page order.

    Records with an empty value are not reported by the API for that
    (year, country) and are left out; they are never treated as zero.
    """
    return [
        record
        for page in pages
        for record in page.records
        if not record.is_empty
    ]


def build_series(records: Iterable[DataRecord],
                 unit: Union[Unit, str],
                 indicator_code: Optional[str] = None) -> IndicatorSeries:
    """
    Build a unit-tagged series keyed by (year, country).

    Args:
        records: Records to load, typically the output of extract_records
        unit: Unit of the values (Unit.AREA or Unit.PERCENT)
        indicator_code: Code of the indicator the records belong to

    Returns:
        IndicatorSeries; a repeated key keeps the last value seen
    """
    unit = Unit(unit)
    wrap = UNIT_TYPES[unit]

    series = IndicatorSeries(unit=unit, indicator_code=indicator_code)
    for record in records:
        if record.is_empty:
            continue
        try:
            number = float(record.value)
        except ValueError:
            raise DataParsingError(
                f"Value for {record.country} {record.year} is not numeric: {record.value!r}"
            )
        series.values[record.key] = wrap(number)

    return series
