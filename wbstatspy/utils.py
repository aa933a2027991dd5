"""Utility functions for the wbstatspy package."""

import re
from typing import Dict, List, Optional, Tuple, Union
from xml.etree import ElementTree

import requests

from .exceptions import (
    WorldBankAPIError, IndicatorNotFoundError, InvalidParameterError, DataParsingError
)

WB_NAMESPACE = "http://www.worldbank.org"

# Message ids used by the World Bank API in <wb:error> documents
ERROR_INVALID_VALUE = "120"
ERROR_INDICATOR_NOT_FOUND = "175"

_DATE_RANGE_PATTERN = re.compile(r"^(\d{4}):(\d{4})$")


def wb_tag(name: str) -> str:
    """Qualify a tag name with the World Bank XML namespace."""
    return f"{{{WB_NAMESPACE}}}{name}"


def parse_xml(text: str) -> ElementTree.Element:
    """Parse an XML response body into its root element."""
    if text is None:
        raise DataParsingError("Empty XML response")

    # The API prefixes its documents with a UTF-8 byte order mark
    text = text.lstrip("\ufeff").strip()
    if not text:
        raise DataParsingError("Empty XML response")

    try:
        return ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        raise DataParsingError(f"Failed to parse XML response: {e}")


def read_error_message(root: ElementTree.Element) -> Optional[Tuple[str, str]]:
    """
    Return ``(message_id, message)`` if ``root`` is a <wb:error> document.

    Args:
        root: Parsed response root

    Returns:
        Tuple of message id and text, or None for regular documents
    """
    if root.tag != wb_tag("error"):
        return None

    message = root.find(wb_tag("message"))
    if message is None:
        return ("", "Unknown error")

    text = (message.text or "").strip() or message.get("key", "Unknown error")
    return (message.get("id", ""), text)


def raise_for_error_document(root: ElementTree.Element,
                             indicator_code: Optional[str] = None) -> None:
    """
    Raise the matching exception if the API answered with an error document.

    An invalid value on an indicator request means the indicator code is
    unknown, so it is reported as IndicatorNotFoundError there.
    """
    error = read_error_message(root)
    if error is None:
        return

    message_id, message = error
    if message_id == ERROR_INDICATOR_NOT_FOUND:
        raise IndicatorNotFoundError(f"Indicator not found: {message}")
    elif message_id == ERROR_INVALID_VALUE and indicator_code:
        raise IndicatorNotFoundError(f"Indicator '{indicator_code}' not found: {message}")
    elif message_id == ERROR_INVALID_VALUE:
        raise InvalidParameterError(f"Bad request: {message}")
    else:
        raise WorldBankAPIError(f"API Error {message_id}: {message}")


def handle_api_errors(response: requests.Response,
                      indicator_code: Optional[str] = None) -> None:
    """Handle common API error responses."""
    if response.status_code == 200:
        return

    try:
        root = ElementTree.fromstring((response.text or "").lstrip("\ufeff").strip())
    except (ElementTree.ParseError, TypeError, AttributeError):
        root = None

    if root is not None:
        raise_for_error_document(root, indicator_code)

    # Fallback for responses without an error document
    if response.status_code == 404:
        raise IndicatorNotFoundError("Resource not found")
    elif response.status_code == 400:
        raise InvalidParameterError("Invalid request parameters")
    else:
        raise WorldBankAPIError(f"HTTP {response.status_code}: {response.text}")


def parse_response(response: requests.Response,
                   indicator_code: Optional[str] = None) -> ElementTree.Element:
    """Check the status of ``response`` and return its parsed XML root."""
    handle_api_errors(response, indicator_code)
    root = parse_xml(response.text)
    raise_for_error_document(root, indicator_code)
    return root


def validate_date_range(date_range: str) -> str:
    """Validate a date range of the form 'YYYY:YYYY'."""
    match = _DATE_RANGE_PATTERN.match(str(date_range))
    if match is None:
        raise InvalidParameterError(
            f"Invalid date range '{date_range}'. Use YYYY:YYYY format."
        )

    start, end = int(match.group(1)), int(match.group(2))
    if start > end:
        raise InvalidParameterError(
            f"Invalid date range '{date_range}': start year is after end year."
        )
    return date_range


def format_date_range(start: int, end: Optional[int] = None) -> str:
    """Build a 'YYYY:YYYY' range; a single year gives a one-year range."""
    if end is None:
        end = start
    return validate_date_range(f"{int(start):04d}:{int(end):04d}")


def date_range_years(date_range: str) -> List[int]:
    """List every year covered by a 'YYYY:YYYY' range."""
    validate_date_range(date_range)
    start, end = (int(part) for part in date_range.split(":"))
    return list(range(start, end + 1))


def build_query_params(per_page: int, api_key: Optional[str] = None,
                       **kwargs) -> Dict[str, Union[str, int]]:
    """Build query parameters; the API key is only sent when configured."""
    params: Dict[str, Union[str, int]] = {'per_page': per_page}

    if api_key:
        params['api_key'] = api_key

    for key, value in kwargs.items():
        if value is not None:
            params[key] = value

    return params
