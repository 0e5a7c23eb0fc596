"""Builds the query document sent with the initial scan request."""

import copy
import json

from shared.models.config import ExportConfig
from shared.models.errors import ConfigurationError


def default_query() -> dict:
    """Returns a fresh match-everything query."""
    return {"query": {"match_all": {}}}


def parse_query(query_string: str) -> dict:
    """Parse a caller-supplied query document.

    Args:
        query_string (str): JSON text of the query document.

    Returns:
        dict: The decoded document.

    Raises:
        ConfigurationError: If the text is not valid JSON or not a JSON object.
    """
    try:
        query = json.loads(query_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid -query document: {e}") from e
    if not isinstance(query, dict):
        raise ConfigurationError(f"Invalid -query document: expected a JSON object, got {type(query).__name__}")
    return query


def build_query(config: ExportConfig) -> dict:
    """Build the query for one run.

    Outside raw mode the requested field list is attached as "fields", so the
    backend returns exactly the columns to render. The configured document is
    copied and never modified.
    """
    query = copy.deepcopy(config.query) if config.query is not None else default_query()
    if not config.raw:
        query["fields"] = list(config.fields)
    return query
