"""
Endpoint catalog of the factory REST API (v3).

Each entry describes one operation: its HTTP method, the path and query
parameters it accepts, and the path template the path parameters are
substituted into. Nodes select an entry by index or by label.
"""
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple, Union
from urllib.parse import quote

from tulip_edge.errors import ConfigurationError, ParameterError

BODY_METHODS = ("POST", "PUT", "PATCH")


@dataclass(frozen=True)
class Endpoint:
    label: str
    method: str
    path_params: Tuple[str, ...]
    query_params: Tuple[str, ...]
    path_template: str

    @property
    def has_body(self) -> bool:
        return self.method in BODY_METHODS

    def build_path(self, path_params: Mapping[str, Any]) -> str:
        values: Dict[str, str] = {}
        for name in self.path_params:
            value = path_params.get(name)
            if value is None:
                raise ParameterError(f"Missing path parameter '{name}' for '{self.label}'")
            values[name] = quote(str(value), safe="")
        return self.path_template.format(**values)


TABLE_QUERY_TYPES: Tuple[Endpoint, ...] = (
    Endpoint("List tables", "GET", (), ("includeDeleted",), "/tables"),
    Endpoint("Create a table", "POST", (), (), "/tables"),
    Endpoint("Look up a table", "GET", ("tableId",), (), "/tables/{tableId}"),
    Endpoint("Update a table", "PUT", ("tableId",), (), "/tables/{tableId}"),
    Endpoint(
        "List records",
        "GET",
        ("tableId",),
        (
            "limit",
            "offset",
            "sortBy",
            "sortDir",
            "includeTotalCount",
            "filters",
            "filterAggregator",
            "sortOptions",
        ),
        "/tables/{tableId}/records",
    ),
    Endpoint("Create a record", "POST", ("tableId",), (), "/tables/{tableId}/records"),
    Endpoint(
        "Delete all records",
        "DELETE",
        ("tableId",),
        ("allowRecordsInUse",),
        "/tables/{tableId}/records",
    ),
    Endpoint(
        "Count records",
        "GET",
        ("tableId",),
        ("filters", "filterAggregator"),
        "/tables/{tableId}/count",
    ),
    Endpoint(
        "Run an aggregate function",
        "GET",
        ("tableId",),
        ("fieldId", "function", "limit", "sortOptions", "filters", "filterAggregator"),
        "/tables/{tableId}/runAggregation",
    ),
    Endpoint(
        "Look up a record",
        "GET",
        ("tableId", "recordId"),
        ("field",),
        "/tables/{tableId}/records/{recordId}",
    ),
    Endpoint(
        "Update a record",
        "PUT",
        ("tableId", "recordId"),
        (),
        "/tables/{tableId}/records/{recordId}",
    ),
    Endpoint(
        "Delete a record",
        "DELETE",
        ("tableId", "recordId"),
        (),
        "/tables/{tableId}/records/{recordId}",
    ),
    Endpoint("List queries", "GET", ("tableId",), (), "/tables/{tableId}/queries"),
    Endpoint("Create a query", "POST", ("tableId",), (), "/tables/{tableId}/queries"),
    Endpoint(
        "Look up a query",
        "GET",
        ("tableId", "queryId"),
        (),
        "/tables/{tableId}/query/{queryId}",
    ),
    Endpoint(
        "Update a query",
        "PUT",
        ("tableId", "queryId"),
        (),
        "/tables/{tableId}/query/{queryId}",
    ),
    Endpoint(
        "Delete a query",
        "DELETE",
        ("tableId", "queryId"),
        (),
        "/tables/{tableId}/query/{queryId}",
    ),
    Endpoint("List aggregations", "GET", ("tableId",), (), "/tables/{tableId}/aggregations"),
    Endpoint(
        "Create an aggregation", "POST", ("tableId",), (), "/tables/{tableId}/aggregations"
    ),
    Endpoint(
        "Look up an aggregation",
        "GET",
        ("tableId", "aggregationId"),
        (),
        "/tables/{tableId}/aggregation/{aggregationId}",
    ),
    Endpoint(
        "Update an aggregation",
        "PUT",
        ("tableId", "aggregationId"),
        (),
        "/tables/{tableId}/aggregation/{aggregationId}",
    ),
    Endpoint(
        "Delete an aggregation",
        "DELETE",
        ("tableId", "aggregationId"),
        (),
        "/tables/{tableId}/aggregation/{aggregationId}",
    ),
    Endpoint(
        "Increment or decrement a field in a Tulip Table record",
        "PATCH",
        ("tableId", "recordId"),
        (),
        "/tables/{tableId}/records/{recordId}/increment",
    ),
    Endpoint("Link records", "PUT", ("linkId",), (), "/tableLinks/{linkId}/link"),
    Endpoint("Unlink records", "PUT", ("linkId",), (), "/tableLinks/{linkId}/unlink"),
    Endpoint("Create a table link relationship", "POST", (), (), "/tableLinks"),
    Endpoint("Fetch link information", "GET", ("linkId",), (), "/tableLinks/{linkId}"),
    Endpoint(
        "Update the column labels for link", "PUT", ("linkId",), (), "/tableLinks/{linkId}"
    ),
)

FUNCTION_TYPES: Tuple[str, ...] = ("sum", "count", "avg", "min", "max", "mode")

# Operations of the links node, keyed by its queryType
LINK_QUERY_TYPES: Dict[str, str] = {
    "info": "Fetch link information",
}

MACHINE_ATTRIBUTE_PATH = "/attributes/report"

_BY_LABEL = {endpoint.label: endpoint for endpoint in TABLE_QUERY_TYPES}


def get_endpoint(query_type: Union[int, str]) -> Endpoint:
    """
    Look up a catalog entry by index (int or numeric string) or by label.
    """
    if isinstance(query_type, bool):
        raise ConfigurationError(f"Invalid query type: {query_type!r}")

    if isinstance(query_type, str) and query_type.strip().isdigit():
        query_type = int(query_type)

    if isinstance(query_type, int):
        if 0 <= query_type < len(TABLE_QUERY_TYPES):
            return TABLE_QUERY_TYPES[query_type]
        raise ConfigurationError(
            f"Query type index {query_type} out of range (0-{len(TABLE_QUERY_TYPES) - 1})"
        )

    endpoint = _BY_LABEL.get(query_type) if isinstance(query_type, str) else None
    if endpoint is None:
        raise ConfigurationError(f"Unknown query type: {query_type!r}")
    return endpoint


def get_link_endpoint(query_type: str) -> Endpoint:
    label = LINK_QUERY_TYPES.get(query_type)
    if label is None:
        raise ConfigurationError(
            f"Unsupported links query type: {query_type!r}. "
            f"Supported: {list(LINK_QUERY_TYPES.keys())}"
        )
    return _BY_LABEL[label]
