"""
Categorization adapter contract and merge step.

A categorizer receives the ordered list of node filepaths and eventually
returns ``{categories, assignments}``. ``apply_categorization`` merges such a
result into a graph by filepath lookup and returns a new snapshot.

License: MIT
"""

from __future__ import annotations

import inspect
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Protocol,
    Union,
    runtime_checkable,
)

import structlog
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import CategorizationError
from ..models import CategorizationResult, Graph

logger = structlog.get_logger(__name__)

RawResult = Union[CategorizationResult, Mapping[str, Any]]


@runtime_checkable
class Categorizer(Protocol):
    """Anything that can assign filepaths to named categories."""

    async def categorize(self, filepaths: List[str]) -> CategorizationResult: ...


class CallableCategorizer:
    """
    Adapts a plain function (sync or async) to the Categorizer protocol.

    The function may return a CategorizationResult or a mapping with
    ``categories`` and ``assignments`` keys; mappings are validated.

    Example:
        ```python
        def by_folder(paths):
            names = sorted({p.split("/")[0] for p in paths})
            return {"categories": names, "assignments": {p: p.split("/")[0] for p in paths}}

        categorizer = CallableCategorizer(by_folder)
        ```
    """

    def __init__(self, func: Callable[[List[str]], Union[RawResult, Awaitable[RawResult]]]):
        if not callable(func):
            raise TypeError("func must be callable")
        self._func = func

    async def categorize(self, filepaths: List[str]) -> CategorizationResult:
        result = self._func(list(filepaths))
        if inspect.isawaitable(result):
            result = await result
        return coerce_result(result)


def coerce_result(result: Any) -> CategorizationResult:
    """
    Validate an adapter response.

    Raises:
        CategorizationError: If the response does not match the contract
    """
    if isinstance(result, CategorizationResult):
        return result
    if not isinstance(result, Mapping):
        raise CategorizationError(
            message="Categorization response must be an object with categories and assignments",
            error_code="CAT_002",
            details={"received_type": type(result).__name__},
        )
    try:
        return CategorizationResult.model_validate(dict(result))
    except PydanticValidationError as exc:
        raise CategorizationError(
            message="Malformed categorization response",
            error_code="CAT_002",
            details={"errors": exc.errors(include_url=False)},
            original_exception=exc,
        )


def apply_categorization(graph: Graph, result: CategorizationResult) -> Graph:
    """
    Merge a categorization result into ``graph``.

    Each node whose filepath is assigned to a category present in
    ``result.categories`` gets that category's index; every other node
    resolves to 0. A result without categories leaves the graph unchanged.

    Args:
        graph: Snapshot to categorize
        result: Validated adapter response

    Returns:
        A new Graph with the same nodes, edges and epoch
    """
    if not result.categories:
        logger.info("categorization_empty_ignored", epoch=graph.epoch)
        return graph

    positions: Dict[str, int] = {}
    for index, name in enumerate(result.categories):
        positions.setdefault(name, index)

    nodes = []
    unassigned = 0
    for node in graph.nodes:
        assigned = result.assignments.get(node.filepath)
        category = positions.get(assigned, 0)
        if assigned not in positions:
            unassigned += 1
        nodes.append(node.model_copy(update={"category": category}))

    categorized = Graph(
        categories=list(result.categories),
        nodes=nodes,
        edges=list(graph.edges),
        epoch=graph.epoch,
    )

    logger.info(
        "categorization_applied",
        epoch=graph.epoch,
        category_count=len(categorized.categories),
        unassigned_count=unassigned,
    )
    return categorized
