"""
GraphSession - owns the current graph and applies categorization safely.

Categorization is slow and may fail; construction is not allowed to wait
for it. A session remembers the epoch of the graph it asked about and
only merges the response if that graph is still current, so a late
answer can never overwrite a newer construction run.

License: MIT
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Optional

import structlog

from ..exceptions import CategorizationError, RepographError, TimeoutError
from ..models import CategorizationResult, Graph, node_filepaths
from .base import Categorizer, apply_categorization, coerce_result

logger = structlog.get_logger(__name__)


@dataclass
class CategorizationOutcome:
    """
    What happened to one categorization request.

    Attributes:
        graph: The session's current graph after the request settled
        applied: True if the result was merged into the graph
        stale: True if the result arrived for a graph that was replaced
        warning: Human-readable reason when categorization was skipped
    """

    graph: Optional[Graph]
    applied: bool = False
    stale: bool = False
    warning: Optional[str] = None


class GraphSession:
    """
    Holder of the "current" graph for one interactive user.

    Example:
        ```python
        session = GraphSession()
        session.load(construct_graph(zip_bytes))
        outcome = await session.categorize(categorizer, timeout=60)
        if outcome.warning:
            print(outcome.warning)
        ```
    """

    def __init__(self, graph: Optional[Graph] = None) -> None:
        self._current: Optional[Graph] = None
        if graph is not None:
            self.load(graph)

    @property
    def current(self) -> Optional[Graph]:
        return self._current

    @property
    def epoch(self) -> Optional[int]:
        return self._current.epoch if self._current is not None else None

    def load(self, graph: Graph) -> None:
        """Replace the current graph; pending categorization for older epochs becomes stale."""
        previous = self.epoch
        self._current = graph
        logger.info(
            "graph_loaded",
            epoch=graph.epoch,
            previous_epoch=previous,
            node_count=len(graph.nodes),
        )

    def apply_if_current(
        self,
        epoch: int,
        result: CategorizationResult,
        graph: Optional[Graph] = None,
    ) -> CategorizationOutcome:
        """
        Merge ``result`` if ``epoch`` still identifies the current graph.

        Args:
            epoch: Epoch of the graph the result was computed for
            result: Categorization to merge
            graph: The exact snapshot the result was computed for; when
                given, the current graph must also be that object

        Returns:
            Outcome with ``stale=True`` when the result was discarded
        """
        current = self._current
        if (
            current is None
            or current.epoch != epoch
            or (graph is not None and current is not graph)
        ):
            logger.info(
                "categorization_discarded_stale",
                requested_epoch=epoch,
                current_epoch=self.epoch,
            )
            return CategorizationOutcome(graph=current, stale=True)

        self._current = apply_categorization(current, result)
        return CategorizationOutcome(graph=self._current, applied=True)

    async def categorize(
        self,
        categorizer: Categorizer,
        timeout: Optional[float] = None,
    ) -> CategorizationOutcome:
        """
        Run ``categorizer`` against the current graph and merge its answer.

        Failures, timeouts and malformed responses are reported through
        ``CategorizationOutcome.warning``; the graph is left as it was.

        Args:
            categorizer: Adapter to call
            timeout: Seconds to wait for the adapter (None waits forever)

        Returns:
            CategorizationOutcome describing what happened

        Raises:
            ValueError: If no graph has been loaded
        """
        graph = self._current
        if graph is None:
            raise ValueError("No graph loaded")

        epoch = graph.epoch
        start = time.perf_counter()

        try:
            raw = await asyncio.wait_for(
                categorizer.categorize(node_filepaths(graph)),
                timeout=timeout,
            )
            result = coerce_result(raw)
        except asyncio.TimeoutError as exc:
            return self._failed(
                epoch,
                TimeoutError(
                    message=f"Categorization timed out after {timeout}s",
                    details={"timeout": timeout},
                    original_exception=exc,
                ),
            )
        except RepographError as exc:
            return self._failed(epoch, exc)
        except Exception as exc:
            return self._failed(
                epoch,
                CategorizationError(
                    message=f"Categorization failed: {exc}",
                    original_exception=exc,
                ),
            )

        outcome = self.apply_if_current(epoch, result, graph=graph)
        logger.info(
            "categorization_completed",
            epoch=epoch,
            applied=outcome.applied,
            stale=outcome.stale,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return outcome

    def schedule_categorization(
        self,
        categorizer: Categorizer,
        timeout: Optional[float] = None,
    ) -> "asyncio.Task[CategorizationOutcome]":
        """Start categorization in the background; must be called inside a running loop."""
        return asyncio.get_running_loop().create_task(self.categorize(categorizer, timeout))

    def _failed(self, epoch: int, error: RepographError) -> CategorizationOutcome:
        logger.warning(
            "categorization_failed",
            epoch=epoch,
            error_code=error.error_code,
            error=error.message,
            is_transient=error.is_transient,
        )
        return CategorizationOutcome(
            graph=self._current,
            warning=f"Categorization skipped: {error.message}",
        )
