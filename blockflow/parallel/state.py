# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Parallel State

Mutable per-construct runtime state and the operations that create, read and
update it. Lookups never raise on bad indexes or missing items; they return
None so speculative reads during setup are harmless.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from blockflow.core.logging import get_engine_logger, log_event

logger = get_engine_logger("state")

DistributionItems = Union[List[Any], Dict[str, Any]]


@dataclass
class ParallelState:
    """Runtime state of one parallel construct within one run."""
    parallel_id: str
    parallel_count: int
    distribution_items: Optional[DistributionItems]
    parallel_type: str = "collection"
    completed_executions: int = 0
    execution_results: Dict[str, Any] = field(default_factory=dict)
    active_iterations: Set[int] = field(default_factory=set)
    current_iteration: int = 0
    multi_emit_keys: Set[str] = field(default_factory=set)

    @property
    def distribution_type(self) -> str:
        if self.parallel_type == "count":
            return "count"
        return "object" if isinstance(self.distribution_items, dict) else "array"


def iteration_key(index: int) -> str:
    return f"iteration_{index}"


def resolve_distribution(raw: Any) -> Optional[DistributionItems]:
    """
    Normalize a raw distribution into a list or dict.

    JSON strings are parsed. Anything that still isn't a list or dict
    degrades to None (zero items).
    """
    if raw is None:
        return None

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            raw = json.loads(text)
        except json.JSONDecodeError:
            log_event(logger, "Unparseable distribution string", level="WARNING", raw=text[:200])
            return None

    if isinstance(raw, tuple):
        raw = list(raw)
    if isinstance(raw, (list, dict)):
        return raw

    log_event(logger, "Unsupported distribution type", level="WARNING", type=type(raw).__name__)
    return None


def initialize_state(
    parallel_id: str,
    distribution_items: Any = None,
    count: Optional[int] = None
) -> ParallelState:
    """
    Create fresh state for a construct.

    `count` builds a count-type construct whose items are the indexes
    themselves. current_iteration starts at 1 to mark "initialized"; 0 means
    not started.
    """
    if count is not None:
        items: Optional[DistributionItems] = list(range(max(count, 0)))
        parallel_type = "count"
    else:
        items = resolve_distribution(distribution_items)
        parallel_type = "collection"

    return ParallelState(
        parallel_id=parallel_id,
        parallel_count=len(items) if items is not None else 0,
        distribution_items=items,
        parallel_type=parallel_type,
        current_iteration=1,
    )


def item_for_iteration(state: Optional[ParallelState], index: int) -> Union[Any, Tuple[str, Any], None]:
    """Item for an iteration: list element, or (key, value) pair in insertion order."""
    if state is None or state.distribution_items is None:
        return None
    if index is None or index < 0 or index >= len(state.distribution_items):
        return None

    items = state.distribution_items
    if isinstance(items, dict):
        key = list(items.keys())[index]
        return key, items[key]
    return items[index]


def record_result(state: ParallelState, index: int, output: Any) -> None:
    """Store an iteration's output; repeated outputs accumulate into a list."""
    key = iteration_key(index)

    if key in state.multi_emit_keys:
        state.execution_results[key].append(output)
    elif key in state.execution_results:
        state.execution_results[key] = [state.execution_results[key], output]
        state.multi_emit_keys.add(key)
    else:
        state.execution_results[key] = output
        state.completed_executions = min(state.completed_executions + 1, state.parallel_count)

    state.active_iterations.add(index)


def aggregate_results(state: ParallelState) -> List[Any]:
    """Per-iteration outputs ordered by iteration index."""
    return [
        state.execution_results[iteration_key(i)]
        for i in range(state.parallel_count)
        if iteration_key(i) in state.execution_results
    ]
