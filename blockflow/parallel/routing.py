# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Parallel Routing

Decides which virtual block instances of a parallel construct are eligible to
run, honoring condition and router decisions recorded for each iteration, and
detects when every eligible instance has executed.
"""

from typing import Iterable, Optional

from .context import ExecutionContext
from .exceptions import MalformedWorkflowError
from .graph import ConnectionGraph
from .identity import virtual_block_id
from .models import Block, BlockType, Connection, ParallelConstruct


CONDITION_HANDLE_PREFIX = "condition-"


class RoutingEvaluator:
    """
    Eligibility rules for blocks inside a parallel construct.

    All checks read the context without mutating it, so repeated calls on the
    same snapshot always agree.
    """

    def __init__(self, graph: Optional[ConnectionGraph]):
        self.graph = graph

    def should_execute(
        self,
        node_id: str,
        parallel: ParallelConstruct,
        iteration: int,
        context: ExecutionContext
    ) -> bool:
        """
        Check whether `node_id` may run in `iteration` of `parallel`.

        A node with no incoming edge from another member is a branch entry
        point and is eligible unless it is not wired to anything at all.
        Otherwise at least one incoming member edge must be active.
        """
        if self.graph is None:
            # No graph yet (partial setup): nothing constrains the node
            return True

        self._require_block(node_id)
        members = set(parallel.nodes)
        internal_incoming = [
            conn for conn in self.graph.incoming(node_id)
            if conn.source in members
        ]

        if not internal_incoming:
            return self.graph.has_connections(node_id)

        return any(
            self._is_edge_active(conn, parallel, iteration, context)
            for conn in internal_incoming
        )

    def all_required_executed(
        self,
        parallel: ParallelConstruct,
        parallel_count: int,
        executed_blocks: Iterable,
        context: ExecutionContext
    ) -> bool:
        """
        Check that every eligible virtual instance of the construct executed.

        Instances on untaken branches are never required.
        """
        executed = executed_blocks if isinstance(executed_blocks, (set, frozenset)) else set(executed_blocks)

        for node_id in parallel.nodes:
            for iteration in range(parallel_count):
                if not self.should_execute(node_id, parallel, iteration, context):
                    continue
                if virtual_block_id(node_id, parallel.id, iteration) not in executed:
                    return False
        return True

    def _is_edge_active(
        self,
        conn: Connection,
        parallel: ParallelConstruct,
        iteration: int,
        context: ExecutionContext
    ) -> bool:
        source_vid = virtual_block_id(conn.source, parallel.id, iteration)
        if source_vid not in context.executed_blocks:
            return False

        source = self._require_block(conn.source)
        if source.type == BlockType.CONDITION:
            selected = context.decisions.condition.get(source_vid)
            return selected is not None and conn.source_handle == f"{CONDITION_HANDLE_PREFIX}{selected}"
        if source.type == BlockType.ROUTER:
            return context.decisions.router.get(source_vid) == conn.target
        return True

    def _require_block(self, block_id: str) -> Block:
        block = self.graph.find_block(block_id)
        if block is None:
            raise MalformedWorkflowError(
                f"Parallel member references non-existent block: {block_id}",
                field="nodes"
            )
        return block
