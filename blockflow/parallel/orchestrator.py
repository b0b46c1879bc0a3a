# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Parallel Orchestrator

Drives parallel constructs through their lifecycle:

    UNSEEN -> INITIALIZED-NOT-STARTED -> ITERATIONS-IN-PROGRESS
           -> PENDING-AGGREGATION -> COMPLETED

The generic executor calls `tick` once per scheduling pass. `tick` is
idempotent: calling it again without any block having executed in between
changes nothing.
"""

from typing import Any, Dict, List, Optional, Union

from blockflow.core.config import Config, get_config
from blockflow.core.logging import get_engine_logger, log_event

from .context import ExecutionContext
from .exceptions import MalformedWorkflowError
from .graph import ConnectionGraph
from .identity import VirtualBlockId, virtual_block_id
from .models import Block, ParallelConstruct, WorkflowDefinition
from .routing import RoutingEvaluator
from .state import (
    ParallelState,
    aggregate_results,
    initialize_state,
    item_for_iteration,
    record_result,
)


def is_aggregate_output(output: Any) -> bool:
    """True if a construct's output is the final {completed, results} aggregate."""
    return isinstance(output, dict) and output.get("completed") is True and "results" in output


class ParallelOrchestrator:
    """
    Scheduling and completion logic for every parallel construct of a workflow.

    Holds only static definition data; all run state lives on the
    ExecutionContext passed to each call.
    """

    def __init__(
        self,
        workflow: WorkflowDefinition,
        graph: Optional[ConnectionGraph] = None,
        config: Optional[Config] = None
    ):
        self.workflow = workflow
        self.graph = graph or ConnectionGraph.from_workflow(workflow)
        self.config = config or get_config()
        self.routing = RoutingEvaluator(self.graph)
        self.logger = get_engine_logger("orchestrator", self.config)

        # Definition order is the evaluation order within a tick
        self.parallels: Dict[str, ParallelConstruct] = {p.id: p for p in workflow.parallels}
        self._member_of: Dict[str, str] = {
            node_id: parallel.id
            for parallel in workflow.parallels
            for node_id in parallel.nodes
        }

    # ------------------------------------------------------------------
    # Scheduling pass
    # ------------------------------------------------------------------

    def tick(self, context: ExecutionContext) -> List[str]:
        """
        Advance every construct whose iterations are all done.

        Returns the ids of constructs that changed state during this call.
        """
        acted: List[str] = []

        for parallel_id, parallel in self.parallels.items():
            if parallel_id in context.completed_loops:
                continue
            if parallel_id not in context.executed_blocks:
                continue

            state = context.parallel_executions.get(parallel_id)
            if state is None or state.current_iteration == 0:
                continue

            if not self.routing.all_required_executed(
                parallel, state.parallel_count, context.executed_blocks, context
            ):
                continue

            if is_aggregate_output(context.block_states.get(parallel_id)):
                # Aggregate already built: finish without rerunning
                context.completed_loops.add(parallel_id)
                activated = self._activate_end_targets(context, parallel_id)
                log_event(
                    self.logger, "Parallel completed from recorded aggregate",
                    parallel_id=parallel_id, activated=activated
                )
            else:
                # Force one more run of the construct block to aggregate
                context.executed_blocks.discard(parallel_id)
                context.active_execution_path.add(parallel_id)
                for node_id in parallel.nodes:
                    context.active_execution_path.discard(node_id)
                log_event(
                    self.logger, "Parallel iterations finished, scheduling aggregation",
                    parallel_id=parallel_id, parallel_count=state.parallel_count
                )

            acted.append(parallel_id)

        return acted

    def instances_to_run(
        self,
        template_block: Union[Block, str],
        parallel_id: str,
        state: ParallelState,
        executed_blocks,
        active_execution_path
    ) -> List[VirtualBlockId]:
        """Virtual instances of a template block that are ready to run now."""
        block_id = template_block.id if isinstance(template_block, Block) else template_block
        template_active = block_id in active_execution_path

        instances = []
        for iteration in range(state.parallel_count):
            vid = virtual_block_id(block_id, parallel_id, iteration)
            if vid in executed_blocks:
                continue
            if not template_active and vid not in active_execution_path:
                continue
            instances.append(vid)
        return instances

    def bind_iteration_context(self, context: ExecutionContext, parallel_id: str, index: int) -> Any:
        """Publish the item and index of an iteration for downstream resolution."""
        state = context.parallel_executions.get(parallel_id)
        item = item_for_iteration(state, index)

        context.loop_items[f"{parallel_id}_iteration_{index}"] = item
        context.loop_items[parallel_id] = item
        context.loop_iterations[parallel_id] = index
        return item

    # ------------------------------------------------------------------
    # Construct block execution
    # ------------------------------------------------------------------

    def execute_parallel_block(
        self,
        context: ExecutionContext,
        parallel_id: str,
        distribution_items: Any = None
    ) -> Dict[str, Any]:
        """
        Run the construct block itself.

        The first run starts the iterations; the forced rerun scheduled by
        `tick` builds the aggregate.
        """
        if parallel_id in context.parallel_executions:
            return self.complete_parallel(context, parallel_id)
        return self.enter_parallel(context, parallel_id, distribution_items)

    def enter_parallel(
        self,
        context: ExecutionContext,
        parallel_id: str,
        distribution_items: Any = None
    ) -> Dict[str, Any]:
        """Initialize state for a construct and activate its entry blocks."""
        parallel = self._require_parallel(parallel_id)

        if parallel.parallel_type == "count":
            state = initialize_state(parallel_id, count=parallel.count)
        else:
            items = distribution_items if distribution_items is not None else parallel.distribution
            state = initialize_state(parallel_id, items)
        context.parallel_executions[parallel_id] = state

        for conn in self.graph.outgoing(parallel_id, self.config.start_handle):
            context.active_execution_path.add(conn.target)

        log_event(
            self.logger, "Parallel started",
            parallel_id=parallel_id,
            parallel_count=state.parallel_count,
            distribution_type=state.distribution_type
        )
        return {
            "parallel_id": parallel_id,
            "parallel_count": state.parallel_count,
            "distribution_type": state.distribution_type,
            "started": True,
        }

    def complete_parallel(self, context: ExecutionContext, parallel_id: str) -> Dict[str, Any]:
        """Build the aggregate output, mark the construct completed and continue past it."""
        state = context.parallel_executions[parallel_id]
        output = {
            "parallel_id": parallel_id,
            "completed": True,
            "results": aggregate_results(state),
        }

        context.block_states[parallel_id] = output
        context.completed_loops.add(parallel_id)
        activated = self._activate_end_targets(context, parallel_id)

        log_event(
            self.logger, "Parallel completed",
            parallel_id=parallel_id,
            result_count=len(output["results"]),
            activated=activated
        )
        return output

    # ------------------------------------------------------------------
    # Virtual instance bookkeeping
    # ------------------------------------------------------------------

    def record_instance_output(self, context: ExecutionContext, vid: VirtualBlockId, output: Any) -> None:
        """Mark a virtual instance executed and store its output as an iteration result."""
        context.mark_executed(vid, output)
        state = context.parallel_executions.get(vid.parallel_id)
        if state is not None:
            record_result(state, vid.iteration, output)
        log_event(self.logger, "Virtual block executed", level="DEBUG", block=str(vid))

    def activate_downstream(self, context: ExecutionContext, vid: VirtualBlockId) -> List[VirtualBlockId]:
        """
        Add the eligible member successors of an executed instance to the path.

        Must run after the instance's condition/router decision is recorded.
        """
        parallel = self._require_parallel(vid.parallel_id)
        members = set(parallel.nodes)

        activated = []
        for conn in self.graph.outgoing(vid.block_id):
            if conn.target not in members:
                continue
            if not self.routing.should_execute(conn.target, parallel, vid.iteration, context):
                continue
            target_vid = virtual_block_id(conn.target, parallel.id, vid.iteration)
            if target_vid not in context.active_execution_path:
                context.active_execution_path.add(target_vid)
                activated.append(target_vid)
        return activated

    def parallel_for_block(self, block_id: str) -> Optional[str]:
        """Id of the construct a block belongs to, if any."""
        return self._member_of.get(block_id)

    def _activate_end_targets(self, context: ExecutionContext, parallel_id: str) -> List[str]:
        activated = []
        for conn in self.graph.outgoing(parallel_id, self.config.end_handle):
            if conn.target not in context.active_execution_path:
                context.active_execution_path.add(conn.target)
                activated.append(conn.target)
        return activated

    def _require_parallel(self, parallel_id: str) -> ParallelConstruct:
        parallel = self.parallels.get(parallel_id)
        if parallel is None:
            raise MalformedWorkflowError(f"Unknown parallel construct: {parallel_id}", field="parallels")
        return parallel
