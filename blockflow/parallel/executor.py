# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Wave Executor

Wave-based driver for workflows with parallel constructs. Each pass ticks the
orchestrator, collects every runnable block and virtual instance, runs them,
and records outputs, decisions and newly activated blocks.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple, Union

from blockflow.core.config import Config, get_config
from blockflow.core.logging import get_engine_logger, log_event

from .context import ExecutionContext
from .exceptions import BlockExecutionError, BlockTimeoutError, WorkflowExecutionError
from .graph import ConnectionGraph
from .identity import VirtualBlockId
from .models import Block, BlockType, WorkflowDefinition
from .orchestrator import ParallelOrchestrator
from .references import resolve_params
from .routing import CONDITION_HANDLE_PREFIX

# (block, key, parallel id) for one unit of work in a wave
WorkItem = Tuple[Block, Union[str, VirtualBlockId], Optional[str]]


class WaveExecutor:
    """
    Wave-based workflow executor.

    Block bodies are delegated to `block_runner`, which must provide
    `async run_block(block, inputs, context) -> dict`. Condition blocks report
    their choice as `selected_condition`, routers as `selected_target`.
    """

    def __init__(self, workflow: WorkflowDefinition, block_runner, config: Optional[Config] = None):
        self.workflow = workflow
        self.block_runner = block_runner
        self.config = config or get_config()
        self.graph = ConnectionGraph.from_workflow(workflow)
        self.orchestrator = ParallelOrchestrator(workflow, graph=self.graph, config=self.config)
        self.logger = get_engine_logger("executor", self.config)

    async def execute(self, context: Optional[ExecutionContext] = None) -> ExecutionContext:
        """
        Execute workflow in waves until nothing is left to run.

        Returns ExecutionContext with results.
        """
        if context is None:
            context = ExecutionContext(self.workflow.workflow_id)
        if not context.active_execution_path and not context.executed_blocks:
            context.active_execution_path.update(self._start_blocks())

        log_event(self.logger, "Workflow started", execution_id=context.execution_id,
                  workflow_id=self.workflow.workflow_id)

        try:
            for wave in range(self.config.max_passes):
                acted = self.orchestrator.tick(context)
                ready = self._get_ready(context)

                if not ready:
                    if acted:
                        continue
                    self._check_settled(context)
                    break

                log_event(self.logger, "Executing wave", level="DEBUG", wave=wave,
                          blocks=[str(key) for _, key, _ in ready])
                await self._execute_wave(ready, context)
            else:
                raise WorkflowExecutionError(
                    f"Workflow did not settle within {self.config.max_passes} passes",
                    execution_id=context.execution_id
                )
        finally:
            context.finalize()

        log_event(self.logger, "Workflow completed", execution_id=context.execution_id,
                  executed=len(context.executed_blocks))
        return context

    def _start_blocks(self) -> List[str]:
        """Blocks outside any construct with no incoming connections"""
        return [
            block.id for block in self.workflow.blocks
            if not self.graph.incoming(block.id)
            and self.orchestrator.parallel_for_block(block.id) is None
        ]

    def _dependencies_met(self, block: Block, context: ExecutionContext) -> bool:
        """
        Check that every activated parent of a top-level block has finished.

        Parents never put on the path (untaken branches) don't count. A
        parallel parent counts only once its aggregate is done.
        """
        for conn in self.graph.incoming(block.id):
            source = conn.source
            if self.orchestrator.parallel_for_block(source) is not None:
                continue
            if source not in context.active_execution_path and source not in context.executed_blocks:
                continue
            if source in self.orchestrator.parallels:
                if source not in context.completed_loops:
                    return False
            elif source not in context.executed_blocks:
                return False
        return True

    def _check_settled(self, context: ExecutionContext) -> None:
        """Raise if the run stopped with constructs or activated blocks left unfinished"""
        unfinished_parallels = [
            parallel_id for parallel_id in context.parallel_executions
            if parallel_id not in context.completed_loops
        ]
        pending_blocks = sorted(
            key for key in context.active_execution_path
            if isinstance(key, str)
            and key not in context.executed_blocks
            and self.orchestrator.parallel_for_block(key) is None
        )
        if unfinished_parallels or pending_blocks:
            raise WorkflowExecutionError(
                f"Workflow execution deadlock: no runnable blocks but parallels "
                f"{unfinished_parallels} incomplete and blocks {pending_blocks} pending",
                execution_id=context.execution_id,
                details={"parallels": unfinished_parallels, "blocks": pending_blocks}
            )

    def _get_ready(self, context: ExecutionContext) -> List[WorkItem]:
        """Runnable blocks and virtual instances, in definition order"""
        ready: List[WorkItem] = []

        for block in self.workflow.blocks:
            parallel_id = self.orchestrator.parallel_for_block(block.id)

            if parallel_id is None:
                if (
                    block.id in context.active_execution_path
                    and block.id not in context.executed_blocks
                    and self._dependencies_met(block, context)
                ):
                    ready.append((block, block.id, None))
                continue

            state = context.parallel_executions.get(parallel_id)
            if state is None or parallel_id in context.completed_loops:
                continue
            for vid in self.orchestrator.instances_to_run(
                block, parallel_id, state, context.executed_blocks, context.active_execution_path
            ):
                ready.append((block, vid, parallel_id))

        return ready

    async def _execute_wave(self, ready: List[WorkItem], context: ExecutionContext) -> None:
        """Execute a wave of blocks concurrently, then record results in order"""
        tasks = []
        for block, key, parallel_id in ready:
            if parallel_id is not None:
                self.orchestrator.bind_iteration_context(context, parallel_id, key.iteration)
                inputs = resolve_params(block.params, context, parallel_id)
            else:
                inputs = dict(block.params)
            tasks.append(self._run_block(block, key, inputs, context))

        # Wait for all blocks in wave to complete, capturing exceptions
        results = await asyncio.gather(*tasks, return_exceptions=True)

        # Check for failures and raise the first exception found
        for result in results:
            if isinstance(result, Exception):
                raise result

        for (block, key, parallel_id), output in zip(ready, results):
            self._record(block, key, parallel_id, output, context)

    async def _run_block(
        self,
        block: Block,
        key: Union[str, VirtualBlockId],
        inputs: Dict[str, Any],
        context: ExecutionContext
    ) -> Any:
        """Execute a single block"""
        if block.type == BlockType.PARALLEL:
            # Construct output is built in _record, after the wave
            return None

        try:
            result = await asyncio.wait_for(
                self.block_runner.run_block(block, inputs, context),
                timeout=self.config.block_timeout
            )
        except asyncio.TimeoutError:
            raise BlockTimeoutError(str(key), self.config.block_timeout)

        if isinstance(result, dict) and result.get("status") == "error":
            raise BlockExecutionError(
                str(key),
                result.get("error", "Block execution failed"),
                context=result
            )
        return result

    def _record(
        self,
        block: Block,
        key: Union[str, VirtualBlockId],
        parallel_id: Optional[str],
        output: Any,
        context: ExecutionContext
    ) -> None:
        """Store output, record the branch decision and activate successors"""
        if block.type == BlockType.PARALLEL:
            output = self.orchestrator.execute_parallel_block(
                context, block.id, block.params.get("distribution")
            )
            context.mark_executed(block.id, output)
            return

        if parallel_id is not None:
            self.orchestrator.record_instance_output(context, key, output)
        else:
            context.mark_executed(key, output)

        self._record_decision(block, key, output, context)

        if parallel_id is not None:
            self.orchestrator.activate_downstream(context, key)
        else:
            self._activate_outgoing(block, context)

    def _record_decision(
        self,
        block: Block,
        key: Union[str, VirtualBlockId],
        output: Any,
        context: ExecutionContext
    ) -> None:
        if not isinstance(output, dict):
            return
        if block.type == BlockType.CONDITION and output.get("selected_condition") is not None:
            context.decisions.condition[key] = str(output["selected_condition"])
        elif block.type == BlockType.ROUTER and output.get("selected_target") is not None:
            context.decisions.router[key] = str(output["selected_target"])

    def _activate_outgoing(self, block: Block, context: ExecutionContext) -> None:
        """Activate taken outgoing connections of a block outside any construct"""
        for conn in self.graph.outgoing(block.id):
            if block.type == BlockType.CONDITION:
                selected = context.decisions.condition.get(block.id)
                if conn.source_handle != f"{CONDITION_HANDLE_PREFIX}{selected}":
                    continue
            elif block.type == BlockType.ROUTER:
                if context.decisions.router.get(block.id) != conn.target:
                    continue
            context.active_execution_path.add(conn.target)
