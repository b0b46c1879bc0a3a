# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Execution Context

Tracks execution state for a single workflow run. Passed explicitly to every
component; there is no process-wide instance.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Set, Union

from .identity import VirtualBlockId

BlockKey = Union[str, VirtualBlockId]


@dataclass
class Decisions:
    """Branch choices made by condition and router blocks."""
    condition: Dict[BlockKey, str] = field(default_factory=dict)  # block -> condition id
    router: Dict[BlockKey, str] = field(default_factory=dict)  # block -> target block id


class ExecutionContext:
    """
    Execution context for a workflow run.

    Tracks:
    - Executed blocks (real and virtual)
    - The active execution path
    - Condition / router decisions
    - Parallel iteration bindings and state
    - Block outputs
    """

    def __init__(self, workflow_id: str, execution_id: Optional[str] = None):
        self.execution_id = execution_id or (
            f"exec_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
        )
        self.workflow_id = workflow_id
        self.started_at = datetime.now(timezone.utc).isoformat()
        self.completed_at = None

        self.executed_blocks: Set[BlockKey] = set()
        self.active_execution_path: Set[BlockKey] = set()
        self.decisions = Decisions()

        # Iteration bindings: "<parallel>_iteration_<i>" and "<parallel>" -> item
        self.loop_items: Dict[str, Any] = {}
        self.loop_iterations: Dict[str, int] = {}

        self.parallel_executions: Dict[str, Any] = {}  # parallel id -> ParallelState
        self.completed_loops: Set[str] = set()
        self.block_states: Dict[BlockKey, Any] = {}  # block -> last output

    def mark_executed(self, block_id: BlockKey, output: Any) -> None:
        """Mark a block as executed with its output"""
        self.block_states[block_id] = output
        self.executed_blocks.add(block_id)

    def is_executed(self, block_id: BlockKey) -> bool:
        return block_id in self.executed_blocks

    def get_output(self, block_id: BlockKey) -> Any:
        """Get last output for a block"""
        return self.block_states.get(block_id)

    def finalize(self) -> None:
        """Mark execution as complete"""
        self.completed_at = datetime.now(timezone.utc).isoformat()
