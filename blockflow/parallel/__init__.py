# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Parallel execution engine.

Scheduling, routing and completion tracking for parallel constructs that fan
a sub-graph out over a list, a map or a fixed count.
"""

from .context import ExecutionContext
from .exceptions import (
    MalformedWorkflowError,
    WorkflowExecutionError,
    BlockExecutionError,
    BlockTimeoutError,
)
from .executor import WaveExecutor
from .graph import ConnectionGraph
from .identity import VirtualBlockId, virtual_block_id
from .models import Block, BlockType, Connection, ParallelConstruct, WorkflowDefinition
from .orchestrator import ParallelOrchestrator
from .routing import RoutingEvaluator
from .state import ParallelState

__all__ = [
    "ExecutionContext",
    "MalformedWorkflowError",
    "WorkflowExecutionError",
    "BlockExecutionError",
    "BlockTimeoutError",
    "WaveExecutor",
    "ConnectionGraph",
    "VirtualBlockId",
    "virtual_block_id",
    "Block",
    "BlockType",
    "Connection",
    "ParallelConstruct",
    "WorkflowDefinition",
    "ParallelOrchestrator",
    "RoutingEvaluator",
    "ParallelState",
]
