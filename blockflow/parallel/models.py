# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Parallel Engine Models

Pydantic models for workflow definitions containing parallel constructs.
"""

import json
from enum import Enum
from typing import List, Dict, Any, Optional, Union, Literal
from pydantic import BaseModel, Field, ConfigDict, model_validator

from .exceptions import MalformedWorkflowError


# Closed set of values a distribution may carry
DistributionValue = Union[str, bool, int, float, Dict[str, Any], List[Any], None]


class BlockType(str, Enum):
    """Supported block types."""

    STARTER = "starter"
    AGENT = "agent"
    FUNCTION = "function"
    API = "api"
    CONDITION = "condition"
    ROUTER = "router"
    PARALLEL = "parallel"
    RESPONSE = "response"


class Block(BaseModel):
    """Single block in a workflow"""
    model_config = ConfigDict(frozen=True)

    id: str
    type: BlockType
    name: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Connection(BaseModel):
    """Directed connection between two blocks"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)  # Allow camelCase handles

    source: str
    target: str
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")


class ParallelConstruct(BaseModel):
    """Fan-out construct: runs its member nodes once per distribution item"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    nodes: List[str] = Field(default_factory=list)
    parallel_type: Literal["collection", "count"] = Field(default="collection", alias="parallelType")
    distribution: Optional[Union[List[Any], Dict[str, Any], str]] = None
    count: int = Field(default=1, ge=0)


class WorkflowDefinition(BaseModel):
    """Complete workflow definition"""
    workflow_id: str
    name: str
    blocks: List[Block]
    connections: List[Connection] = Field(default_factory=list)
    parallels: List[ParallelConstruct] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_references(self) -> "WorkflowDefinition":
        """Reject definitions whose connections or parallels name unknown blocks."""
        block_ids = [block.id for block in self.blocks]
        if len(block_ids) != len(set(block_ids)):
            duplicates = {bid for bid in block_ids if block_ids.count(bid) > 1}
            raise MalformedWorkflowError(f"Duplicate block IDs found: {duplicates}", field="blocks")

        known = set(block_ids)
        for conn in self.connections:
            for end in (conn.source, conn.target):
                if end not in known:
                    raise MalformedWorkflowError(
                        f"Connection references non-existent block: {end}",
                        field="connections"
                    )

        types = {block.id: block.type for block in self.blocks}
        for parallel in self.parallels:
            if types.get(parallel.id) != BlockType.PARALLEL:
                raise MalformedWorkflowError(
                    f"Parallel '{parallel.id}' has no matching parallel block",
                    field="parallels"
                )
            for node_id in parallel.nodes:
                if node_id not in known:
                    raise MalformedWorkflowError(
                        f"Parallel '{parallel.id}' references non-existent block: {node_id}",
                        field=f"parallels[{parallel.id}].nodes"
                    )
        return self


def format_value(value: DistributionValue) -> str:
    """Stringify a distribution value for embedding in text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    raise TypeError(f"Unsupported distribution value type: {type(value).__name__}")
