# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Shared fixtures: small workflows exercising parallel constructs.
"""

import pytest

from blockflow.core.config import Config
from blockflow.parallel.context import ExecutionContext
from blockflow.parallel.models import (
    Block,
    BlockType,
    Connection,
    ParallelConstruct,
    WorkflowDefinition,
)

START = "parallel-start-source"
END = "parallel-end-source"


def conn(source, target, handle=None):
    return Connection(source=source, target=target, sourceHandle=handle)


@pytest.fixture
def config():
    """Defaults, independent of any YAML on disk"""
    return Config(log_format="text")


@pytest.fixture
def context():
    return ExecutionContext("test-workflow")


@pytest.fixture
def linear_workflow():
    """start -> P[A -> B] over three items -> after"""
    return WorkflowDefinition(
        workflow_id="linear",
        name="Linear",
        blocks=[
            Block(id="start", type=BlockType.STARTER),
            Block(id="P", type=BlockType.PARALLEL),
            Block(id="A", type=BlockType.FUNCTION, params={"item": "<parallel.currentItem>"}),
            Block(id="B", type=BlockType.FUNCTION),
            Block(id="after", type=BlockType.FUNCTION),
        ],
        connections=[
            conn("start", "P"),
            conn("P", "A", START),
            conn("A", "B"),
            conn("P", "after", END),
        ],
        parallels=[ParallelConstruct(id="P", nodes=["A", "B"], distribution=["a", "b", "c"])],
    )


@pytest.fixture
def condition_workflow():
    """start -> P[C -(true)-> T, C -(false)-> F, T|F -> J] over [1, 2] -> after"""
    return WorkflowDefinition(
        workflow_id="conditional",
        name="Conditional",
        blocks=[
            Block(id="start", type=BlockType.STARTER),
            Block(id="P", type=BlockType.PARALLEL),
            Block(id="C", type=BlockType.CONDITION, params={"value": "<parallel.currentItem>"}),
            Block(id="T", type=BlockType.FUNCTION),
            Block(id="F", type=BlockType.FUNCTION),
            Block(id="J", type=BlockType.FUNCTION),
            Block(id="after", type=BlockType.FUNCTION),
        ],
        connections=[
            conn("start", "P"),
            conn("P", "C", START),
            conn("C", "T", "condition-true"),
            conn("C", "F", "condition-false"),
            conn("T", "J"),
            conn("F", "J"),
            conn("P", "after", END),
        ],
        parallels=[ParallelConstruct(id="P", nodes=["C", "T", "F", "J"], distribution=[1, 2])],
    )


@pytest.fixture
def router_workflow():
    """start -> P[R -> X | Y] over [0, 1, 2] -> after"""
    return WorkflowDefinition(
        workflow_id="routed",
        name="Routed",
        blocks=[
            Block(id="start", type=BlockType.STARTER),
            Block(id="P", type=BlockType.PARALLEL),
            Block(id="R", type=BlockType.ROUTER, params={"n": "<parallel.currentItem>"}),
            Block(id="X", type=BlockType.AGENT),
            Block(id="Y", type=BlockType.AGENT),
            Block(id="after", type=BlockType.RESPONSE),
        ],
        connections=[
            conn("start", "P"),
            conn("P", "R", START),
            conn("R", "X"),
            conn("R", "Y"),
            conn("P", "after", END),
        ],
        parallels=[ParallelConstruct(id="P", nodes=["R", "X", "Y"], distribution=[0, 1, 2])],
    )
