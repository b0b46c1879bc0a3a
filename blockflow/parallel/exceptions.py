# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Parallel Engine Exceptions

Custom exceptions for the parallel execution engine.
"""

from blockflow.core.errors import ValidationError, ExecutionError


class MalformedWorkflowError(ValidationError):
    """Workflow definition references blocks that do not exist"""
    pass


class WorkflowExecutionError(ExecutionError):
    """Workflow execution failed"""
    pass


class BlockExecutionError(WorkflowExecutionError):
    """Block execution failed"""
    def __init__(self, block_id: str, message: str, context: dict = None):
        self.block_id = block_id
        self.context = context or {}
        super().__init__(f"Block '{block_id}' failed: {message}", details=self.context)


class BlockTimeoutError(BlockExecutionError):
    """Block execution exceeded timeout"""
    def __init__(self, block_id: str, timeout: float):
        super().__init__(
            block_id,
            f"Execution exceeded timeout ({timeout}s)"
        )
        self.timeout = timeout
