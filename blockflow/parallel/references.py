# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Parallel references

Resolves <parallel.currentItem>, <parallel.index> and <parallel.items> in
block parameters from the iteration bindings published on the context.
"""

import re
from typing import Any, Dict

from .context import ExecutionContext
from .models import format_value


REFERENCE_PATTERN = re.compile(r"<parallel\.(\w+)>")


def resolve_reference(name: str, context: ExecutionContext, parallel_id: str) -> Any:
    """Resolve a single `parallel.<name>` reference; unknown names give None."""
    if name == "currentItem":
        return context.loop_items.get(parallel_id)
    if name == "index":
        return context.loop_iterations.get(parallel_id)
    if name == "items":
        state = context.parallel_executions.get(parallel_id)
        return state.distribution_items if state is not None else None
    return None


def resolve_value(value: Any, context: ExecutionContext, parallel_id: str) -> Any:
    """Resolve a single parameter value"""
    if isinstance(value, dict):
        return {k: resolve_value(v, context, parallel_id) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_value(v, context, parallel_id) for v in value]
    if not isinstance(value, str):
        return value

    # Whole value is one reference: keep the raw type
    match = REFERENCE_PATTERN.fullmatch(value.strip())
    if match:
        return resolve_reference(match.group(1), context, parallel_id)

    # Embedded references: "text <parallel.x> more text"
    def replace_ref(m):
        return format_value(resolve_reference(m.group(1), context, parallel_id))

    return REFERENCE_PATTERN.sub(replace_ref, value)


def resolve_params(params: Dict[str, Any], context: ExecutionContext, parallel_id: str) -> Dict[str, Any]:
    """Resolve parameter references like <parallel.currentItem>"""
    return {key: resolve_value(value, context, parallel_id) for key, value in params.items()}
