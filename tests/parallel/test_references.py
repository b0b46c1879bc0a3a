# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for <parallel.*> reference resolution
"""

from blockflow.parallel.references import resolve_params, resolve_value
from blockflow.parallel.state import initialize_state


def bind(context, items, index):
    state = initialize_state("P", items)
    context.parallel_executions["P"] = state
    context.loop_items["P"] = items[index] if isinstance(items, list) else list(items.items())[index]
    context.loop_iterations["P"] = index


def test_single_reference_keeps_raw_type(context):
    bind(context, [{"name": "a"}, {"name": "b"}], 1)

    assert resolve_value("<parallel.currentItem>", context, "P") == {"name": "b"}
    assert resolve_value("<parallel.index>", context, "P") == 1
    assert resolve_value("<parallel.items>", context, "P") == [{"name": "a"}, {"name": "b"}]


def test_embedded_references_are_stringified(context):
    bind(context, [{"name": "a"}, True], 1)

    assert resolve_value("item <parallel.index>: <parallel.currentItem>", context, "P") == "item 1: true"

    bind(context, [{"name": "a"}, True], 0)
    assert resolve_value("got <parallel.currentItem>", context, "P") == 'got {"name": "a"}'


def test_unknown_reference(context):
    bind(context, ["a"], 0)

    assert resolve_value("<parallel.nope>", context, "P") is None
    assert resolve_value("x<parallel.nope>y", context, "P") == "xy"


def test_resolve_params_nested(context):
    bind(context, ["a", "b"], 0)

    params = {
        "query": "search <parallel.currentItem>",
        "options": {"index": "<parallel.index>", "tags": ["<parallel.currentItem>", 3]},
        "limit": 10,
    }

    assert resolve_params(params, context, "P") == {
        "query": "search a",
        "options": {"index": 0, "tags": ["a", 3]},
        "limit": 10,
    }


def test_unbound_parallel(context):
    assert resolve_value("<parallel.currentItem>", context, "Q") is None
    assert resolve_value("<parallel.items>", context, "Q") is None
