# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for virtual block identity
"""

from blockflow.parallel.identity import VirtualBlockId, virtual_block_id


def test_identity_is_deterministic():
    assert virtual_block_id("A", "P", 2) == virtual_block_id("A", "P", 2)
    assert hash(virtual_block_id("A", "P", 2)) == hash(VirtualBlockId("A", "P", 2))


def test_identity_distinguishes_every_component():
    ids = {
        virtual_block_id("A", "P", 0),
        virtual_block_id("A", "P", 1),
        virtual_block_id("B", "P", 0),
        virtual_block_id("A", "Q", 0),
    }
    assert len(ids) == 4


def test_string_form_only_for_logs():
    vid = virtual_block_id("A", "P", 3)

    assert str(vid) == "A_parallel_P_iteration_3"
    assert vid != "A_parallel_P_iteration_3"
