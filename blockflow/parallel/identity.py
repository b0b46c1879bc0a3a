# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Virtual block identity.

A virtual block is one run of a template block for one iteration of a
parallel construct. Its key is a plain composite tuple; the string form only
appears in logs.
"""

from typing import NamedTuple


class VirtualBlockId(NamedTuple):
    block_id: str
    parallel_id: str
    iteration: int

    def __str__(self) -> str:
        return f"{self.block_id}_parallel_{self.parallel_id}_iteration_{self.iteration}"


def virtual_block_id(block_id: str, parallel_id: str, iteration: int) -> VirtualBlockId:
    return VirtualBlockId(block_id, parallel_id, iteration)
