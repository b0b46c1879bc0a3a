# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Connection graph

Static, indexed view over a workflow's blocks and connections.
"""

from collections import defaultdict
from typing import Dict, List, Optional

from .models import Block, Connection, WorkflowDefinition


class ConnectionGraph:
    """
    Indexed block/connection lookup.

    Built once per workflow definition; never mutated afterwards.
    """

    def __init__(self, blocks: List[Block], connections: List[Connection]):
        self._blocks: Dict[str, Block] = {block.id: block for block in blocks}
        self._connections = list(connections)
        self._incoming: Dict[str, List[Connection]] = defaultdict(list)
        self._outgoing: Dict[str, List[Connection]] = defaultdict(list)

        for conn in self._connections:
            self._incoming[conn.target].append(conn)
            self._outgoing[conn.source].append(conn)

    @classmethod
    def from_workflow(cls, workflow: WorkflowDefinition) -> "ConnectionGraph":
        return cls(workflow.blocks, workflow.connections)

    def blocks(self) -> List[Block]:
        return list(self._blocks.values())

    def connections(self) -> List[Connection]:
        return list(self._connections)

    def find_block(self, block_id: str) -> Optional[Block]:
        return self._blocks.get(block_id)

    def incoming(self, block_id: str) -> List[Connection]:
        return list(self._incoming.get(block_id, ()))

    def outgoing(self, block_id: str, handle: Optional[str] = None) -> List[Connection]:
        """Outgoing connections, optionally restricted to one source handle."""
        conns = self._outgoing.get(block_id, ())
        if handle is None:
            return list(conns)
        return [conn for conn in conns if conn.source_handle == handle]

    def has_connections(self, block_id: str) -> bool:
        """True if the block appears on either end of any connection."""
        return bool(self._incoming.get(block_id)) or bool(self._outgoing.get(block_id))
