"""
Maps an assembled family tree onto the node/edge payload the graph UI
renders, plus the placement arithmetic used when members are created,
dragged or grouped.

Member positions are relative to their group when `group_id` is set and
absolute otherwise, matching how the graph library nests child nodes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from bittle.models.connection import Connection
from bittle.models.group import Group
from bittle.models.tree_member import TreeMember
from bittle.schemas.graph_schema import (
    FamilyTreeStats,
    GraphEdge,
    GraphNode,
    GraphPayload,
    XYPosition,
)

NODE_WIDTH = 172
NODE_HEIGHT = 36
GROUP_WIDTH = 300
GROUP_HEIGHT = 200
PADDING = 50

# Estimated client viewport, used to center the default group
VIEWPORT_WIDTH = 1280
VIEWPORT_HEIGHT = 720 * 0.85

# Edges whose ends are this close horizontally are drawn straight
VERTICAL_TOLERANCE = 10

BIG_TO_LITTLE = "bigToLittle"
GENERAL = "general"


# ============================================================
# DIMENSIONS
# ============================================================

def parse_dimension(value: Union[str, float, int, None], fallback: float) -> float:
    """'300px' -> 300.0; unparsable or zero values fall back."""
    if value is None:
        return float(fallback)
    if isinstance(value, (int, float)):
        return float(value) or float(fallback)

    text = value.strip().lower()
    if text.endswith("px"):
        text = text[:-2]
    try:
        parsed = float(text)
    except ValueError:
        return float(fallback)
    return parsed or float(fallback)


def format_dimension(value: float) -> str:
    return f"{value:g}px"


# ============================================================
# PLACEMENT
# ============================================================

def default_group_position() -> tuple[float, float]:
    return (
        (VIEWPORT_WIDTH - GROUP_WIDTH) / 2,
        (VIEWPORT_HEIGHT - GROUP_HEIGHT) / 2,
    )


def calculate_member_positions(
    count: int,
    group_width: float = GROUP_WIDTH,
    group_height: float = GROUP_HEIGHT,
) -> list[tuple[float, float]]:
    """Grid positions, relative to the group, for `count` new members."""
    cell_w = NODE_WIDTH + PADDING
    cell_h = NODE_HEIGHT + PADDING
    per_row = max(1, math.floor(group_width / cell_w))
    offset_x = (group_width - per_row * cell_w + PADDING) / 2
    offset_y = PADDING

    positions = []
    for index in range(count):
        row, col = divmod(index, per_row)
        x = offset_x + col * cell_w
        y = offset_y + row * cell_h
        positions.append((
            min(max(x, PADDING), group_width - NODE_WIDTH - PADDING),
            min(max(y, PADDING), group_height - NODE_HEIGHT - PADDING),
        ))
    return positions


@dataclass(frozen=True)
class Placement:
    group_id: Optional[str]
    x: float
    y: float


def _contains(group: Group, x: float, y: float) -> bool:
    gx = group.position_x or 0
    gy = group.position_y or 0
    gw = parse_dimension(group.width, GROUP_WIDTH)
    gh = parse_dimension(group.height, GROUP_HEIGHT)
    return gx <= x <= gx + gw and gy <= y <= gy + gh


def place_dropped_member(
    abs_x: float,
    abs_y: float,
    groups: Sequence[Group],
    container_height: Optional[float] = None,
) -> Placement:
    """
    Decide where a member dropped at an absolute position ends up.

    Inside a group: the position becomes relative and is clamped so the
    node stays within the group. Outside every group: the absolute
    position is kept, clamped above the bottom of the container if known.
    """
    for group in groups:
        if not _contains(group, abs_x, abs_y):
            continue
        gw = parse_dimension(group.width, GROUP_WIDTH)
        gh = parse_dimension(group.height, GROUP_HEIGHT)
        rel_x = max(0.0, min(abs_x - (group.position_x or 0), gw - NODE_WIDTH))
        rel_y = max(0.0, min(abs_y - (group.position_y or 0), gh - NODE_HEIGHT))
        return Placement(group.id, rel_x, rel_y)

    y = abs_y
    if container_height is not None:
        y = min(abs_y, container_height - NODE_HEIGHT - 100)
    return Placement(None, abs_x, y)


# ============================================================
# NODES / EDGES
# ============================================================

def role_icon(is_big: bool, has_littles: bool, has_big: bool) -> str:
    if is_big and has_littles and has_big:
        return "👑🌱"
    if is_big:
        return "⭐"
    if has_big:
        return "🌱"
    return "⚪"


def _group_node(group: Group) -> GraphNode:
    width = parse_dimension(group.width, GROUP_WIDTH)
    height = parse_dimension(group.height, GROUP_HEIGHT)
    return GraphNode(
        id=group.id,
        type="group",
        data={"label": "", "width": width, "height": height},
        position=XYPosition(x=group.position_x or 0, y=group.position_y or 0),
        style={"width": width, "height": height, "zIndex": 10},
        resizable=True,
    )


def _member_node(
    member: TreeMember,
    has_littles: bool,
    has_big: bool,
    group_ids: set[str],
) -> GraphNode:
    is_big = bool(member.is_big)
    # A member pointing at a group that is not in this tree is drawn loose
    parent = member.group_id if member.group_id in group_ids else None
    return GraphNode(
        id=member.id,
        type="member",
        data={
            "label": f"{role_icon(is_big, has_littles, has_big)} {member.identifier}",
            "identifier": member.identifier,
            "is_big": is_big,
            "hasLittles": has_littles,
            "hasBig": has_big,
            "form_submission_id": member.form_submission_id,
        },
        position=XYPosition(x=member.position_x or 0, y=member.position_y or 0),
        parentNode=parent,
        extent="parent" if parent else None,
        style={"width": NODE_WIDTH, "height": NODE_HEIGHT, "zIndex": 20},
    )


def _absolute_x(node: GraphNode, nodes_by_id: dict[str, GraphNode]) -> float:
    x = node.position.x
    if node.parentNode and node.parentNode in nodes_by_id:
        x += nodes_by_id[node.parentNode].position.x
    return x


def _edge(
    connection: Connection,
    nodes_by_id: dict[str, GraphNode],
) -> GraphEdge:
    source = nodes_by_id.get(connection.big_id)
    target = nodes_by_id.get(connection.little_id)

    big_to_little = bool(
        source and target and source.data.get("is_big") and target.data.get("hasBig")
    )
    vertical = bool(
        source
        and target
        and abs(_absolute_x(source, nodes_by_id) - _absolute_x(target, nodes_by_id))
        < VERTICAL_TOLERANCE
    )
    return GraphEdge(
        id=connection.id,
        source=connection.big_id,
        target=connection.little_id,
        type="default" if vertical else "smoothstep",
        animated=big_to_little,
        data={
            "relationshipType": BIG_TO_LITTLE if big_to_little else GENERAL,
            "isVertical": vertical,
            "points": connection.points or 0,
        },
    )


def build_nodes_and_edges(
    members: Iterable[TreeMember],
    groups: Iterable[Group],
    connections: Iterable[Connection],
) -> tuple[list[GraphNode], list[GraphEdge]]:
    connections = list(connections)
    bigs = {c.big_id for c in connections}
    littles = {c.little_id for c in connections}

    # Parents must precede their children for the graph library
    group_nodes = [_group_node(g) for g in groups]
    group_ids = {n.id for n in group_nodes}
    member_nodes = [
        _member_node(m, m.id in bigs, m.id in littles, group_ids) for m in members
    ]
    nodes = group_nodes + member_nodes

    nodes_by_id = {n.id: n for n in nodes}
    edges = [_edge(c, nodes_by_id) for c in connections]
    return nodes, edges


def build_graph(aggregate) -> GraphPayload:
    """Render a FamilyTreeAggregate into the graph page payload."""
    nodes, edges = build_nodes_and_edges(
        aggregate.members, aggregate.groups, aggregate.connections
    )
    big_count = sum(1 for m in aggregate.members if m.is_big)
    return GraphPayload(
        familyTreeId=aggregate.tree.id,
        nodes=nodes,
        edges=edges,
        familyTreeData=FamilyTreeStats(
            title=aggregate.tree.title,
            description=aggregate.tree.description,
            code=aggregate.tree.code,
            totalMembers=len(aggregate.members),
            bigCount=big_count,
            littleCount=len(aggregate.members) - big_count,
        ),
    )
