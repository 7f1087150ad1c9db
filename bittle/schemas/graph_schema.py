from typing import Any, List, Literal, Optional

from pydantic import BaseModel


# --------------------------------------------------
# GRAPH NODES / EDGES (shape expected by the graph UI)
# --------------------------------------------------
class XYPosition(BaseModel):
    x: float
    y: float


class GraphNode(BaseModel):
    id: str
    type: Literal["group", "member"]
    data: dict[str, Any]
    position: XYPosition
    parentNode: Optional[str] = None
    extent: Optional[Literal["parent"]] = None
    style: dict[str, Any] = {}
    draggable: bool = True
    selectable: bool = True
    resizable: bool = False


class GraphEdge(BaseModel):
    id: str
    source: str
    target: str
    type: Literal["default", "smoothstep"]
    animated: bool = False
    sourceHandle: str = "bottom"
    targetHandle: str = "top"
    data: dict[str, Any] = {}


class FamilyTreeStats(BaseModel):
    title: str
    description: Optional[str] = None
    code: str
    totalMembers: int
    bigCount: int
    littleCount: int


class GraphPayload(BaseModel):
    familyTreeId: str
    nodes: List[GraphNode]
    edges: List[GraphEdge]
    familyTreeData: FamilyTreeStats
