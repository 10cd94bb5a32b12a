"""Pathway graph data model primitives."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


Number = Union[int, float]


@dataclass
class Position:
    x: Number = 0
    y: Number = 0

    def to_json(self) -> Dict[str, Number]:
        return {"x": self.x, "y": self.y}


@dataclass
class Resource:
    title: str
    url: str

    def to_json(self) -> Dict[str, str]:
        return {"title": self.title, "url": self.url}


@dataclass
class Reference:
    title: str
    url: str = ""
    type: Optional[str] = None

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"title": self.title, "url": self.url}
        if self.type is not None:
            payload["type"] = self.type
        return payload


ReferenceItem = Union[str, Reference]


@dataclass
class ExpandableContent:
    detailed_explanation: str = ""
    applications: List[str] = field(default_factory=list)
    common_mistakes: List[str] = field(default_factory=list)
    mnemonics: List[str] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "detailedExplanation": self.detailed_explanation,
            "applications": list(self.applications),
            "commonMistakes": list(self.common_mistakes),
            "mnemonics": list(self.mnemonics),
        }


@dataclass
class PathwayNode:
    id: str
    title: str
    position: Position
    parent_id: Optional[str] = None
    description: str = ""
    topics: List[str] = field(default_factory=list)
    questions: List[str] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    equations: List[str] = field(default_factory=list)
    code_examples: List[str] = field(default_factory=list)
    pyqs: List[ReferenceItem] = field(default_factory=list)
    key_concepts: List[ReferenceItem] = field(default_factory=list)
    references: List[ReferenceItem] = field(default_factory=list)
    expandable_content: Optional[ExpandableContent] = None

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "parentId": self.parent_id,
            "title": self.title,
            "description": self.description,
            "position": self.position.to_json(),
            "topics": list(self.topics),
            "questions": list(self.questions),
            "resources": [resource.to_json() for resource in self.resources],
            "equations": list(self.equations),
            "codeExamples": list(self.code_examples),
            "pyqs": [_reference_to_json(item) for item in self.pyqs],
            "keyConcepts": [_reference_to_json(item) for item in self.key_concepts],
            "references": [_reference_to_json(item) for item in self.references],
        }
        if self.expandable_content is not None:
            payload["expandableContent"] = self.expandable_content.to_json()
        return payload


@dataclass
class PathwayEdge:
    id: str
    source: str
    target: str
    label: Optional[str] = None
    animated: bool = False

    def to_json(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "animated": self.animated,
        }
        if self.label is not None:
            payload["label"] = self.label
        return payload


@dataclass
class PathwayGraph:
    title: str
    nodes: List[PathwayNode] = field(default_factory=list)
    edges: List[PathwayEdge] = field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def to_json(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "nodes": [node.to_json() for node in self.nodes],
            "edges": [edge.to_json() for edge in self.edges],
        }


def _reference_to_json(item: ReferenceItem) -> Union[str, Dict[str, Any]]:
    if isinstance(item, Reference):
        return item.to_json()
    return item
