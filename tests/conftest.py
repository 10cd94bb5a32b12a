"""Shared pytest fixtures: raw generator outputs and a fake chat model."""

import json
from types import SimpleNamespace
from typing import Any, List

import pytest


class FakeChatModel:
    """Stands in for ``ChatOpenAI``; returns a fixed answer and records prompts."""

    def __init__(self, content: Any, finish_reason: str = "stop") -> None:
        self.content = content
        self.finish_reason = finish_reason
        self.calls: List[Any] = []

    def invoke(self, prompt: Any) -> SimpleNamespace:
        self.calls.append(prompt)
        return SimpleNamespace(
            content=self.content,
            response_metadata={"model_name": "fake-model", "finish_reason": self.finish_reason},
            usage_metadata={"input_tokens": 10, "output_tokens": 20},
        )


class ExplodingChatModel:
    def invoke(self, prompt: Any) -> None:
        raise AssertionError("model must not be called")


@pytest.fixture
def pathway_payload():
    return {
        "title": "Linear Algebra",
        "nodes": [
            {
                "id": "n1",
                "parentId": None,
                "title": "Vectors",
                "description": "Basics of vectors",
                "topics": ["addition", "scaling"],
                "questions": ["What is a basis?"],
                "resources": [{"title": "Notes", "url": "https://example.com/vectors"}],
                "equations": ["v = a*e1 + b*e2"],
                "codeExamples": ["import numpy as np"],
                "position": {"x": 0, "y": 0},
            },
            {
                "id": "n2",
                "parentId": "n1",
                "title": "Matrices",
                "description": "Linear maps",
                "topics": ["multiplication"],
                "position": {"x": 300, "y": 0},
                "expandableContent": {
                    "detailedExplanation": "Matrices represent linear maps",
                    "applications": ["graphics"],
                    "commonMistakes": ["AB != BA"],
                    "mnemonics": [],
                },
            },
            {"id": "n3", "parentId": "n2", "title": "Eigenvalues", "position": {"x": 600, "y": 0}},
        ],
        "edges": [
            {"id": "e1", "source": "n1", "target": "n2", "label": "leads to", "animated": True},
            {"id": "e2", "source": "n2", "target": "n3", "animated": False},
        ],
    }


@pytest.fixture
def pathway_text(pathway_payload):
    return json.dumps(pathway_payload)


@pytest.fixture
def chatty_response(pathway_text):
    return f"Sure! Here is your learning pathway:\n```json\n{pathway_text}\n```\nLet me know if you need more."


@pytest.fixture
def truncated_response():
    return '{"title":"T","nodes":[{"id":"n1","title":"X","topics":["a","b"'


@pytest.fixture
def fake_model(pathway_text):
    return FakeChatModel(pathway_text)


@pytest.fixture
def exploding_model():
    return ExplodingChatModel()
