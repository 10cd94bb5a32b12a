"""Pathway generation phase powered by LangGraph + real LLM."""

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv
from langchain_openai import ChatOpenAI
from langgraph.graph import END, START, StateGraph
from typing_extensions import TypedDict

from ..pipeline import PipelinePhase

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "google/gemini-2.5-pro-exp-03-25:free"
DEFAULT_MAX_TOKENS = 6000

PATHWAY_SHAPE = """{
  "title": "Main topic title",
  "nodes": [
    {
      "id": "unique-id-1",
      "parentId": null,
      "title": "Node title",
      "description": "Brief description of this topic",
      "topics": ["key topic 1", "key topic 2"],
      "questions": ["previous year question 1", "previous year question 2"],
      "resources": [{"title": "Resource title", "url": "https://example.com"}],
      "equations": ["E = mc^2"],
      "codeExamples": ["code example here"],
      "position": {"x": 0, "y": 0}
    }
  ],
  "edges": [
    {"id": "edge-1", "source": "unique-id-1", "target": "unique-id-2", "label": "relates to", "animated": false}
  ]
}"""


class GenerationState(TypedDict):
    topic: str
    timespan: str
    custom_days: Optional[int]
    complexity: str
    prompt: List[Tuple[str, str]]
    raw_text: str
    llm_call: Dict[str, Any]


class PathwayGenerationPhase(PipelinePhase):
    phase_name = "generation"

    def __init__(self, model: Any = None, temperature: float = 0.7) -> None:
        self._model = model
        self._temperature = temperature

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        if context.get("raw_text") is not None:
            logger.info("Raw text supplied (%d chars); skipping generation", len(str(context["raw_text"])))
            return {"generation_report": {"skipped": True, "source": context.get("input_path", "")}}

        workflow = self._build_workflow()
        result_state = workflow.invoke(
            {
                "topic": str(context.get("topic", "")),
                "timespan": str(context.get("timespan", "weekly")),
                "custom_days": context.get("custom_days"),
                "complexity": str(context.get("complexity", "intermediate")),
                "prompt": [],
                "raw_text": "",
                "llm_call": {},
            }
        )
        return {
            "raw_text": result_state.get("raw_text", ""),
            "generation_report": {"skipped": False, "llm_call": result_state.get("llm_call", {})},
        }

    def _build_workflow(self):
        graph = StateGraph(GenerationState)
        graph.add_node("prepare_prompt", self._prepare_prompt)
        graph.add_node("invoke_model", self._invoke_model)
        graph.add_edge(START, "prepare_prompt")
        graph.add_edge("prepare_prompt", "invoke_model")
        graph.add_edge("invoke_model", END)
        return graph.compile()

    def _prepare_prompt(self, state: GenerationState) -> Dict[str, Any]:
        return {
            "prompt": self._build_prompt(
                topic=state.get("topic", ""),
                timespan=state.get("timespan", "weekly"),
                custom_days=state.get("custom_days"),
                complexity=state.get("complexity", "intermediate"),
            )
        }

    def _invoke_model(self, state: GenerationState) -> Dict[str, Any]:
        model = self._model if self._model is not None else self._build_model()
        response = model.invoke(state.get("prompt", []))
        response_text = self._to_text(response.content)
        response_metadata = getattr(response, "response_metadata", {}) or {}
        usage = response_metadata.get("token_usage") or getattr(response, "usage_metadata", {})
        finish_reason = response_metadata.get("finish_reason")
        if finish_reason == "length":
            logger.warning("Model output hit the token limit; recovery will complete the truncated JSON")
        logger.info("Model returned %d chars for topic %r", len(response_text), state.get("topic", ""))
        return {
            "raw_text": response_text,
            "llm_call": {
                "model": response_metadata.get("model_name", os.getenv("PATHWAY_MODEL", DEFAULT_MODEL)),
                "finish_reason": finish_reason,
                "token_usage": usage,
            },
        }

    def _build_model(self) -> ChatOpenAI:
        load_dotenv()
        api_key = os.getenv("OPENROUTER_API_KEY") or os.getenv("OPENAI_API_KEY")
        base_url = os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL)
        if not api_key:
            raise RuntimeError("OPENROUTER_API_KEY (or OPENAI_API_KEY) is not set in environment/.env")

        return ChatOpenAI(
            model=os.getenv("PATHWAY_MODEL", DEFAULT_MODEL),
            temperature=self._temperature,
            max_tokens=int(os.getenv("PATHWAY_MAX_TOKENS", DEFAULT_MAX_TOKENS)),
            api_key=api_key,
            base_url=base_url,
        )

    @staticmethod
    def _build_prompt(
        topic: str,
        timespan: str,
        custom_days: Optional[int],
        complexity: str,
    ) -> List[Tuple[str, str]]:
        if timespan == "custom" and custom_days:
            time_description = f"{custom_days} days"
        else:
            time_description = timespan

        system_prompt = (
            "You design learning pathways as graphs of topics.\n"
            "Return STRICT JSON only with shape:\n"
            f"{PATHWAY_SHAPE}\n"
            "parentId is null for root nodes and references the parent node id otherwise."
        )
        user_prompt = (
            f'Create a learning pathway for "{topic}" with {time_description} timespan '
            f"at {complexity} level.\n\n"
            "Ensure there are at least 5-10 nodes with various content types appropriate for the topic "
            "(include questions, equations if relevant, code examples if relevant, and resources). "
            "Structure the nodes in a hierarchical way that makes sense for learning the topic progressively."
        )
        return [("system", system_prompt), ("user", user_prompt)]

    @staticmethod
    def _to_text(content: Any) -> str:
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts: List[str] = []
            for item in content:
                if isinstance(item, dict) and "text" in item:
                    parts.append(str(item["text"]))
                else:
                    parts.append(str(item))
            return "\n".join(parts)
        return str(content)
