from __future__ import annotations

import logging
from typing import Any, Dict, Optional, TypedDict
from urllib.parse import quote

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, StateGraph

from app.ai.openai_client import GenerateFn, ModelConfig
from app.ai.parser import parse_model_json
from app.ai.prompts import build_plan_prompt
from app.core.errors import ParseFailureError, UpstreamEmptyError

logger = logging.getLogger(__name__)

PLAN_MAX_TOKENS = 700
DEFAULT_IMAGE_URL = "https://source.unsplash.com/800x500/?{query}"


class PlanState(TypedDict):
    request: Dict[str, Any]
    language: str
    prompt: str
    raw_text: Optional[str]
    payload: Dict[str, Any]


def default_image_url(destination: str) -> str:
    return DEFAULT_IMAGE_URL.format(query=quote(destination, safe=""))


def ensure_images(payload: Dict[str, Any], destination: str) -> Dict[str, Any]:
    images = payload.get("images")
    if not isinstance(images, list) or not images:
        payload["images"] = [default_image_url(destination)]
    return payload


async def build_prompt(state: PlanState) -> Dict[str, Any]:
    req = state["request"]
    prompt = build_plan_prompt(
        destination=req["destination"],
        language=state["language"],
        days=req.get("days"),
        budget=req.get("budget"),
        interests=req.get("interests"),
        group=req.get("group"),
    )
    return {"prompt": prompt}


async def parse_output(state: PlanState) -> Dict[str, Any]:
    try:
        payload = parse_model_json(state["raw_text"] or "")
    except ParseFailureError:
        logger.warning("Plan output for %r was not valid JSON", state["request"]["destination"])
        raise
    return {"payload": payload}


async def attach_images(state: PlanState) -> Dict[str, Any]:
    return {"payload": ensure_images(state["payload"], state["request"]["destination"])}


async def call_model(state: PlanState, config: RunnableConfig) -> Dict[str, Any]:
    configurable = config.get("configurable", {})
    generate: GenerateFn = configurable["generate"]
    text = await generate(state["prompt"], configurable["model_config"])
    if not text:
        raise UpstreamEmptyError()
    return {"raw_text": text}


def build_plan_graph():
    """
    Compile the single-shot plan pipeline:
    build_prompt -> call_model -> parse_output -> attach_images.
    """
    builder = StateGraph(PlanState)
    builder.add_node("build_prompt", build_prompt)
    builder.add_node("call_model", call_model)
    builder.add_node("parse_output", parse_output)
    builder.add_node("attach_images", attach_images)

    builder.set_entry_point("build_prompt")
    builder.add_edge("build_prompt", "call_model")
    builder.add_edge("call_model", "parse_output")
    builder.add_edge("parse_output", "attach_images")
    builder.add_edge("attach_images", END)
    return builder.compile()


_GRAPH = build_plan_graph()


async def run_plan_graph(
    request: Dict[str, Any], language: str, generate: GenerateFn, model_config: ModelConfig
) -> Dict[str, Any]:
    initial_state: PlanState = {
        "request": request,
        "language": language,
        "prompt": "",
        "raw_text": None,
        "payload": {},
    }
    result = await _GRAPH.ainvoke(
        initial_state, config={"configurable": {"generate": generate, "model_config": model_config}}
    )
    return result["payload"]

