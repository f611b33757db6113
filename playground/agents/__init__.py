"""
AI Components for the Intent-to-JSON Playground.

1. Structured Agent (Single-Shot Multimodal Workflow)
   - Uses Gemini in JSON mode for image or text input
   - Output is gated by a user-supplied schema compiled at call time
   - NOT an ADK agent - uses the Google Gen AI SDK directly
"""

from playground.agents.structured import (
    StructuredAgentInput,
    StructuredAgentOutput,
    run_structured_agent,
)

__all__ = [
    "run_structured_agent",
    "StructuredAgentInput",
    "StructuredAgentOutput",
]
