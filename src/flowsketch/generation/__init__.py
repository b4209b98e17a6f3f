"""Upstream flow description generators."""

from .describe import (
    AnthropicFlowDescriber,
    FlowDescriber,
    StaticFlowDescriber,
    build_prompt,
    clean_description,
)

__all__ = [
    "AnthropicFlowDescriber",
    "FlowDescriber",
    "StaticFlowDescriber",
    "build_prompt",
    "clean_description",
]
