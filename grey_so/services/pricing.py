"""Best-effort cost arithmetic for API responses that report token usage."""

from __future__ import annotations

from dataclasses import dataclass

from grey_so.interfaces.llm_executor import TokenUsage


@dataclass(frozen=True)
class ModelPricing:
    input_cost_per_million: float
    output_cost_per_million: float


@dataclass(frozen=True)
class CostBreakdown:
    input_cost: float = 0.0
    output_cost: float = 0.0

    @property
    def total_cost(self) -> float:
        return self.input_cost + self.output_cost


MODEL_PRICING: dict[str, ModelPricing] = {
    "gemini-3-pro-preview": ModelPricing(input_cost_per_million=2.0, output_cost_per_million=12.0),
}


def calculate_cost(usage: TokenUsage | None, model: str) -> CostBreakdown:
    pricing = MODEL_PRICING.get(model)
    if pricing is None or usage is None:
        return CostBreakdown()
    return CostBreakdown(
        input_cost=usage.prompt_tokens / 1_000_000 * pricing.input_cost_per_million,
        output_cost=usage.completion_tokens / 1_000_000 * pricing.output_cost_per_million,
    )


def describe_cost(usage: TokenUsage | None, model: str) -> str:
    """Human-readable usage line for the session log."""
    if usage is None:
        return "Cost data not available (using CLI mode)"
    cost = calculate_cost(usage, model)
    return (
        f"Tokens: {usage.prompt_tokens} input, {usage.completion_tokens} output | "
        f"Cost: ${cost.total_cost:.6f} (input: ${cost.input_cost:.6f}, "
        f"output: ${cost.output_cost:.6f})"
    )
