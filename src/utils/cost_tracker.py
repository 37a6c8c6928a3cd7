"""LLM cost estimation and usage logging."""

import logging

logger = logging.getLogger(__name__)

# Price per 1K tokens (USD), approximate Groq list prices
MODEL_PRICING: dict[str, dict[str, float]] = {
    "llama-3.1-8b-instant": {"input": 0.00005, "output": 0.00008},
    "llama-3.3-70b-versatile": {"input": 0.00059, "output": 0.00079},
    "gemma2-9b-it": {"input": 0.00020, "output": 0.00020},
    "openai/gpt-oss-20b": {"input": 0.00010, "output": 0.00050},
    "openai/gpt-oss-120b": {"input": 0.00015, "output": 0.00075},
}

# Fallback pricing for unknown models
DEFAULT_PRICING = {"input": 0.0005, "output": 0.001}


def estimate_cost(prompt_tokens: int, completion_tokens: int, model: str) -> float:
    """Estimate cost in USD for a single LLM call."""
    pricing = MODEL_PRICING.get(model, DEFAULT_PRICING)
    cost = (prompt_tokens / 1000) * pricing["input"] + (completion_tokens / 1000) * pricing["output"]
    return round(cost, 8)


def log_usage(usage: dict, model: str, project_id: str) -> float:
    """Estimate and log the cost of an LLM call."""
    prompt_tokens = usage.get("prompt_tokens") or 0
    completion_tokens = usage.get("completion_tokens") or 0
    cost = estimate_cost(prompt_tokens, completion_tokens, model)
    logger.info(
        "LLM call: project=%s model=%s prompt_tokens=%d completion_tokens=%d cost=$%.6f",
        project_id, model, prompt_tokens, completion_tokens, cost,
    )
    return cost
