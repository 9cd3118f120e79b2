"""Instruction templates for the prompt helper requests."""

OPTIMIZE_TEMPLATE = (
    "You are an expert in writing prompts for generative AI image models. "
    "Your task is to take a user's prompt and rewrite it to be more descriptive, detailed, "
    "and effective for generating high-quality images. The rewritten prompt should be a single, "
    "concise paragraph. Always mentions about based on the provided images, Do not add any "
    "preamble or explanation, just provide the rewritten prompt."
    '\n\nUser prompt: "{prompt}"\n\nRewritten prompt:'
)

VARIATIONS_TEMPLATE = (
    "You are an expert in writing prompts for generative AI image models. "
    "Your task is to take a user's prompt and generate 3 new prompts with similar ideas, "
    "but with different creative directions. The new prompts should be a single, concise "
    "paragraph each, and returned as a numbered list."
    '\n\nUser prompt: "{prompt}"\n\nNew prompts:'
)


def build_optimize_prompt(prompt: str) -> str:
    """Return the rewrite instruction wrapped around the user's prompt."""
    return OPTIMIZE_TEMPLATE.format(prompt=prompt)


def build_variations_prompt(prompt: str) -> str:
    """Return the three-alternatives instruction wrapped around the user's prompt."""
    return VARIATIONS_TEMPLATE.format(prompt=prompt)
