"""Editable prompt text plus pending suggestions from the prompt helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from client.variations import parse_variations


@dataclass
class PromptState:
    """
    Attributes:
        text: The active prompt; always a string, possibly empty.
        pending_optimization: Rewritten prompt waiting for the user's review.
        variations: Candidate prompts offered for adoption.
    """

    text: str = ""
    pending_optimization: Optional[str] = None
    variations: List[str] = field(default_factory=list)

    @property
    def is_submittable(self) -> bool:
        return bool(self.text.strip())

    def set_text(self, text: Optional[str]):
        self.text = text or ""

    def offer_optimization(self, suggestion: str):
        self.pending_optimization = suggestion

    def accept_optimization(self) -> bool:
        """Replace the prompt with the pending rewrite, if there is one."""
        if self.pending_optimization is None:
            return False
        self.text = self.pending_optimization
        self.pending_optimization = None
        return True

    def dismiss_optimization(self):
        self.pending_optimization = None

    def offer_variations(self, numbered_list: str) -> List[str]:
        self.variations = parse_variations(numbered_list)
        return list(self.variations)

    def adopt_variation(self, index: int) -> bool:
        """Replace the prompt with candidate `index`. Out-of-range is a no-op."""
        if not 0 <= index < len(self.variations):
            return False
        self.text = self.variations[index]
        return True
