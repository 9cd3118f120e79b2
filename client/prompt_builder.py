"""Structured builder for collectible-figure style prompts."""

from dataclasses import dataclass


@dataclass
class FigurePrompt:
    """Fields of the figure prompt, pre-filled with a worked example."""

    scale: str = "1/7"
    subject: str = "commercialized figure of the character in the illustration"
    style: str = "realistic"
    environment: str = "on a computer desk"
    base: str = "using a circular transparent acrylic base without any text"
    details: str = (
        "On the computer screen, display the ZBrush modeling process of the figure. "
        "Next to the computer screen, place a BANDAl-style toy packaging box printed with the original artwork"
    )

    def build(self) -> str:
        return (
            f"Create a {self.scale} scale {self.subject}, in a {self.style} style and environment. "
            f"Place the figure {self.environment}, {self.base}. {self.details}"
        )
