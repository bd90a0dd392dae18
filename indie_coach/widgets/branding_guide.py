"""Visual branding guide widget data: the ``[BRANDING_GUIDE]`` block.

The guide is editable: users can retype palette hex codes and swap fonts,
then generate a typographic logo from the edited guide.
"""

from dataclasses import dataclass
from typing import Literal

from pydantic import Field

from indie_coach.agent.prompts import build_logo_prompt
from indie_coach.models.schemas import CamelModel


@dataclass(frozen=True)
class FontOption:
    name: str
    family: str


FONT_OPTIONS: tuple[FontOption, ...] = (
    FontOption("Oswald", "'Oswald', sans-serif"),
    FontOption("Montserrat", "'Montserrat', sans-serif"),
    FontOption("Playfair Display", "'Playfair Display', serif"),
    FontOption("Lato", "'Lato', sans-serif"),
    FontOption("Inter", "'Inter', sans-serif"),
)

FONT_NAMES = tuple(f.name for f in FONT_OPTIONS)

DEFAULT_LOGO_TEXT = "Your Artist Name"


class LogoTextError(ValueError):
    """Raised when logo text is blank."""

    pass


class Aesthetic(CamelModel):
    name: str
    description: str = ""


class PaletteColor(CamelModel):
    role: Literal["Primary", "Secondary", "Accent"]
    hex: str
    name: str


class FontSample(CamelModel):
    name: str
    sample: str = ""


class Typography(CamelModel):
    headline: FontSample
    body: FontSample


class ApplicationIdea(CamelModel):
    emoji: str = ""
    title: str
    description: str = ""


class BrandingGuide(CamelModel):
    """A visual identity proposal for an artist."""

    aesthetic: Aesthetic
    palette: list[PaletteColor] = Field(default_factory=list)
    typography: Typography
    application: list[ApplicationIdea] = Field(default_factory=list)

    def with_palette_hex(self, index: int, hex_code: str) -> "BrandingGuide":
        """Return a copy with one palette color's hex code replaced.

        Raises:
            IndexError: If no color exists at ``index``.
        """
        palette = [c.model_copy() for c in self.palette]
        palette[index] = palette[index].model_copy(update={"hex": hex_code})
        return self.model_copy(update={"palette": palette})

    def with_font(self, slot: Literal["headline", "body"], font_name: str) -> "BrandingGuide":
        """Return a copy with the headline or body font swapped.

        The sample text is kept.
        """
        current = getattr(self.typography, slot)
        typography = self.typography.model_copy(
            update={slot: current.model_copy(update={"name": font_name})}
        )
        return self.model_copy(update={"typography": typography})

    def palette_description(self) -> str:
        """Describe the palette as ``Role: Name (#hex)`` entries."""
        return ", ".join(f"{c.role}: {c.name} ({c.hex})" for c in self.palette)

    def logo_prompt(self, logo_text: str) -> str:
        """Build the image prompt for a typographic logo.

        Raises:
            LogoTextError: If ``logo_text`` is blank.
        """
        if not logo_text.strip():
            raise LogoTextError("Please enter your artist or brand name.")
        return build_logo_prompt(
            logo_text=logo_text,
            aesthetic_name=self.aesthetic.name,
            aesthetic_description=self.aesthetic.description,
            palette_description=self.palette_description(),
            headline_font=self.typography.headline.name,
        )


def font_family(name: str) -> str:
    """CSS font-family for a font name, falling back to sans-serif."""
    for option in FONT_OPTIONS:
        if option.name == name:
            return option.family
    return f"'{name}', sans-serif"
