"""Content for the "All About the Music Business" promo card."""

from dataclasses import dataclass

from indie_coach.agent.prompts import BOOK_SUMMARY_ACTION_PROMPT


@dataclass(frozen=True)
class ResourceLink:
    label: str
    href: str


@dataclass(frozen=True)
class KeyConcept:
    label: str
    icon: str


TITLE = "Deep Dive: 'All About the Music Business'"
BLURB = (
    "Unlock key takeaways from the industry's essential guide by Donald S. Passman."
)
WHY_IT_MATTERS = (
    "Understanding the business side is non-negotiable for career longevity. "
    "This knowledge empowers you to build the right team, negotiate fair deals, "
    "and maximize your earnings."
)
ACTION_LABEL = "Ask Me to Break It Down"
ACTION_PROMPT = BOOK_SUMMARY_ACTION_PROMPT

RESOURCES: tuple[ResourceLink, ...] = (
    ResourceLink("U.S. Copyright Office", "https://www.copyright.gov/"),
    ResourceLink("ASCAP (PRO)", "https://www.ascap.com/"),
    ResourceLink("BMI (PRO)", "https://www.bmi.com/"),
)

KEY_CONCEPTS: tuple[KeyConcept, ...] = (
    KeyConcept("Your Team (Manager, Agent, etc.)", "groups"),
    KeyConcept("Record Deals & Royalties", "album"),
    KeyConcept("Copyright Law (The Basics)", "copyright"),
    KeyConcept("Songwriting & Publishing Splits", "library_music"),
)
