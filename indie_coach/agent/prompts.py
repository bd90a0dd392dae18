"""Prompt text and suggestion catalogue for the coach.

Holds the system instruction sent with every chat request, the topic and
tool shortcuts shown on the welcome screen, and the book summary used as
extra context for the "Deep Dive" card.
"""

from dataclasses import dataclass

SYSTEM_INSTRUCTION = """
You are Indie Coach, an AI music industry coach for independent artists, songwriters,
producers, managers, and independent labels. You provide clear, professional, and
actionable advice across the full music business: contracts, royalties, publishing,
branding, marketing, team building, career strategy, touring, and monetization.
You are a 24/7 mentor and creative partner across all music genres.

Your tone must always be:
- Supportive
- Clear
- Professional
- Empowering
- Step-by-step when needed

Your knowledge covers:
1. Artist career foundations: identity, story, goals, positioning, release strategy, niche.
2. The artist team: managers, business managers, attorneys, agents, publicists, creatives.
3. Record labels: majors, indies, artist-owned labels, label functions.
4. Record deals: traditional, distribution, licensing, joint ventures, 360 deals.
5. Advances and recoupment: recoupable costs, cross-collateralization, chargebacks.
6. Royalty systems: artist, streaming, neighboring rights, master royalties.
7. Copyright: composition vs sound recording (PA vs SR), exclusive rights, licensing.
8. Publishing: admin, co-pub and full publishing deals; mechanical, performance, sync, print.
9. Song splits and collaboration: split sheets, producer shares, work-for-hire.
10. PROs: ASCAP, BMI, SESAC, SOCAN, PRS, GEMA, APRA; live setlist submissions.
11. Mechanical royalties: the MLC, Harry Fox Agency, global collection.
12. SoundExchange: digital performance royalties for non-interactive streams.
13. Sync licensing: sync and master-use fees, music supervisors, pitching.
14. Touring and live business: guarantees, door deals, riders, tour budgets, crew.
15. Merchandising: tour merch, venue percentages, online stores.
16. Distribution: DistroKid, CD Baby, AWAL, The Orchard, Stem; physical distribution.
17. Marketing and promotion: social strategy, content systems, PR, playlisting, ads.
18. Analytics: Spotify for Artists, Apple Music for Artists, YouTube Studio, TikTok.
19. Fanbase and community: email/SMS lists, Discord, superfans, memberships.
20. Monetization streams: streaming, publishing, sync, shows, merch, brand deals, courses.
21. Contracts: term, territory, exclusivity, rights granted, obligations, recoupment.
22. Producers: points, advances, production agreements, credits.
23. Branding and visual identity: logos, colors, typography, cover art, stage visuals.
24. Release planning: pre-release, release day, post-release; masters, artwork, EPK, metadata.
25. Music tech tools: AI tools, marketing platforms, royalty trackers, split payments.

RULES:
- Do NOT give legal advice. Explain concepts, and encourage users to consult an attorney
  for binding decisions. When discussing law, state "This is for educational purposes only
  and is not legal advice."
- Explain in a simple, beginner-friendly way unless the user asks for expert depth.
- Tailor answers to the user's career level (beginner, emerging, or advanced).
- Give step-by-step instructions whenever the user asks "how to" or "what should I do".
- Never quote books or copyrighted text word-for-word. You may summarize freely.

RESPONSE FORMATTING RULES:
- Your response MUST be a string formatted using Markdown.
- Use emojis strategically to add personality and visual interest.
- Use generous whitespace. Break long paragraphs into smaller chunks.

For any substantial question, structure the answer like a mini-lesson:
1. **Main Concept Title:** a Markdown H2 (##) with a relevant emoji.
2. **Key Takeaway:** start with the bolded label "**Key Takeaway:**" and a concise explanation.
3. **Actionable Step:** a practical step formatted as a "> [!ACTION]" callout.
Repeat the structure for multi-part questions. Greetings and very short questions can be
answered conversationally.

MARKDOWN RULES:
- Use a single # for the main topic and ## for sub-topics.
- Use the callouts > [!TIP], > [!IMPORTANT], and > [!ACTION] as appropriate.
- When a user asks for a budget, wrap a valid JSON object with [BUDGET_TABLE] and
  [/BUDGET_TABLE] tags. The JSON MUST have this structure:
  {"headers": ["Item", "Industry Low End", "Industry High End", "My Example Estimate"],
   "rows": [{"item": "Category Name", "low": 100, "high": 500, "estimate": 250}]}
- When a user asks for a ticket sale estimator, wrap a valid JSON object with
  [TICKET_ESTIMATOR] and [/TICKET_ESTIMATOR] tags. The JSON MUST have this structure:
  {"defaults": {"ticketPrice": 20, "venueCapacity": 200, "sellThroughRate": 75,
   "merchSpendPerGuest": 10, "venueFeePercent": 15, "venueCostFixed": 500,
   "marketingCost": 200, "crewCost": 300}}
- When a user asks for a visual branding guide, wrap a valid JSON object with
  [BRANDING_GUIDE] and [/BRANDING_GUIDE] tags. The JSON MUST have this structure:
  {"aesthetic": {"name": "Neon Noir", "description": "..."},
   "palette": [{"role": "Primary", "hex": "#1A1A2E", "name": "Midnight"},
               {"role": "Secondary", "hex": "#E94560", "name": "Signal Red"},
               {"role": "Accent", "hex": "#F5F5F5", "name": "Smoke"}],
   "typography": {"headline": {"name": "Oswald", "sample": "..."},
                  "body": {"name": "Inter", "sample": "..."}},
   "application": [{"emoji": "🎨", "title": "Cover Art", "description": "..."}]}
  Fonts MUST be one of: Oswald, Montserrat, Playfair Display, Lato, Inter.
- After your main response, you MUST provide three distinct, relevant follow-up questions
  the user might ask, inside special tags like this:
  [SUGGESTIONS]How do I copyright my music?|What's an EPK?|Tell me about music distributors.[/SUGGESTIONS]
  Separate the prompts with a pipe | character. Do not add any other text or formatting
  around these tags. This is a strict requirement.

END OF SYSTEM INSTRUCTION.
"""

BOOK_SUMMARY_ACTION_PROMPT = "Break down the key concepts from 'All About the Music Business' for me."

BOOK_SUMMARY_ACKNOWLEDGEMENT = "Got it. I'll use the summary to answer. What's your question?"

ALL_ABOUT_MUSIC_BUSINESS_SUMMARY = """
Summary notes: "All About the Music Business" by Donald S. Passman.

1. Your team. A personal manager shapes the career day to day and usually takes
   15-20% of gross earnings. A business manager handles money, taxes and investments
   for roughly 5%. A music attorney negotiates and reviews deals, billing hourly or a
   percentage. Booking agents find live work for about 10% and are licensed in some
   states. Hire carefully: these people can bind you to long commitments.

2. Record deals. Traditional deals pay a royalty on record income after the label
   recoups the advance and many costs. Recoupment comes only from the artist's royalty
   share, so an artist can be unrecouped while the label profits. Distribution and
   licensing deals give the artist more ownership in exchange for smaller advances.
   360 deals let labels share income from touring, merch and publishing.

3. Royalties and advances. Advances are prepaid royalties, not gifts. Watch for
   cross-collateralization, where one album's losses are recouped from another's
   royalties, and for option periods that let the label extend the deal.

4. Copyright basics. Every recorded song carries two copyrights: the composition
   (words and music, Form PA) and the sound recording (the master, Form SR).
   Registration is not required for protection but is required to sue in the U.S.
   and unlocks statutory damages.

5. Publishing. Songwriting income splits into the writer's share and the publisher's
   share. Income types are mechanical royalties (reproductions and streams),
   performance royalties (collected by PROs such as ASCAP and BMI), sync fees (film,
   TV, ads, games) and print. Deals range from administration deals (publisher takes
   10-20% for collecting) to co-publishing and full publishing deals.

6. Splits and collaboration. Agree on song splits in writing before release using a
   split sheet. Producer points come from the master side; producers only share
   publishing when they actually co-write.

7. Live and merch. Concert deals are guarantees, percentage deals, or a guarantee
   versus a percentage. Venues often take a cut of merch sold at the show.

8. Takeaway. Understand every contract before signing, keep ownership where you can,
   register your works, and build a team whose incentives match yours.
"""


@dataclass(frozen=True)
class Suggestion:
    """A welcome-screen shortcut.

    Attributes:
        title: Button label.
        icon: Material icon name.
        prompts: Candidate prompts; one is picked at random on click.
    """

    title: str
    icon: str
    prompts: tuple[str, ...]


TOPIC_SUGGESTIONS: tuple[Suggestion, ...] = (
    Suggestion(
        title="Royalties & Publishing",
        icon="payments",
        prompts=(
            "Explain the different types of music royalties and who collects them.",
            "What's the difference between a publishing admin deal and a co-pub deal?",
            "How do mechanical royalties work for streaming?",
        ),
    ),
    Suggestion(
        title="Record Deals",
        icon="album",
        prompts=(
            "What should I look for before signing a record deal?",
            "How does recoupment work in a traditional record deal?",
            "Compare a distribution deal with a 360 deal.",
        ),
    ),
    Suggestion(
        title="Branding & Identity",
        icon="palette",
        prompts=(
            "Help me define my artist brand and core story.",
            "Create a visual branding guide for a moody alt-R&B artist.",
            "What content pillars should an emerging artist use on social media?",
        ),
    ),
    Suggestion(
        title="Release Strategy",
        icon="rocket_launch",
        prompts=(
            "Build me a 6-week rollout plan for my next single.",
            "How do I pitch my song to Spotify editorial playlists?",
            "What deliverables do I need before release day?",
        ),
    ),
    Suggestion(
        title="Building Your Team",
        icon="groups",
        prompts=(
            "When should I get a manager, and what percentage is fair?",
            "Who should I hire first as an independent artist?",
            "What are red flags when choosing a manager?",
        ),
    ),
    Suggestion(
        title="Mindset & Motivation",
        icon="self_improvement",
        prompts=(
            "How do I overcome writer's block?",
            "Give me a weekly routine to stay consistent with my music.",
            "How can I deal with burnout as an independent artist?",
        ),
    ),
)

TOOL_SUGGESTIONS: tuple[Suggestion, ...] = (
    Suggestion(
        title="Ticket Sale Estimator",
        icon="confirmation_number",
        prompts=(
            "Give me a ticket sale estimator for a 200-capacity club show.",
            "Show me a ticket sale estimator for my first headline show.",
        ),
    ),
    Suggestion(
        title="Music Video Budget",
        icon="request_quote",
        prompts=(
            "Create a budget for a low-budget music video.",
            "Make me a budget for recording and releasing an EP.",
        ),
    ),
)


def build_logo_prompt(
    logo_text: str,
    aesthetic_name: str,
    aesthetic_description: str,
    palette_description: str,
    headline_font: str,
) -> str:
    """Build the typographic logo prompt for the image model."""
    return f"""
Generate a highly creative and clean typographic logo for a music artist. The logo's graphic
elements must be constructed exclusively from the letters of the artist's name, exploring
abstract arrangements and clever use of negative space.

**Core Task:** Create a logo using ONLY the letters from the artist's name. The letters
themselves should form the entire visual of the logo.

**Instructions:**
1. **Text to use:** The logo must be based on the exact text: "{logo_text}".
2. **Style & Aesthetic:** The overall style must be "{aesthetic_name}". Context: {aesthetic_description}.
3. **Color Palette:** Use ONLY colors from this palette: {palette_description}. The background
   must be a solid color from the palette. The text should use a contrasting color.
4. **Typography & Arrangement:**
   - The font style must be heavily inspired by "{headline_font}".
   - Stylize, deconstruct, abstract, or arrange the letters in a unique way to create a graphic mark.
   - Explore vertical stacking, overlapping, interlocking shapes, or mirroring.
   - Use negative space creatively.
5. **Composition:** A clean, modern, visually balanced logo, centered.

**Strict Rules - What to AVOID:**
- Absolutely NO icons, symbols, shapes, or illustrations. The logo must be 100% typographic.
- Do NOT use any colors outside of the provided palette.
- The artist's name must remain legible, even if abstract.
"""
