"""NiceGUI renderers for the widgets embedded in coach responses."""

import logging
from collections.abc import Awaitable, Callable

from nicegui import ui

from indie_coach.parsing.tags import Segment, SegmentKind, split_segments
from indie_coach.ui.api_client import CoachApiClient, ImageRequestError
from indie_coach.ui.markdown import markdown_to_html
from indie_coach.widgets import book_summary
from indie_coach.widgets.branding_guide import (
    DEFAULT_LOGO_TEXT,
    FONT_NAMES,
    BrandingGuide,
    LogoTextError,
    font_family,
)
from indie_coach.widgets.budget_table import BudgetTable
from indie_coach.widgets.ticket_estimator import (
    SLIDER_RANGES,
    TicketEstimatorData,
    calculate,
    format_currency,
)

logger = logging.getLogger(__name__)

_PENDING_LABELS = {
    "BUDGET_TABLE": "Building your budget table...",
    "TICKET_ESTIMATOR": "Setting up the ticket estimator...",
    "BRANDING_GUIDE": "Designing your branding guide...",
}


def render_ticket_estimator(data: TicketEstimatorData) -> None:
    """Interactive show estimator: inputs on the left, projections on the right."""
    values = data.defaults.model_dump()

    with ui.card().classes("w-full my-4 p-4"):
        ui.label("Ticket Sale Estimator").classes("text-lg font-bold")
        ui.label("Adjust the inputs to project your potential earnings from a show.").classes(
            "text-sm text-gray-500 mb-2"
        )

        with ui.row().classes("w-full gap-8 no-wrap max-md:flex-wrap"):
            inputs = ui.column().classes("flex-1 gap-4")
            outputs = ui.column().classes("flex-1 gap-3")

        @ui.refreshable
        def results() -> None:
            estimate = calculate(**values)
            tone = "green" if estimate.is_profitable else "red"
            with ui.element("div").classes(f"w-full p-4 rounded-lg text-center bg-{tone}-50"):
                ui.label("Projected Net Profit").classes(
                    f"text-sm font-bold uppercase text-{tone}-800"
                )
                ui.label(format_currency(estimate.net_profit)).classes(
                    f"text-4xl font-extrabold text-{tone}-600"
                )
                ui.label(
                    f"{format_currency(estimate.total_gross_revenue)} Revenue - "
                    f"{format_currency(estimate.total_costs)} Costs"
                ).classes("text-xs text-gray-500")
            ui.label(f"Est. {estimate.tickets_sold} Guests").classes("text-xs text-gray-500")

            def line(label: str, amount: float, bold: bool = False) -> None:
                weight = "font-bold" if bold else "font-medium"
                with ui.row().classes("w-full justify-between"):
                    ui.label(label).classes(f"text-sm {weight}")
                    ui.label(format_currency(amount)).classes(f"text-sm {weight}")

            with ui.column().classes("w-full gap-1 p-3 bg-gray-50 rounded-lg"):
                ui.label("Revenue Sources").classes("font-bold self-center")
                line("Ticket Sales (Gross)", estimate.gross_ticket_revenue)
                line("Merch Sales (Gross)", estimate.gross_merch_revenue)
                ui.separator()
                line("Total Gross Revenue", estimate.total_gross_revenue, bold=True)

            with ui.column().classes("w-full gap-1 p-3 bg-gray-50 rounded-lg"):
                ui.label("Cost Breakdown").classes("font-bold self-center")
                line(f"Venue's Cut ({estimate.venue_fee_percent:g}%)", estimate.venue_cut_cost)
                line("Venue Cost (Fixed)", estimate.venue_cost_fixed)
                line("Marketing & Promotion", estimate.marketing_cost)
                line("Crew & Staff", estimate.crew_cost)
                ui.separator()
                line("Total Costs", estimate.total_costs, bold=True)

        def slider_row(label: str, key: str, unit: str = "") -> None:
            bounds = SLIDER_RANGES[key]
            with ui.row().classes("w-full justify-between items-center"):
                ui.label(label).classes("text-sm font-medium")
                ui.number(
                    value=values[key],
                    min=bounds.min,
                    max=bounds.max,
                    step=bounds.step,
                    prefix="$" if unit == "$" else None,
                    suffix="%" if unit == "%" else None,
                    on_change=lambda: results.refresh(),
                ).bind_value(values, key).classes("w-28").props("dense outlined")
            ui.slider(
                min=bounds.min,
                max=bounds.max,
                step=bounds.step,
                on_change=lambda: results.refresh(),
            ).bind_value(values, key).props("color=deep-purple")

        def amount_row(label: str, key: str) -> None:
            with ui.row().classes("w-full justify-between items-center"):
                ui.label(label).classes("text-sm font-medium")
                ui.number(
                    value=values[key],
                    prefix="$",
                    placeholder="0",
                    on_change=lambda: results.refresh(),
                ).bind_value(values, key).classes("w-28").props("dense outlined")

        with inputs:
            ui.label("Show Details").classes("font-bold")
            slider_row("Ticket Price", "ticket_price", "$")
            slider_row("Venue Capacity", "venue_capacity")
            slider_row("Sell-Through Rate", "sell_through_rate", "%")
            ui.label("Revenue Streams").classes("font-bold")
            slider_row("Merch Spend per Guest", "merch_spend_per_guest", "$")
            ui.label("Expenses").classes("font-bold")
            slider_row("Venue's Cut of Tickets", "venue_fee_percent", "%")
            amount_row("Venue Cost (Fixed Fee)", "venue_cost_fixed")
            amount_row("Marketing & Promotion", "marketing_cost")
            amount_row("Crew & Staff", "crew_cost")

        with outputs:
            results()


def render_budget_table(table: BudgetTable) -> None:
    headers = table.column_headers()
    keys = ["item", "low", "high", "estimate"]
    columns = [
        {"name": key, "label": header, "field": key, "align": "left" if key == "item" else "right"}
        for key, header in zip(keys, headers)
    ]

    def row(item: str, low: float, high: float, estimate: float) -> dict[str, str]:
        return {
            "item": item,
            "low": format_currency(low),
            "high": format_currency(high),
            "estimate": format_currency(estimate),
        }

    rows = [row(r.item, r.low, r.high, r.estimate) for r in table.rows]
    totals = table.totals()
    rows.append(row(totals.item, totals.low, totals.high, totals.estimate))

    ui.table(columns=columns, rows=rows, row_key="item").classes("w-full my-4").props(
        "flat bordered dense"
    )


def render_branding_guide(guide: BrandingGuide, api: CoachApiClient) -> None:
    """Editable branding guide with typographic logo generation."""
    state = {"guide": guide, "logo_text": DEFAULT_LOGO_TEXT}

    with ui.card().classes("w-full my-4 p-4"):
        with ui.column().classes("w-full items-center border-b pb-4 mb-4"):
            ui.label("Visual Branding Guide").classes("text-lg font-bold text-orange-600 uppercase")
            ui.label(guide.aesthetic.name).classes("text-2xl font-extrabold")
            ui.label(guide.aesthetic.description).classes("text-sm text-gray-500 text-center")

        with ui.row().classes("w-full gap-8 no-wrap max-md:flex-wrap"):
            with ui.column().classes("flex-1 gap-4"):
                ui.label("Color Palette").classes("font-bold")

                @ui.refreshable
                def palette() -> None:
                    with ui.row().classes("w-full gap-4"):
                        for index, color in enumerate(state["guide"].palette):
                            with ui.column().classes("flex-1 items-center gap-1"):
                                ui.element("div").classes("w-full h-16 rounded-lg border").style(
                                    f"background-color: {color.hex}"
                                )
                                ui.label(color.role).classes("font-bold text-sm")
                                ui.label(color.name).classes("text-xs text-gray-500")
                                ui.input(
                                    value=color.hex,
                                    on_change=lambda e, i=index: set_hex(i, e.value),
                                ).classes("w-24 font-mono text-xs").props("dense outlined")

                def set_hex(index: int, hex_code: str) -> None:
                    state["guide"] = state["guide"].with_palette_hex(index, hex_code)
                    palette.refresh()

                palette()

                ui.label("Typography").classes("font-bold")
                for slot, caption in (("headline", "HEADLINE"), ("body", "BODY")):
                    sample_font = getattr(guide.typography, slot)
                    with ui.column().classes("w-full p-3 bg-gray-50 rounded-lg gap-1"):
                        ui.label(caption).classes("text-xs font-semibold text-gray-500")
                        sample = ui.label(sample_font.sample).style(
                            f"font-family: {font_family(sample_font.name)}"
                        )
                        sample.classes("text-2xl" if slot == "headline" else "text-base")

                        def set_font(e, slot=slot, sample=sample) -> None:
                            state["guide"] = state["guide"].with_font(slot, e.value)
                            sample.style(f"font-family: {font_family(e.value)}")

                        options = list(FONT_NAMES)
                        if sample_font.name not in options:
                            options.append(sample_font.name)
                        ui.select(options, value=sample_font.name, on_change=set_font).classes(
                            "w-full"
                        )

            with ui.column().classes("flex-1 gap-4"):
                ui.label("Brand in Action").classes("font-bold")
                for idea in guide.application:
                    with ui.row().classes("items-start gap-3 no-wrap"):
                        ui.label(idea.emoji).classes("text-2xl")
                        with ui.column().classes("gap-0"):
                            ui.label(idea.title).classes("font-bold")
                            ui.label(idea.description).classes("text-sm text-gray-600")

        with ui.column().classes("w-full items-center border-t mt-6 pt-4 gap-2"):
            ui.label("Generate a Font Logo").classes("font-bold")
            ui.label(
                "Enter your artist or brand name to create a typographic logo based on your brand guide."
            ).classes("text-sm text-gray-500 text-center")
            with ui.row().classes("w-full max-w-xl gap-2 items-center no-wrap"):
                name_input = ui.input(
                    placeholder="Enter artist name or record label", value=DEFAULT_LOGO_TEXT
                ).bind_value(state, "logo_text").classes("flex-grow").props("outlined dense")
                generate_btn = ui.button("Generate", icon="auto_awesome").classes("send-btn")
            result = ui.column().classes("w-full items-center")

        async def generate() -> None:
            result.clear()
            try:
                prompt = state["guide"].logo_prompt(state["logo_text"])
            except LogoTextError as e:
                with result:
                    ui.label(str(e)).classes("text-sm text-red-600")
                return

            generate_btn.disable()
            name_input.disable()
            with result:
                spinner = ui.spinner(size="lg")
                waiting = ui.label("The AI is creating your logo...").classes("text-sm text-gray-500")
            try:
                image_url = await api.generate_image(prompt)
            except ImageRequestError as e:
                logger.warning(f"Image generation failed: {e}")
                result.clear()
                with result:
                    ui.label(f"Image generation failed. {e}").classes(
                        "p-3 bg-red-50 text-red-700 rounded-lg text-sm"
                    )
                return
            finally:
                generate_btn.enable()
                name_input.enable()

            spinner.delete()
            waiting.delete()
            with result:
                ui.image(image_url).classes("max-w-sm rounded-lg shadow-lg")

        generate_btn.on_click(generate)


def render_book_summary_card(on_action: Callable[[], Awaitable[None]], disabled: bool) -> None:
    with ui.card().classes("w-full mb-8 p-0 border-2 border-orange-300 overflow-hidden"):
        with ui.row().classes("w-full p-5 bg-orange-50 items-center gap-4 no-wrap"):
            ui.icon("menu_book").classes("text-3xl text-orange-500")
            with ui.column().classes("gap-0"):
                ui.label(book_summary.TITLE).classes("font-bold text-lg")
                ui.label(book_summary.BLURB).classes("text-sm text-gray-500")

        with ui.row().classes("w-full p-5 gap-8 no-wrap max-md:flex-wrap"):
            with ui.column().classes("flex-1 gap-2"):
                ui.label("Why It Matters").classes("font-semibold")
                ui.label(book_summary.WHY_IT_MATTERS).classes("text-sm text-gray-600")
                ui.label("Further Reading & Resources").classes("font-semibold mt-4")
                for resource in book_summary.RESOURCES:
                    with ui.row().classes("items-center gap-2"):
                        ui.icon("link").classes("text-gray-400")
                        ui.link(resource.label, resource.href, new_tab=True).classes(
                            "text-sm text-gray-600"
                        )
            with ui.column().classes("flex-1 gap-3"):
                ui.label("Core Concepts Covered").classes("font-semibold")
                for concept in book_summary.KEY_CONCEPTS:
                    with ui.row().classes("items-center gap-3"):
                        ui.icon(concept.icon).classes("text-indigo-900 bg-indigo-50 p-2 rounded-full")
                        ui.label(concept.label).classes("text-sm font-medium")

        with ui.row().classes("w-full justify-center p-4 bg-gray-50"):
            button = ui.button(book_summary.ACTION_LABEL, on_click=on_action).classes("send-btn")
            if disabled:
                button.disable()


def render_segment(segment: Segment, api: CoachApiClient) -> None:
    if segment.kind is SegmentKind.TEXT:
        ui.html(markdown_to_html(segment.text), sanitize=False).classes(
            "text-sm leading-relaxed"
        )
    elif segment.kind is SegmentKind.PENDING:
        with ui.row().classes("items-center gap-2 my-2"):
            ui.spinner(size="sm")
            ui.label(_PENDING_LABELS.get(segment.text, "Loading...")).classes(
                "text-sm text-gray-500 italic"
            )
    elif segment.kind is SegmentKind.TICKET_ESTIMATOR:
        render_ticket_estimator(segment.data)
    elif segment.kind is SegmentKind.BUDGET_TABLE:
        render_budget_table(segment.data)
    elif segment.kind is SegmentKind.BRANDING_GUIDE:
        render_branding_guide(segment.data, api)


def render_model_text(text: str, api: CoachApiClient) -> None:
    """Render a model message as markdown interleaved with widgets."""
    for segment in split_segments(text):
        render_segment(segment, api)
