"""Ticket sale estimator: projected show revenue, costs, and profit.

The model emits a ``[TICKET_ESTIMATOR]`` block with starting values; the user
then edits the fields freely. Field values arrive as raw text from number
inputs, so every calculation goes through :func:`parse_number`.
"""

import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal

from pydantic import ConfigDict, Field

from indie_coach.models.schemas import CamelModel

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# Enough digits to write out any finite float as a whole number
_WHOLE_FLOAT_DIGITS = Context(prec=400)


@dataclass(frozen=True)
class FieldRange:
    """Slider bounds for an estimator input."""

    min: float
    max: float
    step: float


SLIDER_RANGES: dict[str, FieldRange] = {
    "ticket_price": FieldRange(0, 200, 1),
    "venue_capacity": FieldRange(0, 5000, 10),
    "sell_through_rate": FieldRange(0, 100, 1),
    "merch_spend_per_guest": FieldRange(0, 100, 1),
    "venue_fee_percent": FieldRange(0, 100, 1),
}


def parse_number(value: str | float | int | None) -> float:
    """Read a number the way a lenient form field does.

    Uses the leading numeric prefix of a string ("12.5 dollars" -> 12.5);
    anything without one, including NaN and infinity, is 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    match = _NUMBER_PREFIX.match(str(value))
    if not match:
        return 0.0
    number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


class TicketEstimatorDefaults(CamelModel):
    """Starting values for the estimator, as sent by the model."""

    model_config = ConfigDict(allow_inf_nan=False)

    ticket_price: float = 20
    venue_capacity: float = 200
    sell_through_rate: float = Field(75, description="Percent of capacity sold")
    merch_spend_per_guest: float = 10
    venue_fee_percent: float = Field(15, description="Venue's percent of ticket gross")
    venue_cost_fixed: float = 500
    marketing_cost: float = 200
    crew_cost: float = 300


class TicketEstimatorData(CamelModel):
    """Payload of a ``[TICKET_ESTIMATOR]`` block."""

    defaults: TicketEstimatorDefaults = Field(default_factory=TicketEstimatorDefaults)


@dataclass(frozen=True)
class TicketEstimate:
    """Derived figures for one set of estimator inputs."""

    tickets_sold: float
    gross_ticket_revenue: float
    gross_merch_revenue: float
    total_gross_revenue: float
    venue_cut_cost: float
    venue_cost_fixed: float
    marketing_cost: float
    crew_cost: float
    venue_fee_percent: float
    total_costs: float
    net_profit: float

    @property
    def is_profitable(self) -> bool:
        return self.net_profit >= 0


def calculate(
    ticket_price: str | float,
    venue_capacity: str | float,
    sell_through_rate: str | float,
    merch_spend_per_guest: str | float,
    venue_fee_percent: str | float,
    venue_cost_fixed: str | float,
    marketing_cost: str | float,
    crew_cost: str | float,
) -> TicketEstimate:
    """Project revenue, costs, and net profit for a show.

    Tickets sold is capacity times sell-through, rounded down. The venue's
    percentage applies to ticket gross only, not merch.
    """
    price = parse_number(ticket_price)
    capacity = parse_number(venue_capacity)
    sell_through = parse_number(sell_through_rate)
    merch_spend = parse_number(merch_spend_per_guest)
    fee_percent = parse_number(venue_fee_percent)
    fixed_cost = parse_number(venue_cost_fixed)
    marketing = parse_number(marketing_cost)
    crew = parse_number(crew_cost)

    guests = capacity * (sell_through / 100)
    tickets_sold = math.floor(guests) if math.isfinite(guests) else guests
    gross_ticket = tickets_sold * price
    gross_merch = tickets_sold * merch_spend
    total_gross = gross_ticket + gross_merch

    venue_cut = gross_ticket * (fee_percent / 100)
    total_costs = venue_cut + fixed_cost + marketing + crew

    return TicketEstimate(
        tickets_sold=tickets_sold,
        gross_ticket_revenue=gross_ticket,
        gross_merch_revenue=gross_merch,
        total_gross_revenue=total_gross,
        venue_cut_cost=venue_cut,
        venue_cost_fixed=fixed_cost,
        marketing_cost=marketing,
        crew_cost=crew,
        venue_fee_percent=fee_percent,
        total_costs=total_costs,
        net_profit=total_gross - total_costs,
    )


def calculate_defaults(defaults: TicketEstimatorDefaults) -> TicketEstimate:
    """Estimate using the model's starting values."""
    return calculate(**defaults.model_dump())


def format_currency(value: float) -> str:
    """Format whole US dollars, e.g. ``$1,234`` or ``-$56``.

    Rounds half away from zero. Negative amounts keep their sign even when
    they round to zero (``-$0``), and overflowed totals show as ``$∞``.
    """
    if math.isnan(value):
        return "$NaN"
    sign = "-" if value < 0 else ""
    if math.isinf(value):
        return f"{sign}$∞"
    rounded = Decimal(str(abs(value))).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP, context=_WHOLE_FLOAT_DIGITS
    )
    return f"{sign}${rounded:,}"
