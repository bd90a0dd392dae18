"""Budget table widget data: the ``[BUDGET_TABLE]`` block."""

from pydantic import Field

from indie_coach.models.schemas import CamelModel

DEFAULT_HEADERS = ["Item", "Industry Low End", "Industry High End", "My Example Estimate"]


class BudgetRow(CamelModel):
    item: str
    low: float = 0
    high: float = 0
    estimate: float = 0


class BudgetTable(CamelModel):
    """A budget with industry low/high ranges and an example estimate."""

    headers: list[str] = Field(default_factory=lambda: list(DEFAULT_HEADERS))
    rows: list[BudgetRow] = Field(default_factory=list)

    def totals(self) -> BudgetRow:
        """Sum each numeric column into a totals row."""
        return BudgetRow(
            item="Total",
            low=sum(r.low for r in self.rows),
            high=sum(r.high for r in self.rows),
            estimate=sum(r.estimate for r in self.rows),
        )

    def column_headers(self) -> list[str]:
        """Headers padded or cut to the four table columns."""
        headers = self.headers[:4]
        return headers + DEFAULT_HEADERS[len(headers):]
