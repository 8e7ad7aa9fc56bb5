from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from gh_contrib.api.schemas.contributions import ContributionDay

HEADER_STYLE = "bold black on green"
FOOTER_STYLE = "bold black on green"
ROW_STYLES = ["black on white", "black on bright_white"]


def build_contributions_table(
    days: Sequence[ContributionDay], total: int
) -> Table:
    """Build the date/level/count table with the reported total as footer."""

    table = Table(
        box=box.SIMPLE_HEAVY,
        show_footer=True,
        header_style=HEADER_STYLE,
        footer_style=FOOTER_STYLE,
        row_styles=ROW_STYLES,
    )
    table.add_column("date", footer="")
    table.add_column("level", footer="total")
    table.add_column("count", footer=str(total), justify="right")

    for day in days:
        table.add_row(day.date.isoformat(), day.level.value, str(day.count))

    return table


def render_contributions(
    console: Console, days: Sequence[ContributionDay], total: int
) -> None:
    console.print(build_contributions_table(days, total))


def render_error(console: Console, message: str) -> None:
    """Print a fatal error message in red."""

    console.print(message, style="red", markup=False, highlight=False)
