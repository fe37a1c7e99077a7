import csv
import io
import math
from typing import List

from jinja2 import Environment, PackageLoader, select_autoescape
from openpyxl import Workbook
from openpyxl.styles import Font

from callboard.schemas import DailyPoint
from callboard.services.reports import Report

USER_COLUMNS = ["User Name", "Extension", "Total Calls"]
DAILY_COLUMNS = ["Date", "Calls"]

CHART_WIDTH = 800
CHART_HEIGHT = 400
CHART_BASELINE = 350
BAR_WIDTH = 25
BAR_SPACING = 30

templates = Environment(
    loader=PackageLoader("callboard", "templates"),
    autoescape=select_autoescape(["html"]),
)


def _report_rows(report: Report) -> List[list]:
    rows: List[list] = [
        [report.company_name],
        [report.period_label],
        [],
        ["Daily Call Summary"],
        DAILY_COLUMNS,
    ]
    rows.extend([point.label, point.calls] for point in report.active_days)
    rows.extend([[], ["User Call Summary"], USER_COLUMNS])
    rows.extend(
        [row.user_name, row.extension_number or "", row.calls.total] for row in report.rows
    )
    return rows


def render_csv(report: Report) -> str:
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    for row in _report_rows(report):
        writer.writerow(row)
    return output.getvalue()


def render_xlsx(report: Report) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Call Analytics"
    bold = Font(bold=True)
    for row in _report_rows(report):
        sheet.append(row)
        if len(row) == 1 or row in (DAILY_COLUMNS, USER_COLUMNS):
            for cell in sheet[sheet.max_row]:
                cell.font = bold
    sheet.column_dimensions["A"].width = 32
    sheet.column_dimensions["B"].width = 14
    sheet.column_dimensions["C"].width = 14
    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def bar_chart(points: List[DailyPoint]) -> dict:
    if not points:
        return {"bars": [], "ticks": [], "width": CHART_WIDTH, "height": CHART_HEIGHT}
    max_calls = max(point.calls for point in points)
    scale = CHART_BASELINE / max_calls
    spacing = min(BAR_SPACING, CHART_WIDTH / len(points))
    bar_width = min(BAR_WIDTH, spacing * 0.8)
    bars = []
    for index, point in enumerate(points):
        height = point.calls * scale
        x = index * spacing
        bars.append(
            {
                "x": round(x, 2),
                "y": round(CHART_BASELINE - height, 2),
                "width": round(bar_width, 2),
                "height": round(height, 2),
                "label_x": round(x + bar_width / 2, 2),
                "label": point.label,
                "calls": point.calls,
            }
        )
    step = max(1, math.ceil(max_calls / 5))
    ticks = [
        {"value": value, "y": round(CHART_BASELINE - value * scale, 2)}
        for value in range(0, max_calls + 1, step)
    ]
    return {
        "bars": bars,
        "ticks": ticks,
        "width": CHART_WIDTH,
        "height": CHART_HEIGHT,
        "baseline": CHART_BASELINE,
    }


def render_print_html(report: Report) -> str:
    template = templates.get_template("report.html")
    return template.render(
        report=report,
        chart=bar_chart(report.active_days),
        columns=USER_COLUMNS,
        generated_on=report.generated_at.strftime("%B %d, %Y %I:%M %p"),
    )
