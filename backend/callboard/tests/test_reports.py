from datetime import date

import pytest

from callboard.core.errors import ValidationError
from callboard.schemas import CallCounters, UserActivity
from callboard.services.analytics import local_today
from callboard.services.reports import (
    chart_series,
    daily_series,
    filter_by_user,
    period_label,
    quick_range,
    report_filename,
    sort_rows,
    total_calls,
)


def make_row(user_id, name, extension, calls):
    return UserActivity(
        user_id=user_id,
        user_name=name,
        extension_number=extension,
        calls=CallCounters(total=calls),
    )


@pytest.fixture()
def rows():
    return [
        make_row("1", "Dana", "104", 3),
        make_row("2", "Alice", "101", 12),
        make_row("3", "Carol", "103", 0),
        make_row("4", "Bob", "102", 7),
    ]


def test_empty_selection_returns_all_rows(rows):
    assert filter_by_user(rows, None) is rows
    assert filter_by_user(rows, "") is rows


def test_selection_matches_extension_or_user_id(rows):
    assert [row.user_name for row in filter_by_user(rows, "102")] == ["Bob"]
    assert [row.user_name for row in filter_by_user(rows, "2")] == ["Alice"]
    assert filter_by_user(rows, "999") == []


def test_sort_by_calls_is_reversible(rows):
    ascending = sort_rows(rows, "calls", "asc")
    descending = sort_rows(rows, "calls", "desc")
    assert [row.calls.total for row in ascending] == [0, 3, 7, 12]
    assert descending == list(reversed(ascending))


def test_sort_by_name(rows):
    assert [row.user_name for row in sort_rows(rows, "name", "asc")] == [
        "Alice",
        "Bob",
        "Carol",
        "Dana",
    ]


def test_sort_is_stable_for_ties():
    tied = [make_row("1", "A", "1", 5), make_row("2", "B", "2", 5)]
    assert [row.user_id for row in sort_rows(tied, "calls", "asc")] == ["1", "2"]
    assert [row.user_id for row in sort_rows(tied, "calls", "desc")] == ["1", "2"]


def test_sort_rejects_unknown_field(rows):
    with pytest.raises(ValidationError):
        sort_rows(rows, "duration", "asc")


def test_total_calls(rows):
    assert total_calls(rows) == 22
    assert total_calls([]) == 0


def test_chart_series_drops_zero_rows(rows):
    series = chart_series(rows)
    assert [point.name for point in series] == ["Dana (104)", "Alice (101)", "Bob (102)"]


def test_daily_series_is_zero_filled():
    points = daily_series({date(2025, 5, 2): 6}, date(2025, 5, 1), date(2025, 5, 3))
    assert [(p.label, p.calls) for p in points] == [("May 1", 0), ("May 2", 6), ("May 3", 0)]


def test_quick_ranges():
    thursday = date(2025, 5, 15)
    assert quick_range("today", thursday) == (thursday, thursday)
    assert quick_range("week", thursday) == (date(2025, 5, 11), thursday)
    assert quick_range("month", thursday) == (date(2025, 5, 1), thursday)
    sunday = date(2025, 5, 11)
    assert quick_range("week", sunday) == (sunday, sunday)


def test_period_label():
    assert (
        period_label(date(2025, 5, 1), date(2025, 5, 15))
        == "Report Period: May 1, 2025 - May 15, 2025"
    )


def test_report_filename():
    assert (
        report_filename("DKC Lending LLC", "csv", date(2025, 5, 15))
        == "DKC-Lending-LLC-Call-Analytics-2025-05-15.csv"
    )


def test_report_endpoint(client):
    response = client.get(
        "/api/reports?dateFrom=2025-05-01&dateTo=2025-05-03&sortField=name&sortOrder=asc"
    )
    assert response.status_code == 200
    body = response.json()
    assert body["companyName"] == "DKC Lending LLC"
    assert [row["userName"] for row in body["records"]] == [
        "Alice Smith",
        "Bob Jones",
        "Carol White",
    ]
    assert body["totalCalls"] == 17
    assert [point["name"] for point in body["chart"]] == ["Alice Smith (101)", "Bob Jones (102)"]
    assert [point["calls"] for point in body["daily"]] == [4, 0, 13]


def test_report_endpoint_user_filter_keeps_full_user_list(client):
    body = client.get("/api/reports?dateFrom=2025-05-01&dateTo=2025-05-03&user=101").json()
    assert len(body["users"]) == 3
    assert [row["extensionNumber"] for row in body["records"]] == ["101"]
    assert body["totalCalls"] == 12


def test_report_endpoint_rejects_future_range(client):
    response = client.get("/api/reports?dateFrom=2025-05-01&dateTo=2999-01-01")
    assert response.status_code == 400
    assert response.json()["error"] == "Date range cannot include future dates."


def test_quick_ranges_endpoint_uses_account_today(client):
    response = client.get("/api/reports/ranges")
    assert response.status_code == 200
    body = response.json()
    today = local_today("UTC")
    assert body["timeZone"] == "UTC"
    assert body["today"] == today.isoformat()
    assert body["ranges"]["today"] == {"from": today.isoformat(), "to": today.isoformat()}
    assert body["ranges"]["month"] == {
        "from": today.replace(day=1).isoformat(),
        "to": today.isoformat(),
    }
    week_start = date.fromisoformat(body["ranges"]["week"]["from"])
    assert week_start.weekday() == 6
    assert 0 <= (today - week_start).days < 7


def test_dashboard_chart_visibility_follows_chart_mode(client):
    response = client.get("/dashboard.js")
    assert response.status_code == 200
    script = response.text
    assert "const points = isDailyChart() ? report.daily : report.chart;" in script
    assert "card.hidden = points.length === 0;" in script
    assert "fetch('/api/reports/ranges')" in script
