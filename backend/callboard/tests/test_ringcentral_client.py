import pytest

from callboard.core.errors import UpstreamAuthError, UpstreamRequestError
from callboard.services.ringcentral_client import (
    CALL_TIMELINE_PATH,
    EXTENSIONS_PATH,
    SMS_AGGREGATION_PATH,
    RingCentralClient,
)


def test_logs_in_once_across_requests(platform, ringcentral):
    ringcentral.fetch_call_aggregation("2025-05-01T00:00:00.000Z", "2025-05-02T00:00:00.000Z")
    ringcentral.fetch_sms_aggregation("2025-05-01T00:00:00.000Z", "2025-05-02T00:00:00.000Z")
    assert platform.login_calls == 1
    assert [request["method"] for request in platform.requests] == ["POST", "POST"]


def test_missing_settings_fail_before_login(platform):
    client = RingCentralClient(platform, "", missing_settings=["RC_USER_JWT"])
    with pytest.raises(UpstreamAuthError) as excinfo:
        client.list_extensions()
    assert "RC_USER_JWT" in str(excinfo.value)
    assert platform.login_calls == 0
    assert platform.requests == []


def test_login_failure_is_auth_error(platform, ringcentral):
    platform.login_error = RuntimeError("invalid_grant")
    with pytest.raises(UpstreamAuthError) as excinfo:
        ringcentral.list_extensions()
    assert "invalid_grant" in str(excinfo.value)
    assert excinfo.value.status_code == 502


def test_transport_failure_is_request_error(platform, ringcentral):
    platform.request_error = ConnectionError("reset by peer")
    with pytest.raises(UpstreamRequestError) as excinfo:
        ringcentral.fetch_sms_aggregation("a", "b")
    assert SMS_AGGREGATION_PATH in str(excinfo.value)


def test_malformed_json_is_request_error(platform, ringcentral):
    platform.responses[SMS_AGGREGATION_PATH] = ValueError("Expecting value")
    with pytest.raises(UpstreamRequestError):
        ringcentral.fetch_sms_aggregation("a", "b")


def test_sms_aggregation_body(platform, ringcentral):
    ringcentral.fetch_sms_aggregation("2025-05-01T00:00:00.000Z", "2025-05-15T18:30:00.000Z")
    body = platform.requests[0]["body"]
    assert body["grouping"] == {"groupBy": "Users"}
    assert body["timeSettings"]["timeZone"] == "UTC"
    assert set(body["responseOptions"]["counters"]) == {"allMessages", "messagesByDirection"}
    assert "timers" not in body["responseOptions"]


def test_unexpected_payload_yields_no_records(platform, ringcentral):
    platform.responses[SMS_AGGREGATION_PATH] = {"data": ["not", "a", "dict"]}
    assert ringcentral.fetch_sms_aggregation("a", "b") == []


def test_timeline_is_flattened(platform, ringcentral):
    points = ringcentral.fetch_call_timeline("a", "b")
    assert points == [
        {"time": "2025-05-01T00:00:00Z", "allCalls": 4},
        {"time": "2025-05-03T00:00:00Z", "allCalls": 13},
    ]
    request = platform.requests[0]
    assert request["path"] == CALL_TIMELINE_PATH
    assert request["query_params"] == {"interval": "Day"}
    assert request["body"]["grouping"] == {"groupBy": "Company"}


def test_pagination_follows_next_page(platform, ringcentral):
    pages = {
        1: {"records": [{"id": 1}, {"id": 2}], "navigation": {"nextPage": {"uri": "..."}}},
        2: {"records": [{"id": 3}], "navigation": {}},
    }
    platform.responses[EXTENSIONS_PATH] = lambda params: pages[params["page"]]
    assert [record["id"] for record in ringcentral.list_extensions()] == [1, 2, 3]
    assert [request["query_params"]["page"] for request in platform.requests] == [1, 2]
    assert platform.requests[0]["query_params"]["perPage"] == 1000


def test_message_store_query(platform, ringcentral):
    messages = ringcentral.list_sms_messages("201", "2025-05-01T00:00:00.000Z", "2025-05-02T00:00:00.000Z")
    assert len(messages) == 3
    params = platform.requests[0]["query_params"]
    assert params["messageType"] == ["SMS"]
    assert params["dateFrom"] == "2025-05-01T00:00:00.000Z"
    assert params["page"] == 1


def test_default_time_zone_is_sent_with_queries(platform):
    client = RingCentralClient(platform, "test-jwt")
    client.fetch_call_aggregation("a", "b")
    assert platform.requests[0]["body"]["timeSettings"]["timeZone"] == "America/Los_Angeles"


def test_timeline_skips_malformed_points(platform, ringcentral):
    platform.responses[CALL_TIMELINE_PATH] = {
        "data": {
            "records": [
                None,
                {"points": ["bad", {"time": "2025-05-02T00:00:00Z", "counters": []}]},
            ]
        }
    }
    assert ringcentral.fetch_call_timeline("a", "b") == [
        {"time": "2025-05-02T00:00:00Z", "allCalls": 0}
    ]
