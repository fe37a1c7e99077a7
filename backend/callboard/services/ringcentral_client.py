import logging
from typing import Any, Dict, List, Optional

from ringcentral import SDK

from callboard.core.config import Settings
from callboard.core.errors import UpstreamAuthError, UpstreamRequestError

logger = logging.getLogger(__name__)

CALL_AGGREGATION_PATH = "/analytics/calls/v1/accounts/~/aggregation/fetch"
CALL_TIMELINE_PATH = "/analytics/calls/v1/accounts/~/timeline/fetch"
SMS_AGGREGATION_PATH = "/analytics/sms/v1/accounts/~/aggregation/fetch"
EXTENSIONS_PATH = "/restapi/v1.0/account/~/extension"
MESSAGE_STORE_PATH = "/restapi/v1.0/account/~/extension/{extension_id}/message-store"

CALL_COUNTERS = {
    "allCalls": {"aggregationType": "Sum"},
    "callsByResponse": {"aggregationType": "Sum"},
    "callsByResult": {"aggregationType": "Sum"},
}
CALL_TIMERS = {"allCallsDuration": {"aggregationType": "Sum"}}
SMS_COUNTERS = {
    "allMessages": {"aggregationType": "Sum"},
    "messagesByDirection": {"aggregationType": "Sum"},
}


class RingCentralClient:
    def __init__(
        self,
        platform,
        jwt: str,
        time_zone: str = "America/Los_Angeles",
        aggregation_page_size: int = 100,
        extension_page_size: int = 1000,
        message_page_size: int = 1000,
        missing_settings: Optional[List[str]] = None,
    ) -> None:
        self.platform = platform
        self.jwt = jwt
        self.time_zone = time_zone
        self.aggregation_page_size = aggregation_page_size
        self.extension_page_size = extension_page_size
        self.message_page_size = message_page_size
        self.missing_settings = missing_settings or []

    @classmethod
    def from_settings(cls, config: Settings) -> "RingCentralClient":
        sdk = SDK(config.rc_app_client_id, config.rc_app_client_secret, config.rc_server_url)
        return cls(
            sdk.platform(),
            config.rc_user_jwt,
            time_zone=config.rc_time_zone,
            aggregation_page_size=config.rc_aggregation_page_size,
            extension_page_size=config.rc_extension_page_size,
            message_page_size=config.rc_message_page_size,
            missing_settings=config.missing_ringcentral_settings(),
        )

    def ensure_logged_in(self) -> None:
        if self.missing_settings:
            raise UpstreamAuthError(
                f"Missing RingCentral settings: {', '.join(self.missing_settings)}"
            )
        if self.platform.logged_in():
            return
        logger.info("Logging in to RingCentral with JWT credential.")
        try:
            self.platform.login(jwt=self.jwt)
        except Exception as exc:
            raise UpstreamAuthError(f"{type(exc).__name__}: {exc}") from exc

    def fetch_call_aggregation(self, time_from: str, time_to: str) -> List[Dict[str, Any]]:
        body = self._analytics_body("Users", time_from, time_to, CALL_COUNTERS, CALL_TIMERS)
        payload = self._post(
            CALL_AGGREGATION_PATH, body, {"perPage": self.aggregation_page_size}
        )
        return self._records(payload, "call aggregation")

    def fetch_sms_aggregation(self, time_from: str, time_to: str) -> List[Dict[str, Any]]:
        body = self._analytics_body("Users", time_from, time_to, SMS_COUNTERS)
        payload = self._post(
            SMS_AGGREGATION_PATH, body, {"perPage": self.aggregation_page_size}
        )
        return self._records(payload, "SMS aggregation")

    def fetch_call_timeline(self, time_from: str, time_to: str) -> List[Dict[str, Any]]:
        body = self._analytics_body(
            "Company", time_from, time_to, {"allCalls": {"aggregationType": "Sum"}}
        )
        payload = self._post(CALL_TIMELINE_PATH, body, {"interval": "Day"})
        points: List[Dict[str, Any]] = []
        for record in self._records(payload, "call timeline"):
            if not isinstance(record, dict):
                continue
            for point in record.get("points") or []:
                if not isinstance(point, dict):
                    continue
                counters = point.get("counters")
                if not isinstance(counters, dict):
                    counters = {}
                points.append(
                    {
                        "time": point.get("time"),
                        "allCalls": _counter_value(counters.get("allCalls")),
                    }
                )
        return points

    def list_extensions(self) -> List[Dict[str, Any]]:
        return self._get_all_pages(EXTENSIONS_PATH, {"perPage": self.extension_page_size})

    def list_sms_messages(
        self, extension_id: str, date_from: str, date_to: str
    ) -> List[Dict[str, Any]]:
        params = {
            "messageType": ["SMS"],
            "dateFrom": date_from,
            "dateTo": date_to,
            "perPage": self.message_page_size,
        }
        return self._get_all_pages(
            MESSAGE_STORE_PATH.format(extension_id=extension_id), params
        )

    def _analytics_body(
        self,
        group_by: str,
        time_from: str,
        time_to: str,
        counters: Dict[str, Any],
        timers: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        response_options: Dict[str, Any] = {"counters": counters}
        if timers:
            response_options["timers"] = timers
        return {
            "grouping": {"groupBy": group_by},
            "timeSettings": {
                "timeZone": self.time_zone,
                "timeRange": {"timeFrom": time_from, "timeTo": time_to},
            },
            "responseOptions": response_options,
        }

    def _post(self, path: str, body: Dict[str, Any], params: Dict[str, Any]) -> Any:
        self.ensure_logged_in()
        try:
            response = self.platform.post(path, body=body, query_params=params)
        except Exception as exc:
            raise UpstreamRequestError(f"POST {path}: {type(exc).__name__}: {exc}") from exc
        return _decode(response, path)

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        self.ensure_logged_in()
        try:
            response = self.platform.get(path, query_params=params)
        except Exception as exc:
            raise UpstreamRequestError(f"GET {path}: {type(exc).__name__}: {exc}") from exc
        return _decode(response, path)

    def _get_all_pages(self, path: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        records: List[Dict[str, Any]] = []
        page = 1
        while True:
            payload = self._get(path, {**params, "page": page})
            if not isinstance(payload, dict):
                logger.warning("Unexpected response shape from %s; stopping.", path)
                break
            records.extend(payload.get("records") or [])
            if not (payload.get("navigation") or {}).get("nextPage"):
                break
            page += 1
        return records

    @staticmethod
    def _records(payload: Any, label: str) -> List[Dict[str, Any]]:
        records = None
        data = payload.get("data") if isinstance(payload, dict) else None
        if isinstance(data, dict):
            records = data.get("records")
        if not isinstance(records, list):
            logger.warning("No valid %s records returned.", label)
            return []
        return records


def _decode(response, path: str) -> Any:
    try:
        return response.response().json()
    except ValueError as exc:
        raise UpstreamRequestError(f"{path}: malformed JSON response") from exc


def _counter_value(counter: Any) -> float:
    if isinstance(counter, dict):
        value = counter.get("values")
        if isinstance(value, (int, float)):
            return value
    return 0
