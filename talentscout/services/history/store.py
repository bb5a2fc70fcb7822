from __future__ import annotations

import copy
import json
import logging
import secrets
from datetime import datetime
from pathlib import Path
from typing import Any

from talentscout.logging_utils import structured_log
from talentscout.services.enrichment.types import utc_timestamp
from talentscout.settings import settings

logger = logging.getLogger(__name__)

REQUESTS_FILENAME = "requests.json"
RESULTS_FILENAME = "results.json"

STATUS_PENDING = "pending"
STATUS_COMPLETED = "completed"


def new_request_id() -> str:
    return secrets.token_hex(16)


class JsonHistoryStore:
    """Append-only request and result history kept in two JSON files.

    Read and write failures are logged and never raised; history is a side
    channel and must not fail a search.
    """

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self._data_dir = Path(data_dir if data_dir is not None else settings.history_data_dir)
        self._requests: list[dict[str, Any]] | None = None
        self._results: list[dict[str, Any]] | None = None

    @property
    def requests_path(self) -> Path:
        return self._data_dir / REQUESTS_FILENAME

    @property
    def results_path(self) -> Path:
        return self._data_dir / RESULTS_FILENAME

    def record_request(self, query: str, pages: int, *, now: datetime | None = None) -> str:
        request_id = new_request_id()
        requests = self._load_requests()
        requests.append(
            {
                "id": request_id,
                "query": query,
                "pages": pages,
                "timestamp": utc_timestamp(now),
                "status": STATUS_PENDING,
                "completed_at": None,
                "result_count": None,
            }
        )
        self._save(self.requests_path, requests)
        return request_id

    def record_result(self, result: dict[str, Any], *, now: datetime | None = None) -> None:
        results = self._load_results()
        results.append(copy.deepcopy(result))
        self._save(self.results_path, results)
        self._mark_completed(result.get("request_id"), result_count=result.get("count"), now=now)

    def list_requests(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._load_requests())

    def list_results(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._load_results())

    def _mark_completed(self, request_id: Any, *, result_count: Any, now: datetime | None) -> None:
        requests = self._load_requests()
        for request in requests:
            if request.get("id") == request_id:
                request["status"] = STATUS_COMPLETED
                request["completed_at"] = utc_timestamp(now)
                request["result_count"] = result_count
                self._save(self.requests_path, requests)
                return
        structured_log(logger, "warning", "history_store.request_not_found", history_request_id=request_id)

    def _load_requests(self) -> list[dict[str, Any]]:
        if self._requests is None:
            self._requests = self._load(self.requests_path)
        return self._requests

    def _load_results(self) -> list[dict[str, Any]]:
        if self._results is None:
            self._results = self._load(self.results_path)
        return self._results

    def _load(self, path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            return []
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            structured_log(logger, "error", "history_store.load_failed", path=str(path), error=str(exc))
            return []
        if not isinstance(payload, list):
            structured_log(logger, "error", "history_store.unexpected_payload", path=str(path))
            return []
        return payload

    def _save(self, path: Path, payload: list[dict[str, Any]]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            structured_log(logger, "error", "history_store.save_failed", path=str(path), error=str(exc))
