import asyncio
import json
import logging
import time
import uuid
from typing import Any, Dict, List

import azure.functions as func

from ..shared.airtable_client import PageProgress, fetch_all_records, open_client
from ..shared.config import AirtableConfig
from ..shared.errors import AirtableError, ConfigurationError, UpstreamError
from ..shared.responses import classify_error, error_response, json_response, preflight_response

logger = logging.getLogger("airtable_records")


def _fetch_records(config: AirtableConfig, trace_id: str, progress: List[PageProgress]) -> List[Dict[str, Any]]:
    """Return every record; ``progress`` collects one entry per page fetched, even when a later page fails."""

    def _log_page(page: PageProgress) -> None:
        progress.append(page)
        telemetry = {
            "event": "airtable_page",
            "page": page.page_number,
            "records": page.fetched,
            "total": page.total,
            "trace_id": trace_id,
        }
        logger.info("airtable_page: " + json.dumps(telemetry))

    with open_client(config) as client:
        return fetch_all_records(client, config, on_page=_log_page)


def _log_summary(config: AirtableConfig, status: int, total: int, pages: int, started: float, trace_id: str) -> None:
    elapsed_ms = (time.perf_counter() - started) * 1000
    telemetry = {
        "event": "airtable_proxy_call",
        "table_id": config.table_id,
        "status": status,
        "total_records": total,
        "pages": pages,
        "elapsed_ms": round(elapsed_ms, 2),
        "trace_id": trace_id,
    }
    logger.info("airtable_proxy: " + json.dumps(telemetry))


def _success_payload(config: AirtableConfig, records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "success": True,
        "records": records,
        "totalRecords": len(records),
        "table": config.table_id,
        "filter": config.filter_formula,
        "sort": config.sort,
    }


def _debug_extra(config: AirtableConfig, exc: Exception) -> Dict[str, Any]:
    extra: Dict[str, Any] = {"baseId": config.base_id, "tableId": config.table_id}
    if isinstance(exc, UpstreamError):
        extra["upstreamStatus"] = exc.status_code
        extra["upstreamBody"] = exc.body
    return extra


async def main(req: func.HttpRequest) -> func.HttpResponse:
    method = (req.method or "").upper()
    if method == "OPTIONS":
        return preflight_response()
    if method != "GET":
        logger.warning("method_not_allowed", extra={"method": method})
        return error_response(405, "Method not allowed", "Only GET requests are supported")

    trace_id = str(uuid.uuid4())
    hdrs = {"X-Trace-Id": trace_id}

    try:
        config = AirtableConfig.from_env()
    except ConfigurationError as e:
        logger.error("server_misconfigured", extra={"which": e.variable, "trace_id": trace_id})
        return error_response(500, "Server configuration error", str(e), headers=hdrs)

    started = time.perf_counter()
    progress: List[PageProgress] = []
    try:
        records = await asyncio.to_thread(_fetch_records, config, trace_id, progress)
    except Exception as e:
        if isinstance(e, AirtableError):
            logger.warning("airtable_fetch_failed: " + str(e), extra={"trace_id": trace_id})
        else:
            logger.exception("Unexpected error fetching Airtable records", extra={"trace_id": trace_id})
        status, category = classify_error(e)
        _log_summary(config, status, 0, len(progress), started, trace_id)
        extra = _debug_extra(config, e) if config.debug_errors else None
        return error_response(status, category, str(e), headers=hdrs, extra=extra)

    _log_summary(config, 200, len(records), len(progress), started, trace_id)
    return json_response(200, _success_payload(config, records), headers=hdrs)
