import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from .config import AirtableConfig
from .errors import TooManyPagesError, TransportError, UpstreamError

logger = logging.getLogger("airtable_client")

Record = Dict[str, Any]


@dataclass(frozen=True)
class Page:
    records: List[Record] = field(default_factory=list)
    # Continuation token; None on the last page.
    offset: Optional[str] = None


@dataclass(frozen=True)
class PageProgress:
    page_number: int
    fetched: int
    total: int


PageObserver = Callable[[PageProgress], None]


def build_list_url(config: AirtableConfig) -> str:
    return f"{config.api_url}/{quote(config.base_id, safe='')}/{quote(config.table_id, safe='')}"


def build_list_params(config: AirtableConfig, offset: Optional[str] = None) -> List[Tuple[str, str]]:
    params = [
        ("filterByFormula", config.filter_formula),
        ("sort[0][field]", config.sort_field),
        ("sort[0][direction]", config.sort_direction),
        ("pageSize", str(config.page_size)),
    ]
    if offset:
        params.append(("offset", offset))
    return params


def _build_auth_headers(config: AirtableConfig) -> Dict[str, str]:
    return {"Authorization": f"Bearer {config.api_key}", "Accept": "application/json"}


def _error_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


def fetch_page(client: httpx.Client, config: AirtableConfig, offset: Optional[str] = None) -> Page:
    """Fetch one page of the table listing.

    Raises UpstreamError on a non-2xx answer and TransportError when Airtable
    could not be reached at all.
    """
    try:
        resp = client.get(
            build_list_url(config),
            headers=_build_auth_headers(config),
            params=build_list_params(config, offset),
        )
    except httpx.RequestError as e:
        raise TransportError(f"Error contacting Airtable: {type(e).__name__}: {e}") from e

    if not resp.is_success:
        body = _error_body(resp)
        logger.warning("airtable_upstream_error", extra={"status": resp.status_code, "table_id": config.table_id})
        raise UpstreamError(resp.status_code, body)

    try:
        data = resp.json()
    except ValueError:
        raise UpstreamError(resp.status_code, resp.text) from None
    if not isinstance(data, dict):
        raise UpstreamError(resp.status_code, resp.text)

    return Page(records=data.get("records") or [], offset=data.get("offset") or None)


def fetch_all_records(
    client: httpx.Client,
    config: AirtableConfig,
    on_page: Optional[PageObserver] = None,
) -> List[Record]:
    """Walk every page of the listing and return the records in upstream order.

    Any error aborts the walk; records gathered so far are dropped with it.
    """
    records: List[Record] = []
    offset: Optional[str] = None
    page_number = 0
    while True:
        if config.max_pages is not None and page_number >= config.max_pages:
            raise TooManyPagesError(config.max_pages)
        page_number += 1
        page = fetch_page(client, config, offset)
        records.extend(page.records)
        if on_page is not None:
            on_page(PageProgress(page_number=page_number, fetched=len(page.records), total=len(records)))
        offset = page.offset
        if not offset:
            return records


def open_client(config: AirtableConfig, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    return httpx.Client(timeout=config.timeout_seconds, transport=transport)
