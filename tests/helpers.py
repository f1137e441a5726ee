"""Scripted Airtable upstream for driving the client through httpx.MockTransport."""

from typing import List, Union

import httpx


class ScriptedAirtable:
    """Answers each request with the next scripted response and records what was asked.

    A script entry is either an ``httpx.Response`` or an exception instance to raise.
    """

    def __init__(self, script: List[Union[httpx.Response, Exception]]):
        self.script = list(script)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.script:
            raise AssertionError("unexpected extra request to Airtable")
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    @property
    def offsets(self):
        return [r.url.params.get("offset") for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=self.transport())


def page(records, offset=None, status_code=200):
    body = {"records": records}
    if offset is not None:
        body["offset"] = offset
    return httpx.Response(status_code, json=body)
