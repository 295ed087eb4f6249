from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .config_types import ClientConfig
from .errors import InvalidArgument
from .paths import build_segments, join_path
from .transport import HTTP_METHODS, Transport

logger = logging.getLogger(__name__)

# https://developer.atlassian.com/cloud/trello/rest/
RESOURCES = (
    "actions",
    "batch",
    "boards",
    "cards",
    "checklists",
    "labels",
    "lists",
    "members",
    "notifications",
    "organizations",
    "search",
    "sessions",
    "tokens",
    "types",
    "webhooks",
)


class TrelloClient:
    """Thin client for the Trello REST API.

    Every instance is scoped to one URL path. ``resource()`` (and the named
    accessors such as ``boards()``) return a new instance scoped deeper;
    the verb methods issue a request against the current path::

        trello = TrelloClient(ClientConfig(key="KEY", token="TOKEN"))
        board = trello.boards("4d5ea62fd76a").fetch()
        trello.cards().create(data={"name": "X", "idList": "..."})

    Child instances share the parent's transport; closing any of them
    closes it for all.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            transport: Transport | None = None,
            path: str | None = None,
    ):
        self._cfg = cfg
        self._t = transport or Transport(cfg)
        self._path = path if path is not None else f"/{cfg.version}"

    def __repr__(self) -> str:
        return f"<TrelloClient {self._path}>"

    def __enter__(self) -> TrelloClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    @property
    def path(self) -> str:
        return self._path

    @property
    def url(self) -> str:
        return self._cfg.base_url.rstrip("/") + self._path

    def close(self) -> None:
        self._t.close()

    def resource(self, name: str, *segments: Any) -> TrelloClient:
        """Return a new client scoped to ``{path}/{name}/{segments...}``.

        ``segments`` may be bare items consumed as (segment, value) pairs,
        explicit 2-tuples, or a mix. Segment names of pairs are camelCased
        when ``casing == "camelcase"``; the resource name and a trailing
        unpaired segment are used verbatim. Every part is percent-encoded,
        so ``path`` is the path sent on the wire.
        """
        parts = build_segments(name, segments, camel=self._cfg.camelcase)
        return TrelloClient(self._cfg, transport=self._t, path=join_path(self._path, parts))

    def send(
            self,
            verb: str = "GET",
            *,
            query: Mapping[str, Any] | None = None,
            data: Any | None = None,
            **_ignored: Any,
    ) -> tuple[Any, httpx.Response]:
        """Issue ``verb`` against this path; returns (parsed body, response)."""
        if not isinstance(verb, str) or verb.upper() not in HTTP_METHODS:
            raise InvalidArgument(f"unsupported HTTP verb: {verb!r}")
        if _ignored:
            logger.debug("ignoring request arguments: %s", ", ".join(sorted(_ignored)))
        return self._t.request(verb.upper(), self._path, query=query, data=data)

    def action(
            self,
            verb: str = "GET",
            *,
            query: Mapping[str, Any] | None = None,
            data: Any | None = None,
            **_ignored: Any,
    ) -> Any:
        body, _ = self.send(verb, query=query, data=data, **_ignored)
        return body

    def create(self, *, query: Mapping[str, Any] | None = None, data: Any | None = None) -> Any:
        return self.action("POST", query=query, data=data)

    def fetch(self, *, query: Mapping[str, Any] | None = None, data: Any | None = None) -> Any:
        return self.action("GET", query=query, data=data)

    def update(self, *, query: Mapping[str, Any] | None = None, data: Any | None = None) -> Any:
        return self.action("PUT", query=query, data=data)

    def delete(self, *, query: Mapping[str, Any] | None = None, data: Any | None = None) -> Any:
        return self.action("DELETE", query=query, data=data)


def _resource_accessor(name: str):
    def accessor(self: TrelloClient, *segments: Any) -> TrelloClient:
        return self.resource(name, *segments)

    accessor.__name__ = name
    accessor.__qualname__ = f"TrelloClient.{name}"
    accessor.__doc__ = f"Return a new client scoped to the ``{name}`` resource."
    return accessor


for _name in RESOURCES:
    setattr(TrelloClient, _name, _resource_accessor(_name))
del _name
