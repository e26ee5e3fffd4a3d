"""
RemoteStorage – query/mutation RPC client for slink-store
=========================================================

Implements `BaseStorage` against a backend-as-a-service that exposes two
HTTP endpoints:

- ``POST {url}/api/query``    side-effect free functions
- ``POST {url}/api/mutation`` functions that change state

Both take a `UdfExecution` body (see `rpc.py`) and answer with a
`{status, value, errorMessage}` envelope. The bearer token is merged into
``args`` on every request.

Remote functions used
---------------------
- ``load:loadAll``                      -> [LinkDocument]
- ``load:loadOne``   {normalizedId}     -> LinkDocument | null
- ``store``          {link}             -> null
- ``stats:loadStats``                   -> {normalizedId: total}
- ``stats:saveStats`` {stats}           -> null   (server adds deltas)

Error mapping
-------------
- transport failure, timeout, too many redirects -> TransientIOError
- body with an undecodable content-encoding     -> ProtocolError
- HTTP status other than 200                    -> ProtocolError
- body that is not an envelope                  -> ProtocolError
- ``status == "error"``                         -> ApplicationError (server text verbatim)
- any other ``status``                          -> ProtocolError

There is no client-side locking; ordering between concurrent callers is
whatever the remote service provides.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

import httpx
import pydantic

from ..exceptions import ApplicationError, NotFoundError, ProtocolError, TransientIOError
from ..keys import normalize
from ..models import ClickStats, Link, attribute_totals, merge_deltas
from .base import BaseStorage
from .rpc import LinkDocument, LinkDocumentList, RpcResponse, StatsTotals, UdfExecution

log = logging.getLogger("slink.storage")

LOAD_ALL = "load:loadAll"
LOAD_ONE = "load:loadOne"
STORE = "store"
LOAD_STATS = "stats:loadStats"
SAVE_STATS = "stats:saveStats"


class RemoteStorage(BaseStorage):
    """HTTP implementation of the slink storage contract.

    Parameters
    ----------
    url : str
        Base URL of the service, without the ``/api/...`` suffix.
    token : str
        Bearer credential sent as ``args.token``.
    timeout : float
        Per-request timeout in seconds, used when the client is created here.
    client : httpx.Client, optional
        Pre-configured client (custom transport, proxies). Not closed by
        `close()` when supplied by the caller.
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.token = token
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # ---- Transport --------------------------------------------------------

    def _call(self, kind: str, path: str, args: Optional[Dict[str, Any]] = None) -> Any:
        """POST one function call to /api/{kind} and unwrap the envelope."""
        request = UdfExecution(path=path, args={**(args or {}), "token": self.token})
        endpoint = f"{self.url}/api/{kind}"
        log.debug("RemoteStorage.%s: path=%s", kind, path)
        try:
            resp = self._client.post(endpoint, json=request.model_dump())
        except httpx.DecodingError as exc:
            # Body arrived but could not be decoded (bad content-encoding).
            raise ProtocolError(f"undecodable response from remote store for {path}: {exc}") from exc
        except httpx.RequestError as exc:
            log.warning("RemoteStorage transport error on %s %s: %s", kind, path, exc)
            raise TransientIOError(f"{kind} {path}: {exc}") from exc

        if resp.status_code != 200:
            raise ProtocolError(f"unexpected status code from remote store: {resp.status_code}: {resp.text}")

        try:
            envelope = RpcResponse.model_validate(json.loads(resp.text, parse_float=Decimal))
        except (json.JSONDecodeError, pydantic.ValidationError) as exc:
            raise ProtocolError(f"malformed response from remote store for {path}: {resp.text!r}") from exc

        if envelope.status == "success":
            return envelope.value
        if envelope.status == "error":
            log.warning("RemoteStorage application error on %s: %s", path, envelope.error_message)
            raise ApplicationError(envelope.error_message)
        raise ProtocolError(f"unexpected response status from remote store: {envelope.status!r}")

    def _query(self, path: str, args: Optional[Dict[str, Any]] = None) -> Any:
        return self._call("query", path, args)

    def _mutation(self, path: str, args: Optional[Dict[str, Any]] = None) -> None:
        self._call("mutation", path, args)

    @staticmethod
    def _decode(validate, value: Any, path: str):
        try:
            return validate(value)
        except pydantic.ValidationError as exc:
            raise ProtocolError(f"unexpected payload from remote store for {path}: {exc}") from exc

    # ---- Contract methods -------------------------------------------------

    def load_all(self) -> List[Link]:
        docs = self._decode(LinkDocumentList.validate_python, self._query(LOAD_ALL) or [], LOAD_ALL)
        return [doc.to_link() for doc in docs]

    def load(self, short: str) -> Link:
        value = self._query(LOAD_ONE, {"normalizedId": normalize(short)})
        if not value:
            raise NotFoundError(short)
        return self._decode(LinkDocument.model_validate, value, LOAD_ONE).to_link()

    def save(self, link: Link) -> None:
        document = LinkDocument.from_link(link).model_dump(by_alias=True)
        self._mutation(STORE, {"link": document})

    def load_stats(self) -> ClickStats:
        links = self.load_all()
        totals = self._decode(StatsTotals.validate_python, self._query(LOAD_STATS) or {}, LOAD_STATS)
        return attribute_totals(links, {key: int(clicks) for key, clicks in totals.items()})

    def save_stats(self, stats: Mapping[str, int]) -> None:
        deltas = merge_deltas(stats)
        if not deltas:
            return
        self._mutation(SAVE_STATS, {"stats": deltas})
