"""Read-only client for the inventory API's node records."""

from __future__ import annotations

import logging
from typing import Generator, Optional

import httpx
from botocore.auth import SigV4Auth as BotocoreSigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError
from botocore.session import Session
from pydantic import TypeAdapter, ValidationError

from ..config import Settings
from ..exceptions import ConfigurationError, NodeSourceError
from ..inventory.models import NodeRecord

logger = logging.getLogger(__name__)

NODECONFIG_PATH = "nodeconfig"
API_GATEWAY_SERVICE = "execute-api"

_node_list = TypeAdapter(list[NodeRecord])


class SigV4Auth(httpx.Auth):
    """Sign outgoing httpx requests with AWS Signature Version 4."""

    requires_request_body = True

    def __init__(self, credentials, region: str, service: str = API_GATEWAY_SERVICE) -> None:
        self._signer = BotocoreSigV4Auth(credentials, service, region)

    @classmethod
    def from_profile(cls, profile: str, region: str) -> "SigV4Auth":
        try:
            credentials = Session(profile=profile).get_credentials()
        except BotoCoreError as exc:
            raise ConfigurationError(f"unable to load AWS profile '{profile}': {exc}") from exc
        if credentials is None:
            raise ConfigurationError(f"no AWS credentials found for profile '{profile}'")
        return cls(credentials, region)

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        aws_request = AWSRequest(
            method=request.method,
            url=str(request.url),
            data=request.content,
            headers={"Host": request.url.netloc.decode("ascii")},
        )
        self._signer.add_auth(aws_request)
        for name, value in aws_request.headers.items():
            request.headers[name] = value
        yield request


class InventoryApiClient:
    """Fetch node records from the inventory API."""

    def __init__(
        self,
        base_url: str,
        *,
        auth: Optional[httpx.Auth] = None,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self._auth = auth
        self._transport = transport
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "InventoryApiClient":
        if not settings.baseurl:
            raise ConfigurationError("inventory api base url (baseurl) is not configured")
        auth = SigV4Auth.from_profile(settings.aws.profile, settings.aws.region)
        return cls(settings.baseurl, auth=auth, timeout=settings.request_timeout)

    def fetch_all(self) -> list[NodeRecord]:
        """Return every node record, in the order the API serves them."""
        url = self.base_url + NODECONFIG_PATH
        logger.debug("GET %s", url)
        try:
            with httpx.Client(auth=self._auth, transport=self._transport, timeout=self._timeout) as client:
                response = client.get(url)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise NodeSourceError(f"inventory api returned {exc.response.status_code} for {url}") from exc
        except httpx.HTTPError as exc:
            raise NodeSourceError(f"unable to reach inventory api: {exc}") from exc
        except ValueError as exc:
            raise NodeSourceError(f"inventory api returned invalid JSON: {exc}") from exc

        try:
            nodes = _node_list.validate_python(payload if payload is not None else [])
        except ValidationError as exc:
            raise NodeSourceError(f"unable to decode node records: {exc}") from exc
        logger.info("Fetched %d nodes from %s", len(nodes), url)
        return nodes
