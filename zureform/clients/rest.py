"""
ARM REST client.

Talks to the Azure Resource Manager REST API (or the local emulator)
with httpx. Long-running operations are polled through the
``Azure-AsyncOperation`` or ``Location`` header until they finish.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

import httpx

from ..core.config_manager import DEFAULT_API_VERSION, DEFAULT_ENDPOINT
from ..exceptions import RemoteAPIError
from .base import LongRunningOperation, MongoDatabaseClient
from .models import MongoDatabase, MongoDatabaseCreateUpdateParameters, ThroughputSettings

logger = logging.getLogger(__name__)

ARM_SCOPE = "https://management.azure.com/.default"

TERMINAL_SUCCESS = {"succeeded"}
TERMINAL_FAILURE = {"failed", "canceled", "cancelled"}


def _error_from_response(response: httpx.Response) -> RemoteAPIError:
    """Build a RemoteAPIError from an ARM error response."""
    code = "InternalServerError"
    message = response.text or response.reason_phrase
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        code = body["error"].get("code") or code
        message = body["error"].get("message") or message
    return RemoteAPIError(
        f"{response.request.method} {response.request.url.path}: {response.status_code} {code}: {message}",
        status_code=response.status_code,
        error_code=code,
    )


def _retry_after(response: httpx.Response, default: float) -> float:
    value = response.headers.get("Retry-After")
    if value is None:
        return default
    try:
        return max(float(value), 0.0)
    except ValueError:
        return default


class RestOperation(LongRunningOperation):
    """Polls an ARM long-running operation to completion.

    Args:
        client: Client that started the operation
        initial: Response of the initial request
        final_url: Resource to fetch once the operation succeeded
        transform: Converts the final resource body into a model
    """

    def __init__(
        self,
        client: "RestMongoDatabaseClient",
        initial: httpx.Response,
        final_url: Optional[str] = None,
        transform: Optional[Callable[[Dict[str, Any]], Any]] = None,
    ):
        self._client = client
        self._initial = initial
        self._final_url = final_url
        self._transform = transform

    async def result(self) -> Any:
        response = self._initial
        async_url = response.headers.get("Azure-AsyncOperation")
        location_url = response.headers.get("Location")

        if response.status_code == 202 or async_url:
            delay = _retry_after(response, self._client.poll_interval)
            if async_url:
                await self._poll_async_operation(async_url, delay)
            elif location_url:
                await self._poll_location(location_url, delay)

        if self._transform is None:
            return None
        if self._final_url is not None:
            final = await self._client._send("GET", self._final_url)
            return self._transform(final.json())
        if response.content:
            return self._transform(response.json())
        return None

    async def _poll_async_operation(self, url: str, delay: float) -> None:
        while True:
            await asyncio.sleep(delay)
            poll = await self._client._send("GET", url, versioned=False)
            body = poll.json()
            status = str(body.get("status", "")).lower()
            logger.debug(f"Operation status {status or 'unknown'} from {url}")
            if status in TERMINAL_SUCCESS:
                return
            if status in TERMINAL_FAILURE:
                error = body.get("error") or {}
                raise RemoteAPIError(
                    f"Operation {status}: {error.get('code', 'Unknown')}: {error.get('message', '')}",
                    error_code=error.get("code") or "OperationFailed",
                )
            delay = _retry_after(poll, self._client.poll_interval)

    async def _poll_location(self, url: str, delay: float) -> None:
        while True:
            await asyncio.sleep(delay)
            poll = await self._client._send("GET", url, versioned=False)
            if poll.status_code != 202:
                return
            delay = _retry_after(poll, self._client.poll_interval)


class RestMongoDatabaseClient(MongoDatabaseClient):
    """httpx-based client for the MongoDB database ARM endpoints.

    Args:
        subscription_id: Subscription holding the accounts
        endpoint: ARM endpoint or emulator URL
        api_version: ``Microsoft.DocumentDB`` API version
        credential: Optional async azure-identity credential for bearer tokens
        poll_interval: Default seconds between operation polls
        http_client: Preconfigured ``httpx.AsyncClient`` (its base URL is used)
        close_credential: Close the credential together with the client
    """

    def __init__(
        self,
        subscription_id: str,
        endpoint: str = DEFAULT_ENDPOINT,
        api_version: str = DEFAULT_API_VERSION,
        credential: Optional[Any] = None,
        poll_interval: float = 5.0,
        http_client: Optional[httpx.AsyncClient] = None,
        close_credential: bool = False,
    ):
        self.subscription_id = subscription_id
        self.api_version = api_version
        self.poll_interval = poll_interval
        self._credential = credential
        self._close_credential = close_credential
        self._http = http_client or httpx.AsyncClient(base_url=endpoint, timeout=60.0)

    def _database_path(self, resource_group: str, account: str, name: str) -> str:
        return (
            f"/subscriptions/{self.subscription_id}/resourceGroups/{resource_group}"
            f"/providers/Microsoft.DocumentDB/databaseAccounts/{account}"
            f"/mongodbDatabases/{name}"
        )

    def _throughput_path(self, resource_group: str, account: str, name: str) -> str:
        return self._database_path(resource_group, account, name) + "/throughputSettings/default"

    async def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._credential is not None:
            token = await self._credential.get_token(ARM_SCOPE)
            headers["Authorization"] = f"Bearer {token.token}"
        return headers

    async def _send(
        self,
        method: str,
        url: str,
        body: Optional[Dict[str, Any]] = None,
        versioned: bool = True,
    ) -> httpx.Response:
        """Send a request, raising RemoteAPIError on failure statuses."""
        params = {"api-version": self.api_version} if versioned else None
        try:
            response = await self._http.request(
                method, url, params=params, json=body, headers=await self._headers()
            )
        except httpx.HTTPError as e:
            raise RemoteAPIError(f"{method} {url} failed: {e}", error_code="ServiceRequestError") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        if response.status_code >= 400:
            raise _error_from_response(response)
        return response

    async def get_database(self, resource_group: str, account: str, name: str) -> MongoDatabase:
        response = await self._send("GET", self._database_path(resource_group, account, name))
        return MongoDatabase.model_validate(response.json())

    async def begin_create_update_database(
        self,
        resource_group: str,
        account: str,
        name: str,
        parameters: MongoDatabaseCreateUpdateParameters,
    ) -> LongRunningOperation:
        path = self._database_path(resource_group, account, name)
        response = await self._send("PUT", path, body=parameters.to_arm())
        return RestOperation(self, response, final_url=path, transform=MongoDatabase.model_validate)

    async def begin_delete_database(self, resource_group: str, account: str, name: str) -> LongRunningOperation:
        response = await self._send("DELETE", self._database_path(resource_group, account, name))
        return RestOperation(self, response)

    async def get_database_throughput(self, resource_group: str, account: str, name: str) -> ThroughputSettings:
        response = await self._send("GET", self._throughput_path(resource_group, account, name))
        return ThroughputSettings.model_validate(response.json())

    async def begin_update_database_throughput(
        self, resource_group: str, account: str, name: str, throughput: int
    ) -> LongRunningOperation:
        path = self._throughput_path(resource_group, account, name)
        body = {"properties": {"resource": {"throughput": throughput}}}
        response = await self._send("PUT", path, body=body)
        return RestOperation(self, response, final_url=path, transform=ThroughputSettings.model_validate)

    async def close(self) -> None:
        await self._http.aclose()
        if self._close_credential and self._credential is not None:
            await self._credential.close()
