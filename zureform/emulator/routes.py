"""
Emulator Routes.

FastAPI routes exposing the emulated control plane at ARM-shaped paths.
Write operations answer ``202 Accepted`` with an ``Azure-AsyncOperation``
header pointing at an operation status endpoint.

Author: Zureform Team
Date: 2026-10-17
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ..clients.models import MongoDatabaseCreateUpdateParameters, ThroughputSettingsResource
from .backend import EmulatorBackend, OperationStatus
from .exceptions import BadRequestError, EmulatorError

logger = logging.getLogger(__name__)

DATABASE_PATH = (
    "/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
    "/providers/Microsoft.DocumentDB/databaseAccounts/{account}"
    "/mongodbDatabases/{database}"
)
THROUGHPUT_PATH = DATABASE_PATH + "/throughputSettings/default"
OPERATION_PATH = "/providers/Microsoft.DocumentDB/locations/{location}/operationsStatus/{operation_id}"

EMULATOR_LOCATION = "emulator"


# Global backend instance
_backend: Optional[EmulatorBackend] = None


def get_backend() -> EmulatorBackend:
    """Get or create the emulator backend instance."""
    global _backend
    if _backend is None:
        _backend = EmulatorBackend()
    return _backend


def _error_response(error: EmulatorError) -> JSONResponse:
    """Build an ARM error body for an emulator error."""
    return JSONResponse(
        status_code=error.status_code,
        content={"error": {"code": error.error_code, "message": error.message}},
    )


def _accepted(request: Request, operation: OperationStatus, api_version: str) -> Response:
    """Build a 202 response pointing at the operation status endpoint."""
    base = str(request.base_url).rstrip("/")
    path = OPERATION_PATH.format(location=EMULATOR_LOCATION, operation_id=operation.id)
    url = f"{base}{path}?api-version={api_version}"
    return Response(
        status_code=status.HTTP_202_ACCEPTED,
        headers={"Azure-AsyncOperation": url, "Location": url, "Retry-After": "0"},
    )


async def _properties(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise BadRequestError("Request body must be valid JSON")
    properties = body.get("properties") if isinstance(body, dict) else None
    if not isinstance(properties, dict):
        raise BadRequestError("Request body must contain 'properties'")
    return properties


def create_router(backend: Optional[EmulatorBackend] = None) -> APIRouter:
    """Create FastAPI router for the emulated control plane.

    Args:
        backend: Backend to serve; the process-wide backend when omitted

    Returns:
        Configured APIRouter
    """
    router = APIRouter()

    def current_backend() -> EmulatorBackend:
        return backend if backend is not None else get_backend()

    @router.get(DATABASE_PATH, tags=["MongoDB Databases"])
    async def get_database(
        subscription_id: str,
        resource_group: str,
        account: str,
        database: str,
        api_version: str = Query("2021-10-15", alias="api-version"),
    ) -> Response:
        """Get a MongoDB database."""
        try:
            result = await current_backend().get_database(subscription_id, resource_group, account, database)
        except EmulatorError as e:
            return _error_response(e)
        return JSONResponse(content=result.model_dump())

    @router.put(DATABASE_PATH, tags=["MongoDB Databases"])
    async def create_update_database(
        request: Request,
        subscription_id: str,
        resource_group: str,
        account: str,
        database: str,
        api_version: str = Query("2021-10-15", alias="api-version"),
    ) -> Response:
        """Create or update a MongoDB database."""
        try:
            properties = await _properties(request)
            try:
                parameters = MongoDatabaseCreateUpdateParameters(
                    resource=properties.get("resource"),
                    options=properties.get("options") or {},
                )
            except ValidationError as e:
                raise BadRequestError(f"Invalid request body: {e.errors()[0]['msg']}")
            await current_backend().create_update_database(
                subscription_id, resource_group, account, database, parameters
            )
        except EmulatorError as e:
            logger.warning(f"Create/update of database '{database}' rejected: {e.message}")
            return _error_response(e)
        operation = await current_backend().record_operation()
        logger.info(f"Database '{database}' in account '{account}' created or updated")
        return _accepted(request, operation, api_version)

    @router.delete(DATABASE_PATH, tags=["MongoDB Databases"])
    async def delete_database(
        request: Request,
        subscription_id: str,
        resource_group: str,
        account: str,
        database: str,
        api_version: str = Query("2021-10-15", alias="api-version"),
    ) -> Response:
        """Delete a MongoDB database."""
        try:
            await current_backend().delete_database(subscription_id, resource_group, account, database)
        except EmulatorError as e:
            return _error_response(e)
        operation = await current_backend().record_operation()
        logger.info(f"Database '{database}' in account '{account}' deleted")
        return _accepted(request, operation, api_version)

    @router.get(THROUGHPUT_PATH, tags=["Throughput"])
    async def get_throughput(
        subscription_id: str,
        resource_group: str,
        account: str,
        database: str,
        api_version: str = Query("2021-10-15", alias="api-version"),
    ) -> Response:
        """Get a database's throughput settings."""
        try:
            result = await current_backend().get_throughput(subscription_id, resource_group, account, database)
        except EmulatorError as e:
            return _error_response(e)
        return JSONResponse(content=result.model_dump())

    @router.put(THROUGHPUT_PATH, tags=["Throughput"])
    async def update_throughput(
        request: Request,
        subscription_id: str,
        resource_group: str,
        account: str,
        database: str,
        api_version: str = Query("2021-10-15", alias="api-version"),
    ) -> Response:
        """Update a database's throughput."""
        try:
            properties = await _properties(request)
            try:
                resource = ThroughputSettingsResource(**(properties.get("resource") or {}))
            except ValidationError as e:
                raise BadRequestError(f"Invalid request body: {e.errors()[0]['msg']}")
            if resource.throughput is None:
                raise BadRequestError("Throughput must be specified")
            await current_backend().update_throughput(
                subscription_id, resource_group, account, database, resource.throughput
            )
        except EmulatorError as e:
            return _error_response(e)
        operation = await current_backend().record_operation()
        return _accepted(request, operation, api_version)

    @router.get(OPERATION_PATH, tags=["Operations"])
    async def get_operation_status(
        location: str,
        operation_id: str,
        api_version: str = Query("2021-10-15", alias="api-version"),
    ) -> Response:
        """Get the status of an asynchronous operation."""
        try:
            operation = await current_backend().get_operation(operation_id)
        except EmulatorError as e:
            return _error_response(e)
        return JSONResponse(content=operation.to_arm())

    return router


def create_app(backend: Optional[EmulatorBackend] = None) -> FastAPI:
    """Create the emulator application."""
    app = FastAPI(
        title="Zureform Control-Plane Emulator",
        description="Local emulation of the Cosmos DB MongoDB database control plane",
    )
    app.include_router(create_router(backend))
    return app
