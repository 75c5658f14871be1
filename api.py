"""
FastAPI app for the Query Gateway.

Serves the generated schema and runs filtered queries against Elasticsearch.
"""

import json
from contextlib import asynccontextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from pydantic import BaseModel, Field

from query_gateway import QueryOrchestrator
from query_gateway.config import load_config
from query_gateway.core.exceptions import QueryGatewayError
from query_gateway.core.models import Accessibility
from query_gateway.logger import configure_logging


class DataRequest(BaseModel):
    """Request model for a bounded data query."""
    filter: Optional[Dict[str, Any]] = Field(None, description="Filter expression")
    sort: Optional[Any] = Field(None, description="Sort list or mapping")
    fields: Optional[List[str]] = Field(None, description="Source fields to return")
    offset: int = Field(0, ge=0, description="Index of the first document")
    first: Optional[int] = Field(None, ge=0, description="Number of documents")
    accessibility: Accessibility = Accessibility.ALL


class CountRequest(BaseModel):
    """Request model for a count query."""
    filter: Optional[Dict[str, Any]] = None
    accessibility: Accessibility = Accessibility.ALL


class DownloadRequest(BaseModel):
    """Request model for the unbounded download endpoint."""
    type: str = Field(..., description="Client type name of the index")
    filter: Optional[Dict[str, Any]] = None
    sort: Optional[Any] = None
    fields: Optional[List[str]] = None
    accessibility: Accessibility = Accessibility.ACCESSIBLE


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[len("bearer "):]
    return None


def _json_array(documents: Iterator[Dict[str, Any]]) -> Iterator[str]:
    yield "["
    for i, document in enumerate(documents):
        yield ("," if i else "") + json.dumps(document)
    yield "]"


def create_app(orchestrator: Optional[QueryOrchestrator] = None) -> FastAPI:
    """
    Build the API app.

    Args:
        orchestrator: Pre-built orchestrator; built from the environment at
            startup when omitted

    Returns:
        FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        gateway = orchestrator
        if gateway is None:
            config = load_config()
            configure_logging(config.log_level)
            gateway = QueryOrchestrator.from_config(config)
        # Fails the boot if the mappings hold an unsupported type
        gateway.build_schema()
        app.state.orchestrator = gateway
        yield

    app = FastAPI(
        title="Query Gateway API",
        description="Compile client filters to Elasticsearch queries",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(QueryGatewayError)
    async def gateway_error_handler(request: Request, exc: QueryGatewayError):
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    @app.get("/_status")
    async def status():
        return {"status": "ok"}

    @app.get("/schema", response_class=PlainTextResponse)
    async def schema(request: Request):
        return request.app.state.orchestrator.schema_string()

    @app.get("/mapping/{type_name}")
    async def mapping(type_name: str, request: Request):
        return request.app.state.orchestrator.get_mapping_fields(type_name)

    @app.post("/data/{type_name}")
    def data(
        type_name: str,
        body: DataRequest,
        request: Request,
        authorization: Optional[str] = Header(None),
    ):
        gateway: QueryOrchestrator = request.app.state.orchestrator
        auth_filter = gateway.get_auth_filter(type_name, _bearer_token(authorization), body.accessibility)
        return gateway.get_data(
            type_name,
            filter_obj=body.filter,
            fields=body.fields,
            sort=body.sort,
            offset=body.offset,
            size=body.first,
            auth_filter=auth_filter,
        )

    @app.post("/count/{type_name}")
    def count(
        type_name: str,
        body: CountRequest,
        request: Request,
        authorization: Optional[str] = Header(None),
    ):
        gateway: QueryOrchestrator = request.app.state.orchestrator
        auth_filter = gateway.get_auth_filter(type_name, _bearer_token(authorization), body.accessibility)
        return {"count": gateway.get_count(type_name, body.filter, auth_filter=auth_filter)}

    @app.post("/download")
    def download(
        body: DownloadRequest,
        request: Request,
        authorization: Optional[str] = Header(None),
    ):
        gateway: QueryOrchestrator = request.app.state.orchestrator
        auth_filter = gateway.get_auth_filter(body.type, _bearer_token(authorization), body.accessibility)
        # Compiled here so input errors are returned before streaming starts
        documents = gateway.download(
            body.type,
            filter_obj=body.filter,
            fields=body.fields,
            sort=body.sort,
            auth_filter=auth_filter,
        )
        return StreamingResponse(_json_array(documents), media_type="application/json")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = load_config()
    uvicorn.run(app, host=config.api_host, port=config.api_port)
