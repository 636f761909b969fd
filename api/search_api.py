"""
API Layer for the Solr search gateway.
Exposes search, navigation and health endpoints.
"""
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from cache.navigation_store import NavigationStore
from config.config_loader import load_search_config
from config.logging_config import logger
from config.settings import (API_ALLOWED_ORIGINS, NAVIGATION_TTL_HOURS, REDIS_HOST,
                             REDIS_PASSWORD, REDIS_PORT, SOLR_TIMEOUT, SOLR_URL)
from search.displays import render, select_display
from search.pipeline import SearchPipeline
from search.query_executor import ExecutionError
from search.solr_client import SolrClient

# ---------------------------
# Response Schemas
# ---------------------------


class SearchResponse(BaseModel):
    query: str
    total_found: int
    page: int
    rows: int
    start: int
    display: str
    navigation_token: Optional[str] = None
    results: Any
    facets: Dict[str, Any] = {}
    highlighting: Dict[str, Any] = {}


class NavigationResponse(BaseModel):
    token: str
    offset: int
    position: int
    total_found: int
    current_id: Optional[str] = None
    previous_id: Optional[str] = None
    next_id: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    services: dict


# ---------------------------
# App Initialization
# ---------------------------

app = FastAPI(title="Solr Search Gateway", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=API_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_pipeline() -> SearchPipeline:
    logger.info("Initializing search pipeline...")
    settings = load_search_config()
    navigation_store = None
    if settings.search_navigation:
        navigation_store = NavigationStore.from_settings(
            host=REDIS_HOST, port=REDIS_PORT, password=REDIS_PASSWORD, ttl_hours=NAVIGATION_TTL_HOURS
        )
    return SearchPipeline(
        settings=settings,
        client=SolrClient(SOLR_URL, timeout=SOLR_TIMEOUT),
        navigation_store=navigation_store,
    )


# ---------------------------
# Endpoints
# ---------------------------

@app.get("/health", response_model=HealthResponse, tags=["General"])
def health_check(pipeline: SearchPipeline = Depends(get_pipeline)):
    """Health check endpoint for Docker and Kubernetes"""
    services_status = {"solr": "healthy" if pipeline.client.ping() else "unhealthy"}
    overall_status = "healthy" if services_status["solr"] == "healthy" else "unhealthy"

    if pipeline.navigation_store is not None:
        if pipeline.navigation_store.health_check():
            services_status["redis"] = "healthy"
        else:
            services_status["redis"] = "unhealthy"
            if overall_status == "healthy":
                overall_status = "degraded"

    return HealthResponse(status=overall_status, services=services_status)


@app.get("/v1/search", response_model=SearchResponse, tags=["Search"])
def search(request: Request,
           q: Optional[str] = None,
           f: Optional[List[str]] = Query(default=None),
           x_session_id: Optional[str] = Header(default=None),
           pipeline: SearchPipeline = Depends(get_pipeline)):
    url_params: Dict[str, Any] = {
        key: value for key, value in request.query_params.items() if key not in ("f", "hidden_filter")
    }
    if f:
        url_params["f"] = f

    try:
        result_set = pipeline.search(q, url_params, session_id=x_session_id, path=str(request.url))
    except ExecutionError as ex:
        logger.error(f"Error during Solr query: {ex.message}")
        raise HTTPException(status_code=502, detail="Error searching Solr index")

    profile = select_display(url_params.get("display"), pipeline.settings)
    spec = result_set.spec
    return SearchResponse(
        query=spec.raw_query,
        total_found=result_set.total_found,
        page=spec.page,
        rows=spec.rows,
        start=spec.start,
        display=profile.value,
        navigation_token=result_set.navigation_token,
        results=render(result_set, profile),
        facets=result_set.facets,
        highlighting=result_set.highlighting,
    )


@app.get("/v1/search/navigation/{token}", response_model=NavigationResponse, tags=["Search"])
def navigation(token: str,
               offset: int = Query(default=0, ge=0),
               x_session_id: Optional[str] = Header(default=None),
               pipeline: SearchPipeline = Depends(get_pipeline)):
    if not x_session_id:
        raise HTTPException(status_code=400, detail="Missing X-Session-Id header")

    try:
        context = pipeline.navigate(x_session_id, token, offset)
    except ExecutionError as ex:
        logger.error(f"Error during navigation query: {ex.message}")
        raise HTTPException(status_code=502, detail="Error searching Solr index")

    if context is None:
        raise HTTPException(status_code=404, detail="Unknown navigation token")

    return NavigationResponse(
        token=context.token,
        offset=context.offset,
        position=context.position,
        total_found=context.total_found,
        current_id=context.current_id,
        previous_id=context.previous_id,
        next_id=context.next_id,
    )
