"""FastAPI REST API for markup-compressor."""

from __future__ import annotations

import hashlib
import json
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Literal

import redis.asyncio as aioredis
from redis.exceptions import RedisError
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from markup_compressor import (
    PHP_TAG_PATTERN,
    SERVER_SCRIPT_TAG_PATTERN,
    SERVER_SIDE_INCLUDE_PATTERN,
    CompressionResult,
    CompressorOptions,
    HtmlCompressor,
    HtmlMetrics,
    __version__,
    compress_with_stats,
    compress_xml,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Redis Cache
# ---------------------------------------------------------------------------

redis_client: aioredis.Redis | None = None

# Cache TTL in seconds (default: 1 hour)
CACHE_TTL = int(os.getenv("CACHE_TTL", "3600"))

# Redis connection URL
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379")

_PRESETS = {
    "php": PHP_TAG_PATTERN,
    "server_script": SERVER_SCRIPT_TAG_PATTERN,
    "server_side_include": SERVER_SIDE_INCLUDE_PATTERN,
}


def _generate_cache_key(prefix: str, data: dict) -> str:
    """Generate a cache key from request data."""
    sorted_data = json.dumps(data, sort_keys=True)
    hash_value = hashlib.sha256(sorted_data.encode()).hexdigest()[:16]
    return f"{prefix}:{hash_value}"


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class OptionsModel(BaseModel):
    """HTML compression settings shared by the HTML endpoints."""

    remove_comments: bool = Field(default=True, description="Remove HTML comments")
    remove_multi_spaces: bool = Field(default=True, description="Collapse whitespace runs")
    remove_intertag_spaces: bool = Field(default=False, description="Remove whitespace between tags")
    remove_quotes: bool = Field(default=False, description="Unquote simple attribute values")
    preserve_line_breaks: bool = Field(default=False, description="Keep line breaks")
    remove_surrounding_spaces: str | None = Field(
        default=None, description="min, max, all, or a comma list of tag names"
    )
    simple_doctype: bool = False
    remove_script_attributes: bool = False
    remove_style_attributes: bool = False
    remove_link_attributes: bool = False
    remove_form_attributes: bool = False
    remove_input_attributes: bool = False
    simple_boolean_attributes: bool = False
    remove_javascript_protocol: bool = False
    remove_http_protocol: bool = False
    remove_https_protocol: bool = False
    compress_javascript: bool = Field(default=False, description="Minify inline <script> bodies")
    compress_css: bool = Field(default=False, description="Minify inline <style> bodies")
    preserve_patterns: list[str] | None = Field(
        default=None, description="Custom regex patterns to preserve"
    )
    preserve_presets: list[Literal["php", "server_script", "server_side_include"]] | None = Field(
        default=None, description="Predefined server-side tag patterns to preserve"
    )


class CompressRequest(OptionsModel):
    """Request body for HTML compression endpoints."""

    html: str = Field(..., description="HTML to compress")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "html": "<div class=\"box\">\n    <!-- note -->\n    <p>Hello</p>\n</div>",
                "remove_intertag_spaces": True,
            }
        ]
    }}


class CompressResponse(BaseModel):
    """Response body for the /compress endpoint."""

    text: str = Field(..., description="Compressed HTML")


class MetricsResponse(BaseModel):
    """Sizes on one side of a compression run."""

    filesize: int
    empty_chars: int
    inline_script_size: int
    inline_style_size: int
    inline_event_size: int


class CompressStatsResponse(BaseModel):
    """Response body for the /compress/stats endpoint."""

    text: str = Field(..., description="Compressed HTML")
    original_length: int = Field(..., description="Original document length")
    compressed_length: int = Field(..., description="Compressed document length")
    ratio: float = Field(..., description="Compression ratio (0.0-1.0)")
    savings_pct: float = Field(..., description="Percentage of characters saved")
    preserved_size: int = Field(default=0, description="Characters passed through untouched")
    time_ms: float = Field(default=0.0, description="Compression time in milliseconds")
    original_metrics: MetricsResponse | None = None
    compressed_metrics: MetricsResponse | None = None


class BatchItem(BaseModel):
    """A single item in a batch compression request."""

    id: str = Field(..., description="Unique identifier for this item")
    html: str = Field(..., description="HTML to compress")


class BatchRequest(OptionsModel):
    """Request body for batch compression."""

    items: list[BatchItem] = Field(..., description="List of documents to compress")


class BatchItemResponse(BaseModel):
    """A single result in a batch compression response."""

    id: str
    text: str
    original_length: int
    compressed_length: int
    ratio: float
    savings_pct: float


class BatchResponse(BaseModel):
    """Response body for batch compression."""

    items: list[BatchItemResponse]
    total_original_length: int
    total_compressed_length: int
    overall_ratio: float
    overall_savings_pct: float


class XmlCompressRequest(BaseModel):
    """Request body for XML compression."""

    xml: str = Field(..., description="XML to compress")
    remove_comments: bool = Field(default=True)
    remove_intertag_spaces: bool = Field(default=True)


class HealthResponse(BaseModel):
    """Response body for health check."""

    status: str = "ok"
    version: str
    cache_enabled: bool = False
    redis_connected: bool = False


class CacheStatsResponse(BaseModel):
    """Response body for cache statistics."""

    enabled: bool
    connected: bool
    ttl_seconds: int
    redis_url: str
    keys_count: int | None = None
    memory_used: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_kwargs(req: OptionsModel) -> dict:
    """Turn request settings into CompressorOptions keywords."""
    kwargs = req.model_dump(
        include=set(OptionsModel.model_fields) - {"preserve_patterns", "preserve_presets"}
    )
    patterns: list = [_PRESETS[name] for name in req.preserve_presets or ()]
    patterns.extend(req.preserve_patterns or ())
    if patterns:
        kwargs["preserve_patterns"] = patterns
    return kwargs


def _result_to_stats_response(result: CompressionResult) -> CompressStatsResponse:
    """Convert a CompressionResult to the API response model."""
    response = CompressStatsResponse(
        text=result.text,
        original_length=result.original_length,
        compressed_length=result.compressed_length,
        ratio=result.ratio,
        savings_pct=result.savings_pct,
    )
    statistics = result.statistics
    if statistics is not None:
        response.preserved_size = statistics.preserved_size
        response.time_ms = statistics.time
        response.original_metrics = MetricsResponse(**_metrics_dict(statistics.original_metrics))
        response.compressed_metrics = MetricsResponse(**_metrics_dict(statistics.compressed_metrics))
    return response


def _metrics_dict(metrics: HtmlMetrics) -> dict:
    return {name: getattr(metrics, name) for name in MetricsResponse.model_fields}


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - setup Redis connection."""
    global redis_client
    try:
        redis_client = await aioredis.from_url(
            REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
        )
        await redis_client.ping()
        logger.info("Connected to Redis at %s", REDIS_URL)
    except Exception as e:
        logger.warning("Redis unavailable: %s. Caching disabled.", e)
        redis_client = None

    yield

    if redis_client:
        await redis_client.close()


app = FastAPI(
    title="Markup Compressor API",
    description=(
        "REST API for minifying HTML and XML. Removes comments, redundant "
        "whitespace and attribute syntax while keeping pre, textarea, script, "
        "style, conditional comments and custom regions intact."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Check API health, version, and cache status."""
    redis_connected = False
    if redis_client:
        try:
            await redis_client.ping()
            redis_connected = True
        except RedisError:
            logger.debug("Redis ping failed", exc_info=True)

    return HealthResponse(
        status="ok",
        version=__version__,
        cache_enabled=redis_client is not None,
        redis_connected=redis_connected,
    )


@app.get("/cache/stats", response_model=CacheStatsResponse, tags=["Cache"])
async def cache_stats() -> CacheStatsResponse:
    """Get cache statistics and Redis connection info."""
    keys_count = None
    memory_used = None
    connected = False

    if redis_client:
        try:
            await redis_client.ping()
            connected = True
            keys_count = 0
            for pattern in ["compress:*", "compress_stats:*", "compress_xml:*"]:
                keys_count += len(await redis_client.keys(pattern))

            info = await redis_client.info("memory")
            memory_used = info.get("used_memory_human", "unknown")
        except RedisError:
            logger.debug("Redis stats unavailable", exc_info=True)

    return CacheStatsResponse(
        enabled=redis_client is not None,
        connected=connected,
        ttl_seconds=CACHE_TTL,
        redis_url=REDIS_URL.split("@")[-1] if "@" in REDIS_URL else REDIS_URL,
        keys_count=keys_count,
        memory_used=memory_used,
    )


@app.post("/compress", response_model=CompressResponse, tags=["Compression"])
async def compress_html(req: CompressRequest) -> CompressResponse:
    """Compress an HTML document.

    Results are cached in Redis for improved performance.
    """
    try:
        cache_key = _generate_cache_key("compress", req.model_dump())

        if redis_client:
            cached = await redis_client.get(cache_key)
            if cached:
                return CompressResponse(text=cached)

        compressor = HtmlCompressor(CompressorOptions(**_build_kwargs(req)))
        result = compressor.compress(req.html) or ""

        if redis_client:
            await redis_client.setex(cache_key, CACHE_TTL, result)

        return CompressResponse(text=result)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@app.post("/compress/stats", response_model=CompressStatsResponse, tags=["Compression"])
async def compress_html_with_stats(req: CompressRequest) -> CompressStatsResponse:
    """Compress an HTML document and return size statistics.

    Results are cached in Redis for improved performance.
    """
    try:
        cache_key = _generate_cache_key("compress_stats", req.model_dump())

        if redis_client:
            cached = await redis_client.get(cache_key)
            if cached:
                return CompressStatsResponse(**json.loads(cached))

        result = compress_with_stats(req.html, **_build_kwargs(req))
        response = _result_to_stats_response(result)

        if redis_client:
            await redis_client.setex(cache_key, CACHE_TTL, response.model_dump_json())

        return response
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@app.post("/compress/batch", response_model=BatchResponse, tags=["Compression"])
async def compress_batch(req: BatchRequest) -> BatchResponse:
    """Compress multiple HTML documents with the same settings."""
    try:
        kwargs = _build_kwargs(req)
        items: list[BatchItemResponse] = []
        total_orig = 0
        total_comp = 0

        for item in req.items:
            result = compress_with_stats(item.html, **kwargs)
            items.append(BatchItemResponse(
                id=item.id,
                text=result.text,
                original_length=result.original_length,
                compressed_length=result.compressed_length,
                ratio=result.ratio,
                savings_pct=result.savings_pct,
            ))
            total_orig += result.original_length
            total_comp += result.compressed_length

        overall_ratio = total_comp / total_orig if total_orig > 0 else 1.0
        return BatchResponse(
            items=items,
            total_original_length=total_orig,
            total_compressed_length=total_comp,
            overall_ratio=overall_ratio,
            overall_savings_pct=(1.0 - overall_ratio) * 100,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@app.post("/compress/xml", response_model=CompressResponse, tags=["Compression"])
async def compress_xml_document(req: XmlCompressRequest) -> CompressResponse:
    """Compress an XML document, keeping CDATA sections intact."""
    cache_key = _generate_cache_key("compress_xml", req.model_dump())

    if redis_client:
        cached = await redis_client.get(cache_key)
        if cached:
            return CompressResponse(text=cached)

    result = compress_xml(
        req.xml,
        remove_comments=req.remove_comments,
        remove_intertag_spaces=req.remove_intertag_spaces,
    ) or ""

    if redis_client:
        await redis_client.setex(cache_key, CACHE_TTL, result)

    return CompressResponse(text=result)
