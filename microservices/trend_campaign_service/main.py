"""
Trend Campaign Service Main Application

FastAPI application for trend-driven search campaign provisioning.
Port: 8260
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Depends, Request, status
from fastapi.responses import JSONResponse

from core.config import get_settings

from . import __version__
from .article_service import ArticleService
from .campaign_service import TrendCampaignService
from .error_classifier import classify_error
from .factory import TrendCampaignServiceFactory
from .models import (
    Article,
    ArticleCreateRequest,
    ArticleStatsResponse,
    ArticleUpdateRequest,
    CampaignCreateRequest,
    CampaignResult,
    CleanupResponse,
    ExpressCampaignRequest,
    HealthResponse,
    MessageResponse,
    StoredCampaign,
    TrendingSearch,
    TrendMatch,
)
from .protocols import (
    ArticleNotFoundError,
    CampaignNotFoundError,
    CampaignProvisioningError,
    CampaignValidationError,
    PlatformCallError,
    TrendsClientProtocol,
    TrendsSourceError,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.logging.log_level, logging.INFO),
    format=settings.logging.log_format,
)
logger = logging.getLogger(__name__)

# Service configuration
SERVICE_NAME = "trend_campaign_service"
SERVICE_PORT = settings.service_port
SERVICE_VERSION = __version__

# Global factory instance
factory: Optional[TrendCampaignServiceFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT}")

    factory = TrendCampaignServiceFactory(settings)
    await factory.initialize()

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    await factory.close()


# Create FastAPI application
app = FastAPI(
    title="Trend Campaign Service",
    description="Creates short-lived search campaigns for articles that match trending searches",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================


@app.exception_handler(ArticleNotFoundError)
async def article_not_found_handler(request: Request, exc: ArticleNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(CampaignNotFoundError)
async def campaign_not_found_handler(request: Request, exc: CampaignNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.exception_handler(CampaignValidationError)
async def validation_error_handler(request: Request, exc: CampaignValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "field": exc.field},
    )


@app.exception_handler(CampaignProvisioningError)
async def provisioning_error_handler(request: Request, exc: CampaignProvisioningError):
    content = exc.classified.model_dump(mode="json")
    content["step"] = exc.step.value
    content["last_completed_step"] = exc.last_completed_step.value
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(PlatformCallError)
async def platform_error_handler(request: Request, exc: PlatformCallError):
    classified = classify_error(exc)
    return JSONResponse(
        status_code=classified.status_code,
        content=classified.model_dump(mode="json"),
    )


@app.exception_handler(TrendsSourceError)
async def trends_source_error_handler(request: Request, exc: TrendsSourceError):
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc), "type": type(exc).__name__},
    )


# ====================
# Dependencies
# ====================


def _require_factory() -> TrendCampaignServiceFactory:
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory


def get_service() -> TrendCampaignService:
    """Get trend campaign service from factory"""
    return _require_factory().service


def get_article_service() -> ArticleService:
    """Get article service from factory"""
    return _require_factory().article_service


def get_trends_client() -> TrendsClientProtocol:
    """Get trends client from factory"""
    return _require_factory().trends_client


# ====================
# Health Endpoints
# ====================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    dependencies = {}
    if factory:
        dependencies["google_ads"] = "configured" if settings.ads.is_configured else "not_configured"
        dependencies["event_bus"] = (
            "configured" if factory.event_publisher and factory.event_publisher.event_bus
            else "not_configured"
        )

    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        port=SERVICE_PORT,
        version=SERVICE_VERSION,
        dependencies=dependencies,
    )


# ====================
# Campaign Endpoints
# ====================


@app.post(
    "/api/v1/campaigns",
    response_model=CampaignResult,
    status_code=status.HTTP_201_CREATED,
    tags=["Campaigns"],
)
async def create_campaign(
    request: CampaignCreateRequest,
    service: TrendCampaignService = Depends(get_service),
):
    """Create a campaign from explicit settings"""
    return await service.create_campaign(request)


@app.post(
    "/api/v1/campaigns/express",
    response_model=CampaignResult,
    status_code=status.HTTP_201_CREATED,
    tags=["Campaigns"],
)
async def create_express_campaign(
    request: ExpressCampaignRequest,
    service: TrendCampaignService = Depends(get_service),
):
    """Create a campaign promoting one article on one trending keyword"""
    return await service.create_express_campaign(request)


@app.post("/api/v1/campaigns/auto", response_model=List[CampaignResult], tags=["Campaigns"])
async def auto_create_campaigns(
    geo: Optional[str] = Query(None, description="Trends region, e.g. AR"),
    max_campaigns: Optional[int] = Query(None, ge=1, le=20, alias="max"),
    service: TrendCampaignService = Depends(get_service),
):
    """Create campaigns for the top trend/article matches"""
    return await service.auto_create_from_trends(geo=geo, max_campaigns=max_campaigns)


@app.get("/api/v1/campaigns", response_model=List[Dict[str, Any]], tags=["Campaigns"])
async def list_active_campaigns(service: TrendCampaignService = Depends(get_service)):
    """List ENABLED campaigns on the advertising account"""
    return await service.list_active_campaigns()


@app.get("/api/v1/campaigns/account-info", tags=["Campaigns"])
async def get_account_info(service: TrendCampaignService = Depends(get_service)):
    info = await service.get_account_info()
    if info is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return info


@app.get("/api/v1/campaigns/stored", response_model=List[StoredCampaign], tags=["Campaigns"])
async def list_stored_campaigns(service: TrendCampaignService = Depends(get_service)):
    """Campaigns created by this service instance"""
    return await service.list_stored_campaigns()


@app.post("/api/v1/campaigns/cleanup", response_model=CleanupResponse, tags=["Campaigns"])
async def cleanup_expired_campaigns(service: TrendCampaignService = Depends(get_service)):
    """Remove every active campaign past its expiry"""
    cleaned = await service.cleanup_expired_campaigns()
    return CleanupResponse(cleaned=cleaned)


@app.get("/api/v1/campaigns/{campaign_id}", response_model=StoredCampaign, tags=["Campaigns"])
async def get_stored_campaign(
    campaign_id: str,
    service: TrendCampaignService = Depends(get_service),
):
    campaign = await service.get_stored_campaign(campaign_id)
    if not campaign:
        raise CampaignNotFoundError(f"Campaign not found: {campaign_id}")
    return campaign


@app.get("/api/v1/campaigns/{campaign_id}/stats", tags=["Campaigns"])
async def get_campaign_stats(
    campaign_id: str,
    service: TrendCampaignService = Depends(get_service),
):
    stats = await service.get_campaign_stats(campaign_id)
    if stats is None:
        raise CampaignNotFoundError(f"Campaign not found: {campaign_id}")
    return stats


@app.patch("/api/v1/campaigns/{campaign_id}/pause", response_model=MessageResponse, tags=["Campaigns"])
async def pause_campaign(
    campaign_id: str,
    service: TrendCampaignService = Depends(get_service),
):
    campaign = await service.pause_campaign(campaign_id)
    if not campaign:
        return MessageResponse(message=f"Campaign {campaign_id} is not tracked, nothing to pause")
    return MessageResponse(message=f"Campaign {campaign_id} paused")


@app.patch("/api/v1/campaigns/{campaign_id}/enable", response_model=MessageResponse, tags=["Campaigns"])
async def enable_campaign(
    campaign_id: str,
    service: TrendCampaignService = Depends(get_service),
):
    campaign = await service.enable_campaign(campaign_id)
    if not campaign:
        return MessageResponse(message=f"Campaign {campaign_id} is not tracked, nothing to enable")
    return MessageResponse(message=f"Campaign {campaign_id} enabled")


@app.delete("/api/v1/campaigns/{campaign_id}", response_model=MessageResponse, tags=["Campaigns"])
async def remove_campaign(
    campaign_id: str,
    service: TrendCampaignService = Depends(get_service),
):
    if not await service.remove_campaign(campaign_id):
        return MessageResponse(message=f"Campaign {campaign_id} is not tracked, nothing to remove")
    return MessageResponse(message=f"Campaign {campaign_id} removed")


# ====================
# Article Endpoints
# ====================


@app.post(
    "/api/v1/articles",
    response_model=Article,
    status_code=status.HTTP_201_CREATED,
    tags=["Articles"],
)
async def create_article(
    request: ArticleCreateRequest,
    articles: ArticleService = Depends(get_article_service),
):
    return await articles.create_article(request)


@app.post(
    "/api/v1/articles/bulk",
    response_model=List[Article],
    status_code=status.HTTP_201_CREATED,
    tags=["Articles"],
)
async def bulk_create_articles(
    requests: List[ArticleCreateRequest],
    articles: ArticleService = Depends(get_article_service),
):
    return await articles.bulk_create(requests)


@app.get("/api/v1/articles", response_model=List[Article], tags=["Articles"])
async def list_articles(
    category: Optional[str] = Query(None),
    keyword: Optional[str] = Query(None),
    articles: ArticleService = Depends(get_article_service),
):
    return await articles.list_articles(category=category, keyword=keyword)


@app.get("/api/v1/articles/stats", response_model=ArticleStatsResponse, tags=["Articles"])
async def get_article_stats(articles: ArticleService = Depends(get_article_service)):
    return await articles.get_stats()


@app.post("/api/v1/articles/match", response_model=List[TrendMatch], tags=["Articles"])
async def match_articles(
    trends: List[TrendingSearch],
    articles: ArticleService = Depends(get_article_service),
):
    """Rank the catalog against the supplied trends"""
    return await articles.match_with_trends(trends)


@app.get("/api/v1/articles/{article_id}", response_model=Article, tags=["Articles"])
async def get_article(
    article_id: str,
    articles: ArticleService = Depends(get_article_service),
):
    return await articles.get_article(article_id)


@app.put("/api/v1/articles/{article_id}", response_model=Article, tags=["Articles"])
async def update_article(
    article_id: str,
    request: ArticleUpdateRequest,
    articles: ArticleService = Depends(get_article_service),
):
    return await articles.update_article(article_id, request)


@app.delete("/api/v1/articles/{article_id}", response_model=MessageResponse, tags=["Articles"])
async def delete_article(
    article_id: str,
    articles: ArticleService = Depends(get_article_service),
):
    await articles.delete_article(article_id)
    return MessageResponse(message=f"Article {article_id} deleted")


# ====================
# Trends Endpoints
# ====================


@app.get("/api/v1/trends/daily", response_model=List[TrendingSearch], tags=["Trends"])
async def get_daily_trends(
    geo: Optional[str] = Query(None),
    trends: TrendsClientProtocol = Depends(get_trends_client),
):
    return await trends.get_daily_trends(geo)


@app.get("/api/v1/trends/realtime", response_model=List[TrendingSearch], tags=["Trends"])
async def get_realtime_trends(
    category: Optional[str] = Query(None),
    trends: TrendsClientProtocol = Depends(get_trends_client),
):
    return await trends.get_realtime_trends(category)


@app.get("/api/v1/trends/related", response_model=List[str], tags=["Trends"])
async def get_related_queries(
    keyword: str = Query(..., min_length=1),
    trends: TrendsClientProtocol = Depends(get_trends_client),
):
    return await trends.get_related_queries(keyword)


@app.get("/api/v1/trends/interest", tags=["Trends"])
async def get_interest_over_time(
    keyword: str = Query(..., min_length=1),
    trends: TrendsClientProtocol = Depends(get_trends_client),
):
    return await trends.get_interest_over_time(keyword)


@app.get("/api/v1/trends/top", response_model=List[TrendingSearch], tags=["Trends"])
async def get_top_trends(
    geo: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=50),
    trends: TrendsClientProtocol = Depends(get_trends_client),
):
    return await trends.get_top_trends_with_keywords(geo, limit)


# ====================
# Main Entry Point
# ====================


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.trend_campaign_service.main:app",
        host=settings.service_host,
        port=SERVICE_PORT,
        reload=settings.debug,
        log_level=settings.logging.log_level.lower(),
    )


if __name__ == "__main__":
    main()
