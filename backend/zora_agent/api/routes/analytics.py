"""Analytics Routes — dashboard, card queries, aggregates and pro features.

Invariants:
    - Every route is rate limited per client IP (router-level dependency)
    - Tier comes from the session user; routes never redact or filter themselves
    - Invalid query values (unknown sort key, negative offset, limit < 1) → 400
    - GET /analytics answers JSON when Accept includes application/json, else HTML

Design Decisions:
    - Thin routes delegate to AnalyticsService (impureim sandwich)
    - Filter query parameters parsed once by the card_filters dependency
"""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from zora_agent.api.dependencies import (
    access_tier, current_user, enforce_rate_limit, get_container,
)
from zora_agent.api.templating import render
from zora_agent.core.card_query import CardFilters
from zora_agent.core.csv_export import CSV_FILENAME
from zora_agent.core.domain_types import AccessTier, Platform, RiskLevel, SortKey
from zora_agent.core.entities import User
from zora_agent.schemas.analytics import (
    AdvancedSearchRequest, CardListResponse, DashboardResponse, SearchResponse,
)
from zora_agent.services.container import AppContainer

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
    dependencies=[Depends(enforce_rate_limit)],
)


def card_filters(
    platform: str | None = None,
    risk: str | None = None,
    trending: bool = False,
    sort: SortKey | None = None,
    search: str | None = Query(None, max_length=200),
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
) -> CardFilters:
    return CardFilters(
        platform=platform,
        risk=risk,
        trending=trending,
        search=search,
        sort_by=sort,
        limit=limit,
        offset=offset,
    )


def _cards_json(cards) -> list[dict]:
    return [c.to_json_dict() for c in cards]


# ─── Dashboard ───────────────────────────────────────────────────

@router.get("")
async def dashboard(
    request: Request,
    filters: CardFilters = Depends(card_filters),
    user: User | None = Depends(current_user),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    """Dashboard page, or its data as JSON for Accept: application/json."""
    page = container.analytics.list_cards(tier, filters)
    aggregates = container.analytics.dashboard_stats()
    if "application/json" in request.headers.get("accept", ""):
        return DashboardResponse(
            cards=page.cards,
            total=page.total,
            stats=aggregates["stats"],
            platform_stats=aggregates["platformStats"],
            risk_distribution=aggregates["riskDistribution"],
            is_pro=tier is AccessTier.PRO,
            tier=tier,
            filters=filters.as_dict(),
        ).to_json_dict()
    return render(request, "analytics.html", {
        "cards": _cards_json(page.cards),
        "total": page.total,
        "limit": page.limit,
        "offset": page.offset,
        "filters": filters.as_dict(),
        "platforms": [p.value for p in Platform],
        "risk_levels": [r.value for r in RiskLevel],
        "sort_keys": [s.value for s in SortKey],
        "guest_mode": request.query_params.get("guest") == "true",
        "switched": request.query_params.get("switched") == "true",
        **aggregates,
    }, user=user)


# ─── Card queries ────────────────────────────────────────────────

@router.get("/cards")
async def list_cards(
    filters: CardFilters = Depends(card_filters),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    page = container.analytics.list_cards(tier, filters)
    return CardListResponse.from_page(page, tier, filters).to_json_dict()


@router.get("/cards/{card_id}")
async def get_card(
    card_id: str,
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    return {"card": container.analytics.get_card(card_id, tier).to_json_dict()}


@router.get("/trending")
async def trending(
    limit: int = Query(8, ge=1),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    cards = container.analytics.trending(tier, limit)
    return {"cards": _cards_json(cards), "count": len(cards)}


@router.get("/search")
async def search(
    q: str | None = Query(None, max_length=200),
    limit: int | None = Query(None, ge=1),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    page = container.analytics.search(q, tier, limit)
    return SearchResponse(
        query=q.strip(),
        results=page.cards,
        count=len(page.cards),
        total=page.total,
    ).to_json_dict()


@router.get("/top-performers")
async def top_performers(
    limit: int = Query(5, ge=1),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    cards = container.analytics.top_performers(tier, limit)
    return {"cards": _cards_json(cards), "count": len(cards)}


@router.get("/recently-added")
async def recently_added(
    limit: int = Query(5, ge=1),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    cards = container.analytics.recently_added(tier, limit)
    return {"cards": _cards_json(cards), "count": len(cards)}


# ─── Aggregates (all tiers) ──────────────────────────────────────

@router.get("/market-stats")
async def market_stats(container: AppContainer = Depends(get_container)):
    return container.analytics.market_stats()


@router.get("/platform-stats")
async def platform_stats(container: AppContainer = Depends(get_container)):
    return container.analytics.platform_stats()


@router.get("/risk-distribution")
async def risk_distribution(container: AppContainer = Depends(get_container)):
    return container.analytics.risk_distribution()


@router.get("/weekly-performance")
async def weekly_performance(container: AppContainer = Depends(get_container)):
    return container.analytics.weekly_performance()


# ─── Pro features ────────────────────────────────────────────────

@router.get("/export")
async def export_csv(
    filters: CardFilters = Depends(card_filters),
    user: User | None = Depends(current_user),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    body = container.analytics.export_csv(tier, filters)
    logger.info("CSV export served", extra={"user_id": user.id if user else None})
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
    )


@router.post("/advanced-search")
async def advanced_search(
    body: AdvancedSearchRequest,
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    filters = body.to_filters()
    page = container.analytics.advanced_search(tier, filters, body.to_criteria())
    return CardListResponse.from_page(page, tier, filters).to_json_dict()


@router.get("/cards/{card_id}/history")
async def card_history(
    card_id: str,
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    return container.analytics.history(card_id, tier)


@router.get("/recommendations")
async def recommendations(
    limit: int = Query(5, ge=1),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    ranked = container.analytics.recommendations(tier, limit)
    return {
        "recommendations": [
            {**r, "card": r["card"].to_json_dict()} for r in ranked
        ],
        "count": len(ranked),
    }


@router.get("/compare")
async def compare(
    ids: str = Query("", description="Comma-separated card ids"),
    tier: AccessTier = Depends(access_tier),
    container: AppContainer = Depends(get_container),
):
    card_ids = [i.strip() for i in ids.split(",") if i.strip()]
    result = container.analytics.compare(card_ids, tier)
    return {**result, "cards": _cards_json(result["cards"])}
