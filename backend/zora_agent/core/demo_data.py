"""Demo Data — deterministic seed dataset and card construction from market data.

Invariants:
    - generate_demo_cards(seed=s) returns the same cards for the same seed and clock
    - Card ids are stable: "card_<n>" for seed data, "zora_<collection id>" for refreshed data
    - Metrics scale with risk and trending status (riskier / trending -> larger, more volatile)
    - Randomness only through the injected random.Random — no module-level RNG state
"""

import random
import re
from datetime import datetime, timedelta

from zora_agent.core.domain_types import Platform, RiskLevel
from zora_agent.core.entities import (
    AnalyticsCard, Artist, CardMetrics, Collection, MarketCollection, utc_now,
)

DEMO_CARD_COUNT = 50
DEMO_SEED = 20240601

ARTIST_NAMES = (
    "CryptoArtist", "NeonWave Studio", "PixelMaster", "Abstract Forms",
    "AI Artist Collective", "Ethereal Visions", "Urban Canvas", "Less is More",
    "Digital Dreams", "Synth Aesthetics", "Quantum Creator", "Vintage Future",
    "Glitch Poet", "Cyber Monk", "Neural Artist", "Data Sculptor",
    "Code Painter", "Blockchain Muse", "Crypto Picasso", "NFT Wizard",
    "Meta Artist", "Web3 Creator", "Onchain Visionary", "Decentralized Studio",
    "Token Artist", "Smart Contract Art", "DeFi Designer", "DAO Creator",
    "Protocol Artist", "Layer2 Labs", "Zora Native", "Foundation Fellow",
    "SuperRare Sage", "Fxhash Phoenix", "Manifold Maker", "Async Artist",
    "KnownOrigin King", "OpenSea Oracle", "Rarible Rebel", "MakersPlace Master",
    "Mintable Muse", "Nifty Gateway Ninja", "Portion Pioneer", "Atomic Artist",
    "Viv3 Visionary", "Tezos Talent", "Solana Sculptor", "Polygon Painter",
    "Ethereum Executor", "BSC Builder",
)

COLLECTION_NAMES = (
    "Digital Dreams", "Synthwave Collection", "Retro Pixels",
    "Geometric Harmony", "Machine Dreams", "Dreamscape Series",
    "City Walls Digital", "Minimal Expressions", "Neon Nights", "Cyber Punk",
    "Abstract Reality", "Future Nostalgia", "Glitch Art Series",
    "Neural Networks", "Data Visualization", "Algorithmic Beauty",
    "Generative Art", "Procedural Worlds", "AI Compositions", "Code Art",
    "Smart Contracts", "Blockchain Stories", "Crypto Portraits",
    "NFT Landscapes", "Digital Souls", "Virtual Galleries",
    "Metaverse Memories", "Decentralized Dreams", "Token Tales", "Web3 Wonders",
    "Onchain Chronicles", "Layer2 Legends", "Protocol Paintings", "DAO Designs",
    "DeFi Drawings", "Yield Farming Art", "Liquidity Pool Landscapes",
    "AMM Abstracts", "Bridge Blueprints", "Oracle Oracles",
    "Consensus Creations", "Fork Fantasies", "Merge Masterpieces",
    "Rollup Renderings", "Shard Sculptures", "Hash Harmony", "Block Beauties",
    "Chain Chronicles", "Node Narratives", "Mining Murals",
)

AI_RECOMMENDATIONS = (
    "Strong momentum with growing follower base and increasing trading volume. Consider watching for next drop.",
    "Early stage growth detected with smart money accumulation. High potential but monitor risk levels.",
    "Consolidation phase after recent gains. Good entry point for long-term positions.",
    "VIRAL ALERT! Massive follower spike and volume growth. High risk but potential for significant returns.",
    "Cross-platform momentum building with institutional interest. Strong fundamentals.",
    "Market correction phase. Watch for support levels and accumulation patterns.",
    "Emerging talent with strong community support. Early growth opportunity with medium risk.",
    "Street art crossover appeal attracting mainstream collectors. Stable growth trajectory.",
    "Minimalist aesthetic gaining traction among serious collectors. Timeless appeal.",
    "AI-generated content showing experimental promise. High volatility expected.",
    "Established artist with consistent performance. Low risk, steady returns.",
    "New artist breakthrough with rapid community adoption. Monitor closely.",
    "Technical innovation driving collector interest. Strong technical fundamentals.",
    "Community-driven project with DAO governance. Social signals very positive.",
    "Whale accumulation detected through on-chain analysis.",
    "Social sentiment analysis indicating positive momentum.",
)

TAG_SETS = (
    ("trending", "early-growth", "digital-art"),
    ("synthwave", "established", "music-art"),
    ("viral", "pixel-art", "breakout"),
    ("geometric", "abstract", "premium"),
    ("ai-generated", "experimental", "high-volume"),
    ("dreamy", "surreal", "emerging"),
    ("street-art", "urban", "crossover"),
    ("minimalist", "clean", "timeless"),
    ("cyberpunk", "neon", "futuristic"),
    ("generative", "algorithmic", "procedural"),
    ("glitch", "error", "digital-noise"),
    ("neural", "ai", "machine-learning"),
    ("3d", "rendering", "virtual"),
    ("animated", "gif", "motion"),
    ("interactive", "utility", "gaming"),
    ("profile-picture", "avatar", "identity"),
    ("retro", "vintage", "nostalgia"),
    ("exclusive", "limited", "rare"),
    ("collaborative", "community", "social"),
    ("colorful", "vibrant", "saturated"),
)

# Short recommendation / tag pools used for cards refreshed from market data
REFRESH_RECOMMENDATIONS = (
    "Strong momentum building. Consider for portfolio diversification.",
    "Early stage growth detected. Monitor for next 48 hours.",
    "Consolidation phase. Good entry point for long-term positions.",
    "High volatility detected. Suitable for experienced traders only.",
    "Community engagement increasing. Social signals positive.",
    "Smart money accumulating. Institutional interest growing.",
)
REFRESH_TAGS = (
    "trending", "early-growth", "established", "viral", "breakout",
    "consolidating",
)

_RISK_MULTIPLIER = {RiskLevel.HIGH: 2.0, RiskLevel.MEDIUM: 1.3, RiskLevel.LOW: 0.8}


def slugify_username(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


def random_contract_address(rng: random.Random) -> str:
    return "0x" + "".join(rng.choice("0123456789abcdef") for _ in range(40))


def pick_risk_level(rng: random.Random) -> RiskLevel:
    roll = rng.random()
    if roll < 0.3:
        return RiskLevel.LOW
    if roll < 0.7:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def _demo_card(index: int, rng: random.Random, now: datetime) -> AnalyticsCard:
    platform = rng.choice(list(Platform))
    risk = rng.choice(list(RiskLevel))
    trending = rng.random() > 0.7
    artist_name = (
        ARTIST_NAMES[index] if index < len(ARTIST_NAMES) else f"Artist {index + 1}"
    )
    collection_name = (
        COLLECTION_NAMES[index] if index < len(COLLECTION_NAMES)
        else f"Collection {index + 1}"
    )
    username = slugify_username(artist_name)
    multiplier = (1.5 if trending else 1.0) * _RISK_MULTIPLIER[risk]

    volume_24h = int((rng.random() * 200_000 + 10_000) * multiplier)
    has_twitter_stats = rng.random() > 0.2
    metrics = CardMetrics(
        market_cap=int((rng.random() * 800_000 + 50_000) * multiplier),
        # slight bullish bias
        market_cap_change_24h=round((rng.random() - 0.3) * 200 * multiplier, 1),
        volume_24h=volume_24h,
        volume_7d=round(volume_24h * (5 + rng.random() * 10), 2),
        followers=int((rng.random() * 15_000 + 500) * multiplier),
        followers_change_24h=int((rng.random() - 0.2) * 500 * multiplier),
        smart_followers=int((rng.random() * 200 + 5) * multiplier),
        twitter_followers=(
            int((rng.random() * 50_000 + 1000) * multiplier)
            if has_twitter_stats else None
        ),
        twitter_followers_change_24h=(
            int((rng.random() - 0.2) * 1000 * multiplier)
            if has_twitter_stats else None
        ),
    )
    return AnalyticsCard(
        id=f"card_{index + 1}",
        artist=Artist(
            username=username,
            display_name=artist_name,
            profile_url=f"https://{platform.value}.co/@{username}",
            twitter_url=(
                f"https://twitter.com/{username}" if rng.random() > 0.3 else None
            ),
        ),
        collection=Collection(
            name=collection_name,
            contract_address=random_contract_address(rng),
            platform=platform,
        ),
        metrics=metrics,
        ai_recommendation=rng.choice(AI_RECOMMENDATIONS),
        tags=list(rng.choice(TAG_SETS)),
        risk_level=risk,
        trending=trending,
        created_at=now - timedelta(seconds=rng.random() * 30 * 24 * 3600),
        updated_at=now - timedelta(seconds=rng.random() * 24 * 3600),
    )


def generate_demo_cards(
    count: int = DEMO_CARD_COUNT,
    seed: int = DEMO_SEED,
    now: datetime | None = None,
) -> list[AnalyticsCard]:
    rng = random.Random(seed)
    now = now or utc_now()
    return [_demo_card(i, rng, now) for i in range(count)]


def build_card_from_collection(
    collection: MarketCollection,
    rng: random.Random,
    now: datetime | None = None,
    existing: AnalyticsCard | None = None,
) -> AnalyticsCard:
    """Card for a trending collection. Keeps created_at of an existing card."""
    now = now or utc_now()
    username = f"artist_{collection.id}"
    volume = collection.volume_24h
    return AnalyticsCard(
        id=f"zora_{collection.id}",
        artist=Artist(
            username=username,
            display_name=f"Artist for {collection.name}",
            profile_url=f"https://zora.co/@{username}",
        ),
        collection=Collection(
            name=collection.name,
            contract_address=collection.address,
            platform=Platform.ZORA,
        ),
        metrics=CardMetrics(
            market_cap=volume * 10,
            market_cap_change_24h=round((rng.random() - 0.5) * 50, 1),
            volume_24h=volume,
            volume_7d=volume * 7,
            followers=rng.randrange(5000),
            followers_change_24h=int((rng.random() - 0.5) * 200),
            smart_followers=rng.randrange(50),
            twitter_followers=rng.randrange(10_000),
            twitter_followers_change_24h=int((rng.random() - 0.5) * 500),
        ),
        ai_recommendation=rng.choice(REFRESH_RECOMMENDATIONS),
        tags=rng.sample(REFRESH_TAGS, rng.randint(1, 3)),
        risk_level=pick_risk_level(rng),
        trending=rng.random() > 0.7,
        created_at=existing.created_at if existing else now,
        updated_at=now,
    )
