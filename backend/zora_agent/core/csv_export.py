"""CSV Export — renders analytics cards as a downloadable CSV document.

Invariants:
    - First line is always CSV_HEADER, even for an empty card list
    - Text fields are double-quoted; embedded quotes are doubled ("" escaping)
    - Numbers and the trending flag are written unquoted; whole numbers carry
      no decimal part (1500, not 1500.0)
    - Rows are joined with "\n" and the last row has no trailing newline
"""

from zora_agent.core.entities import AnalyticsCard

CSV_HEADER = (
    "Artist", "Collection", "Platform", "Market Cap", "Volume 24h",
    "Followers", "Smart Followers", "Risk Level", "Trending",
    "AI Recommendation",
)
CSV_FILENAME = "nft-analytics.csv"


def _text(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _row(card: AnalyticsCard) -> str:
    m = card.metrics
    return ",".join((
        _text(card.artist.display_name),
        _text(card.collection.name),
        _text(card.collection.platform.value),
        _number(m.market_cap),
        _number(m.volume_24h),
        _number(m.followers),
        _number(m.smart_followers),
        _text(card.risk_level.value),
        "true" if card.trending else "false",
        _text(card.ai_recommendation),
    ))


def cards_to_csv(cards: list[AnalyticsCard]) -> str:
    header = ",".join(CSV_HEADER) + "\n"
    return header + "\n".join(_row(c) for c in cards)
