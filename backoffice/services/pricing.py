"""Selling-price calculator built on recipe cost."""

from dataclasses import dataclass

from backoffice.config import get_settings


@dataclass(frozen=True)
class PriceQuote:
    cost: float
    markup_factor: float
    suggested_price: float
    final_price: float
    profit_margin_pct: float
    markup_pct: float
    low_margin: bool


def suggested_price(cost: float, markup_factor: float) -> float:
    """Cost times markup, e.g. 10 at 2.5x suggests 25."""
    return cost * markup_factor


def profit_margin_pct(price: float, cost: float) -> float:
    """(price - cost) / price as a percentage; 0 when there is no price."""
    if price <= 0:
        return 0.0
    return (price - cost) / price * 100


def markup_pct(price: float, cost: float) -> float:
    """(price - cost) / cost as a percentage; 0 when there is no cost."""
    if cost <= 0:
        return 0.0
    return (price - cost) / cost * 100


def quote(
    cost: float,
    markup_factor: float | None = None,
    sell_price: float | None = None,
) -> PriceQuote:
    """Price a dish from its cost.

    A missing or non-positive markup uses the configured default; a custom
    ``sell_price`` overrides the suggested price.
    """
    settings = get_settings()
    factor = markup_factor if markup_factor and markup_factor > 0 else settings.default_markup_factor
    suggested = suggested_price(cost, factor)
    final = sell_price if sell_price is not None and sell_price > 0 else suggested
    margin = profit_margin_pct(final, cost)
    return PriceQuote(
        cost=round(cost, 2),
        markup_factor=factor,
        suggested_price=round(suggested, 2),
        final_price=round(final, 2),
        profit_margin_pct=round(margin, 1),
        markup_pct=round(markup_pct(final, cost), 1),
        low_margin=margin < settings.low_margin_threshold,
    )
