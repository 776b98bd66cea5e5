from .client import GraphQLError, MarketDataClient
from .models import PriceQuote, TokenMeta

__all__ = [
    "MarketDataClient",
    "GraphQLError",
    "PriceQuote",
    "TokenMeta",
]
