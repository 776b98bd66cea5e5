from __future__ import annotations

from pydantic import BaseModel


class PriceQuote(BaseModel):
    id: str
    value: float | None = None

    @property
    def is_usable(self) -> bool:
        return self.value is not None and self.value > 0


class AssetInfo(BaseModel):
    decimals: int


class PriceLink(BaseModel):
    priceId: str


class TokenMeta(BaseModel):
    id: str
    contractAddress: str
    symbol: str
    Asset: AssetInfo
    PriceToken: list[PriceLink] | None = None

    @property
    def decimals(self) -> int:
        return self.Asset.decimals

    @property
    def price_ids(self) -> set[str]:
        return {p.priceId for p in self.PriceToken or []}
