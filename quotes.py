import json, time, asyncio, logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import aiohttp

from log_setup import LOGGER_NAME

log = logging.getLogger(LOGGER_NAME)

# ---------- API ----------
PRICE_URL = "https://api.binance.com/api/v3/ticker/price?symbol={symbol}USDT"
QUOTE_ASSET = "USDT"
LOADING_TEXT = "Loading..."

SymbolQuoteFetcher = Callable[[str], Awaitable[str]]


class QuoteFetchError(Exception):
    pass


def price_url(symbol: str) -> str:
    return PRICE_URL.format(symbol=symbol)

def trim_price(raw: str) -> str:
    """Drop trailing zeros of the fractional part, then a dangling point.

    Integer digits are never touched: "100" stays "100".
    """
    if "." not in raw:
        return raw
    trimmed = raw.rstrip("0")
    if trimmed.endswith("."):
        trimmed = trimmed[:-1]
    return trimmed

def describe_error(e: BaseException) -> str:
    return str(e) or type(e).__name__


@dataclass(frozen=True)
class QuoteResult:
    symbol: str
    price: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, symbol: str, raw_price: str) -> "QuoteResult":
        return cls(symbol, price=trim_price(raw_price))

    @classmethod
    def failure(cls, symbol: str, error: str) -> "QuoteResult":
        return cls(symbol, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def display(self) -> str:
        if not self.ok:
            return f"Error: {self.error}"
        return f"{self.symbol}/{QUOTE_ASSET}: {self.price}"


class BinanceFetcher:
    """One GET per call against the ticker price endpoint, through a shared session."""

    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    async def __call__(self, symbol: str) -> str:
        url = price_url(symbol)
        try:
            async with self.session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    txt = await resp.text()
                    raise QuoteFetchError(f"HTTP {resp.status}: {_error_message(txt)}")
                payload = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise QuoteFetchError(describe_error(e)) from e
        return extract_price(payload)


def _error_message(txt: str) -> str:
    try:
        body = json.loads(txt)
    except ValueError:
        return txt[:200]
    if isinstance(body, dict) and body.get("msg"):
        return str(body["msg"])
    return txt[:200]

def extract_price(payload: Any) -> str:
    if not isinstance(payload, dict):
        raise QuoteFetchError(f"unexpected payload: {type(payload).__name__}")
    price = payload.get("price")
    if price is None:
        raise QuoteFetchError("missing 'price' field")
    if not isinstance(price, str):
        raise QuoteFetchError(f"malformed price: {price!r}")
    try:
        float(price)
    except ValueError:
        raise QuoteFetchError(f"malformed price: {price!r}") from None
    return price


async def refresh_all(symbols: Sequence[str], fetch: SymbolQuoteFetcher) -> Dict[str, QuoteResult]:
    """Fetch every symbol concurrently and return once all of them are done.

    A failing symbol yields an error result and never affects the others.
    Duplicate symbols are fetched once and share a slot.
    """
    async def one(symbol: str) -> QuoteResult:
        try:
            raw = await fetch(symbol)
            return QuoteResult.success(symbol, raw)
        except Exception as e:
            log.warning("Quote failed | %s: %s", symbol, describe_error(e))
            return QuoteResult.failure(symbol, describe_error(e))

    t0 = time.monotonic()
    unique = list(dict.fromkeys(symbols))
    results = await asyncio.gather(*[one(s) for s in unique])
    output = {r.symbol: r for r in results}
    ok = sum(1 for r in results if r.ok)
    log.info("Refresh done | %d/%d ok in %.2fs", ok, len(unique), time.monotonic() - t0)
    return output

def display_rows(symbols: Sequence[str], output: Dict[str, QuoteResult]) -> List[str]:
    rows = []
    for s in symbols:
        res = output.get(s)
        rows.append(res.display if res else LOADING_TEXT)
    return rows
