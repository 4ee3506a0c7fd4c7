"""
Core data types for swap reconstruction and reverse-quote analysis.

All types are immutable plain data; every analysis step returns new values
instead of mutating its inputs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from sequential_arbitrage.constants import NATIVE_CURRENCY, NATIVE_ISSUER_LABEL
from sequential_arbitrage.utils import iso_to_timestamp


@dataclass(frozen=True)
class Asset:
    """
    A ledger asset.

    Attributes:
        currency: Currency code ("XRP" for the native currency)
        issuer: Issuing account, always None for the native currency
    """

    currency: str
    issuer: Optional[str] = None

    @classmethod
    def of(cls, currency: str, issuer: Optional[str] = None) -> "Asset":
        """Build an asset, dropping the issuer of the native currency."""
        if currency == NATIVE_CURRENCY:
            return cls(currency=currency, issuer=None)
        return cls(currency=currency, issuer=issuer)

    @property
    def is_native(self) -> bool:
        return self.currency == NATIVE_CURRENCY

    @property
    def price_key(self) -> str:
        """Key into a price table, "<currency>-<issuer>"."""
        return f"{self.currency}-{self.issuer}"

    @property
    def sort_key(self) -> Tuple[str, int, str]:
        # None issuer sorts before any issuer
        if self.issuer is None:
            return (self.currency, 0, "")
        return (self.currency, 1, self.issuer)

    def label(self) -> str:
        return f"{self.currency}-{self.issuer or NATIVE_ISSUER_LABEL}"

    def to_dict(self) -> Dict[str, Any]:
        return {"currency": self.currency, "issuer": self.issuer}


def pair_key(asset_a: Asset, asset_b: Asset) -> str:
    """
    Canonical, order-independent identity for two assets.

    Examples:
        >>> pair_key(Asset.of("USD", "rB"), Asset.of("XRP"))
        'USD-rB→XRP-XRP'
    """
    canonical = (
        Asset.of(asset_a.currency, asset_a.issuer),
        Asset.of(asset_b.currency, asset_b.issuer),
    )
    first, second = sorted(canonical, key=lambda asset: asset.sort_key)
    return f"{first.label()}→{second.label()}"


@dataclass(frozen=True)
class Swap:
    """
    A single executed exchange extracted from one payment.

    Attributes:
        hash: Transaction hash
        date: ISO 8601 execution time (UTC)
        c1, i1, v1: Sent currency, issuer and amount
        c2, i2, v2: Received currency, issuer and amount
    """

    hash: Optional[str]
    date: str
    c1: str
    i1: Optional[str]
    v1: float
    c2: str
    i2: Optional[str]
    v2: float

    @property
    def sent_asset(self) -> Asset:
        return Asset.of(self.c1, self.i1)

    @property
    def received_asset(self) -> Asset:
        return Asset.of(self.c2, self.i2)

    @property
    def pair_key(self) -> str:
        return pair_key(self.sent_asset, self.received_asset)

    @property
    def ratio(self) -> float:
        return self.v2 / self.v1

    @property
    def timestamp(self) -> float:
        return iso_to_timestamp(self.date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash": self.hash,
            "date": self.date,
            "c1": self.c1,
            "i1": self.i1,
            "v1": self.v1,
            "c2": self.c2,
            "i2": self.i2,
            "v2": self.v2,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Swap":
        return cls(
            hash=data.get("hash"),
            date=data["date"],
            c1=data["c1"],
            i1=data.get("i1"),
            v1=float(data["v1"]),
            c2=data["c2"],
            i2=data.get("i2"),
            v2=float(data["v2"]),
        )


@dataclass(frozen=True)
class SwapGroup:
    """
    All swaps sharing one pair key, newest first.

    Attributes:
        asset1: Sent asset of the first swap seen for this pair
        asset2: Received asset of the first swap seen for this pair
        swaps: Swaps sorted by date, newest first
    """

    asset1: Asset
    asset2: Asset
    swaps: Tuple[Swap, ...] = ()

    @property
    def pair_key(self) -> str:
        return pair_key(self.asset1, self.asset2)

    @property
    def contains_native(self) -> bool:
        return self.asset1.is_native or self.asset2.is_native

    def is_asset1_to_asset2(self, swap: Swap) -> bool:
        """True when the swap sends asset1 and receives asset2."""
        return swap.sent_asset == self.asset1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asset1": self.asset1.to_dict(),
            "asset2": self.asset2.to_dict(),
            "swaps": [swap.to_dict() for swap in self.swaps],
        }


@dataclass(frozen=True)
class Position:
    """
    The open leg of a pair: the newest run of same-direction swaps.

    Attributes:
        asset1, asset2: The group's assets
        total_asset1: Accumulated asset1 amount over the run
        total_asset2: Accumulated asset2 amount over the run
        asset1_to_asset2: Direction of the run
        swap_count: Number of swaps in the run
        date: Date of the newest swap in the run
    """

    asset1: Asset
    asset2: Asset
    total_asset1: float
    total_asset2: float
    asset1_to_asset2: bool
    swap_count: int
    date: str

    @property
    def sent_asset(self) -> Asset:
        return self.asset1 if self.asset1_to_asset2 else self.asset2

    @property
    def received_asset(self) -> Asset:
        return self.asset2 if self.asset1_to_asset2 else self.asset1

    def as_swap(self) -> Swap:
        """Swap-shaped view of the position, as priced by the quote engine."""
        sent, received = self.sent_asset, self.received_asset
        if self.asset1_to_asset2:
            sent_amount, received_amount = self.total_asset1, self.total_asset2
        else:
            sent_amount, received_amount = self.total_asset2, self.total_asset1
        return Swap(
            hash=None,
            date=self.date,
            c1=sent.currency,
            i1=sent.issuer,
            v1=sent_amount,
            c2=received.currency,
            i2=received.issuer,
            v2=received_amount,
        )


@dataclass(frozen=True)
class PoolReserves:
    """
    AMM reserves oriented for reversing a swap.

    Attributes:
        pool1: Reserve of the asset received back (the swap's sent asset)
        pool2: Reserve of the asset being sold (the swap's received asset)
    """

    pool1: float
    pool2: float


@dataclass(frozen=True)
class ReverseQuote:
    """
    Estimated result of unwinding a swap or position right now.

    Attributes:
        reverse_amount: Amount of the original asset obtained by reversing
        original_amount: Amount originally sent
        original_currency, original_issuer: Asset originally sent
        received_amount: Amount originally received (sold back when reversing)
        received_currency, received_issuer: Asset originally received
        profit_loss: reverse_amount - original_amount
        profit_percent: profit_loss / original_amount * 100
        is_profit: profit_loss > 0
    """

    reverse_amount: float
    original_amount: float
    original_currency: str
    received_amount: float
    received_currency: str
    profit_loss: float
    profit_percent: float
    is_profit: bool
    original_issuer: Optional[str] = None
    received_issuer: Optional[str] = None

    @property
    def original_asset(self) -> Asset:
        return Asset.of(self.original_currency, self.original_issuer)

    @property
    def received_asset(self) -> Asset:
        return Asset.of(self.received_currency, self.received_issuer)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reverseAmount": self.reverse_amount,
            "originalAmount": self.original_amount,
            "originalCurrency": self.original_currency,
            "originalIssuer": self.original_issuer,
            "receivedAmount": self.received_amount,
            "receivedCurrency": self.received_currency,
            "receivedIssuer": self.received_issuer,
            "profitLoss": self.profit_loss,
            "profitPercent": self.profit_percent,
            "isProfit": self.is_profit,
        }


@dataclass(frozen=True)
class ArbitrageChainLink:
    """
    A swap group annotated with its reverse quote and hop direction.

    Attributes:
        index: Position of the group among the visible groups
        group: Source swap group
        pair_key: Canonical key of the group
        reverse_quote: Quote for the group, None when unavailable
        from_currency, from_issuer: Asset spent by this hop
        to_currency, to_issuer: Asset obtained by this hop
        profit_percent: Quote profit percentage (0 without a quote)
        is_profitable: Quote present, in profit and at or above threshold
    """

    index: int
    group: SwapGroup
    pair_key: str
    reverse_quote: Optional[ReverseQuote]
    from_currency: str
    from_issuer: Optional[str]
    to_currency: str
    to_issuer: Optional[str]
    profit_percent: float
    is_profitable: bool

    @property
    def from_asset(self) -> Asset:
        return Asset.of(self.from_currency, self.from_issuer)

    @property
    def to_asset(self) -> Asset:
        return Asset.of(self.to_currency, self.to_issuer)

    @property
    def currency_pair(self) -> Tuple[str, str]:
        """Direction- and issuer-agnostic identity of the hop."""
        return tuple(sorted((self.from_currency, self.to_currency)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "pairKey": self.pair_key,
            "fromCurrency": self.from_currency,
            "fromIssuer": self.from_issuer,
            "toCurrency": self.to_currency,
            "toIssuer": self.to_issuer,
            "profitPercent": self.profit_percent,
            "isProfitable": self.is_profitable,
            "reverseQuote": self.reverse_quote.to_dict() if self.reverse_quote else None,
        }


@dataclass(frozen=True)
class ArbitrageChain:
    """A contiguous sequence of profitable reversals, ranked by total profit."""

    pairs: Tuple[ArbitrageChainLink, ...]
    total_profit_percent: float
    chain_path: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pairs": [link.to_dict() for link in self.pairs],
            "totalProfitPercent": self.total_profit_percent,
            "chainPath": self.chain_path,
        }


@dataclass(frozen=True)
class PairSummary:
    """
    Whole-history summary of one pair.

    Attributes:
        net_asset1: Net asset1 flow (received minus sent)
        net_asset2: Net asset2 flow (received minus sent)
        has_complete_cycle: Both directions traded at least once
        realized_profit_asset1: max(0, net_asset1) when the cycle is complete
        realized_profit_asset2: max(0, net_asset2) when the cycle is complete
    """

    net_asset1: float
    net_asset2: float
    has_complete_cycle: bool
    realized_profit_asset1: float = 0.0
    realized_profit_asset2: float = 0.0


@dataclass(frozen=True)
class TokenBalance:
    """Net balance change of one token across all visible swaps."""

    asset: Asset
    balance: float

    def to_dict(self) -> Dict[str, Any]:
        return {**self.asset.to_dict(), "balance": self.balance}


@dataclass
class AnalysisResult:
    """Everything one analysis pass produces."""

    swaps: List[Swap] = field(default_factory=list)
    groups: List[SwapGroup] = field(default_factory=list)
    quotes: Dict[str, Optional[ReverseQuote]] = field(default_factory=dict)
    chains: List[ArbitrageChain] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "swaps": [swap.to_dict() for swap in self.swaps],
            "groups": [group.to_dict() for group in self.groups],
            "quotes": {
                key: quote.to_dict() if quote else None
                for key, quote in self.quotes.items()
            },
            "chains": [chain.to_dict() for chain in self.chains],
        }
