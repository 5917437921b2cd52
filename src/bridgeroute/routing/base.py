"""Core data types for bridge routing and quoting."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class QuotePolicy(str, Enum):
    """Preference used to pick a single quote."""

    FASTEST = "fastest"
    CHEAPEST = "cheapest"


class FeeKind(str, Enum):
    MESSAGE = "message"
    PROTOCOL = "protocol"


class StepKind(str, Enum):
    APPROVE = "approve"
    BRIDGE = "bridge"


@dataclass(frozen=True)
class RouteKey:
    """Identity of a route: (src chain, src token) -> (dst chain, dst token).

    Token addresses are compared case-insensitively, chain keys exactly.
    """

    src_chain_key: str
    src_token: str
    dst_chain_key: str
    dst_token: str

    def __post_init__(self):
        object.__setattr__(self, "src_token", self.src_token.lower())
        object.__setattr__(self, "dst_token", self.dst_token.lower())

    def __str__(self) -> str:
        return f"{self.src_chain_key}:{self.src_token} -> {self.dst_chain_key}:{self.dst_token}"


@dataclass(frozen=True)
class Fee:
    """A fee charged by a route, in base units of ``token_address``."""

    token_address: str
    amount: int
    kind: FeeKind
    chain_key: str


@dataclass(frozen=True)
class TransactionStep:
    """An unsigned transaction the wallet must send, in execution order."""

    kind: StepKind
    target_contract: str
    call_data: str
    native_value: Optional[int] = None
    chain_key: Optional[str] = None
    sender: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "chain_key": self.chain_key,
            "sender": self.sender,
            "target_contract": self.target_contract,
            "call_data": self.call_data,
            "native_value": str(self.native_value) if self.native_value is not None else None,
        }


@dataclass(frozen=True)
class Quote:
    """A normalized bridge quote. Amounts are integers in base units."""

    route_label: str  # e.g. "stargate/v2/taxi"
    src_amount: int
    dst_amount: int
    dst_amount_min: int
    estimated_duration_seconds: int
    fees: tuple[Fee, ...] = ()
    steps: tuple[TransactionStep, ...] = ()
    src_chain_key: Optional[str] = None
    dst_chain_key: Optional[str] = None
    src_token: Optional[str] = None
    dst_token: Optional[str] = None

    def __post_init__(self):
        amounts = (self.src_amount, self.dst_amount, self.dst_amount_min)
        if any(amount < 0 for amount in amounts):
            raise ValueError(f"Quote amounts must be non-negative: {amounts}")
        if self.dst_amount_min > self.dst_amount:
            raise ValueError(
                f"dst_amount_min ({self.dst_amount_min}) exceeds dst_amount ({self.dst_amount})"
            )

    @property
    def total_fee(self) -> int:
        """Sum of all fee amounts in base units.

        Fees may be denominated in different tokens, so this is only an
        approximation of cost when they are.
        """
        return sum(fee.amount for fee in self.fees)

    @property
    def approval_steps(self) -> list[TransactionStep]:
        return [step for step in self.steps if step.kind == StepKind.APPROVE]

    @property
    def requires_approval(self) -> bool:
        return bool(self.approval_steps)

    @property
    def bridge_step(self) -> Optional[TransactionStep]:
        """The final bridge transaction, if the quote has one."""
        for step in reversed(self.steps):
            if step.kind == StepKind.BRIDGE:
                return step
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary (amounts as strings)."""
        return {
            "route": self.route_label,
            "src_chain_key": self.src_chain_key,
            "dst_chain_key": self.dst_chain_key,
            "src_token": self.src_token,
            "dst_token": self.dst_token,
            "src_amount": str(self.src_amount),
            "dst_amount": str(self.dst_amount),
            "dst_amount_min": str(self.dst_amount_min),
            "estimated_duration_seconds": self.estimated_duration_seconds,
            "fees": [
                {
                    "token": fee.token_address,
                    "amount": str(fee.amount),
                    "kind": fee.kind.value,
                    "chain_key": fee.chain_key,
                }
                for fee in self.fees
            ],
            "steps": [step.to_dict() for step in self.steps],
        }


@dataclass
class QuoteRequest:
    """Parameters for a real transfer quote."""

    src_chain_key: str
    dst_chain_key: str
    src_token: str
    dst_token: str
    amount: Union[str, Decimal]  # human-readable, e.g. "1.5"
    src_address: str
    dst_address: str
    slippage: Optional[Union[str, float, Decimal]] = None  # None = settings default
    src_decimals: Optional[int] = None
    dst_decimals: Optional[int] = None

    @property
    def route_key(self) -> RouteKey:
        return RouteKey(
            src_chain_key=self.src_chain_key,
            src_token=self.src_token,
            dst_chain_key=self.dst_chain_key,
            dst_token=self.dst_token,
        )


@dataclass(frozen=True)
class SupportedToken:
    """A token that can be bridged between a pair of chains."""

    symbol: str
    src_address: str
    dst_address: str


@dataclass(frozen=True)
class BridgePair:
    """One direction of a bridgeable token between two chains."""

    symbol: str
    src_chain_key: str
    dst_chain_key: str
    src_address: str
    dst_address: str


@dataclass(frozen=True)
class FeeEstimate:
    """Fee breakdown of the provider's preferred quote, in base units."""

    message_fee: int
    protocol_fee: int
    fees: tuple[Fee, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return self.message_fee + self.protocol_fee
