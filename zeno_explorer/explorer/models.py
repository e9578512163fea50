"""
Summary models produced by the chain data adapter.

Each model has a documented zero-valued default so callers never see a
partial shape, and to_dict() renders the camelCase keys the dashboard reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

SLO_TARGET = 99.9
ZERO_MAGNITUDE = "0.00B"


@dataclass(frozen=True)
class ChainSummary:
    total_supply: str = ZERO_MAGNITUDE
    circulating_supply: str = ZERO_MAGNITUDE
    current_epoch: int = 0
    current_slot: int = 0
    block_height: int = 0
    is_healthy: bool = False

    @classmethod
    def offline(cls) -> "ChainSummary":
        """All-zero, unhealthy summary used when the node cannot be reached."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSupply": self.total_supply,
            "circulatingSupply": self.circulating_supply,
            "currentEpoch": self.current_epoch,
            "currentSlot": self.current_slot,
            "blockHeight": self.block_height,
            "isHealthy": self.is_healthy,
        }


@dataclass(frozen=True)
class TransactionSummary:
    signature: str
    slot: int
    timestamp: int | None
    success: bool
    fee: int
    instruction_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "signature": self.signature,
            "slot": self.slot,
            "timestamp": self.timestamp,
            "success": self.success,
            "fee": self.fee,
            "instructionCount": self.instruction_count,
        }


@dataclass(frozen=True)
class BlockSummary:
    slot: int
    hash: str
    timestamp: int | None
    transaction_count: int
    parent_slot: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "slot": self.slot,
            "hash": self.hash,
            "timestamp": self.timestamp,
            "transactionCount": self.transaction_count,
            "parentSlot": self.parent_slot,
        }


@dataclass(frozen=True)
class AddressSummary:
    address: str
    balance: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"address": self.address, "balance": float(self.balance)}


@dataclass(frozen=True)
class UptimePoint:
    time: int
    uptime: float

    def to_dict(self) -> dict[str, Any]:
        return {"time": self.time, "uptime": self.uptime}


@dataclass(frozen=True)
class ValidatorSummary:
    epoch: int = 0
    total_validators: int = 0
    active_validators: int = 0
    delinquent_validators: int = 0
    total_staked: Decimal = Decimal(0)
    percent_of_supply: float = 0.0
    current_uptime: float = 0.0
    slo_met: bool = False
    slo_target: float = SLO_TARGET
    incident_count: int = 0
    avg_response_ms: int = 0
    uptime_history: tuple[UptimePoint, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "ValidatorSummary":
        return cls()

    @property
    def all_active_healthy(self) -> bool:
        return self.total_validators > 0 and self.delinquent_validators == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "epoch": self.epoch,
            "totalValidators": self.total_validators,
            "activeValidators": self.active_validators,
            "delinquentValidators": self.delinquent_validators,
            "allActiveHealthy": self.all_active_healthy,
            "totalStaked": float(self.total_staked),
            "percentOfSupply": self.percent_of_supply,
            "currentUptime": self.current_uptime,
            "sloMet": self.slo_met,
            "sloTarget": self.slo_target,
            "incidentCount": self.incident_count,
            "avgResponseMs": self.avg_response_ms,
            "uptimeHistory": [p.to_dict() for p in self.uptime_history],
        }


@dataclass(frozen=True)
class PriceSummary:
    # No price oracle is wired in; price fields stay 0.
    price: float = 0.0
    price_change: float = 0.0
    avg_fee: float = 0.0
    tps: float = 0.0

    @classmethod
    def empty(cls) -> "PriceSummary":
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": self.price,
            "priceChange": self.price_change,
            "avgFee": self.avg_fee,
            "tps": self.tps,
        }
