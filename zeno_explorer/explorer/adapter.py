"""
Chain data adapter: folds relay calls into fixed-shape dashboard summaries.

Independent calls run concurrently (asyncio.gather); the per-block fetches
wait on the current slot. Every function is total: relay failures read as
None, anything unexpected is logged and the documented zero-valued summary is
returned, so callers never handle exceptions or partial shapes.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

from zeno_explorer.explorer.models import (
    SLO_TARGET,
    BlockSummary,
    ChainSummary,
    PriceSummary,
    TransactionSummary,
    UptimePoint,
    ValidatorSummary,
)
from zeno_explorer.explorer.parsing import (
    as_int,
    format_magnitude,
    lamports_to_tokens,
    parse_block,
    parse_transaction,
    rpc_value,
)
from zeno_explorer.rpc import methods as m
from zeno_explorer.rpc.relay import RpcRelay
from zeno_explorer.zeno_logging import get_logger

logger = get_logger(__name__)

# Blocks fetched per recent-transactions/recent-blocks call, whatever the limit
MAX_RECENT_BLOCKS = 10
DEFAULT_RECENT_LIMIT = 10
# Nominal slot time used to turn performance samples into an uptime percentage
SLOT_DURATION_SEC = 0.4
# Display band for the uptime series
UPTIME_FLOOR = 95.0
UPTIME_CEIL = 100.0


def _recent_slots(current_slot: int, count: int) -> list[int]:
    """Newest-first slots: current, current-1, ... never below 0."""
    return [s for s in range(current_slot, current_slot - count, -1) if s >= 0]


def _sample_uptime(sample: dict[str, Any]) -> float | None:
    """Produced slots over expected slots for one performance sample, in percent."""
    period = sample.get("samplePeriodSecs")
    num_slots = sample.get("numSlots")
    if not isinstance(period, (int, float)) or not isinstance(num_slots, (int, float)):
        return None
    if period <= 0:
        return None
    expected = period / SLOT_DURATION_SEC
    return num_slots / expected * 100.0


def _sample_slot_ms(sample: dict[str, Any]) -> float | None:
    period = sample.get("samplePeriodSecs")
    num_slots = sample.get("numSlots")
    if not isinstance(period, (int, float)) or not isinstance(num_slots, (int, float)):
        return None
    if num_slots <= 0:
        return None
    return period * 1000.0 / num_slots


def _clamp_uptime(value: float) -> float:
    return min(UPTIME_CEIL, max(UPTIME_FLOOR, value))


def _performance_samples(result: Any) -> list[dict[str, Any]]:
    if not isinstance(result, list):
        return []
    return [s for s in result if isinstance(s, dict)]


# -----------------------------------------------------------------------------
# Adapter functions
# -----------------------------------------------------------------------------


async def get_chain_summary(relay: RpcRelay) -> ChainSummary:
    """
    Health, height, epoch and supply in one concurrent round.

    Height is the primary signal: if it is unavailable the node is treated as
    offline and the all-zero summary is returned. Otherwise missing pieces
    default to zero / "0.00B", and is_healthy follows getHealth alone.
    """
    try:
        health, height, epoch_info, supply = await asyncio.gather(
            relay.call_or_none(m.GET_HEALTH),
            relay.call_or_none(m.GET_BLOCK_HEIGHT),
            relay.call_or_none(m.GET_EPOCH_INFO),
            relay.call_or_none(m.GET_SUPPLY),
        )
        if height is None:
            logger.info("chain_summary_offline", endpoint=relay.endpoint)
            return ChainSummary.offline()

        epoch_info = epoch_info if isinstance(epoch_info, dict) else {}
        supply_value = rpc_value(supply)
        supply_value = supply_value if isinstance(supply_value, dict) else {}
        return ChainSummary(
            total_supply=format_magnitude(supply_value.get("total")),
            circulating_supply=format_magnitude(supply_value.get("circulating")),
            current_epoch=as_int(epoch_info.get("epoch")),
            current_slot=as_int(epoch_info.get("absoluteSlot")),
            block_height=as_int(height),
            is_healthy=health == m.HEALTH_OK,
        )
    except Exception as e:
        logger.warning("chain_summary_failed", error=str(e))
        return ChainSummary.offline()


async def _fetch_recent_blocks(
    relay: RpcRelay, limit: int, detail: str
) -> list[tuple[int, dict[str, Any] | None]]:
    """Current slot, then up to min(limit, MAX_RECENT_BLOCKS) blocks concurrently."""
    current = await relay.call_or_none(m.GET_SLOT)
    if isinstance(current, bool) or not isinstance(current, int):
        logger.info("recent_blocks_no_slot", endpoint=relay.endpoint)
        return []
    slots = _recent_slots(current, min(limit, MAX_RECENT_BLOCKS))
    blocks = await asyncio.gather(
        *(relay.call_or_none(m.GET_BLOCK, m.block_params(slot, detail)) for slot in slots)
    )
    return [
        (slot, block if isinstance(block, dict) else None)
        for slot, block in zip(slots, blocks)
    ]


async def get_recent_transactions(
    relay: RpcRelay, limit: int = DEFAULT_RECENT_LIMIT
) -> list[TransactionSummary]:
    """
    Transactions from the most recent blocks, newest block first, at most limit.
    A failed block fetch counts as an empty block.
    """
    if limit <= 0:
        return []
    try:
        fetched = await _fetch_recent_blocks(relay, limit, m.DETAIL_FULL)
        transactions: list[TransactionSummary] = []
        for slot, block in fetched:
            if block is None:
                continue
            block_time = block.get("blockTime")
            for entry in block.get("transactions") or []:
                tx = parse_transaction(
                    entry,
                    slot=slot,
                    block_time=block_time if isinstance(block_time, int) else None,
                )
                if tx is not None:
                    transactions.append(tx)
        return transactions[:limit]
    except Exception as e:
        logger.warning("recent_transactions_failed", error=str(e))
        return []


async def get_recent_blocks(
    relay: RpcRelay, limit: int = DEFAULT_RECENT_LIMIT
) -> list[BlockSummary]:
    """Most recent blocks (signature detail only); failed fetches are dropped."""
    if limit <= 0:
        return []
    try:
        fetched = await _fetch_recent_blocks(relay, limit, m.DETAIL_SIGNATURES)
        blocks = []
        for slot, block in fetched:
            summary = parse_block(slot, block)
            if summary is not None:
                blocks.append(summary)
        return blocks[:limit]
    except Exception as e:
        logger.warning("recent_blocks_failed", error=str(e))
        return []


async def get_validator_summary(
    relay: RpcRelay, *, now: float | None = None
) -> ValidatorSummary:
    """
    Validator counts, stake and an uptime series from performance samples.

    Uptime per sample is produced/expected slots, clamped to [95, 100] for
    display. current_uptime is the mean of the series, 100 when validators
    exist but no samples came back, and 0 when there are no validators.
    Incidents count samples whose unclamped uptime fell below the SLO.
    """
    try:
        vote_accounts, samples_raw, epoch_info, supply = await asyncio.gather(
            relay.call_or_none(m.GET_VOTE_ACCOUNTS),
            relay.call_or_none(
                m.GET_RECENT_PERFORMANCE_SAMPLES, m.performance_samples_params()
            ),
            relay.call_or_none(m.GET_EPOCH_INFO),
            relay.call_or_none(m.GET_SUPPLY),
        )
        vote_accounts = vote_accounts if isinstance(vote_accounts, dict) else {}
        current = [v for v in vote_accounts.get("current") or [] if isinstance(v, dict)]
        delinquent = [v for v in vote_accounts.get("delinquent") or [] if isinstance(v, dict)]
        total_validators = len(current) + len(delinquent)

        staked_lamports = sum(as_int(v.get("activatedStake")) for v in current + delinquent)
        total_staked = lamports_to_tokens(staked_lamports)
        supply_value = rpc_value(supply)
        total_supply = as_int(supply_value.get("total")) if isinstance(supply_value, dict) else 0
        percent_of_supply = (
            round(staked_lamports / total_supply * 100.0, 2) if total_supply > 0 else 0.0
        )

        samples = _performance_samples(samples_raw)
        now_ts = int(now if now is not None else time.time())
        history: list[UptimePoint] = []
        incidents = 0
        slot_times: list[float] = []
        # Samples arrive newest first; walk back in time from now.
        sample_end = now_ts
        for sample in samples:
            raw = _sample_uptime(sample)
            period = as_int(sample.get("samplePeriodSecs"))
            if raw is not None:
                if raw < SLO_TARGET:
                    incidents += 1
                history.append(UptimePoint(time=sample_end, uptime=round(_clamp_uptime(raw), 3)))
            slot_ms = _sample_slot_ms(sample)
            if slot_ms is not None:
                slot_times.append(slot_ms)
            sample_end -= period
        history.reverse()

        if total_validators == 0:
            current_uptime = 0.0
        elif not history:
            current_uptime = 100.0
        else:
            current_uptime = sum(p.uptime for p in history) / len(history)

        epoch_info = epoch_info if isinstance(epoch_info, dict) else {}
        return ValidatorSummary(
            epoch=as_int(epoch_info.get("epoch")),
            total_validators=total_validators,
            active_validators=len(current),
            delinquent_validators=len(delinquent),
            total_staked=total_staked,
            percent_of_supply=percent_of_supply,
            current_uptime=round(current_uptime, 2),
            slo_met=total_validators > 0 and current_uptime >= SLO_TARGET,
            slo_target=SLO_TARGET,
            incident_count=incidents,
            avg_response_ms=round(sum(slot_times) / len(slot_times)) if slot_times else 0,
            uptime_history=tuple(history),
        )
    except Exception as e:
        logger.warning("validator_summary_failed", error=str(e))
        return ValidatorSummary.empty()


async def get_price_summary(relay: RpcRelay) -> PriceSummary:
    """
    Fee estimate and throughput. Price stays 0: no price oracle is integrated.
    avg_fee is the per-signature fee scaled to display units.
    """
    try:
        governor, samples_raw = await asyncio.gather(
            relay.call_or_none(m.GET_FEE_RATE_GOVERNOR),
            relay.call_or_none(
                m.GET_RECENT_PERFORMANCE_SAMPLES, m.performance_samples_params()
            ),
        )
        value = rpc_value(governor)
        rates = value.get("feeRateGovernor") if isinstance(value, dict) else None
        rates = rates if isinstance(rates, dict) else {}
        lamports_per_sig = rates.get("lamportsPerSignature", rates.get("minLamportsPerSignature"))
        avg_fee = float(lamports_to_tokens(lamports_per_sig))

        samples = _performance_samples(samples_raw)
        total_txs = sum(as_int(s.get("numTransactions")) for s in samples)
        total_secs = sum(as_int(s.get("samplePeriodSecs")) for s in samples)
        tps = round(total_txs / total_secs, 2) if total_secs > 0 else 0.0
        return PriceSummary(avg_fee=avg_fee, tps=tps)
    except Exception as e:
        logger.warning("price_summary_failed", error=str(e))
        return PriceSummary.empty()
