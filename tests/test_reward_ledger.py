# tests/test_reward_ledger.py
from __future__ import annotations

import pytest

from threadcycle.ledger.constants import (
    DEFAULT_COOLDOWN_BLOCKS,
    DEFAULT_REWARD_PER_ACTION,
    MAX_SUPPLY,
    ZERO_ADDRESS,
)
from threadcycle.runtime.errors import (
    ERR_COOLDOWN_ACTIVE,
    ERR_INSUFFICIENT_BALANCE,
    ERR_INVALID_AMOUNT,
    ERR_INVALID_EVENT,
    ERR_MAX_SUPPLY_REACHED,
    ERR_NOT_AUTHORIZED,
    ERR_PAUSED,
    ERR_PROVENANCE_NOT_SET,
    ERR_ZERO_ADDRESS,
    RewardError,
)
from threadcycle.runtime.rewards import RewardLedger

ADMIN = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
ALICE = "ST2CY5..."
BOB = "ST3NB..."
ORACLE = "ST5NB..."

HEIGHT = 10_000


def _ledger() -> RewardLedger:
    return RewardLedger(ADMIN)


def _with_oracle() -> RewardLedger:
    r = _ledger()
    r.set_provenance_contract(ADMIN, ORACLE)
    return r


def _code(fn, *args, **kwargs) -> str:
    with pytest.raises(RewardError) as e:
        fn(*args, **kwargs)
    return e.value.code


def test_defaults() -> None:
    r = _ledger()
    assert r.get_admin() == ADMIN
    assert r.is_paused() is False
    assert r.get_provenance_contract() is None
    assert r.get_total_supply() == 0
    assert r.get_reward_per_action() == DEFAULT_REWARD_PER_ACTION == 1_000_000
    assert r.get_cooldown_period() == DEFAULT_COOLDOWN_BLOCKS == 1_440
    assert r.get_balance(ALICE) == 0
    assert r.get_action_count(ALICE) == 0
    assert r.get_last_action_height(ALICE) is None


def test_constructor_rejects_non_positive_config() -> None:
    with pytest.raises(ValueError):
        RewardLedger(ADMIN, reward_per_action=0)
    with pytest.raises(ValueError):
        RewardLedger(ADMIN, cooldown_period=0)


# --- mint ---


def test_mint_by_admin() -> None:
    r = _ledger()
    assert r.mint(ADMIN, ALICE, 1_000_000) is True
    assert r.get_balance(ALICE) == 1_000_000
    assert r.get_total_supply() == 1_000_000


def test_mint_by_non_admin_is_rejected_without_mutation() -> None:
    r = _ledger()
    assert _code(r.mint, BOB, ALICE, 1_000_000) == ERR_NOT_AUTHORIZED
    assert r.get_balance(ALICE) == 0
    assert r.get_total_supply() == 0


def test_mint_check_order() -> None:
    r = _ledger()
    # non-admin wins over every later check
    assert _code(r.mint, BOB, ZERO_ADDRESS, 0) == ERR_NOT_AUTHORIZED
    # zero address before amount
    assert _code(r.mint, ADMIN, ZERO_ADDRESS, 0) == ERR_ZERO_ADDRESS
    assert _code(r.mint, ADMIN, ALICE, 0) == ERR_INVALID_AMOUNT
    assert _code(r.mint, ADMIN, ALICE, -5) == ERR_INVALID_AMOUNT
    assert _code(r.mint, ADMIN, ALICE, "100") == ERR_INVALID_AMOUNT
    assert _code(r.mint, ADMIN, ALICE, True) == ERR_INVALID_AMOUNT


def test_mint_up_to_cap_then_max_supply_reached() -> None:
    r = _ledger()
    assert r.mint(ADMIN, ALICE, MAX_SUPPLY - 1) is True
    assert r.mint(ADMIN, BOB, 1) is True
    assert r.get_total_supply() == MAX_SUPPLY

    with pytest.raises(RewardError) as e:
        r.mint(ADMIN, ALICE, 1_000_000)
    assert e.value.code == ERR_MAX_SUPPLY_REACHED
    assert e.value.number == 108
    assert r.get_total_supply() == MAX_SUPPLY


def test_mint_is_not_gated_by_pause() -> None:
    r = _ledger()
    r.set_paused(ADMIN, True)
    assert r.mint(ADMIN, ALICE, 2_000_000) is True


# --- transfer ---


def test_transfer_moves_balance_and_keeps_supply() -> None:
    r = _ledger()
    r.mint(ADMIN, ALICE, 2_000_000)
    assert r.transfer(ALICE, BOB, 1_000_000) is True
    assert r.get_balance(ALICE) == 1_000_000
    assert r.get_balance(BOB) == 1_000_000
    assert r.get_total_supply() == 2_000_000


def test_transfer_when_paused() -> None:
    r = _ledger()
    r.set_paused(ADMIN, True)
    r.mint(ADMIN, ALICE, 2_000_000)
    assert _code(r.transfer, ALICE, BOB, 1_000_000) == ERR_PAUSED
    assert r.get_balance(ALICE) == 2_000_000
    assert r.get_balance(BOB) == 0


def test_transfer_insufficient_balance() -> None:
    r = _ledger()
    r.mint(ADMIN, ALICE, 500_000)
    with pytest.raises(RewardError) as e:
        r.transfer(ALICE, BOB, 1_000_000)
    assert e.value.code == ERR_INSUFFICIENT_BALANCE
    assert e.value.number == 101
    assert r.get_balance(ALICE) == 500_000
    assert r.get_balance(BOB) == 0


def test_transfer_check_order() -> None:
    r = _ledger()
    r.set_paused(ADMIN, True)
    assert _code(r.transfer, ALICE, ZERO_ADDRESS, 0) == ERR_PAUSED
    r.set_paused(ADMIN, False)
    assert _code(r.transfer, ALICE, ZERO_ADDRESS, 0) == ERR_ZERO_ADDRESS
    assert _code(r.transfer, ALICE, BOB, 0) == ERR_INVALID_AMOUNT
    assert _code(r.transfer, ALICE, BOB, 1) == ERR_INSUFFICIENT_BALANCE


def test_transfer_to_self_keeps_balance() -> None:
    r = _ledger()
    r.mint(ADMIN, ALICE, 700)
    assert r.transfer(ALICE, ALICE, 700) is True
    assert r.get_balance(ALICE) == 700
    assert r.get_total_supply() == 700


# --- burn ---


def test_burn_reduces_balance_and_supply() -> None:
    r = _ledger()
    r.mint(ADMIN, ALICE, 2_000_000)
    assert r.burn(ALICE, 1_000_000) is True
    assert r.get_balance(ALICE) == 1_000_000
    assert r.get_total_supply() == 1_000_000


def test_burn_insufficient_balance() -> None:
    r = _ledger()
    r.mint(ADMIN, ALICE, 500_000)
    assert _code(r.burn, ALICE, 1_000_000) == ERR_INSUFFICIENT_BALANCE
    assert r.get_balance(ALICE) == 500_000
    assert r.get_total_supply() == 500_000


def test_burn_check_order() -> None:
    r = _ledger()
    r.set_paused(ADMIN, True)
    assert _code(r.burn, ALICE, 0) == ERR_PAUSED
    r.set_paused(ADMIN, False)
    assert _code(r.burn, ALICE, 0) == ERR_INVALID_AMOUNT


def test_burn_entire_balance_reads_as_zero() -> None:
    r = _ledger()
    r.mint(ADMIN, ALICE, 10)
    r.burn(ALICE, 10)
    assert r.get_balance(ALICE) == 0
    assert ALICE not in r.snapshot().balances


# --- admin configuration ---


def test_set_reward_per_action() -> None:
    r = _ledger()
    assert _code(r.set_reward_per_action, BOB, 5) == ERR_NOT_AUTHORIZED
    assert _code(r.set_reward_per_action, ADMIN, 0) == ERR_INVALID_AMOUNT
    assert r.set_reward_per_action(ADMIN, 5) is True
    assert r.get_reward_per_action() == 5


def test_set_cooldown_period() -> None:
    r = _ledger()
    assert _code(r.set_cooldown_period, BOB, 10) == ERR_NOT_AUTHORIZED
    assert _code(r.set_cooldown_period, ADMIN, 0) == ERR_INVALID_AMOUNT
    assert r.set_cooldown_period(ADMIN, 10) is True
    assert r.get_cooldown_period() == 10


def test_set_paused_returns_new_flag_and_is_admin_only() -> None:
    r = _ledger()
    assert _code(r.set_paused, BOB, True) == ERR_NOT_AUTHORIZED
    assert r.set_paused(ADMIN, True) is True
    assert r.is_paused() is True
    assert r.set_paused(ADMIN, False) is False
    assert r.is_paused() is False


def test_admin_configuration_allowed_while_paused() -> None:
    r = _ledger()
    r.set_paused(ADMIN, True)
    assert r.set_reward_per_action(ADMIN, 7) is True
    assert r.set_cooldown_period(ADMIN, 3) is True
    assert r.set_provenance_contract(ADMIN, ORACLE) is True


def test_set_provenance_contract_zero_address_leaves_unset() -> None:
    r = _ledger()
    assert _code(r.set_provenance_contract, ADMIN, ZERO_ADDRESS) == ERR_ZERO_ADDRESS
    assert r.get_provenance_contract() is None


def test_transfer_admin() -> None:
    r = _ledger()
    assert r.transfer_admin(ADMIN, BOB) is True
    assert r.get_admin() == BOB
    assert _code(r.mint, ADMIN, ALICE, 1) == ERR_NOT_AUTHORIZED
    assert r.mint(BOB, ALICE, 1) is True


# --- reward_action ---


def test_reward_requires_provenance_contract_set() -> None:
    r = _ledger()
    with pytest.raises(RewardError) as e:
        r.reward_action(ORACLE, ALICE, "recycle", height=HEIGHT)
    assert e.value.code == ERR_PROVENANCE_NOT_SET


def test_reward_by_non_provenance_caller() -> None:
    r = _with_oracle()
    assert _code(r.reward_action, "ST6NB...", ALICE, "recycle", height=HEIGHT) == ERR_NOT_AUTHORIZED


def test_reward_with_invalid_action_type() -> None:
    r = _with_oracle()
    with pytest.raises(RewardError) as e:
        r.reward_action(ORACLE, ALICE, "invalid", height=HEIGHT)
    assert e.value.code == ERR_INVALID_EVENT
    assert e.value.number == 107
    # production is a lifecycle event but never rewarded
    assert _code(r.reward_action, ORACLE, ALICE, "production", height=HEIGHT) == ERR_INVALID_EVENT


@pytest.mark.parametrize("action", ["recycle", "resale", "donation", "repair"])
def test_reward_credits_user(action: str) -> None:
    r = _with_oracle()
    assert r.reward_action(ORACLE, ALICE, action, height=HEIGHT) == 1_000_000
    assert r.get_balance(ALICE) == 1_000_000
    assert r.get_total_supply() == 1_000_000
    assert r.get_action_count(ALICE) == 1
    assert r.get_last_action_height(ALICE) == HEIGHT


def test_first_reward_is_eligible_at_low_height() -> None:
    r = _with_oracle()
    assert r.reward_action(ORACLE, ALICE, "recycle", height=0) == 1_000_000


def test_reward_during_cooldown_is_rejected_without_mutation() -> None:
    r = _with_oracle()
    r.reward_action(ORACLE, ALICE, "recycle", height=HEIGHT)

    with pytest.raises(RewardError) as e:
        r.reward_action(ORACLE, ALICE, "recycle", height=HEIGHT + DEFAULT_COOLDOWN_BLOCKS - 1)
    assert e.value.code == ERR_COOLDOWN_ACTIVE
    assert e.value.number == 109

    assert r.get_balance(ALICE) == 1_000_000
    assert r.get_action_count(ALICE) == 1
    assert r.get_last_action_height(ALICE) == HEIGHT
    assert r.get_total_supply() == 1_000_000


def test_reward_after_cooldown_elapsed() -> None:
    r = _with_oracle()
    r.reward_action(ORACLE, ALICE, "recycle", height=HEIGHT)
    assert r.reward_action(ORACLE, ALICE, "repair", height=HEIGHT + DEFAULT_COOLDOWN_BLOCKS) == 1_000_000
    assert r.get_action_count(ALICE) == 2
    assert r.get_last_action_height(ALICE) == HEIGHT + DEFAULT_COOLDOWN_BLOCKS
    assert r.get_balance(ALICE) == 2_000_000


def test_cooldown_is_per_user() -> None:
    r = _with_oracle()
    r.reward_action(ORACLE, ALICE, "recycle", height=HEIGHT)
    assert r.reward_action(ORACLE, BOB, "recycle", height=HEIGHT) == 1_000_000


def test_reward_when_paused_checked_after_cooldown() -> None:
    r = _with_oracle()
    r.reward_action(ORACLE, ALICE, "recycle", height=HEIGHT)
    r.set_paused(ADMIN, True)
    # cooldown is checked before pause
    assert _code(r.reward_action, ORACLE, ALICE, "recycle", height=HEIGHT + 1) == ERR_COOLDOWN_ACTIVE
    assert _code(r.reward_action, ORACLE, BOB, "recycle", height=HEIGHT + 1) == ERR_PAUSED
    assert r.get_balance(BOB) == 0
    assert r.get_action_count(BOB) == 0


def test_reward_respects_max_supply() -> None:
    r = _with_oracle()
    r.mint(ADMIN, BOB, MAX_SUPPLY - 999_999)
    with pytest.raises(RewardError) as e:
        r.reward_action(ORACLE, ALICE, "donation", height=HEIGHT)
    assert e.value.code == ERR_MAX_SUPPLY_REACHED
    assert r.get_last_action_height(ALICE) is None
    assert r.get_action_count(ALICE) == 0


def test_reward_uses_configured_rate_and_cooldown() -> None:
    r = _with_oracle()
    r.set_reward_per_action(ADMIN, 250)
    r.set_cooldown_period(ADMIN, 5)
    assert r.reward_action(ORACLE, ALICE, "resale", height=100) == 250
    assert _code(r.reward_action, ORACLE, ALICE, "resale", height=104) == ERR_COOLDOWN_ACTIVE
    assert r.reward_action(ORACLE, ALICE, "resale", height=105) == 250
    assert r.get_balance(ALICE) == 500


def test_is_cooldown_expired() -> None:
    r = _with_oracle()
    assert r.is_cooldown_expired(ALICE, 0) is True
    r.reward_action(ORACLE, ALICE, "recycle", height=HEIGHT)
    assert r.is_cooldown_expired(ALICE, HEIGHT) is False
    assert r.is_cooldown_expired(ALICE, HEIGHT + DEFAULT_COOLDOWN_BLOCKS) is True


def test_snapshot_is_a_copy() -> None:
    r = _ledger()
    r.mint(ADMIN, ALICE, 5)
    view = r.snapshot()
    r.mint(ADMIN, ALICE, 5)
    assert view.balance(ALICE) == 5
    assert view.total_supply == 5
    assert view.to_json()["balances"] == {ALICE: 5}
