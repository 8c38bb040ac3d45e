# tests/test_access_policy.py
from __future__ import annotations

import pytest

from threadcycle.ledger.constants import ZERO_ADDRESS
from threadcycle.runtime.access import AccessPolicy
from threadcycle.runtime.errors import (
    ERR_NOT_AUTHORIZED,
    ERR_PAUSED,
    ERR_PROVENANCE_NOT_SET,
    ERR_ZERO_ADDRESS,
    GarmentError,
    RewardError,
)

ADMIN = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
ORACLE = "ST5NB..."


def test_is_admin_compares_stored_principal() -> None:
    p = AccessPolicy(admin=ADMIN)
    assert p.is_admin(ADMIN)
    assert not p.is_admin("ST3NB...")


def test_require_checks_raise_component_error_class() -> None:
    p = AccessPolicy(admin=ADMIN, error_cls=RewardError)
    with pytest.raises(RewardError) as e:
        p.require_admin("ST3NB...")
    assert e.value.code == ERR_NOT_AUTHORIZED
    assert e.value.number == 100

    g = AccessPolicy(admin=ADMIN, error_cls=GarmentError)
    with pytest.raises(GarmentError) as e2:
        g.require_non_zero_address(ZERO_ADDRESS)
    assert e2.value.code == ERR_ZERO_ADDRESS
    assert e2.value.number == 105


def test_require_not_paused() -> None:
    p = AccessPolicy(admin=ADMIN, error_cls=RewardError)
    p.require_not_paused()
    assert p.set_paused(ADMIN, True) is True
    with pytest.raises(RewardError) as e:
        p.require_not_paused()
    assert e.value.code == ERR_PAUSED


def test_provenance_caller_unset_then_mismatch_then_match() -> None:
    p = AccessPolicy(admin=ADMIN, error_cls=RewardError)

    with pytest.raises(RewardError) as e:
        p.require_provenance_caller(ORACLE)
    assert e.value.code == ERR_PROVENANCE_NOT_SET
    assert e.value.number == 110

    p.set_provenance_contract(ADMIN, ORACLE)
    with pytest.raises(RewardError) as e2:
        p.require_provenance_caller("ST6NB...")
    assert e2.value.code == ERR_NOT_AUTHORIZED

    p.require_provenance_caller(ORACLE)


def test_set_provenance_contract_checks_admin_before_zero_address() -> None:
    p = AccessPolicy(admin=ADMIN, error_cls=RewardError)

    with pytest.raises(RewardError) as e:
        p.set_provenance_contract("ST3NB...", ZERO_ADDRESS)
    assert e.value.code == ERR_NOT_AUTHORIZED

    with pytest.raises(RewardError) as e2:
        p.set_provenance_contract(ADMIN, ZERO_ADDRESS)
    assert e2.value.code == ERR_ZERO_ADDRESS
    assert p.provenance_contract is None


def test_transfer_admin_hands_over_privileges() -> None:
    p = AccessPolicy(admin=ADMIN, error_cls=RewardError)

    with pytest.raises(RewardError) as e:
        p.transfer_admin(ADMIN, ZERO_ADDRESS)
    assert e.value.code == ERR_ZERO_ADDRESS
    assert p.admin == ADMIN

    assert p.transfer_admin(ADMIN, "ST9NEW...") is True
    assert p.admin == "ST9NEW..."

    with pytest.raises(RewardError):
        p.set_paused(ADMIN, True)
    assert p.paused is False
