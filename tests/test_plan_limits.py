import pytest

from memoryshare.core.plan_limits import GIB, MIB, Quota, get_plan_limit, normalize_plan, resolve_quota


@pytest.mark.parametrize(
    "plan, expected",
    [
        ("basic", Quota(10, 50 * MIB)),
        ("premium", Quota(500, 1 * GIB)),
        ("forever", Quota(3000, 5 * GIB)),
    ],
)
def test_resolve_quota_table(plan, expected):
    assert resolve_quota(plan) == expected


@pytest.mark.parametrize("plan", [None, "", "gold", "BASIC"])
def test_unknown_or_missing_plan_gets_basic_limits(plan):
    assert resolve_quota(plan) == resolve_quota("basic")
    assert normalize_plan(plan) == "basic"


def test_get_plan_limit_unknown_limit_type_is_zero():
    assert get_plan_limit("premium", "max_media") == 500
    assert get_plan_limit("premium", "max_guests") == 0
