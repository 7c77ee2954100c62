"""
Unit tests for subscription plan admission rules.
Tests capability gates, unlimited quotas, quota boundaries and quota display.
"""
import pytest

from app.core.subscription_plans import (
    PLAN_CONFIGS,
    SubscriptionPlan,
    QuotaResource,
    UsageCounts,
    InvalidPlanError,
    InvalidUsageCountError,
    FEATURE_UNAVAILABLE,
    QUOTA_EXHAUSTED,
    get_plan_config,
    can_post_job,
    can_use_featured,
    can_use_urgent,
    can_download_cv,
    check_admission,
    check_analytics_access,
    check_cv_database_access,
    analytics_level,
    get_quota_display,
    get_quota_info,
)


ALL_PLANS = list(SubscriptionPlan)


def test_one_config_per_plan():
    """Test every plan has exactly one configuration."""
    assert set(PLAN_CONFIGS) == set(SubscriptionPlan)
    for plan, config in PLAN_CONFIGS.items():
        assert config.name == plan.value


def test_job_posting_quota_positive_or_unlimited():
    """Test every plan allows at least one job posting."""
    for config in PLAN_CONFIGS.values():
        assert config.job_posting_quota is None or config.job_posting_quota > 0


def test_plan_config_is_read_only():
    """Test the plan table and plan records cannot be changed at runtime."""
    with pytest.raises(TypeError):
        PLAN_CONFIGS[SubscriptionPlan.FREE] = PLAN_CONFIGS[SubscriptionPlan.ENTERPRISE]
    with pytest.raises(AttributeError):
        PLAN_CONFIGS[SubscriptionPlan.FREE].job_posting_quota = 100


def test_get_plan_config_accepts_string():
    """Test plans can be looked up by their string value."""
    assert get_plan_config("starter") is PLAN_CONFIGS[SubscriptionPlan.STARTER]
    assert get_plan_config("starter").job_posting_quota == 10


# Job posting

def test_can_post_job_free_quota_exhausted():
    """Test free plan is blocked at 3 postings with a Starter upsell."""
    result = can_post_job("free", 3)
    assert result.allowed is False
    assert result.reason == "Quota habis! Upgrade ke Starter (Rp 199k)"
    assert result.code == QUOTA_EXHAUSTED


def test_can_post_job_professional_under_limit():
    """Test professional plan allows the 30th posting."""
    result = can_post_job("professional", 29)
    assert result.allowed is True
    assert result.reason is None
    assert result.to_dict() == {"allowed": True}


@pytest.mark.parametrize("plan,message", [
    ("free", "Quota habis! Upgrade ke Starter (Rp 199k)"),
    ("starter", "Quota habis! Upgrade ke Professional"),
    ("professional", "Quota habis! Upgrade ke Enterprise"),
])
def test_can_post_job_upgrade_messages_name_next_plan(plan, message):
    """Test exhaustion messages suggest the next plan up."""
    quota = get_plan_config(plan).job_posting_quota
    result = can_post_job(plan, quota)
    assert result.to_dict() == {"allowed": False, "reason": message}


def test_can_post_job_enterprise_unlimited():
    """Test enterprise never runs out of job postings."""
    assert can_post_job("enterprise", 0).allowed is True
    assert can_post_job("enterprise", 10 ** 9).allowed is True


# Featured

def test_can_use_featured_free_not_available():
    """Test featured listings are a capability gate on free plan."""
    result = can_use_featured("free", 0)
    assert result.allowed is False
    assert result.reason == "Feature not available in your plan"
    assert result.code == FEATURE_UNAVAILABLE


def test_can_use_featured_enterprise_unlimited():
    """Test enterprise has unlimited featured listings."""
    assert can_use_featured("enterprise", 1000).to_dict() == {"allowed": True}


def test_can_use_featured_starter_boundary():
    """Test starter allows 3 featured listings and suggests Professional after."""
    assert can_use_featured("starter", 2).allowed is True
    result = can_use_featured("starter", 3)
    assert result.allowed is False
    assert result.reason == "Quota habis! Upgrade ke Professional"
    assert result.code == QUOTA_EXHAUSTED
    assert result.limit == 3
    assert result.current == 3


# Urgent

def test_can_use_urgent_not_available_on_free_and_starter():
    """Test urgent listings are not part of free or starter plans."""
    for plan in ("free", "starter"):
        result = can_use_urgent(plan, 0)
        assert result.allowed is False
        assert result.reason == "Feature not available in your plan"


def test_can_use_urgent_unlimited_on_professional():
    """Test professional has unlimited urgent listings."""
    assert can_use_urgent("professional", 500).allowed is True


# CV download

def test_can_download_cv_starter_no_cv_database():
    """Test CV downloads require CV database access."""
    result = can_download_cv("starter", 0)
    assert result.allowed is False
    assert result.reason == "CV Database not available in your plan"
    assert result.code == FEATURE_UNAVAILABLE


def test_can_download_cv_professional_boundary():
    """Test professional allows 100 CV downloads per period."""
    assert can_download_cv("professional", 99).allowed is True
    result = can_download_cv("professional", 100)
    assert result.allowed is False
    assert result.reason == "Quota habis! Upgrade Enterprise"


def test_can_download_cv_enterprise_unlimited():
    """Test enterprise has unlimited CV downloads."""
    assert can_download_cv("enterprise", 10 ** 6).allowed is True


# Properties over every plan and resource

@pytest.mark.parametrize("plan", ALL_PLANS)
@pytest.mark.parametrize("resource", list(QuotaResource))
def test_admission_rules(plan, resource):
    """Test unlimited, capability gate, boundary and monotonicity rules."""
    config = PLAN_CONFIGS[plan]
    quota = config.quota_for(resource)
    gated = quota == 0 or (resource is QuotaResource.CV_DOWNLOAD and not config.has_cv_database)

    if gated:
        result = check_admission(plan, resource, 0)
        assert result.allowed is False
        assert result.code == FEATURE_UNAVAILABLE
    elif quota is None:
        for count in (0, 1, 10 ** 9):
            assert check_admission(plan, resource, count).allowed is True
    else:
        assert check_admission(plan, resource, quota - 1).allowed is True
        assert check_admission(plan, resource, quota).allowed is False

    # Denial never reverses with higher counts
    denied = False
    for count in range(0, 120):
        allowed = check_admission(plan, resource, count).allowed
        if denied:
            assert allowed is False
        denied = denied or not allowed


def test_check_admission_reports_resource():
    """Test admission results name the resource they were evaluated for."""
    assert check_admission("free", "featured", 0).resource == "featured"
    assert check_admission("free", QuotaResource.JOB_POSTING, 0).resource == "job_posting"


# Preconditions

def test_unknown_plan_fails_fast():
    """Test unknown plans are rejected instead of being allowed."""
    with pytest.raises(InvalidPlanError):
        can_post_job("gold", 0)
    with pytest.raises(InvalidPlanError):
        get_quota_display(None, UsageCounts())


def test_invalid_counts_fail_fast():
    """Test negative and non-integer counts are rejected."""
    with pytest.raises(InvalidUsageCountError):
        can_use_featured("starter", -1)
    with pytest.raises(InvalidUsageCountError):
        can_download_cv("professional", 1.5)
    with pytest.raises(InvalidUsageCountError):
        can_use_urgent("enterprise", True)
    with pytest.raises(InvalidUsageCountError):
        get_quota_display("starter", UsageCounts(job_posting=-2))


def test_invalid_plan_error_is_value_error():
    """Test contract violations are ValueErrors."""
    assert issubclass(InvalidPlanError, ValueError)
    assert issubclass(InvalidUsageCountError, ValueError)


# Capabilities

def test_analytics_access():
    """Test analytics is available from Starter up."""
    result = check_analytics_access("free")
    assert result.allowed is False
    assert "Analytics" in result.reason
    assert check_analytics_access("starter").allowed is True
    assert analytics_level("free") == "none"
    assert analytics_level("starter") == "basic"
    assert analytics_level("professional") == "advanced"


def test_cv_database_access():
    """Test CV database is available on Professional and Enterprise only."""
    assert check_cv_database_access("starter").allowed is False
    assert check_cv_database_access("professional").allowed is True
    assert check_cv_database_access("enterprise").allowed is True


# Quota display

def test_get_quota_display_starter():
    """Test urgent and CV fragments are hidden on starter."""
    counts = UsageCounts(job_posting=2, featured=1, urgent=0, cv_download=0)
    assert get_quota_display("starter", counts) == "Job: 2 / 10, Featured: 1 / 3"


def test_get_quota_display_free():
    """Test free plan only shows job postings."""
    assert get_quota_display("free", UsageCounts(job_posting=1)) == "Job: 1 / 3"


def test_get_quota_display_professional():
    """Test unlimited quotas render as the infinity symbol."""
    counts = UsageCounts(job_posting=5, featured=2, urgent=1, cv_download=10)
    assert get_quota_display("professional", counts) == (
        "Job: 5 / 30, Featured: ∞, Urgent: ∞, CV: 10 / 100"
    )


def test_get_quota_display_enterprise():
    """Test enterprise shows every resource as unlimited."""
    assert get_quota_display("enterprise", UsageCounts(job_posting=40)) == (
        "Job: ∞, Featured: ∞, Urgent: ∞, CV: ∞"
    )


@pytest.mark.parametrize("plan", ALL_PLANS)
def test_get_quota_display_omits_unavailable_resources(plan):
    """Test zero-quota resources and CV without database access are never shown."""
    config = PLAN_CONFIGS[plan]
    display = get_quota_display(plan, UsageCounts())

    assert display.startswith("Job: ")
    assert ("Featured:" in display) == (config.featured_quota != 0)
    assert ("Urgent:" in display) == (config.urgent_quota != 0)
    assert ("CV:" in display) == config.has_cv_database


# Quota info

def test_get_quota_info_starter():
    """Test structured quota info with percentages."""
    info = get_quota_info("starter", UsageCounts(job_posting=5, featured=1))

    assert info["plan"] == "starter"
    job = info["resources"]["job_posting"]
    assert job == {
        "current": 5,
        "limit": 10,
        "remaining": 5,
        "unlimited": False,
        "available": True,
        "percentage": 50,
    }
    assert info["resources"]["featured"]["percentage"] == 33
    assert info["resources"]["urgent"]["available"] is False
    assert info["resources"]["urgent"]["percentage"] == 0
    assert info["resources"]["cv_download"]["available"] is False
    assert info["features"]["analytics_level"] == "basic"
    assert info["features"]["support_level"] == "standard"


def test_get_quota_info_enterprise_unlimited():
    """Test unlimited resources have no remaining count and 0 percent."""
    info = get_quota_info("enterprise", UsageCounts(job_posting=99))
    for details in info["resources"].values():
        assert details["unlimited"] is True
        assert details["limit"] is None
        assert details["remaining"] is None
        assert details["percentage"] == 0
