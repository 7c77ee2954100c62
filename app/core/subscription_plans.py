"""
Subscription plan configuration and quota admission rules.

Single source of truth for what each PintuKerja employer plan includes.
None means unlimited quota for that resource; 0 means the feature is not
available on the plan at all.

Every admission check follows the same order:
1. Capability gate (quota == 0, or no CV database)
2. Unlimited bypass (quota is None)
3. Counter comparison (current >= quota denies)
"""
import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

UNLIMITED_SYMBOL = "∞"

FEATURE_UNAVAILABLE = "feature_unavailable"
QUOTA_EXHAUSTED = "quota_exhausted"


class SubscriptionPlan(str, enum.Enum):
    """Employer subscription tiers."""

    FREE = "free"
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class SupportLevel(str, enum.Enum):
    BASIC = "basic"
    STANDARD = "standard"
    PRIORITY = "priority"
    DEDICATED = "dedicated"


class QuotaResource(str, enum.Enum):
    """Resources tracked against a plan quota."""

    JOB_POSTING = "job_posting"
    FEATURED = "featured"
    URGENT = "urgent"
    CV_DOWNLOAD = "cv_download"


class InvalidPlanError(ValueError):
    """Raised when a plan value is not one of the known subscription plans."""


class InvalidUsageCountError(ValueError):
    """Raised when a usage count is negative or not an integer."""


@dataclass(frozen=True)
class PlanBadge:
    color: str
    icon: str


@dataclass(frozen=True)
class PlanFeatures:
    """Static feature set of one subscription plan."""

    name: str
    display_name: str
    tagline: str
    badge: PlanBadge
    job_posting_quota: Optional[int]
    featured_quota: Optional[int]
    urgent_quota: Optional[int]
    job_duration: int  # days
    has_verified_badge: bool
    has_basic_analytics: bool
    has_advanced_analytics: bool
    has_cv_database: bool
    cv_download_quota: Optional[int]
    support_level: SupportLevel
    tags: Tuple[str, ...] = ()

    def quota_for(self, resource: QuotaResource) -> Optional[int]:
        """Get the quota of a resource (None for unlimited)."""
        return {
            QuotaResource.JOB_POSTING: self.job_posting_quota,
            QuotaResource.FEATURED: self.featured_quota,
            QuotaResource.URGENT: self.urgent_quota,
            QuotaResource.CV_DOWNLOAD: self.cv_download_quota,
        }[resource]


@dataclass(frozen=True)
class UsageCounts:
    """Usage of one company within the current accounting period."""

    job_posting: int = 0
    featured: int = 0
    urgent: int = 0
    cv_download: int = 0

    def get(self, resource: QuotaResource) -> int:
        return getattr(self, resource.value)


@dataclass(frozen=True)
class AdmissionResult:
    """
    Outcome of an admission check.

    A denial is a normal business outcome, not an error: `allowed` is False
    and `reason` carries the user-facing message. `code` tells a missing
    feature apart from an exhausted quota.
    """

    allowed: bool
    reason: Optional[str] = None
    code: Optional[str] = None
    resource: Optional[str] = None
    current: Optional[int] = None
    limit: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"allowed": self.allowed}
        if self.reason is not None:
            data["reason"] = self.reason
        return data


# Plan configuration (per accounting period)
PLAN_CONFIGS: Mapping[SubscriptionPlan, PlanFeatures] = MappingProxyType({
    SubscriptionPlan.FREE: PlanFeatures(
        name="free",
        display_name="GRATIS",
        tagline="Untuk Memulai",
        badge=PlanBadge(color="text-gray-600 bg-gray-100", icon="⚡"),
        job_posting_quota=3,
        featured_quota=0,
        urgent_quota=0,
        job_duration=30,
        has_verified_badge=False,
        has_basic_analytics=False,
        has_advanced_analytics=False,
        has_cv_database=False,
        cv_download_quota=0,
        support_level=SupportLevel.BASIC,
    ),
    SubscriptionPlan.STARTER: PlanFeatures(
        name="starter",
        display_name="STARTER",
        tagline="Untuk Berkembang",
        badge=PlanBadge(color="text-lime-600 bg-lime-100", icon="✓"),
        tags=("Populer",),
        job_posting_quota=10,
        featured_quota=3,
        urgent_quota=0,
        job_duration=30,
        has_verified_badge=True,
        has_basic_analytics=True,
        has_advanced_analytics=False,
        has_cv_database=False,
        cv_download_quota=0,
        support_level=SupportLevel.STANDARD,
    ),
    SubscriptionPlan.PROFESSIONAL: PlanFeatures(
        name="professional",
        display_name="PROFESSIONAL",
        tagline="Solusi Lengkap",
        badge=PlanBadge(color="text-blue-600 bg-blue-100", icon="✓"),
        tags=("Recommended",),
        job_posting_quota=30,
        featured_quota=None,  # Unlimited
        urgent_quota=None,
        job_duration=30,
        has_verified_badge=True,
        has_basic_analytics=True,
        has_advanced_analytics=True,
        has_cv_database=True,
        cv_download_quota=100,
        support_level=SupportLevel.PRIORITY,
    ),
    SubscriptionPlan.ENTERPRISE: PlanFeatures(
        name="enterprise",
        display_name="ENTERPRISE",
        tagline="Custom Solution",
        badge=PlanBadge(color="text-purple-600 bg-purple-100", icon="✓"),
        tags=("Best Value",),
        job_posting_quota=None,
        featured_quota=None,
        urgent_quota=None,
        job_duration=30,
        has_verified_badge=True,
        has_basic_analytics=True,
        has_advanced_analytics=True,
        has_cv_database=True,
        cv_download_quota=None,
        support_level=SupportLevel.DEDICATED,
    ),
})

JOB_POSTING_UPGRADE_MESSAGES: Mapping[SubscriptionPlan, str] = MappingProxyType({
    SubscriptionPlan.FREE: "Quota habis! Upgrade ke Starter (Rp 199k)",
    SubscriptionPlan.STARTER: "Quota habis! Upgrade ke Professional",
    SubscriptionPlan.PROFESSIONAL: "Quota habis! Upgrade ke Enterprise",
    SubscriptionPlan.ENTERPRISE: "Quota habis!",
})

# Plans without an entry fall back to the generic message
FEATURED_UPGRADE_MESSAGES: Mapping[SubscriptionPlan, str] = MappingProxyType({
    SubscriptionPlan.STARTER: "Quota habis! Upgrade ke Professional",
})

FEATURE_NOT_AVAILABLE_MESSAGE = "Feature not available in your plan"
FEATURED_EXHAUSTED_MESSAGE = "Featured quota habis!"
URGENT_EXHAUSTED_MESSAGE = "Urgent quota habis!"
CV_DATABASE_NOT_AVAILABLE_MESSAGE = "CV Database not available in your plan"
CV_DOWNLOAD_EXHAUSTED_MESSAGE = "Quota habis! Upgrade Enterprise"
ANALYTICS_NOT_AVAILABLE_MESSAGE = (
    "Fitur Analytics hanya tersedia di paket Starter, Professional, dan Enterprise."
)
CV_DATABASE_ACCESS_MESSAGE = (
    "Fitur CV Database hanya tersedia di paket Professional dan Enterprise."
)


def _validate_config() -> None:
    missing = set(SubscriptionPlan) - set(PLAN_CONFIGS)
    if missing:
        raise RuntimeError(f"Missing plan configuration for: {sorted(p.value for p in missing)}")

    for plan, config in PLAN_CONFIGS.items():
        if config.job_posting_quota is not None and config.job_posting_quota <= 0:
            raise RuntimeError(f"Plan {plan.value} must allow at least one job posting")
        for resource in QuotaResource:
            quota = config.quota_for(resource)
            if quota is not None and quota < 0:
                raise RuntimeError(f"Plan {plan.value} has a negative {resource.value} quota")


_validate_config()


def normalize_plan(plan: Any) -> SubscriptionPlan:
    """
    Convert a plan value into a SubscriptionPlan.

    Args:
        plan: SubscriptionPlan member or its string value

    Returns:
        The matching SubscriptionPlan

    Raises:
        InvalidPlanError: If the value is not a known plan
    """
    if isinstance(plan, SubscriptionPlan):
        return plan
    try:
        return SubscriptionPlan(plan)
    except ValueError:
        raise InvalidPlanError(f"Unknown subscription plan: {plan!r}") from None


def _validate_count(current_count: Any) -> int:
    if isinstance(current_count, bool) or not isinstance(current_count, int):
        raise InvalidUsageCountError(f"Usage count must be an integer, got {current_count!r}")
    if current_count < 0:
        raise InvalidUsageCountError(f"Usage count must be non-negative, got {current_count}")
    return current_count


def get_plan_config(plan: Any) -> PlanFeatures:
    """Get the feature set of a plan."""
    return PLAN_CONFIGS[normalize_plan(plan)]


def _check_counter(
    resource: QuotaResource,
    quota: Optional[int],
    current_count: int,
    unavailable_message: Optional[str],
    exhausted_message: str,
) -> AdmissionResult:
    """
    Apply the capability gate, unlimited bypass and counter comparison.

    `unavailable_message` of None skips the capability gate (job postings
    always have a positive quota).
    """
    if unavailable_message is not None and quota == 0:
        return AdmissionResult(
            allowed=False,
            reason=unavailable_message,
            code=FEATURE_UNAVAILABLE,
            resource=resource.value,
            current=current_count,
            limit=0,
        )

    if quota is None:
        return AdmissionResult(allowed=True, resource=resource.value, current=current_count)

    if current_count >= quota:
        return AdmissionResult(
            allowed=False,
            reason=exhausted_message,
            code=QUOTA_EXHAUSTED,
            resource=resource.value,
            current=current_count,
            limit=quota,
        )

    return AdmissionResult(allowed=True, resource=resource.value, current=current_count, limit=quota)


def can_post_job(plan: Any, current_count: int) -> AdmissionResult:
    """
    Check whether a company may create another job posting.

    Exhaustion messages name the next plan up; enterprise has no upgrade path.
    """
    plan = normalize_plan(plan)
    current_count = _validate_count(current_count)
    config = PLAN_CONFIGS[plan]
    return _check_counter(
        QuotaResource.JOB_POSTING,
        config.job_posting_quota,
        current_count,
        None,
        JOB_POSTING_UPGRADE_MESSAGES[plan],
    )


def can_use_featured(plan: Any, current_count: int) -> AdmissionResult:
    """Check whether a company may mark another job posting as featured."""
    plan = normalize_plan(plan)
    current_count = _validate_count(current_count)
    return _check_counter(
        QuotaResource.FEATURED,
        PLAN_CONFIGS[plan].featured_quota,
        current_count,
        FEATURE_NOT_AVAILABLE_MESSAGE,
        FEATURED_UPGRADE_MESSAGES.get(plan, FEATURED_EXHAUSTED_MESSAGE),
    )


def can_use_urgent(plan: Any, current_count: int) -> AdmissionResult:
    """Check whether a company may mark another job posting as urgent."""
    plan = normalize_plan(plan)
    current_count = _validate_count(current_count)
    return _check_counter(
        QuotaResource.URGENT,
        PLAN_CONFIGS[plan].urgent_quota,
        current_count,
        FEATURE_NOT_AVAILABLE_MESSAGE,
        URGENT_EXHAUSTED_MESSAGE,
    )


def can_download_cv(plan: Any, current_count: int) -> AdmissionResult:
    """
    Check whether a company may download another candidate CV.

    CV access is gated on the CV database capability before any quota
    comparison.
    """
    plan = normalize_plan(plan)
    current_count = _validate_count(current_count)
    config = PLAN_CONFIGS[plan]

    if not config.has_cv_database:
        return AdmissionResult(
            allowed=False,
            reason=CV_DATABASE_NOT_AVAILABLE_MESSAGE,
            code=FEATURE_UNAVAILABLE,
            resource=QuotaResource.CV_DOWNLOAD.value,
            current=current_count,
            limit=0,
        )

    return _check_counter(
        QuotaResource.CV_DOWNLOAD,
        config.cv_download_quota,
        current_count,
        None,
        CV_DOWNLOAD_EXHAUSTED_MESSAGE,
    )


ADMISSION_CHECKS: Mapping[QuotaResource, Callable[[Any, int], AdmissionResult]] = MappingProxyType({
    QuotaResource.JOB_POSTING: can_post_job,
    QuotaResource.FEATURED: can_use_featured,
    QuotaResource.URGENT: can_use_urgent,
    QuotaResource.CV_DOWNLOAD: can_download_cv,
})


def check_admission(plan: Any, resource: Any, current_count: int) -> AdmissionResult:
    """
    Run the admission check of a resource.

    Args:
        plan: Subscription plan
        resource: QuotaResource member or its string value
        current_count: Usage of the resource in the current period

    Returns:
        AdmissionResult of the matching can_* check
    """
    return ADMISSION_CHECKS[QuotaResource(resource)](plan, current_count)


def check_analytics_access(plan: Any) -> AdmissionResult:
    """Check whether the plan includes (at least basic) analytics."""
    if not get_plan_config(plan).has_basic_analytics:
        return AdmissionResult(
            allowed=False,
            reason=ANALYTICS_NOT_AVAILABLE_MESSAGE,
            code=FEATURE_UNAVAILABLE,
        )
    return AdmissionResult(allowed=True)


def check_cv_database_access(plan: Any) -> AdmissionResult:
    """Check whether the plan can browse the CV database."""
    if not get_plan_config(plan).has_cv_database:
        return AdmissionResult(
            allowed=False,
            reason=CV_DATABASE_ACCESS_MESSAGE,
            code=FEATURE_UNAVAILABLE,
        )
    return AdmissionResult(allowed=True)


def analytics_level(plan: Any) -> str:
    """Get the analytics level of a plan: none, basic or advanced."""
    config = get_plan_config(plan)
    if config.has_advanced_analytics:
        return "advanced"
    if config.has_basic_analytics:
        return "basic"
    return "none"


def _format_quota(current: int, quota: Optional[int]) -> str:
    if quota is None:
        return UNLIMITED_SYMBOL
    return f"{current} / {quota}"


def get_quota_display(plan: Any, counts: UsageCounts) -> str:
    """
    Format a human-readable quota summary, e.g. "Job: 2 / 10, Featured: 1 / 3".

    Featured and Urgent are omitted when the plan quota is 0; CV is omitted
    without CV database access.
    """
    config = get_plan_config(plan)
    for resource in QuotaResource:
        _validate_count(counts.get(resource))

    parts = [f"Job: {_format_quota(counts.job_posting, config.job_posting_quota)}"]

    if config.featured_quota != 0:
        parts.append(f"Featured: {_format_quota(counts.featured, config.featured_quota)}")

    if config.urgent_quota != 0:
        parts.append(f"Urgent: {_format_quota(counts.urgent, config.urgent_quota)}")

    if config.has_cv_database:
        parts.append(f"CV: {_format_quota(counts.cv_download, config.cv_download_quota)}")

    return ", ".join(parts)


def _usage_percentage(current: int, quota: Optional[int]) -> int:
    if not quota:
        return 0
    return round(current / quota * 100)


def get_quota_info(plan: Any, counts: UsageCounts) -> Dict[str, Any]:
    """
    Get structured quota data for a plan and its current usage.

    Returns:
        Dictionary with plan, per-resource usage details and feature flags.
        Each resource has: current, limit, remaining, unlimited, available,
        percentage
    """
    plan = normalize_plan(plan)
    config = PLAN_CONFIGS[plan]

    resources = {}
    for resource in QuotaResource:
        current = _validate_count(counts.get(resource))
        quota = config.quota_for(resource)
        available = quota != 0
        if resource is QuotaResource.CV_DOWNLOAD:
            available = available and config.has_cv_database

        resources[resource.value] = {
            "current": current,
            "limit": quota,
            "remaining": None if quota is None else max(0, quota - current),
            "unlimited": quota is None,
            "available": available,
            "percentage": _usage_percentage(current, quota),
        }

    return {
        "plan": plan.value,
        "resources": resources,
        "features": {
            "has_basic_analytics": config.has_basic_analytics,
            "has_advanced_analytics": config.has_advanced_analytics,
            "analytics_level": analytics_level(plan),
            "has_cv_database": config.has_cv_database,
            "has_verified_badge": config.has_verified_badge,
            "job_duration": config.job_duration,
            "support_level": config.support_level.value,
        },
    }
