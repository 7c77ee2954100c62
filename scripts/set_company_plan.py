"""
Script to move a company to another subscription plan.
Run: python -m scripts.set_company_plan <company_id> <plan>
"""
import argparse
import logging
import sys

from app.db.session import SessionLocal
from app.core.subscription_plans import SubscriptionPlan, InvalidPlanError
from app.services.quota_service import CompanyNotFoundError, change_plan

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Change a company's subscription plan")
    parser.add_argument("company_id", type=int)
    parser.add_argument("plan", choices=[plan.value for plan in SubscriptionPlan])
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        company = change_plan(db, args.company_id, args.plan)
    except (CompanyNotFoundError, InvalidPlanError) as e:
        logger.error(str(e))
        return 1
    finally:
        db.close()

    print(f"[SUCCESS] Company {company.id} ({company.name}) is now on the {company.subscription_plan} plan")
    return 0


if __name__ == "__main__":
    sys.exit(main())
