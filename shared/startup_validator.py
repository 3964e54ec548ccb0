"""
Startup configuration validation module.

This module provides startup-time validation for the Stripe credentials
so that a misconfigured deployment fails fast instead of failing the first
customer that tries to pay.

Usage:
    from shared.startup_validator import validate_startup_config, StartupValidationError

    try:
        validate_startup_config(settings)
    except StartupValidationError as e:
        logger.critical(f"Startup blocked: {e}")
        sys.exit(1)
"""

import logging

from shared.config import Settings
from shared.customer_resolver import CUSTOMER_RESOLVERS

logger = logging.getLogger(__name__)

SECRET_KEY_PREFIX = "sk_"
TEST_SECRET_KEY_PREFIX = "sk_test_"


class StartupValidationError(Exception):
    """Raised when critical startup validation fails."""

    pass


def validate_startup_config(settings: Settings) -> dict[str, bool]:
    """
    Validate Stripe configuration at startup.

    Performs tiered validation:
    - TIER 1 (CRITICAL): Block startup if any fail
    - TIER 2 (IMPORTANT): Warn but allow startup; the affected endpoint
      degrades on its own

    Args:
        settings: Loaded application settings

    Returns:
        dict of {check_name: passed} for all validations

    Raises:
        StartupValidationError: If any CRITICAL check fails
    """
    results: dict[str, bool] = {}
    critical_failures: list[str] = []

    # =========================================================================
    # TIER 1: CRITICAL (block startup if any fail)
    # =========================================================================

    secret_key = settings.STRIPE_SECRET_KEY
    if not secret_key:
        critical_failures.append("STRIPE_SECRET_KEY is missing")
        results["stripe_secret_key"] = False
    elif not secret_key.startswith(SECRET_KEY_PREFIX):
        critical_failures.append(
            f"STRIPE_SECRET_KEY is invalid - expected a key starting with '{SECRET_KEY_PREFIX}'"
        )
        results["stripe_secret_key"] = False
    else:
        results["stripe_secret_key"] = True
        logger.info("  [OK] Stripe secret key configured")

    if settings.CUSTOMER_STRATEGY.lower() not in CUSTOMER_RESOLVERS:
        critical_failures.append(
            f"CUSTOMER_STRATEGY '{settings.CUSTOMER_STRATEGY}' is unknown - "
            f"use one of: {', '.join(sorted(CUSTOMER_RESOLVERS))}"
        )
        results["customer_strategy"] = False
    else:
        results["customer_strategy"] = True

    # =========================================================================
    # TIER 2: IMPORTANT (warn but allow startup)
    # =========================================================================

    if not settings.STRIPE_PUBLISHABLE_KEY:
        logger.warning("  [WARN] STRIPE_PUBLISHABLE_KEY missing - /stripe-key will return 500")
        results["stripe_publishable_key"] = False
    else:
        results["stripe_publishable_key"] = True
        logger.info("  [OK] Stripe publishable key configured")

    if not settings.STRIPE_WEBHOOK_SECRET:
        logger.warning("  [WARN] STRIPE_WEBHOOK_SECRET missing - webhooks will be rejected")
        results["stripe_webhook_secret"] = False
    else:
        results["stripe_webhook_secret"] = True
        logger.info("  [OK] Stripe webhook secret configured")

    if (
        results["stripe_secret_key"]
        and not settings.is_development
        and secret_key.startswith(TEST_SECRET_KEY_PREFIX)
    ):
        logger.warning(
            f"Running with a Stripe test key in environment '{settings.ENVIRONMENT}'"
        )

    # =========================================================================
    # Summary and result
    # =========================================================================

    passed = sum(1 for v in results.values() if v)
    total = len(results)
    logger.info(f"Startup validation: {passed}/{total} checks passed")

    if critical_failures:
        logger.critical("STARTUP BLOCKED - Critical configuration errors:")
        for i, failure in enumerate(critical_failures, 1):
            logger.critical(f"  {i}. {failure}")
        raise StartupValidationError(
            f"Critical startup validation failed ({len(critical_failures)} errors): "
            f"{'; '.join(critical_failures)}"
        )

    return results
