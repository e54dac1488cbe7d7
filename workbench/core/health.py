from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from workbench.core.settings import settings
from workbench.services import requirement_catalog

APP_VERSION = "0.1.0"


async def _check_catalog() -> dict[str, Any]:
    try:
        lenders = requirement_catalog.list_lenders()
        baseline = requirement_catalog.get_requirements_for_funder(requirement_catalog.BASELINE_KEY)
    except Exception as exc:  # pragma: no cover - exercised in runtime
        return {"status": "error", "error": str(exc)}
    if not baseline:
        return {"status": "error", "error": "baseline requirements are empty"}
    return {"status": "ok", "lenders": len(lenders)}


async def _check_api() -> dict[str, str]:
    return {"status": "ok", "version": APP_VERSION}


def _overall_status(checks: dict[str, dict[str, Any]]) -> tuple[str, bool]:
    ready = all(check.get("status") == "ok" for check in checks.values())
    return ("ok" if ready else "degraded", ready)


async def live_payload() -> dict[str, str]:
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def ready_payload() -> dict[str, Any]:
    checks = {
        "api": await _check_api(),
        "catalog": await _check_catalog(),
    }
    overall, ready = _overall_status(checks)
    return {
        "status": overall,
        "ready": ready,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }


async def status_summary_payload() -> dict[str, Any]:
    payload = await ready_payload()
    payload["version"] = APP_VERSION
    return payload
