from __future__ import annotations
import sys

from mediadesk import __version__
from mediadesk.backend.common.logging import get_logger, init_logging
from mediadesk.backend.common.tasks import TaskRunner
from mediadesk.backend.common.types import HealthReport
from mediadesk.backend.content.public_api import PublicAPI
from mediadesk.backend.content.store import PublicDataStore
from mediadesk.config.settings import get_settings



def quick_self_check(api: PublicAPI) -> HealthReport:
    components = {
        "python": "ok" if sys.version_info >= (3, 10) else "degraded",
        "logging": "ok",
        "config": "ok",
        "content_api": "ok" if api.health_check().success else "fail",
    }

    if all(v == "ok" for v in components.values()):
        status = "ok"
    elif components["content_api"] == "fail":
        status = "fail"
    else:
        status = "degraded"

    return {"status": status, "components": components}


def main() -> int:
    settings = get_settings()

    init_logging(settings.log_level)
    log = get_logger("mediadesk.startup")

    log.info("boot_begin", extra={"app": settings.app_name, "env": settings.env, "api": settings.api_base_url})

    api = PublicAPI()
    health = quick_self_check(api)
    log.info("health_report", extra=dict(health))
    if health["status"] == "fail":
        log.error("boot_failed", extra={"reason": "content API unavailable"})
        return 1

    with TaskRunner(max_workers=settings.task_workers, context="startup") as runner:
        store = PublicDataStore(api, task_runner=runner)
        store.refresh()

    log.info("boot_ready", extra={"version": __version__, "items": len(store.all_items())})

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
