from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from lending.tasks.overdue_check import run_overdue_check_job


def start_scheduler(app):
    """
    Starts the overdue reminder job.
    - Skipped when SCHEDULER_ENABLED is off (tests, one-off CLI runs).
    - Skipped in the debug reloader's watcher process so the job runs once.
    """
    if not app.config.get("SCHEDULER_ENABLED", False):
        app.logger.info("[scheduler] Disabled by config.")
        return None

    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    scheduler = BackgroundScheduler(timezone="UTC")

    def _job_wrapper():
        try:
            run_overdue_check_job(app)
        except Exception as ex:
            # already logged with traceback; keep the scheduler thread alive
            app.logger.error(f"[scheduler] overdue_check_job failed: {ex}")

    minutes = app.config.get("OVERDUE_CHECK_MINUTES", 10)
    scheduler.add_job(
        func=_job_wrapper,
        trigger=IntervalTrigger(minutes=minutes),
        id="overdue_check_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=120
    )

    scheduler.start()
    app.logger.info(f"[scheduler] Overdue check job started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler
    atexit.register(lambda: scheduler.shutdown(wait=False))
    return scheduler
