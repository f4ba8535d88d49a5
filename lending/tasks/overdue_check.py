from lending.extensions import db
from lending.services.notification_service import NotificationService


def run_overdue_check_job(app):
    """Scheduler entry point: overdue reminder run inside an app context."""
    with app.app_context():
        try:
            return NotificationService.notify_overdue()
        except Exception as e:
            db.session.rollback()
            app.logger.exception(f"[overdue_check] Error: {e}")
            raise
