from flask import Blueprint, jsonify

from lending.models.user import ADMIN_ROLES
from lending.services.notification_service import NotificationService
from lending.utils.decorators import role_required

notif_bp = Blueprint("notifications", __name__)


@notif_bp.post("/run-overdue-check")
@role_required(*ADMIN_ROLES)
def run_overdue_check():
    summary = NotificationService.notify_overdue()
    return jsonify({"success": True, "message": "Overdue check finished", "data": summary})
