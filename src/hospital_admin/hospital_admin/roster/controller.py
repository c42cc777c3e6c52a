from __future__ import annotations

import logging
from datetime import date
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, LoadError, ValidationError
from ..container import Container
from ..shifts.model import ShiftRecord
from ..staff.model import StaffMember
from .aggregator import DutyStatus
from .service import ensure_can_view_roster

logger = logging.getLogger(__name__)


def _staff_json(m: StaffMember) -> dict:
    return {
        "id": m.staff_id,
        "first_name": m.first_name,
        "last_name": m.last_name,
        "display_name": m.display_name,
        "initials": m.initials,
        "role": m.role.value,
        "department": m.department,
        "contact_number": m.contact_number,
        "email": m.email,
        "employee_id": m.employee_id,
    }


def _shift_json(s: ShiftRecord) -> dict:
    return {
        "id": s.shift_id,
        "staff_id": s.staff_id,
        "date": s.work_date.isoformat(),
        "start_time": s.start_time,
        "end_time": s.end_time,
        "status": s.status.value,
        "status_label": s.status.label,
        "type": s.shift_type,
        "department": s.department,
    }


def _duty_json(d: DutyStatus) -> dict:
    return {
        "on_duty": d.on_duty,
        "shift": _shift_json(d.shift) if d.shift else None,
        "remaining": str(d.remaining) if d.remaining else None,
        "remaining_minutes": d.remaining.total_minutes if d.remaining else None,
    }


def register(app: Flask, container: Container) -> None:
    def roster_view(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Login required"}), 401
            try:
                role = Role(session.get("role")) if session.get("role") else None
            except ValueError:
                role = None
            try:
                ensure_can_view_roster(role)
                return view(*args, **kwargs)
            except AuthorizationError as e:
                return jsonify({"success": False, "message": str(e)}), 403
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except LoadError as e:
                return jsonify({"success": False, "message": str(e)}), 503
            except Exception:
                logger.exception("Unexpected error in %s", view.__name__)
                return jsonify({"success": False, "message": "Internal server error"}), 500

        return wrapper

    def _date_arg(name: str) -> date:
        value = request.args.get(name)
        if not value:
            return now_local().date()
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"Invalid date: {value}") from None

    @app.route("/api/staff", methods=["GET"], endpoint="api_staff")
    @roster_view
    def api_staff():
        entries = container.roster_service.roster(
            search=request.args.get("q", ""),
            department=request.args.get("department", ""),
            now=now_local(),
        )
        return jsonify({
            "success": True,
            "staff": [{**_staff_json(e.staff), "duty": _duty_json(e.duty)} for e in entries],
        })

    @app.route("/api/staff/departments", methods=["GET"], endpoint="api_staff_departments")
    @roster_view
    def api_staff_departments():
        return jsonify({"success": True, "departments": container.roster_service.departments()})

    @app.route("/api/schedule", methods=["GET"], endpoint="api_schedule")
    @roster_view
    def api_schedule():
        view = container.roster_service.schedule(_date_arg("date"), now=now_local())
        return jsonify({
            "success": True,
            "date": view.work_date.isoformat(),
            "summary": {
                "on_duty": view.summary.on_duty,
                "scheduled": view.summary.scheduled,
                "total": view.summary.total,
            },
            "shifts": [
                {
                    **_shift_json(item.shift),
                    "staff": _staff_json(item.staff),
                    "remaining": str(item.remaining) if item.remaining else None,
                }
                for item in view.items
            ],
            "coverage": [
                {
                    "department": c.department,
                    "total_shifts": c.total_shifts,
                    "on_duty": [
                        {"name": m.full_name, "until": s.end_time} for m, s in c.active_shifts
                    ],
                }
                for c in view.coverage.values()
            ],
        })

    @app.route("/api/schedule/week", methods=["GET"], endpoint="api_schedule_week")
    @roster_view
    def api_schedule_week():
        week = container.roster_service.week(now=now_local())
        return jsonify({
            "success": True,
            "days": {day: [_shift_json(s) for s in shifts] for day, shifts in week.items()},
        })
