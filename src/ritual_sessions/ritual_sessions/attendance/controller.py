from __future__ import annotations

import csv
import io

from flask import Flask, Response, jsonify

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_participant_id, current_role, json_body, parse_session_type
from ..container import Container
from ..core.enums import ADMIN_ROLES, SessionStatus
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    reconciler = container.reconciler

    def _require_editor(participant_id: int) -> None:
        # Admins edit the whole roster; members only their own row.
        if current_role() in ADMIN_ROLES:
            return
        if current_participant_id() != participant_id:
            raise AuthorizationError("You can only update your own attendance")

    @app.route(
        "/api/sessions/<type_s>/<day_s>/attendance/<int:participant_id>",
        methods=["PUT"],
        endpoint="api_attendance_set",
    )
    def attendance_set(type_s: str, day_s: str, participant_id: int):
        _require_editor(participant_id)
        body = json_body()
        mark = reconciler.set_tentative_status(
            day=parse_iso_date(day_s),
            session_type=parse_session_type(type_s),
            participant_id=participant_id,
            status=body.get("status") or "",
            reason=body.get("reason"),
        )
        return jsonify({"participant_id": participant_id, "status": mark.status.value, "reason": mark.reason})

    @app.route(
        "/api/sessions/<type_s>/<day_s>/attendance/<int:participant_id>",
        methods=["DELETE"],
        endpoint="api_attendance_clear",
    )
    def attendance_clear(type_s: str, day_s: str, participant_id: int):
        _require_editor(participant_id)
        reconciler.clear_tentative_status(
            day=parse_iso_date(day_s), session_type=parse_session_type(type_s), participant_id=participant_id
        )
        return "", 204

    @app.route("/api/sessions/<type_s>/<day_s>/attendance", methods=["GET"], endpoint="api_attendance_list")
    def attendance_list(type_s: str, day_s: str):
        day, session_type = parse_iso_date(day_s), parse_session_type(type_s)
        session = container.lifecycle_service.get(day=day, session_type=session_type)
        stats = reconciler.statistics(day=day, session_type=session_type).to_dict()

        if session.status == SessionStatus.ENDED:
            roster = reconciler.final_roster(day=day, session_type=session_type)
            return jsonify({"final": True, "statistics": stats, **roster.to_dict()})

        rows = reconciler.working_set(day=day, session_type=session_type)
        return jsonify({"final": False, "statistics": stats, "roster": [r.to_dict() for r in rows]})

    @app.route("/api/sessions/<type_s>/<day_s>/attendance.csv", methods=["GET"], endpoint="api_attendance_export")
    def attendance_export(type_s: str, day_s: str):
        day, session_type = parse_iso_date(day_s), parse_session_type(type_s)
        roster = reconciler.final_roster(day=day, session_type=session_type)
        names = {p.participant_id: p for p in container.participants_repo.list_active()}

        out = io.StringIO()
        writer = csv.writer(out)
        writer.writerow(["date", "participant_id", "name", "email", "status", "reason", "marked_at"])
        for m in roster.marks:
            p = names.get(m.participant_id)
            writer.writerow(
                [
                    day.isoformat(),
                    m.participant_id,
                    p.name if p else "",
                    p.email if p else "",
                    m.status.value,
                    m.reason or "",
                    m.marked_at.strftime("%Y-%m-%d %H:%M:%S"),
                ]
            )

        filename = f"{session_type.value}_{day.isoformat()}.csv"
        return Response(
            out.getvalue(),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
