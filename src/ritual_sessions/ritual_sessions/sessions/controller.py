from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_elapsed, now_local, parse_iso_date, parse_iso_datetime
from ..common.http import current_operator, current_role, json_body, parse_session_type
from ..common.validators import require_non_empty
from ..container import Container
from ..core.enums import SessionStatus


def register(app: Flask, container: Container) -> None:
    lifecycle = container.lifecycle_service

    def _when_from_body():
        return parse_iso_datetime(require_non_empty(json_body().get("when"), "when"))

    @app.route("/api/sessions", methods=["GET"], endpoint="api_sessions_list")
    def sessions_list():
        today = now_local().date()
        start = parse_iso_date(request.args.get("start") or today.isoformat())
        end = parse_iso_date(request.args.get("end") or (start + timedelta(days=6)).isoformat())
        type_s = request.args.get("type")
        session_type = parse_session_type(type_s) if type_s else None

        sessions = lifecycle.list_range(start=start, end=end, session_type=session_type)
        return jsonify({"sessions": [s.to_dict() for s in sessions]})

    @app.route("/api/sessions/<type_s>/<day_s>", methods=["GET"], endpoint="api_session_detail")
    def session_detail(type_s: str, day_s: str):
        day, session_type = parse_iso_date(day_s), parse_session_type(type_s)
        s = lifecycle.get(day=day, session_type=session_type)

        data = s.to_dict()
        if s.status == SessionStatus.ACTIVE and s.started_at:
            data["elapsed"] = format_elapsed(s.started_at, now_local())
        data["statistics"] = container.reconciler.statistics(day=day, session_type=session_type).to_dict()
        return jsonify(data)

    @app.route("/api/sessions/<type_s>/<day_s>/schedule", methods=["POST"], endpoint="api_session_schedule")
    def session_schedule(type_s: str, day_s: str):
        s = lifecycle.schedule(
            current_role=current_role(),
            day=parse_iso_date(day_s),
            session_type=parse_session_type(type_s),
            when=_when_from_body(),
            operator=current_operator(),
        )
        return jsonify(s.to_dict()), 201

    @app.route("/api/sessions/<type_s>/<day_s>/reschedule", methods=["POST"], endpoint="api_session_reschedule")
    def session_reschedule(type_s: str, day_s: str):
        s = lifecycle.reschedule(
            current_role=current_role(),
            day=parse_iso_date(day_s),
            session_type=parse_session_type(type_s),
            when=_when_from_body(),
        )
        return jsonify(s.to_dict())

    @app.route("/api/sessions/<type_s>/<day_s>/activate", methods=["POST"], endpoint="api_session_activate")
    def session_activate(type_s: str, day_s: str):
        s = lifecycle.activate(
            current_role=current_role(), day=parse_iso_date(day_s), session_type=parse_session_type(type_s)
        )
        return jsonify(s.to_dict())

    @app.route("/api/sessions/<type_s>/<day_s>/terminate", methods=["POST"], endpoint="api_session_terminate")
    def session_terminate(type_s: str, day_s: str):
        result = lifecycle.terminate(
            current_role=current_role(), day=parse_iso_date(day_s), session_type=parse_session_type(type_s)
        )
        return jsonify({"session": result.session.to_dict(), "roster": result.roster.to_dict()})

    @app.route("/api/sessions/<type_s>/<day_s>/sync", methods=["POST"], endpoint="api_session_sync")
    def session_sync(type_s: str, day_s: str):
        s = lifecycle.mark_synced(day=parse_iso_date(day_s), session_type=parse_session_type(type_s))
        return jsonify(s.to_dict())
