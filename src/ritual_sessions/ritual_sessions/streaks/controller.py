from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import parse_session_type
from ..container import Container
from ..core.enums import SessionType


def register(app: Flask, container: Container) -> None:
    @app.route("/api/participants/<int:participant_id>/streak", methods=["GET"], endpoint="api_participant_streak")
    def participant_streak(participant_id: int):
        session_type = parse_session_type(request.args.get("type") or SessionType.STANDUP.value)
        today_s = request.args.get("today")
        today = parse_iso_date(today_s) if today_s else None

        streak = container.streak_service.streak_for(
            participant_id=participant_id, session_type=session_type, today=today
        )
        return jsonify({"participant_id": participant_id, "type": session_type.value, "streak": streak})
