from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_participant_id, json_body
from ..container import Container
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    points = container.learning_point_service

    def _require_participant() -> int:
        participant_id = current_participant_id()
        if participant_id is None:
            raise AuthorizationError("Sign in as a team member to write learning points")
        return participant_id

    @app.route("/api/learning-points/<day_s>", methods=["GET"], endpoint="api_learning_points_list")
    def learning_points_list(day_s: str):
        day = parse_iso_date(day_s)
        pid_s = request.args.get("participant_id")
        participant_id = int(pid_s) if pid_s and pid_s.isdigit() else None
        return jsonify(
            {
                "day": day.isoformat(),
                "editable": points.is_editable(day),
                "points": points.list_for_day(day=day, participant_id=participant_id),
            }
        )

    @app.route("/api/learning-points/<day_s>", methods=["POST"], endpoint="api_learning_points_add")
    def learning_points_add(day_s: str):
        body = json_body()
        point_id = points.add_point(
            participant_id=_require_participant(),
            day=parse_iso_date(day_s),
            task_name=body.get("task_name") or "",
            point_type=body.get("point_type") or "",
            details=body.get("details") or {},
        )
        return jsonify({"point_id": point_id}), 201

    @app.route("/api/learning-points/item/<int:point_id>", methods=["PUT"], endpoint="api_learning_points_update")
    def learning_points_update(point_id: int):
        body = json_body()
        points.update_point(
            participant_id=_require_participant(),
            point_id=point_id,
            task_name=body.get("task_name") or "",
            point_type=body.get("point_type") or "",
            details=body.get("details") or {},
        )
        return "", 204
