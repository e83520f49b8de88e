from __future__ import annotations

import io

from flask import Flask, jsonify, redirect, request, send_file, url_for

from ..container import Container
from ..core.enums import CheckInState
from . import codes


def register(app: Flask, container: Container) -> None:
    service = container.registration_service

    def _serialize(attendee) -> dict:
        data = attendee.to_dict()
        base = (app.config.get("PUBLIC_BASE_URL") or "").rstrip("/")
        if base:
            data["participant_url"] = f"{base}/participant/{attendee.attendee_id}"
        return data

    @app.route("/api/attendees", methods=["POST"], endpoint="api_register_attendee")
    def api_register_attendee():
        form = request.get_json(silent=True)
        if not isinstance(form, dict):
            form = request.form.to_dict()

        result = service.register(form)
        if result.ok:
            return jsonify({"success": True, "attendee": _serialize(result.attendee)}), 201
        if result.errors:
            return jsonify({"success": False, "message": result.message, "errors": result.errors}), 422
        return jsonify({"success": False, "message": result.message}), 503

    @app.route("/api/attendees", methods=["GET"], endpoint="api_list_attendees")
    def api_list_attendees():
        search = request.args.get("search", "")
        status = (request.args.get("status") or "").strip().lower()

        state = None
        if status:
            try:
                state = CheckInState(status)
            except ValueError:
                return jsonify({"success": False, "message": f"Unknown status '{status}'"}), 400

        result = service.list_attendees(search=search, state=state)
        if not result.ok:
            return jsonify({"success": False, "message": result.error}), 503
        return jsonify(
            {
                "success": True,
                "count": len(result.attendees),
                "attendees": [_serialize(a) for a in result.attendees],
            }
        )

    @app.route("/api/attendees/summary", methods=["GET"], endpoint="api_attendee_summary")
    def api_attendee_summary():
        result = service.summary()
        if not result.ok:
            return jsonify({"success": False, "message": result.error}), 503
        return jsonify({"success": True, **result.counts()})

    @app.route("/api/attendees/<attendee_id>", methods=["GET"], endpoint="api_get_attendee")
    def api_get_attendee(attendee_id: str):
        result = service.get_attendee(attendee_id)
        if result.error:
            return jsonify({"success": False, "message": result.error}), 503
        if not result.found:
            return jsonify({"success": False, "message": "Attendee not found."}), 404
        return jsonify({"success": True, "attendee": _serialize(result.attendee)})

    # Target of the participant link printed next to the QR code.
    @app.route("/participant/<attendee_id>", methods=["GET"], endpoint="participant_page")
    def participant_page(attendee_id: str):
        return redirect(url_for("api_get_attendee", attendee_id=attendee_id))

    @app.route("/api/attendees/<attendee_id>/qr.png", methods=["GET"], endpoint="api_attendee_qr")
    def api_attendee_qr(attendee_id: str):
        result = service.get_attendee(attendee_id)
        if result.error:
            return jsonify({"success": False, "message": result.error}), 503
        if not result.found:
            return jsonify({"success": False, "message": "Attendee not found."}), 404

        png = codes.render_png(result.attendee.code_payload)
        return send_file(
            io.BytesIO(png),
            mimetype="image/png",
            download_name=f"attendee_{attendee_id}.png",
        )
