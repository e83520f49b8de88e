from __future__ import annotations

from flask import Flask, jsonify, request
from PIL import Image, UnidentifiedImageError

from ..container import Container
from .model import CheckInResult


def register(app: Flask, container: Container) -> None:
    service = container.checkin_service

    def _respond(result: CheckInResult):
        return jsonify(result.to_dict()), 503 if result.storage_failed else 200

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    def api_checkin():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        code = str(data.get("code") or "").strip()
        attendee_id = str(data.get("id") or "").strip()

        if not code and not attendee_id:
            return jsonify({"success": False, "message": "QR code must not be empty."}), 400

        result = service.check_in(attendee_id) if attendee_id else service.check_in_code(code)
        return _respond(result)

    @app.route("/api/checkin/image", methods=["POST"], endpoint="api_checkin_image")
    def api_checkin_image():
        upload = request.files.get("image")
        if upload is None or not upload.filename:
            return jsonify({"success": False, "message": "No image uploaded."}), 400

        try:
            img = Image.open(upload.stream)
            img.load()
        except (UnidentifiedImageError, OSError):
            return jsonify({"success": False, "message": "The uploaded file is not an image."}), 400

        # pyzbar loads the native zbar library on import.
        from pyzbar.pyzbar import decode as pyzbar_decode

        decoded = pyzbar_decode(img)
        if not decoded:
            return jsonify({"success": False, "message": "No QR code found in the image."}), 400

        text = decoded[0].data.decode("utf-8", errors="replace")
        return _respond(service.check_in_code(text))

    @app.route("/api/attendees/<attendee_id>/checkin", methods=["DELETE"], endpoint="api_clear_checkin")
    def api_clear_checkin(attendee_id: str):
        result = service.clear_check_in(attendee_id)
        if result.storage_failed:
            return jsonify(result.to_dict()), 503
        if not result.found:
            return jsonify(result.to_dict()), 404
        return jsonify(result.to_dict())
