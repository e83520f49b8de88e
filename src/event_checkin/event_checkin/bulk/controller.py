from __future__ import annotations

import io
import logging
import zipfile

from flask import Flask, jsonify, request, send_file

from ..container import Container
from ..core.enums import ExportFormat
from ..core.exceptions import StorageError
from .spreadsheet import UnsupportedFileError

logger = logging.getLogger(__name__)

_MIMETYPES = {
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.CSV: "text/csv",
}


def register(app: Flask, container: Container) -> None:
    service = container.bulk_service

    @app.route("/api/attendees/import", methods=["POST"], endpoint="api_import_attendees")
    def api_import_attendees():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return jsonify({"success": False, "message": "No file uploaded."}), 400

        try:
            report = service.import_file(upload.stream, upload.filename)
        except UnsupportedFileError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except (ValueError, zipfile.BadZipFile) as e:
            # pandas/openpyxl reject corrupt or mislabelled workbooks.
            logger.warning("Could not read uploaded sheet %s: %s", upload.filename, e)
            return jsonify({"success": False, "message": "Could not read the uploaded file."}), 400
        except StorageError:
            logger.exception("Import of %s failed", upload.filename)
            return jsonify({"success": False, "message": "Could not save the imported attendees."}), 503

        return jsonify({"success": True, **report.to_dict()})

    # Static rules so they win over /api/attendees/<attendee_id>.
    @app.route("/api/attendees/export.xlsx", methods=["GET"], endpoint="api_export_xlsx", defaults={"fmt": "xlsx"})
    @app.route("/api/attendees/export.csv", methods=["GET"], endpoint="api_export_csv", defaults={"fmt": "csv"})
    def api_export_attendees(fmt: str):
        export_format = ExportFormat(fmt)

        try:
            content = service.export(export_format)
        except StorageError:
            logger.exception("Export failed")
            return jsonify({"success": False, "message": "Could not load attendees."}), 503

        return send_file(
            io.BytesIO(content),
            mimetype=_MIMETYPES[export_format],
            as_attachment=True,
            download_name=f"attendees.{export_format.value}",
        )
