from __future__ import annotations

import io

from flask import Flask, jsonify, request, send_file, session

from ..container import Container
from ..web.guards import EDITORS, roles_required
from .excel import XLSX_MIMETYPE
from .pagination import ReportPreview
from .service import COLUMNS, ExportFile, ReportFilters, parse_report_type

_PREVIEW_KEY = "report_preview"


def register(app: Flask, container: Container) -> None:
    def _download(export: ExportFile):
        return send_file(
            io.BytesIO(export.content),
            download_name=export.filename,
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/reports", methods=["GET"], endpoint="reports")
    @roles_required(*EDITORS)
    def reports():
        report_type = parse_report_type(request.args.get("type"))
        filters = ReportFilters.from_mapping(request.args)

        preview = ReportPreview.from_session(session.get(_PREVIEW_KEY))
        preview.select(report_type, filters, request.args.get("page", 1))

        rows, summary = container.report_service.overview(report_type, filters)
        page = preview.render(rows, int(app.config.get("REPORT_PAGE_SIZE", 10)))
        session[_PREVIEW_KEY] = preview.to_session()

        return jsonify(
            {
                "type": report_type.value,
                "filters": filters.as_dict(),
                "columns": list(COLUMNS[report_type]),
                "rows": page.rows,
                "page": page.page,
                "total_pages": page.total_pages,
                "total_items": page.total_items,
                "page_size": page.page_size,
                "summary": summary,
            }
        )

    @app.route("/reports/export", methods=["GET"], endpoint="export_report")
    @roles_required(*EDITORS)
    def export_report():
        report_type = parse_report_type(request.args.get("type"))
        filters = ReportFilters.from_mapping(request.args)
        return _download(container.report_service.export(report_type, filters))

    @app.route("/reports/export/complete", methods=["GET"], endpoint="export_complete_report")
    @roles_required(*EDITORS)
    def export_complete_report():
        return _download(container.report_service.export_complete())
