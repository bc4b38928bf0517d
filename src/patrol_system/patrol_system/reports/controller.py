from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import fail_from, fail_unexpected, ok
from ..container import Container
from ..core.enums import Permission
from ..core.exceptions import DomainError
from ..users.decorators import permission_required
from .pdf import render_matrix_pdf, render_monthly_pdf


def _wants_pdf() -> bool:
    return (request.args.get("format") or "").strip().lower() == "pdf"


def _pdf_response(content: bytes, filename: str):
    return send_file(
        io.BytesIO(content),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=filename,
    )


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service

    @app.route("/api/reports/monthly", methods=["GET"], endpoint="api_reports_monthly")
    @permission_required(auth, Permission.REPORTS_READ)
    def monthly_report():
        try:
            report = container.report_service.monthly_list(request.args.get("month"), request.args.get("year"))
            if _wants_pdf():
                return _pdf_response(render_monthly_pdf(report), f"patrol_{report.year}_{report.month:02d}.pdf")
            return ok(report.to_dict())
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "building the monthly report")

    @app.route("/api/reports/matrix", methods=["GET"], endpoint="api_reports_matrix")
    @permission_required(auth, Permission.REPORTS_READ)
    def matrix_report():
        try:
            matrix = container.report_service.coverage_matrix(request.args.get("month"), request.args.get("year"))
            if _wants_pdf():
                return _pdf_response(render_matrix_pdf(matrix), f"coverage_{matrix.year}_{matrix.month:02d}.pdf")
            return ok(matrix.to_dict())
        except DomainError as e:
            return fail_from(e)
        except Exception as e:
            return fail_unexpected(e, "building the coverage matrix")
