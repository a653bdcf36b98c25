# app/utils/pdf_generators/report_pdf.py
import os
from collections import defaultdict
from datetime import datetime
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from app.core.config import PDF_OUTPUT_DIR
from app.models.reports.report_models import Report
from app.services.reports.report_service import load_report, build_balance
from app.utils.decimal_utils import ZERO, format_brl, to_decimal
from app.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_LABELS = {
    "in_progress": "Em andamento",
    "reimbursed": "Reembolsado",
    "closed": "Fechado",
}

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
    ("ALIGN", (-1, 1), (-1, -1), "RIGHT"),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
])


def _fmt_date(value) -> str:
    return value.strftime("%d/%m/%Y") if value else "N/A"


def _text(value) -> str:
    return escape(str(value)) if value else "N/A"


def _expense_rows(report: Report) -> list:
    rows = [["Data", "Categoria", "Descrição", "Fornecedor", "Valor"]]
    for e in sorted(report.expenses, key=lambda x: (x.expense_date, x.id)):
        rows.append([
            _fmt_date(e.expense_date),
            e.category.name if e.category else "-",
            Paragraph(escape(e.description)),
            e.supplier or "-",
            format_brl(e.amount),
        ])
    return rows


def _category_rows(report: Report) -> list:
    totals = defaultdict(lambda: ZERO)
    for e in report.expenses:
        totals[e.category.name if e.category else "-"] += to_decimal(e.amount)

    rows = [["Categoria", "Total"]]
    for name, total in sorted(totals.items(), key=lambda kv: kv[1], reverse=True):
        rows.append([name, format_brl(total)])
    return rows


def _mileage_rows(report: Report) -> list:
    per_vehicle = defaultdict(lambda: {"km": ZERO, "amount": ZERO, "trips": 0})
    for e in report.expenses:
        m = e.mileage
        if not m:
            continue
        v = m.vehicle
        label = " ".join(p for p in (v.brand, v.model, f"[{v.identification}]") if p) if v else "-"
        bucket = per_vehicle[label]
        bucket["km"] += to_decimal(m.distance_km)
        bucket["amount"] += m.mileage_amount
        bucket["trips"] += 1

    rows = [["Veículo", "Viagens", "Km", "Valor"]]
    for label, b in per_vehicle.items():
        rows.append([label, str(b["trips"]), f"{b['km']:.2f}", format_brl(b["amount"])])
    return rows


async def generate_report_pdf(db, report_id: int) -> str:
    """
    Render the expense report (details, expenses, category and vehicle
    subtotals, advance reconciliation and signature lines) to a PDF file
    and return its path.
    """
    report = await load_report(db, report_id)
    block = build_balance(report)

    os.makedirs(PDF_OUTPUT_DIR, exist_ok=True)
    file_path = os.path.join(PDF_OUTPUT_DIR, f"RDV_{report.id}.pdf")

    styles = getSampleStyleSheet()
    story = []

    # -----------------------------
    # HEADER
    # -----------------------------
    story.append(Paragraph("<b>RELATÓRIO DE DESPESAS DE VIAGEM</b>", styles["Title"]))
    story.append(Paragraph(f"RDV #{report.id} - {_text(report.title)}", styles["Heading2"]))
    story.append(Paragraph(
        f"Emitido em {datetime.now().strftime('%d/%m/%Y %H:%M')}",
        styles["Normal"],
    ))
    story.append(Spacer(1, 15))

    # -----------------------------
    # REPORT DETAILS
    # -----------------------------
    story.append(Paragraph("<b>Dados do relatório:</b>", styles["Heading3"]))
    story.append(Paragraph(
        f"Período: {_fmt_date(report.start_date)} a {_fmt_date(report.end_date)}",
        styles["Normal"],
    ))
    story.append(Paragraph(f"Destino: {_text(report.destination)}", styles["Normal"]))
    story.append(Paragraph(f"Propósito: {_text(report.purpose)}", styles["Normal"]))
    story.append(Paragraph(f"Cliente: {_text(report.client)}", styles["Normal"]))
    story.append(Paragraph(
        f"Status: {STATUS_LABELS.get(report.status.value, report.status.value)}",
        styles["Normal"],
    ))
    if report.notes:
        story.append(Paragraph(f"Observações: {_text(report.notes)}", styles["Normal"]))
    story.append(Spacer(1, 15))

    # -----------------------------
    # EXPENSES
    # -----------------------------
    story.append(Paragraph("<b>Despesas:</b>", styles["Heading3"]))
    if report.expenses:
        table = Table(_expense_rows(report), colWidths=[60, 90, 170, 100, 80], repeatRows=1)
        table.setStyle(TABLE_STYLE)
        story.append(table)
    else:
        story.append(Paragraph("Nenhuma despesa registrada.", styles["Normal"]))
    story.append(Spacer(1, 15))

    # -----------------------------
    # SUBTOTALS
    # -----------------------------
    if report.expenses:
        story.append(Paragraph("<b>Totais por categoria:</b>", styles["Heading3"]))
        table = Table(_category_rows(report), colWidths=[300, 120])
        table.setStyle(TABLE_STYLE)
        story.append(table)
        story.append(Spacer(1, 15))

    mileage = _mileage_rows(report)
    if len(mileage) > 1:
        story.append(Paragraph("<b>Quilometragem por veículo:</b>", styles["Heading3"]))
        table = Table(mileage, colWidths=[200, 60, 80, 100])
        table.setStyle(TABLE_STYLE)
        story.append(table)
        story.append(Spacer(1, 15))

    # -----------------------------
    # BALANCE
    # -----------------------------
    balance = block.balance
    story.append(Paragraph("<b>Resumo financeiro:</b>", styles["Heading3"]))
    story.append(Paragraph(f"Adiantamento: {format_brl(balance.advance)}", styles["Normal"]))
    story.append(Paragraph(f"Total gasto: {format_brl(balance.total_spent)}", styles["Normal"]))
    story.append(Paragraph(f"Saldo: {block.balance_display.text}", styles["Normal"]))
    story.append(Paragraph(f"<b>{block.reimbursement.label}</b>", styles["Heading2"]))
    story.append(Spacer(1, 40))

    # -----------------------------
    # SIGNATURES
    # -----------------------------
    signatures = Table(
        [
            ["______________________________", "______________________________"],
            ["Colaborador", "Aprovação"],
        ],
        colWidths=[230, 230],
    )
    signatures.setStyle(TableStyle([
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
    ]))
    story.append(signatures)

    # -----------------------------
    # GENERATE PDF
    # -----------------------------
    doc = SimpleDocTemplate(file_path, pagesize=A4, title=f"RDV {report.id}")
    doc.build(story)

    logger.info("Report PDF generated", extra={"report_id": report.id, "path": file_path})
    return file_path
