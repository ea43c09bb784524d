"""Document builders for sale receipts (PDF) and the sales workbook (Excel)."""
import io

import openpyxl
from django.utils import timezone
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

SALE_HEADERS = ["ID", "Vendedor", "Cliente", "Método de pago", "Total", "Fecha"]


def _format_created(sale):
    if not sale.created_at:
        return ''
    return timezone.localtime(sale.created_at).strftime('%Y-%m-%d %H:%M')


def build_sale_pdf(sale):
    """Render a one-page receipt for ``sale`` and return the PDF bytes."""
    buffer = io.BytesIO()
    p = canvas.Canvas(buffer, pagesize=letter)
    p.setTitle(f"Venta {sale.pk}")
    width, height = letter
    y = height - 60

    p.setFont("Helvetica-Bold", 16)
    p.drawString(40, y, f"Comprobante de venta #{sale.pk}")
    y -= 16
    p.setLineWidth(0.5)
    p.line(40, y, width - 40, y)
    y -= 30

    rows = [
        ("Fecha", _format_created(sale)),
        ("Vendedor", sale.seller),
        ("Cliente", sale.customer),
        ("Método de pago", sale.payment),
    ]
    for label, value in rows:
        p.setFont("Helvetica-Bold", 11)
        p.drawString(40, y, f"{label}:")
        p.setFont("Helvetica", 11)
        p.drawString(160, y, str(value))
        y -= 22

    y -= 10
    p.line(40, y, width - 40, y)
    y -= 26
    p.setFont("Helvetica-Bold", 13)
    p.drawString(40, y, "Total:")
    p.drawRightString(width - 40, y, f"${sale.total:,.2f}")

    p.showPage()
    p.save()
    return buffer.getvalue()


def build_sales_workbook(sales):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Ventas"
    ws.append(SALE_HEADERS)
    for sale in sales:
        ws.append([
            sale.pk,
            sale.seller,
            sale.customer,
            sale.payment,
            sale.total,
            _format_created(sale),
        ])
    return wb
