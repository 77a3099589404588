from datetime import datetime, timezone
from typing import List, Optional

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from app.schemas.esg import ESGRecord
from app.services.esg_calculator import METHODOLOGY, calculate_esg_metrics, format_metrics


def _money(value: Optional[float]) -> str:
    # Core PDF fonts are latin-1 only, so no rupee sign
    return f"INR {value:,.0f}" if value is not None else "N/A"


def _yes_no(value: Optional[bool]) -> str:
    if value is None:
        return "N/A"
    return "Yes" if value else "No"


def record_lines(record: ESGRecord) -> List[str]:
    """Body lines of one fiscal-year block. Unreported values read N/A, never 0 or No."""
    formatted = format_metrics(calculate_esg_metrics(record))
    employees = record.total_employees if record.total_employees is not None else "N/A"
    return [
        f"Carbon Intensity: {formatted['carbonIntensity']} T CO2e/INR",
        f"Renewable Electricity: {formatted['renewableRatio']}%",
        f"Diversity Ratio: {formatted['diversityRatio']}%",
        f"Community Investment: {formatted['communityRatio']}%",
        f"Total Revenue: {_money(record.total_revenue_inr)}",
        f"Total Employees: {employees}",
        f"Data Privacy Policy: {_yes_no(record.has_data_privacy_policy)}",
    ]


def _latin1(text: str) -> str:
    return text.encode("latin-1", "replace").decode("latin-1")


def _line(pdf: FPDF, text: str, height: float = 6) -> None:
    pdf.cell(0, height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def generate_esg_report_pdf(records: List[ESGRecord], year: Optional[str] = None) -> bytes:
    """
    Generate the ESG history PDF for one user's stored responses.
    Returns PDF as raw bytes.
    """
    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    # Title
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "ESG Reports", new_x=XPos.LMARGIN, new_y=YPos.NEXT, align="C")

    # Meta
    pdf.ln(5)
    pdf.set_font("Helvetica", "", 12)
    if year:
        _line(pdf, f"Year: {year}", 8)
    _line(pdf, f"Generated: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M')} UTC", 8)

    pdf.ln(5)
    if not records:
        pdf.set_font("Helvetica", "", 11)
        _line(pdf, "No ESG reports found.")

    for record in records:
        pdf.set_font("Helvetica", "B", 13)
        _line(pdf, f"Fiscal Year: {record.fiscal_year}", 8)

        pdf.set_font("Helvetica", "", 11)
        for text in record_lines(record):
            _line(pdf, text)
        pdf.ln(4)

    # Methodology
    pdf.ln(6)
    pdf.set_font("Helvetica", "B", 14)
    _line(pdf, "Methodology", 8)

    pdf.set_font("Helvetica", "", 11)
    for key, desc in METHODOLOGY.items():
        pdf.multi_cell(0, 6, f"- {key.capitalize()}: {desc}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    return bytes(pdf.output())
