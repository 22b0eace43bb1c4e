# /carepoint/utils/report_export.py
import csv
import logging
import os
import uuid
from datetime import datetime, timezone

from fpdf import FPDF

logger = logging.getLogger(__name__)

PATIENT_FLOW_ROWS = (
    ('Total Appointments', 'totalAppointments', ''),
    ('Scheduled', 'scheduledAppointments', ''),
    ('Completed', 'completedAppointments', ''),
    ('Cancelled', 'cancelledAppointments', ''),
    ('Average Wait Time', 'averageWaitTime', ' minutes'),
)

REVENUE_ROWS = (
    ('Total Revenue', 'totalRevenue', ''),
    ('Cash Payments', 'cashPayments', ''),
    ('Card Payments', 'cardPayments', ''),
    ('Insurance Payments', 'insurancePayments', ''),
    ('Pending Payments', 'pendingPayments', ''),
    ('Refunds', 'refunds', ''),
)


def summary_rows(report: dict):
    """(label, value) pairs for the headline metrics of either report type."""
    rows = PATIENT_FLOW_ROWS if 'totalAppointments' in report else REVENUE_ROWS
    return [(label, f"{report.get(key, 0)}{suffix}") for label, key, suffix in rows]


def report_title(report: dict) -> str:
    return "Patient Flow Report" if 'totalAppointments' in report else "Revenue Report"


class ReportExporter:
    """Writes report dictionaries to CSV or PDF files under ``export_dir``."""

    PRIMARY_COLOR = (0, 102, 179)
    TEXT_COLOR = (50, 50, 50)

    def __init__(self, export_dir='exports'):
        self.export_dir = export_dir

    def export(self, report: dict, fmt: str) -> str:
        os.makedirs(self.export_dir, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime('%Y%m%d%H%M%S')
        path = os.path.join(self.export_dir, f"report_{stamp}_{uuid.uuid4().hex[:8]}.{fmt.lower()}")

        if fmt == 'CSV':
            self._write_csv(report, path)
        else:
            self._write_pdf(report, path)
        logger.info(f"Exported {report_title(report)} to {path}")
        return path

    def _write_csv(self, report, path):
        with open(path, 'w', newline='', encoding='utf-8') as handle:
            writer = csv.writer(handle)
            writer.writerow(['Metric', 'Value'])
            writer.writerows(summary_rows(report))

            breakdown = report.get('departmentBreakdown') or []
            if breakdown:
                writer.writerow([])
                writer.writerow(['Department', 'Appointments', 'Average Wait Time'])
                for dept in breakdown:
                    writer.writerow([dept.get('departmentName'), dept.get('appointmentCount'),
                                     dept.get('averageWaitTime')])

            daily = report.get('dailyBreakdown') or []
            if daily:
                writer.writerow([])
                writer.writerow(['Date', 'Revenue', 'Transactions'])
                for day in daily:
                    writer.writerow([day.get('date'), day.get('revenue'), day.get('transactions')])

    def _write_pdf(self, report, path):
        pdf = FPDF()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=15)

        pdf.set_font("Helvetica", "B", 16)
        pdf.set_text_color(*self.PRIMARY_COLOR)
        pdf.cell(0, 12, report_title(report), align="C", new_x="LMARGIN", new_y="NEXT")

        date_range = report.get('dateRange') or {}
        if date_range:
            pdf.set_font("Helvetica", size=9)
            pdf.set_text_color(*self.TEXT_COLOR)
            pdf.cell(0, 6, f"{date_range.get('start')} to {date_range.get('end')}", align="C",
                     new_x="LMARGIN", new_y="NEXT")
        pdf.ln(6)

        pdf.set_font("Helvetica", size=11)
        pdf.set_text_color(*self.TEXT_COLOR)
        for label, value in summary_rows(report):
            pdf.cell(90, 8, label, border=1)
            pdf.cell(0, 8, value, border=1, new_x="LMARGIN", new_y="NEXT")

        pdf.output(path)
