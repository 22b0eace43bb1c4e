# /carepoint/services/reporting_service.py
from collections import OrderedDict
from datetime import datetime, timedelta

from carepoint.models.appointment_models import AppointmentStatus, slot_start
from carepoint.models.billing_models import PaymentMethod, PaymentStatus
from carepoint.utils.errors import ValidationError
from carepoint.utils.report_export import ReportExporter
from carepoint.utils.time_util import parse_date, parse_datetime

EXPORT_FORMATS = ('PDF', 'CSV')


class ReportingService:
    """Read-only aggregation over appointments, payments and departments."""

    def __init__(self, appointment_repo, payment_repo, department_repo, exporter=None):
        self.appointment_repo = appointment_repo
        self.payment_repo = payment_repo
        self.department_repo = department_repo
        self.exporter = exporter or ReportExporter()

    def generate_patient_flow_report(self, start_date, end_date) -> dict:
        start, end = self._date_range(start_date, end_date)
        appointments = self.appointment_repo.find_by_date_range(start, end)

        return {
            'totalAppointments': len(appointments),
            'scheduledAppointments': self._count(appointments, AppointmentStatus.SCHEDULED, AppointmentStatus.CONFIRMED),
            'checkedInAppointments': self._count(appointments, AppointmentStatus.CHECKED_IN),
            'completedAppointments': self._count(appointments, AppointmentStatus.COMPLETED),
            'cancelledAppointments': self._count(appointments, AppointmentStatus.CANCELLED),
            'averageWaitTime': self.average_wait_time(appointments),
            'departmentBreakdown': self._department_stats(appointments),
            'dateRange': {'start': start, 'end': end},
        }

    def generate_revenue_report(self, start_date, end_date) -> dict:
        start, end = self._date_range(start_date, end_date)
        payments = self.payment_repo.find_by_date_range(start, end)
        completed = [p for p in payments if p.get('status') == PaymentStatus.COMPLETED]

        def total(items, field='amount'):
            return sum(item.get(field) or 0 for item in items)

        return {
            'totalRevenue': total(completed),
            'cashPayments': total([p for p in completed if p.get('paymentMethod') == PaymentMethod.CASH]),
            'cardPayments': total([p for p in completed if p.get('paymentMethod') == PaymentMethod.CARD]),
            'insurancePayments': total(completed, 'insuranceCoverage'),
            'pendingPayments': total([p for p in payments if p.get('status') == PaymentStatus.PENDING]),
            'refunds': total([p for p in payments if p.get('status') == PaymentStatus.REFUNDED]),
            'dateRange': {'start': start, 'end': end},
            'dailyBreakdown': self._daily_revenue(completed, start, end),
        }

    def export_report(self, report_data: dict, fmt: str) -> str:
        if not report_data or not isinstance(report_data, dict):
            raise ValidationError("reportData is required")
        if fmt not in EXPORT_FORMATS:
            raise ValidationError("format must be PDF or CSV")
        return self.exporter.export(report_data, fmt)

    @staticmethod
    def average_wait_time(appointments) -> int:
        """Mean minutes between the booked slot start and check-in, over checked-in visits.

        Early arrivals count as zero wait.
        """
        waits = []
        for appt in appointments:
            checked_in_at = appt.get('checkedInAt')
            if not checked_in_at or not appt.get('timeSlot'):
                continue
            scheduled = datetime.fromisoformat(f"{appt['appointmentDate']}T{slot_start(appt['timeSlot'])}:00+00:00")
            minutes = (parse_datetime(checked_in_at) - scheduled).total_seconds() / 60
            waits.append(max(minutes, 0))
        if not waits:
            return 0
        return round(sum(waits) / len(waits))

    @staticmethod
    def _count(appointments, *statuses):
        return sum(1 for appt in appointments if appt.get('status') in statuses)

    def _department_stats(self, appointments):
        stats = []
        for dept in self.department_repo.find_all():
            dept_appointments = [appt for appt in appointments if appt.get('departmentId') == dept['id']]
            stats.append({
                'departmentId': dept['id'],
                'departmentName': dept.get('name'),
                'appointmentCount': len(dept_appointments),
                'averageWaitTime': self.average_wait_time(dept_appointments),
            })
        return stats

    @staticmethod
    def _daily_revenue(completed_payments, start, end):
        daily = OrderedDict()
        cursor = datetime.fromisoformat(start)
        last = datetime.fromisoformat(end)
        while cursor <= last:
            daily[cursor.date().isoformat()] = {'revenue': 0, 'transactions': 0}
            cursor += timedelta(days=1)

        for payment in completed_payments:
            paid_at = payment.get('paidAt')
            if not paid_at:
                continue
            day = paid_at[:10]
            if day in daily:
                daily[day]['revenue'] += payment.get('amount') or 0
                daily[day]['transactions'] += 1

        return [{'date': day, **values} for day, values in daily.items()]

    @staticmethod
    def _date_range(start_date, end_date):
        start = parse_date(start_date, 'startDate')
        end = parse_date(end_date, 'endDate')
        if start > end:
            raise ValidationError("startDate must not be after endDate")
        return start, end
