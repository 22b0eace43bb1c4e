from flask import request

from carepoint.api.responses import request_data, success_response
from carepoint.container import services


def patient_flow_report():
    report = services.reports.generate_patient_flow_report(request.args.get('startDate'), request.args.get('endDate'))
    return success_response(report)


def revenue_report():
    report = services.reports.generate_revenue_report(request.args.get('startDate'), request.args.get('endDate'))
    return success_response(report)


def export_report():
    data = request_data()
    path = services.reports.export_report(data.get('reportData'), data.get('format'))
    return success_response({'path': path, 'format': data.get('format')})
