from flask import request

from carepoint.api.responses import request_data, success_response
from carepoint.container import services


def list_doctors():
    return success_response(services.directory.list_doctors())


def get_staff(staff_id):
    return success_response(services.directory.get_staff(staff_id))


def list_departments():
    return success_response(services.directory.list_departments(request.args.get('hospitalId')))


def create_department():
    return success_response(services.directory.create_department(request_data()), 201)


def list_hospitals():
    return success_response(services.directory.list_hospitals())


def create_hospital():
    return success_response(services.directory.create_hospital(request_data()), 201)
