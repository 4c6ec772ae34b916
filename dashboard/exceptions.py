from rest_framework import status
from rest_framework.exceptions import APIException


class DashboardUnavailable(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Failed to compute the dashboard. Please try again later."
    default_code = 'dashboard_unavailable'
