from rest_framework import status
from rest_framework.exceptions import APIException


class InvalidRelation(APIException):
    """
    Raised when two related entities point at different owners, e.g. a reply
    whose parent comment belongs to another review.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The referenced entities do not belong together."
    default_code = 'invalid_relation'


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The resource already exists."
    default_code = 'conflict'
