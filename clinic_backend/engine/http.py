# engine/http.py

"""
OPERATION RESULT -> DRF RESPONSE

Status mapping:
- 400  ValidationError, InvalidPayment
- 404  NotFound
- 409  InsufficientBalance, InsufficientStock, PaymentIncomplete,
       ConcurrencyConflict
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from engine.results import OperationResult

ERROR_STATUS = {
    "ValidationError": status.HTTP_400_BAD_REQUEST,
    "InvalidPayment": status.HTTP_400_BAD_REQUEST,
    "NotFound": status.HTTP_404_NOT_FOUND,
    "InsufficientBalance": status.HTTP_409_CONFLICT,
    "InsufficientStock": status.HTTP_409_CONFLICT,
    "PaymentIncomplete": status.HTTP_409_CONFLICT,
    "ConcurrencyConflict": status.HTTP_409_CONFLICT,
}


def result_response(result: OperationResult, *, serializer_class=None, success_status=status.HTTP_200_OK) -> Response:
    if not result.ok:
        return Response(
            {
                "ok": False,
                "error_kind": result.error_kind,
                "detail": result.message,
                "retryable": result.retryable,
            },
            status=ERROR_STATUS.get(result.error_kind, status.HTTP_400_BAD_REQUEST),
        )

    entity = result.entity
    if serializer_class is not None:
        entity = serializer_class(entity).data

    return Response(
        {
            "ok": True,
            "entity": entity,
            "account_balance": str(result.account_balance) if result.account_balance is not None else None,
        },
        status=success_status,
    )


def error_response(exc) -> Response:
    """Response for a LedgerError raised outside an engine operation."""
    return Response(
        {
            "ok": False,
            "error_kind": exc.kind,
            "detail": str(exc),
            "retryable": exc.retryable,
        },
        status=ERROR_STATUS.get(exc.kind, status.HTTP_400_BAD_REQUEST),
    )
