from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger

from golive.domain.live.errors.recovery_router import recovery_actions
from golive.shared.api.utils import ApiFailure, make_response
from golive.utils.app_errors import AppError, AppErrorCode


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Custom exception handler for AppError.
    Converts AppError to ApiFailure, with the classified go-live error when present.
    """
    # Log with the caller info captured when AppError was raised
    log_msg = f"{exc.errcode} {exc.erresid} msg={exc.errmesg} caller={exc.caller_info}"
    if exc.errcode == AppErrorCode.E_INTERNAL_ERROR.value:
        logger.error(log_msg)
    else:
        logger.warning(log_msg)

    error = None
    if exc.classified is not None:
        error = exc.classified.model_dump(mode="json", exclude={"details"})
        error["recovery_actions"] = [str(action) for action in recovery_actions(exc.classified.kind)]

    failure = ApiFailure(errcode=exc.errcode, errmesg=exc.errmesg, erresid=exc.erresid, error=error)
    return make_response(failure, status_code=exc.status_code)
