from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from storepulse.utils.exceptions import AppException


def api_success(data: Any) -> Dict[str, Any]:
	return {"success": True, "data": data, "error": None}


def api_error(code: str, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
	error: Dict[str, Any] = {"code": code, "message": message}
	if details is not None:
		error["details"] = details
	return {"success": False, "data": None, "error": error}


def app_exception_response(exc: AppException) -> JSONResponse:
	return JSONResponse(
		status_code=exc.status_code,
		content=api_error(code=exc.code, message=exc.message, details=exc.details),
	)
