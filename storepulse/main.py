from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import logging
import time
from typing import Optional

from opentelemetry.trace import get_current_span

from storepulse.core.config import settings
from storepulse.api.routes.analytics import router as analytics_router
from storepulse.api.routes.health import router as health_router
from storepulse.utils.envelopes import api_success, api_error, app_exception_response
from storepulse.utils.exceptions import AppException
from storepulse.core.db import dispose_engine, init_engine_and_session


app = FastAPI(title=settings.APP_NAME)

# Telemetry / Azure Monitor (optional)
_logger = logging.getLogger("storepulse.api")
try:
	if settings.ENABLE_APP_INSIGHTS and settings.AZURE_MONITOR_CONN_STR:
		from azure.monitor.opentelemetry import configure_azure_monitor
		from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
		from opentelemetry.instrumentation.logging import LoggingInstrumentor

		configure_azure_monitor(
			connection_string=settings.AZURE_MONITOR_CONN_STR,
			sampling_ratio=settings.SAMPLING_RATIO,
		)
		# Include trace/span ids in stdlib logging records
		LoggingInstrumentor().instrument(set_logging_format=True)
		FastAPIInstrumentor.instrument_app(app)
		_logger.info("Azure Monitor telemetry is enabled")
except Exception as telemetry_exc:
	# Telemetry is optional; startup continues without it
	_logger.warning("Failed to initialize Azure Monitor telemetry: %s", telemetry_exc)

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

# Normalize API prefix (must not end with '/')
_api_prefix = settings.API_PREFIX.rstrip("/")

app.include_router(health_router, prefix=_api_prefix)
app.include_router(analytics_router, prefix=_api_prefix)


def _current_trace_id() -> Optional[str]:
	span = get_current_span()
	trace_id_int = span.get_span_context().trace_id if span else 0
	return f"{trace_id_int:032x}" if trace_id_int else None


# Structured request logging (includes trace correlation where available)
@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
	start_time = time.perf_counter()
	client_ip: Optional[str] = request.headers.get("x-forwarded-for") or (request.client.host if request.client else None)
	user_agent: Optional[str] = request.headers.get("user-agent")
	status_code: Optional[int] = None
	try:
		response = await call_next(request)
		status_code = response.status_code
		return response
	except Exception:
		_logger.exception(
			"Unhandled exception during request",
			extra={
				"http.method": request.method,
				"http.route": request.url.path,
				"net.peer.ip": client_ip,
				"http.user_agent": user_agent,
				"trace_id": _current_trace_id(),
			},
		)
		raise
	finally:
		elapsed_ms = (time.perf_counter() - start_time) * 1000.0
		_logger.info(
			"HTTP request",
			extra={
				"http.method": request.method,
				"http.route": request.url.path,
				"http.status_code": status_code,
				"http.duration_ms": round(elapsed_ms, 2),
				"net.peer.ip": client_ip,
				"http.user_agent": user_agent,
				"trace_id": _current_trace_id(),
			},
		)


@app.on_event("startup")
def on_startup() -> None:
	if not settings.DATABASE_URL:
		_logger.warning("DATABASE_URL is not configured; database session is created on first use")
		return
	init_engine_and_session()


@app.on_event("shutdown")
async def on_shutdown() -> None:
	await dispose_engine()


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
	_logger.warning(
		"Request failed: %s",
		exc.message,
		extra={"http.method": request.method, "http.route": request.url.path, "error.code": exc.code},
	)
	return app_exception_response(exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
	_logger.exception(
		"Unhandled exception",
		extra={
			"http.method": request.method,
			"http.route": request.url.path,
			"trace_id": _current_trace_id(),
		},
	)
	return JSONResponse(status_code=500, content=api_error(code="INTERNAL_SERVER_ERROR", message="An unexpected error occurred"))


@app.get("/")
async def root():
	return api_success({"service": settings.APP_NAME, "status": "ok"})


if __name__ == "__main__":
	import uvicorn

	uvicorn.run(app, host="0.0.0.0", port=8000)
