from fastapi import FastAPI, HTTPException, Request
import uvicorn
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR, HTTP_502_BAD_GATEWAY

from portal_api.config import get_settings
from portal_api.routes.execution_routes import execution_routes
from portal_api.routes.report_routes import report_routes
from portal_api.routes.status_routes import status_routes
from portal_api.services.execution_service import LaunchError, ProgressServiceError
from portal_api.utils.logger import clear_request_id, configure_logging, set_request_id
from progress_engine import DuplicateOrderNumberError, UnclassifiedAssignmentError, UnknownModuleStatusError

settings = get_settings()
logger = configure_logging(log_dir=settings.log_dir, level=settings.log_level)

app = FastAPI(title="Assessment Progress Status")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logger(request: Request, call_next):
    rid = set_request_id(request.headers.get("x-request-id"))
    try:
        logger.info("request start method=%s path=%s", request.method, request.url.path)
        response: Response = await call_next(request)
        logger.info("request end status=%s method=%s path=%s", response.status_code, request.method, request.url.path)
        response.headers["x-request-id"] = rid
        return response
    except Exception:
        logger.exception("request error method=%s path=%s", request.method, request.url.path)
        raise
    finally:
        clear_request_id()


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("http error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.detail)
    else:
        logger.warning("http error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("validation error method=%s path=%s errors=\n%s", request.method, request.url.path, exc.errors())
    # ctx may carry the raised exception object, which is not JSON serializable.
    errors = [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": errors})


@app.exception_handler(DuplicateOrderNumberError)
@app.exception_handler(UnknownModuleStatusError)
async def invalid_snapshot_handler(request: Request, exc: ValueError) -> JSONResponse:
    logger.warning("invalid snapshot method=%s path=%s error=%s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ProgressServiceError)
async def progress_service_error_handler(request: Request, exc: ProgressServiceError) -> JSONResponse:
    # Upstream failures are user-visible; the client retries manually.
    kind = "launch" if isinstance(exc, LaunchError) else "fetch"
    logger.warning("progress service error kind=%s method=%s path=%s error=%s", kind, request.method, request.url.path, exc)
    return JSONResponse(status_code=HTTP_502_BAD_GATEWAY, content={"detail": str(exc), "kind": kind})


@app.exception_handler(UnclassifiedAssignmentError)
async def unclassified_assignment_handler(request: Request, exc: UnclassifiedAssignmentError) -> JSONResponse:
    logger.error("unclassified assignment method=%s path=%s error=%s", request.method, request.url.path, exc)
    return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Internal Server Error"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internal exception details to clients.
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.get("/")
def read_root():
    return {"message": "Progress status service is healthy"}


app.include_router(status_routes)
app.include_router(report_routes)
app.include_router(execution_routes)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
