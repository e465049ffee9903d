"""
Audit API endpoint.

POST /audit runs the audit pipeline for `{"url": ...}`. OPTIONS is answered
for the whole API in api.router; every other method is rejected with 405.
"""
from fastapi import APIRouter, BackgroundTasks, Request

from webaudit.core.deps import Pipeline
from webaudit.core.exceptions import MethodNotAllowedError
from webaudit.schemas.audit import AuditRequest, AuditResponse
from webaudit.schemas.common import ErrorResponse

router = APIRouter(tags=["Audit"])


@router.post(
    "/audit",
    response_model=AuditResponse,
    summary="Audit a website",
    description="""
    Fetch a single page and score it for SEO, security, performance and
    accessibility.

    Results are cached per exact URL for 10 minutes; cached answers are
    flagged with `cached: true`.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid JSON or URL"},
        403: {"model": ErrorResponse, "description": "Target is on a blocked network"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Target could not be fetched"},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": AuditRequest.model_json_schema()}},
        },
    },
)
async def run_audit(
    request: Request,
    background_tasks: BackgroundTasks,
    pipeline: Pipeline,
) -> AuditResponse:
    """Run an audit for the URL in the request body."""
    body = await request.body()
    return await pipeline.handle(body, background_tasks)


@router.api_route(
    "/audit",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def audit_method_not_allowed():
    raise MethodNotAllowedError()
