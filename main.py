"""
FastAPI backend for MindEase form validation and role-based access.
Provides REST API for form/field validation, bulk spreadsheet validation
and role routing decisions.
"""

from fastapi import FastAPI, UploadFile, File, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel
from typing import Dict, List, Any, Optional
from io import BytesIO
import logging

from config import settings
from api.excel_io import FormWorkbook, SpreadsheetError
from validation import (
    AVAILABLE_FORMS,
    RULES,
    SchemaError,
    UnknownFormError,
    UnknownRuleError,
    describe_schema,
    get_form_schema,
    parse_schema,
    run_form_validation,
    validate_field,
)
from access import (
    can_access_feature,
    effective_role,
    get_dashboard_url,
    get_nav_items,
    get_role_based_urls,
    permissions_for,
    resolve_route_guard,
    should_redirect_to_admin,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

app = FastAPI(
    title="MindEase Validation API",
    description="Form validation and role-based access for the MindEase dashboard",
    version="1.0.0"
)

# CORS middleware for React frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models
# ============================================================================

class FormValidationRequest(BaseModel):
    form_name: Optional[str] = None
    rules: Optional[Dict[str, List[Any]]] = None
    values: Dict[str, Any] = {}


class FieldValidationRequest(BaseModel):
    form_name: Optional[str] = None
    rules: Optional[Dict[str, List[Any]]] = None
    field: str
    value: Any = None
    label: Optional[str] = None
    values: Dict[str, Any] = {}


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: Dict[str, str]
    issues: List[Dict[str, Any]]


class FieldValidationResponse(BaseModel):
    field: str
    error: Optional[str] = None


class GuardRequest(BaseModel):
    role: Optional[str] = None
    is_authenticated: bool = False
    required_role: Optional[str] = None


class AccessProfile(BaseModel):
    role: str
    effective_role: str
    dashboard_url: str
    redirect_to_admin: bool
    permissions: List[str]
    urls: Dict[str, str]
    nav_items: List[Dict[str, str]]


# ============================================================================
# Helpers
# ============================================================================

def _resolve_schema(form_name: Optional[str], rules: Optional[Dict[str, List[Any]]],
                    values: Dict[str, Any]):
    """Schema from an inline JSON description, or from a predefined form."""
    if rules is not None:
        try:
            return parse_schema(rules)
        except (UnknownRuleError, SchemaError) as e:
            logger.warning("Rejected inline schema: %s", e)
            raise HTTPException(status_code=400, detail=str(e))

    if form_name:
        try:
            return get_form_schema(form_name, values)
        except UnknownFormError as e:
            raise HTTPException(status_code=404, detail=str(e))

    raise HTTPException(status_code=400, detail="Provide either form_name or rules")


def _load_workbook(form_name: str, file: UploadFile, content: bytes) -> FormWorkbook:
    if not file.filename or not file.filename.endswith(('.xlsx', '.xlsm')):
        raise HTTPException(status_code=400, detail="File must be an Excel file (.xlsx)")

    try:
        workbook = FormWorkbook(form_name, max_rows=settings.MAX_UPLOAD_ROWS)
    except UnknownFormError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        workbook.load_from_file(BytesIO(content))
    except SpreadsheetError as e:
        logger.warning("Rejected upload %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=str(e))

    return workbook


# ============================================================================
# Form Configuration Endpoints
# ============================================================================

@app.get("/api/config/forms")
async def get_forms_config() -> Dict[str, Any]:
    """Get the rule schema of every predefined form."""
    config = {}
    for form_name, form_info in AVAILABLE_FORMS.items():
        schema = get_form_schema(form_name)
        config[form_name] = {
            "name": form_info["name"],
            "description": form_info["description"],
            "fields": describe_schema(schema),
            "field_order": list(schema.keys()),
        }

    return {"forms": config, "rules": sorted(RULES.keys())}


@app.get("/api/forms/{form_name}/template")
async def download_form_template(form_name: str):
    """Download an empty spreadsheet for bulk entry of a form."""
    try:
        workbook = FormWorkbook(form_name)
    except UnknownFormError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return StreamingResponse(
        BytesIO(workbook.create_template()),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={form_name}_template.xlsx"}
    )


# ============================================================================
# Validation Endpoints
# ============================================================================

@app.post("/api/validate/form")
async def validate_form_data(request: FormValidationRequest) -> ValidationResponse:
    """Validate all fields of a form submission."""
    schema = _resolve_schema(request.form_name, request.rules, request.values)
    result = run_form_validation(request.values, schema)

    return ValidationResponse(
        is_valid=result.is_valid,
        errors={k: str(v) for k, v in result.errors.items()},
        issues=[i.to_dict() for i in result.issues]
    )


@app.post("/api/validate/field")
async def validate_field_data(request: FieldValidationRequest) -> FieldValidationResponse:
    """Validate a single field (blur-time validation)."""
    values = {**request.values, request.field: request.value}
    schema = _resolve_schema(request.form_name, request.rules, values)

    if request.field not in schema:
        return FieldValidationResponse(field=request.field, error=None)

    error = validate_field(request.value, schema[request.field], request.label or request.field)
    return FieldValidationResponse(field=request.field, error=str(error) if error else None)


@app.post("/api/validate/upload")
async def validate_upload(form_name: str = Query(...), file: UploadFile = File(...)) -> Dict[str, Any]:
    """Validate every row of an uploaded spreadsheet against a predefined form."""
    content = await file.read()
    workbook = _load_workbook(form_name, file, content)
    row_errors = workbook.validate()

    rows = [
        {"row": index, "is_valid": not errors, "errors": {k: str(v) for k, v in errors.items()}}
        for index, errors in enumerate(row_errors)
    ]
    invalid_count = sum(1 for r in rows if not r["is_valid"])
    logger.info("Validated %d %s rows from %s (%d invalid)", len(rows), form_name, file.filename, invalid_count)

    return {
        "form_name": form_name,
        "filename": file.filename,
        "row_count": len(rows),
        "invalid_count": invalid_count,
        "rows": rows,
    }


@app.post("/api/validate/upload/report")
async def validate_upload_report(form_name: str = Query(...), file: UploadFile = File(...)):
    """Validate an uploaded spreadsheet and return it with failing cells highlighted."""
    content = await file.read()
    workbook = _load_workbook(form_name, file, content)

    return StreamingResponse(
        BytesIO(workbook.build_report()),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={form_name}_report.xlsx"}
    )


# ============================================================================
# Access Endpoints
# ============================================================================

@app.get("/api/access/{role}")
async def get_access_profile(role: str) -> AccessProfile:
    """Dashboard, permissions and feature routes for a role."""
    return AccessProfile(
        role=role,
        effective_role=effective_role(role),
        dashboard_url=get_dashboard_url(role),
        redirect_to_admin=should_redirect_to_admin(role),
        permissions=permissions_for(role).to_list(),
        urls=get_role_based_urls(role),
        nav_items=get_nav_items(role),
    )


@app.get("/api/access/{role}/features/{feature}")
async def check_feature_access(role: str, feature: str) -> Dict[str, Any]:
    """Check whether a role may use a feature."""
    return {"role": role, "feature": feature, "allowed": can_access_feature(feature, role)}


@app.post("/api/access/guard")
async def check_route_guard(request: GuardRequest) -> Dict[str, Any]:
    """Decide whether a protected page renders, or where to redirect."""
    decision = resolve_route_guard(request.role, request.is_authenticated, request.required_role)
    return decision.to_dict()


# ============================================================================
# Health Check
# ============================================================================

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn
    import argparse

    parser = argparse.ArgumentParser(description="MindEase Validation API")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Port to run the server on")
    parser.add_argument("--host", type=str, default=settings.HOST, help="Host to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload (requires import string)")
    parser.add_argument("--no-reload", dest="reload", action="store_false", help="Disable auto-reload")
    parser.set_defaults(reload=False)
    args = parser.parse_args()

    if args.reload:
        # When reload is enabled, must use import string
        uvicorn.run("main:app", host=args.host, port=args.port, reload=True)
    else:
        # Without reload, can use the app object directly
        uvicorn.run(app, host=args.host, port=args.port)
