import logging
from typing import Dict, Any, Optional
from fastapi import FastAPI, Depends, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel, ValidationError as ModelValidationError
from dotenv import load_dotenv

load_dotenv()  # must run before the local modules below read the environment

from utils import PORTFOLIO_PATH, ADMIN_PASSWORD, CORS_ORIGINS, LOG_LEVEL, parse_origins, load_variables
from errors import RequestError, AuthenticationError
from llm_services import require_api_key, build_portfolio_prompt, call_gemini_api
from validation import normalize_portfolio
from portfolio_schema import PortfolioData
from portfolio_store import PortfolioStore
from pdf_services import PortfolioPDFGenerator
from auth import SessionRegistry, bearer_token
from editor import DraftRegistry, apply_edit

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Portfolio Generator Backend",
    description="Generates portfolio content from resume text, stores it, and serves it for display and editing.",
    version="1.0.0"
)

app.add_middleware(CORSMiddleware, allow_origins=parse_origins(CORS_ORIGINS), allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

store = PortfolioStore(PORTFOLIO_PATH)
sessions = SessionRegistry(ADMIN_PASSWORD)
drafts = DraftRegistry()


@app.on_event("startup")
def on_startup():
    try:
        require_api_key()
    except HTTPException:
        logger.warning("GEMINI_API_KEY is not set; /api/generate will answer 500 until it is.")
    if not ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD is not set; admin login is disabled.")


class LoginRequest(BaseModel):
    password: str

class DraftEdit(BaseModel):
    op: str
    section: str
    field: Optional[str] = None
    index: Optional[int] = None
    subIndex: Optional[int] = None
    value: Any = None


# --- Error rendering ---

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None))

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request body: {location} {first.get('msg', '')}".strip()
    return JSONResponse(status_code=400, content={"error": message})


def require_session(authorization: Optional[str] = Header(None)) -> str:
    token = bearer_token(authorization)
    if not sessions.is_active(token):
        raise AuthenticationError()
    return token

def validate_document(data: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return PortfolioData.model_validate(data).model_dump(exclude_none=True)
    except ModelValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise RequestError(f"Invalid portfolio data: {location} {first['msg']}")


# --- Generation proxy ---

@app.post("/api/generate", response_model=Dict[str, Any])
async def generate_portfolio(request: Request):
    require_api_key()

    try:
        body = await request.json()
    except ValueError:
        body = None
    resume_text = body.get("resumeText") if isinstance(body, dict) else None
    if not resume_text or not isinstance(resume_text, str):
        raise RequestError("Missing resumeText in request body")

    # The Gemini SDK call blocks; keep it off the event loop.
    try:
        raw_text = await run_in_threadpool(call_gemini_api, build_portfolio_prompt(resume_text))
        return normalize_portfolio(raw_text)
    except HTTPException as e:
        logger.error("API function error: %s", e.detail)
        raise

@app.api_route("/api/generate", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"], include_in_schema=False)
def generate_wrong_method():
    raise RequestError("Only POST allowed", status_code=405)


# --- Presentation ---

@app.get("/api/portfolio", response_model=Dict[str, Any])
def get_portfolio():
    return store.get()

@app.get("/api/portfolio/pdf")
def get_portfolio_pdf():
    data = store.get()
    pdf_generator = PortfolioPDFGenerator(variables=load_variables())
    try:
        pdf_bytes = pdf_generator.generate_pdf_bytes(data)
    except Exception as e:
        logger.error("Failed to render portfolio PDF: %s", e)
        raise HTTPException(status_code=500, detail=f"Failed to render portfolio PDF: {e}")
    return Response(content=pdf_bytes, media_type="application/pdf", headers={"Content-Disposition": "inline; filename=portfolio.pdf"})

@app.put("/api/portfolio", response_model=Dict[str, Any])
def replace_portfolio(data: Dict[str, Any], token: str = Depends(require_session)):
    return store.set(validate_document(data))


# --- Authentication gate ---

@app.post("/api/auth/login", response_model=Dict[str, str])
def login(request: LoginRequest):
    return {"token": sessions.login(request.password)}

@app.post("/api/auth/logout", response_model=Dict[str, str])
def logout(token: str = Depends(require_session)):
    sessions.logout(token)
    drafts.discard(token)
    return {"message": "Logged out."}

@app.get("/api/auth/session", response_model=Dict[str, bool])
def session_status(authorization: Optional[str] = Header(None)):
    return {"authenticated": sessions.is_active(bearer_token(authorization))}


# --- Admin editing surface ---

@app.get("/api/admin/draft", response_model=Dict[str, Any])
def get_draft(token: str = Depends(require_session)):
    return drafts.get(token, store.get)

@app.post("/api/admin/draft/edits", response_model=Dict[str, Any])
def edit_draft(edit: DraftEdit, token: str = Depends(require_session)):
    edit_body = edit.model_dump()
    return drafts.update(token, store.get, lambda current: apply_edit(current, edit_body))

@app.post("/api/admin/draft/save", response_model=Dict[str, Any])
def save_draft(token: str = Depends(require_session)):
    saved = store.set(validate_document(drafts.get(token, store.get)))
    drafts.put(token, saved)
    return {"message": "Portfolio updated successfully!", "portfolio": saved}

@app.delete("/api/admin/draft", status_code=204)
def discard_draft(token: str = Depends(require_session)):
    drafts.discard(token)
    return Response(status_code=204)
