from fastapi import APIRouter

from schemas.submission import ResumeRequest
from services.resume import resume_path, resume_step_index
from utils.case import form_keys_to_camel

router = APIRouter(prefix="/api/form", tags=["form"])


@router.post("/resume", response_model=dict)
async def resume(body: ResumeRequest):
    """Step a returning visitor should be redirected to."""
    form_data = form_keys_to_camel(body.form_data or {})
    return {
        "stepIndex": resume_step_index(form_data),
        "path": resume_path(form_data, body.query or ""),
    }
