from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from resume_engine.config import Settings, get_settings
from resume_engine.core.importer import import_file
from resume_engine.core.resume_parser import parse
from resume_engine.core.schemas import ImportResult, ParseOutcome, TextParseRequest

router = APIRouter(tags=["parse"])


@router.post(
    "/parse",
    response_model=ImportResult,
    summary="Import Resume",
    description="Extract a structured resume record from an uploaded file (DOCX, PDF, TXT or MD), or load a previously exported JSON record. Returns the record with an overall confidence, review warnings and a needs_review flag.",
    responses={
        200: {
            "description": "Import finished (check `success` and `errors` for validation or decode failures)",
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "record": {
                            "personal": {
                                "full_name": "John Doe",
                                "email": "john@example.com",
                                "phone": "(555) 123-4567",
                                "location": "San Francisco, CA",
                                "linkedin": "",
                                "summary": ""
                            },
                            "experience": [
                                {
                                    "id": "3f2a9c1b0",
                                    "company": "Google Inc.",
                                    "position": "Senior Software Engineer",
                                    "location": "Mountain View, CA",
                                    "start_date": "Jan 2020",
                                    "end_date": "Present",
                                    "is_current": True,
                                    "bullet_points": [{"id": "7d1e0a2c4", "text": "Led team of 5"}],
                                    "confidence": 0.94
                                }
                            ],
                            "education": [],
                            "skills": [{"id": "a81b22f90", "name": "Python", "category": "Programming"}],
                            "projects": []
                        },
                        "confidence": 0.86,
                        "warnings": [],
                        "errors": [],
                        "parser_used": "PDF Parser",
                        "needs_review": False
                    }
                }
            }
        },
        400: {"description": "Empty file uploaded"},
    }
)
async def parse_resume(
    file: UploadFile = File(..., description="Resume file (DOCX, PDF, TXT or MD format)"),
    settings: Settings = Depends(get_settings),
):
    """
    Import a resume file.

    **Supported formats:**
    - DOCX (.docx)
    - PDF (.pdf) - Text-layer extraction only, OCR not supported
    - TXT / Markdown (.txt, .md)

    **Returns:**
    - **record**: Extracted personal info, experience, education, skills and projects
    - **confidence**: Overall extraction confidence in [0, 1]
    - **warnings**: Areas that need manual review
    - **errors**: Validation / decoding failures (with `success=false`)
    - **needs_review**: Whether the record should be checked by a person
    """
    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="Empty file uploaded.")

    return import_file(file.filename, file.content_type, raw, settings)


@router.post(
    "/parse/text",
    response_model=ParseOutcome,
    summary="Parse Resume Text",
    description="Run the extraction engine on already-decoded text, optionally with positioned fragments (layout hints) from which line breaks are rebuilt.",
)
def parse_resume_text(request: TextParseRequest, settings: Settings = Depends(get_settings)):
    return parse(request.text, layout_hints=request.layout_hints, line_tolerance=settings.pdf_line_tolerance)
