"""Review Template Routes — validate and resolve judge message templates.

Invariants:
    - Malformed JSON → 400 TEMPLATE_PARSE_ERROR; schema mismatch → 400 TEMPLATE_INVALID
    - Resolution never fails on unknown placeholders: they are returned verbatim
      and listed in `unresolved`

Design Decisions:
    - Template sent as raw JSON text, exactly as it is stored on judge configs
"""

from fastapi import APIRouter

from gencore.schemas.review import (
    TemplateResolveRequest,
    TemplateResolveResponse,
    TemplateValidateRequest,
    TemplateValidateResponse,
)
from gencore.services.template_engine import (
    find_unresolved_variables,
    list_template_variables,
    parse_review_template,
    resolve_template,
)

router = APIRouter(prefix="/api/v1/review-templates", tags=["review-templates"])


@router.post("/validate", response_model=TemplateValidateResponse)
async def validate_template(body: TemplateValidateRequest):
    template = parse_review_template(body.template)
    return TemplateValidateResponse(
        valid=True,
        message_count=len(template.messages),
        variables=list_template_variables(template),
    )


@router.post("/resolve", response_model=TemplateResolveResponse)
async def resolve(body: TemplateResolveRequest):
    template = parse_review_template(body.template)
    return TemplateResolveResponse(
        messages=resolve_template(template, body.variables),
        unresolved=find_unresolved_variables(template, body.variables),
    )
