"""FastAPI routes for contact verification codes."""

from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException

from verification.api.schemas import (
    IssueCodeRequest,
    IssueCodeResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from verification.exceptions import DeliveryFailed, VerificationError
from verification.identifiers import IdentifierType, normalize_identifier
from verification.issuer import CredentialIssuer, get_issuer

router = APIRouter(prefix="/verification", tags=["verification"])


def _email_is_registered(email: str) -> bool:
    from ordering.domain import ordering
    from ordering.recipient.customer import Customer

    with ordering.domain_context():
        repo = ordering.repository_for(Customer)
        return bool(repo._dao.query.filter(email=email).all().items)


def get_registration_check() -> Callable[[str], bool]:
    """Lookup used to refuse codes for emails that already have an account."""
    return _email_is_registered


@router.post("/codes", status_code=201, response_model=IssueCodeResponse)
async def issue_code(
    body: IssueCodeRequest,
    issuer: CredentialIssuer = Depends(get_issuer),
    is_registered: Callable[[str], bool] = Depends(get_registration_check),
) -> IssueCodeResponse:
    contact = normalize_identifier(body.identifier)
    if contact.type == IdentifierType.EMAIL and is_registered(contact.value):
        raise HTTPException(status_code=400, detail="Email is already verified and registered")

    try:
        issued = await issuer.issue_and_deliver(contact.value)
    except DeliveryFailed as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc

    return IssueCodeResponse(
        identifier=issued.identifier.value,
        channel=issued.identifier.type.value,
        expires_at=issued.expires_at,
    )


@router.post("/codes/verify", response_model=VerifyCodeResponse)
async def verify_code(
    body: VerifyCodeRequest,
    issuer: CredentialIssuer = Depends(get_issuer),
) -> VerifyCodeResponse:
    try:
        result = await issuer.verify(body.identifier, body.code)
    except VerificationError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc

    return VerifyCodeResponse(identifier=result.identifier.value, verified_at=result.verified_at)
