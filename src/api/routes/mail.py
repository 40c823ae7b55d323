"""Transactional notification endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import MailerDep, verify_api_key
from api.models.requests import (
    CertificateAvailableMail,
    NewRequestMail,
    VisitDateChangedMail,
)
from api.models.responses import MessageResponse
from services.email import (
    render_certificate_available,
    render_new_request,
    render_visit_date_changed,
)

router = APIRouter(tags=["mail"], dependencies=[Depends(verify_api_key)])

SENT = MessageResponse(message="Email sent successfully")


@router.post("/send-mail", response_model=MessageResponse)
async def send_new_request_mail(body: NewRequestMail, mailer: MailerDep):
    """Notify that a new inspection request came in."""
    html = render_new_request(body.request_type, body.link)
    await mailer.send(body.to, body.subject, html)
    return SENT


@router.post("/notify-certificate-available", response_model=MessageResponse)
async def notify_certificate_available(body: CertificateAvailableMail, mailer: MailerDep):
    html = render_certificate_available(
        body.request_type, body.location, body.klant, body.link
    )
    await mailer.send(body.to, body.subject, html)
    return SENT


@router.post("/notify-updated-date-visit", response_model=MessageResponse)
async def notify_updated_date_visit(body: VisitDateChangedMail, mailer: MailerDep):
    html = render_visit_date_changed(
        body.date, body.request_types, body.location, body.klant
    )
    await mailer.send(body.to, body.subject, html)
    return SENT
