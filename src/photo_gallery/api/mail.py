"""Email sending endpoint with permissive CORS."""

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from photo_gallery.api.models import SendEmailRequest
from photo_gallery.domain.mail import OutgoingEmail
from photo_gallery.services.mail import MailError, MailValidationError

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

_logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["email"])


@router.options("/send-email")
async def send_email_preflight() -> Response:
    """Answer CORS preflight requests."""
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.post("/send-email")
async def send_email(request: Request) -> JSONResponse:
    """Send an email through the configured mail transport."""
    try:
        body = SendEmailRequest.model_validate(await request.json())
    except ValueError as exc:
        _logger.debug("Rejected send-email body: %s", exc)
        return JSONResponse(
            {"error": "Invalid request body"},
            status_code=status.HTTP_400_BAD_REQUEST,
            headers=CORS_HEADERS,
        )
    mail_service = request.app.state.container.mail_service
    email = OutgoingEmail(
        to=body.to or "",
        subject=body.subject or "",
        html=body.html or "",
        from_address=body.from_address,
        text=body.text,
        reply_to=body.reply_to,
    )
    try:
        message_id = await mail_service.send(email)
    except MailError as exc:
        if isinstance(exc, MailValidationError):
            status_code = status.HTTP_400_BAD_REQUEST
        else:
            _logger.exception("Error sending email")
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        content: dict[str, object] = {"error": exc.message}
        if exc.details:
            content["details"] = exc.details
        return JSONResponse(content, status_code=status_code, headers=CORS_HEADERS)
    return JSONResponse(
        {"success": True, "messageId": message_id}, headers=CORS_HEADERS
    )


@router.api_route("/send-email", methods=["GET", "PUT", "PATCH", "DELETE"])
async def send_email_wrong_method() -> JSONResponse:
    """Reject methods other than POST and OPTIONS."""
    return JSONResponse(
        {"error": "Method not allowed"},
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        headers=CORS_HEADERS,
    )
