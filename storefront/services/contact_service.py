"""
Contact relays: product queries, custom-jewelry requests and franchise
inquiries are forwarded to the shop's mailboxes. Every user-supplied string is
HTML-escaped before it goes into a message body.
"""

import base64
import binascii
import logging
import re
from datetime import datetime
from html import escape
from typing import List, Optional

from storefront.core.config import settings
from storefront.core.exceptions import ValidationError
from storefront.schemas.contact import CustomRequest, FranchiseInquiry, ProductQueryRequest
from storefront.services.email_service import Attachment, EmailSender, OutgoingEmail

logger = logging.getLogger(__name__)

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def _e(value: Optional[str], default: str = "") -> str:
    return escape(value) if value else default


def _row(label: str, value: Optional[str]) -> str:
    return f"<p><strong>{label}:</strong> {_e(value, 'Not specified')}</p>"


def decode_data_url(data_url: str, index: int) -> Attachment:
    """``data:image/png;base64,...`` -> Attachment named ``reference-<n>.<ext>``."""
    match = _DATA_URL.match(data_url.strip())
    if not match:
        raise ValidationError("Images must be base64 data URLs", details={"index": index})
    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image data is not valid base64", details={"index": index})

    mime_type = match.group("mime")
    extension = mime_type.split("/")[-1]
    return Attachment(filename=f"reference-{index + 1}.{extension}", content=content, mime_type=mime_type)


def send_product_query(query: ProductQueryRequest, sender: EmailSender) -> None:
    """Forward a product query to support and confirm receipt to the customer."""
    product_link = (
        f'<a href="{_e(query.product_url)}" target="_blank">{_e(query.product_url)}</a>'
        if query.product_url
        else "Not specified"
    )
    html = (
        '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
        "<h2>Customer Product Query</h2>"
        f"{_row('Product Name', query.product_name)}"
        f"{_row('Product ID', query.product_id)}"
        f"<p><strong>Product Link:</strong> {product_link}</p>"
        "<hr/>"
        f"{_row('Preferred Size', query.size)}"
        f"<p><strong>Message:</strong></p><p>{_e(query.message, 'No message provided.')}</p>"
        "<hr/>"
        f"{_row('Customer Email', query.email)}"
        f"{_row('Name', query.name) if query.name else ''}"
        f"<p><em>Sent on {datetime.utcnow():%Y-%m-%d %H:%M} UTC</em></p>"
        "</div>"
    )
    sender.send(
        OutgoingEmail(
            to=settings.SUPPORT_EMAIL,
            subject=f"Product Query: {query.product_name}",
            html=html,
            reply_to=query.email,
        )
    )

    summary = "".join(
        item
        for item in (
            f"<li>Preferred Size: {_e(query.size)}</li>" if query.size else "",
            f"<li>Message: {_e(query.message)}</li>" if query.message else "",
        )
    )
    confirmation = (
        '<div style="font-family: Arial, sans-serif;">'
        f"<p>Hi {_e(query.name, 'there')},</p>"
        f"<p>Thank you for reaching out to us regarding <strong>{_e(query.product_name)}</strong>.</p>"
        "<p>Our team will get back to you soon with more details.</p>"
        f"<hr/><p><em>Your query summary:</em></p><ul>{summary}</ul>"
        "</div>"
    )
    sender.send(
        OutgoingEmail(
            to=query.email,
            subject=f"We received your query for {query.product_name}",
            html=confirmation,
        )
    )
    logger.info("Product query for %s relayed", query.product_id)


def send_custom_request(request: CustomRequest, sender: EmailSender) -> int:
    """Relay a custom-jewelry request with its reference images; returns the attachment count."""
    attachments: List[Attachment] = [
        decode_data_url(image, index) for index, image in enumerate(request.images)
    ]
    html = (
        '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
        "<h2>Custom Jewelry Request</h2>"
        f"{_row('Name', request.name)}"
        f"{_row('Email', request.email)}"
        f"{_row('Phone', request.phone)}"
        f"{_row('Inspiration', request.inspiration)}"
        f"{_row('Special Requests', request.special_requests)}"
        f"<p><strong>Reference Images:</strong> {len(attachments)}</p>"
        "</div>"
    )
    sender.send(
        OutgoingEmail(
            to=settings.CUSTOM_REQUEST_EMAIL or settings.SUPPORT_EMAIL,
            subject=f"Custom Jewelry Request from {request.name}",
            html=html,
            reply_to=request.email,
            attachments=attachments,
        )
    )
    logger.info("Custom request relayed with %d images", len(attachments))
    return len(attachments)


def send_franchise_inquiry(inquiry: FranchiseInquiry, sender: EmailSender) -> None:
    html = (
        '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
        "<h2>Franchise Inquiry</h2>"
        f"{_row('Full Name', inquiry.full_name)}"
        f"{_row('Email', inquiry.email)}"
        f"{_row('Phone', inquiry.phone)}"
        f"{_row('Location', inquiry.location)}"
        f"{_row('Investment', inquiry.investment)}"
        f"{_row('Experience', inquiry.experience)}"
        f"<p><strong>Message:</strong></p><p>{_e(inquiry.message, 'No message provided.')}</p>"
        "</div>"
    )
    sender.send(
        OutgoingEmail(
            to=settings.INQUIRY_EMAIL or settings.SUPPORT_EMAIL,
            subject=f"Franchise Inquiry from {inquiry.full_name}",
            html=html,
            reply_to=inquiry.email,
        )
    )
    logger.info("Franchise inquiry relayed")
