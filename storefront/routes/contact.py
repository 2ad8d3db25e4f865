from fastapi import APIRouter, Depends
from storefront.schemas.contact import CustomRequest, FranchiseInquiry, ProductQueryRequest
from storefront.schemas.user import MessageResponse
from storefront.services.contact_service import (
    send_custom_request,
    send_franchise_inquiry,
    send_product_query,
)
from storefront.services.email_service import EmailSender, get_email_sender


router = APIRouter(prefix="/contact", tags=["Contact"])

@router.post("/query", response_model=MessageResponse)
def product_query(data: ProductQueryRequest, sender: EmailSender = Depends(get_email_sender)):
    send_product_query(data, sender)
    return MessageResponse(message="Query email sent successfully")

@router.post("/custom", response_model=MessageResponse)
def custom_request(data: CustomRequest, sender: EmailSender = Depends(get_email_sender)):
    count = send_custom_request(data, sender)
    return MessageResponse(message=f"Custom request sent with {count} reference image(s)")

@router.post("/inquiry", response_model=MessageResponse)
def franchise_inquiry(data: FranchiseInquiry, sender: EmailSender = Depends(get_email_sender)):
    send_franchise_inquiry(data, sender)
    return MessageResponse(message="Inquiry sent successfully")
