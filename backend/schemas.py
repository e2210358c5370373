from typing import List, Optional

from pydantic import BaseModel, Field


class OrderInput(BaseModel):
    name: str
    email: str
    product: str
    price: float = Field(..., ge=0)


class OrderRecord(BaseModel):
    id: str
    name: str
    email: str
    product: str
    price: float
    paymentId: Optional[str] = None
    paymentStatus: Optional[str] = None
    envelopeId: Optional[str] = None
    envelopeStatus: Optional[str] = None
    createdAt: str


class OrderCreatedResponse(BaseModel):
    message: str = "Order processed"
    orderId: str
    paymentId: str
    envelopeId: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class WebhookAck(BaseModel):
    received: bool = True


class IntegrationsInfoResponse(BaseModel):
    payment: bool
    envelopes: bool
    work_items: bool
    search_index: bool
    fanout: bool
    webhook_signature_verification: bool
    enabled: List[str]
