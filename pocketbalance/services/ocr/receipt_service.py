"""
Receipt Extraction Service using Gemini

We send the receipt photo straight to a multimodal Gemini model with a
response schema. The schema requires three fields and constrains the
category to the enumeration, so the provider does the heavy lifting:
1. Reading the receipt
2. Picking the final total
3. Choosing a category

No OCR, image preprocessing or layout analysis happens locally.

CRITICAL: The result is a DRAFT. It only pre-fills the spending form;
the user still submits it.
"""

from typing import Any, Optional, Protocol

from pydantic import ValidationError

from pocketbalance.agents.ai_agents import build_generative_model
from pocketbalance.config import get_settings
from pocketbalance.models.transaction import (
    ReceiptDraft,
    ScanReceiptInput,
    SpendingCategory,
)


SCAN_RECEIPT_PROMPT = """You are a finance assistant who is an expert at reading and interpreting shopping receipts.
Your task is to analyse the receipt image provided and extract the key information.

1.  **Description**: Give a short description for this transaction. This can be the store name or a general summary (for example "Monthly Groceries", "Lunch").
2.  **Amount**: Identify the final total amount on the receipt. This must be the final amount paid.
3.  **Category**: Choose the most suitable spending category from the following list: {categories}.

Produce the output as structured JSON that follows the provided schema.
"""


RECEIPT_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "description": {
            "type": "string",
            "description": "A brief summary or title of the receipt",
        },
        "amount": {
            "type": "number",
            "description": "The final total amount from the receipt",
        },
        "category": {
            "type": "string",
            "format": "enum",
            "enum": SpendingCategory.labels(),
            "description": "The most likely spending category for this transaction",
        },
    },
    "required": ["description", "amount", "category"],
}


class OCRError(Exception):
    """Base exception for receipt scanning errors."""
    pass


class ScanFailedError(OCRError):
    """The receipt could not be turned into a draft."""
    pass


class ReceiptExtractor(Protocol):
    """Capability interface: receipt image in, structured draft out."""

    async def extract_receipt(self, receipt_image: str) -> ReceiptDraft:
        ...


class ReceiptExtractionService:
    """
    Extracts a ReceiptDraft from a receipt photo.

    IMPORTANT BOUNDARIES:
    1. This service makes one provider call per scan, with no retries
    2. Every failure surfaces as ScanFailedError
    3. The category enum is enforced by the response schema
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        supported_mime_types: Optional[set[str]] = None,
        max_image_bytes: Optional[int] = None,
    ):
        app_settings = get_settings().app
        self._model = model if model is not None else build_generative_model({
            "response_mime_type": "application/json",
            "response_schema": RECEIPT_RESPONSE_SCHEMA,
        })
        self._supported_mime_types = (
            supported_mime_types
            if supported_mime_types is not None
            else app_settings.supported_mime_types
        )
        self._max_image_bytes = (
            max_image_bytes
            if max_image_bytes is not None
            else app_settings.max_upload_size_bytes
        )

    def build_prompt(self) -> str:
        return SCAN_RECEIPT_PROMPT.format(
            categories=", ".join(SpendingCategory.labels()),
        )

    def _parse_image(self, receipt_image: str) -> ScanReceiptInput:
        """Validate the data URI before anything is sent to the provider."""
        try:
            request = ScanReceiptInput(receipt_image=receipt_image)
        except ValidationError as e:
            raise ScanFailedError(f"Unreadable receipt image: {e}") from e

        if request.mime_type not in self._supported_mime_types:
            raise ScanFailedError(
                f"Unsupported image type: {request.mime_type}. "
                f"Allowed: {sorted(self._supported_mime_types)}"
            )
        if len(request.payload) > self._max_image_bytes:
            raise ScanFailedError(
                f"Receipt image is larger than {self._max_image_bytes} bytes"
            )
        return request

    async def extract_receipt(self, receipt_image: str) -> ReceiptDraft:
        """
        Scan a receipt.

        Args:
            receipt_image: ``data:<mime-type>;base64,<payload>``

        Returns:
            ReceiptDraft with description, final total and category

        Raises:
            ScanFailedError: If the image is unreadable, the provider fails,
                or the response does not match the schema
        """
        request = self._parse_image(receipt_image)

        try:
            response = await self._model.generate_content_async([
                self.build_prompt(),
                {"mime_type": request.mime_type, "data": request.payload},
            ])
            text = response.text
        except Exception as e:
            raise ScanFailedError(f"Failed to scan receipt: {e}") from e

        try:
            return ReceiptDraft.model_validate_json(text)
        except ValidationError as e:
            raise ScanFailedError(f"Receipt response did not match the schema: {e}") from e
