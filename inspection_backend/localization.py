"""Translation lookup for document labels, container sides and defect codes."""

from datetime import datetime
from typing import Dict, Optional

DEFAULT_LANGUAGE = "en"

# ASCII only: the standard PDF fonts carry no Vietnamese glyphs
LABELS: Dict[str, Dict[str, str]] = {
    "en": {
        "invoice": "INVOICE",
        "invoice_number": "Invoice #:",
        "invoice_date": "Date:",
        "due_date": "Due Date:",
        "bill_to": "Bill To:",
        "container_no": "Container No",
        "description": "Description",
        "price": "Price",
        "repair": "Repair",
        "subtotal": "Subtotal:",
        "tax": "Tax ({rate}%):",
        "total": "Total:",
        "payment_instructions": "Payment Instructions:",
        "bank": "Bank",
        "account_name": "Account Name",
        "account_number": "Account Number",
        "tax_id": "Tax ID",
        "inspection_report": "Inspection Report",
        "inspector": "Inspector",
        "date": "Date",
        "location": "Location",
        "status": "Status",
        "cost_estimate": "Cost Estimate",
        "defects_found": "Defects Found:",
        "no_defects": "No defects detected on this side.",
    },
    "vi": {
        "invoice": "HOA DON",
        "invoice_number": "So hoa don:",
        "invoice_date": "Ngay:",
        "due_date": "Han thanh toan:",
        "bill_to": "Khach hang:",
        "container_no": "So container",
        "description": "Mo ta",
        "price": "Gia",
        "repair": "Sua chua",
        "subtotal": "Tam tinh:",
        "tax": "Thue ({rate}%):",
        "total": "Tong cong:",
        "payment_instructions": "Huong dan thanh toan:",
        "bank": "Ngan hang",
        "account_name": "Ten tai khoan",
        "account_number": "So tai khoan",
        "tax_id": "Ma so thue",
        "inspection_report": "Bao cao giam dinh",
        "inspector": "Giam dinh vien",
        "date": "Ngay",
        "location": "Dia diem",
        "status": "Trang thai",
        "cost_estimate": "Du toan chi phi",
        "defects_found": "Hu hong phat hien:",
        "no_defects": "Khong phat hien hu hong o mat nay.",
    },
}

SIDES: Dict[str, Dict[str, str]] = {
    "en": {
        "FRONT": "Front",
        "BACK": "Back",
        "LEFT": "Left Side",
        "RIGHT": "Right Side",
        "ROOF": "Roof",
        "FLOOR": "Floor",
        "INTERIOR": "Interior",
        "DOOR": "Door",
    },
    "vi": {
        "FRONT": "Mat truoc",
        "BACK": "Mat sau",
        "LEFT": "Ben trai",
        "RIGHT": "Ben phai",
        "ROOF": "Noc",
        "FLOOR": "San",
        "INTERIOR": "Ben trong",
        "DOOR": "Cua",
    },
}

DEFECT_CODES: Dict[str, Dict[str, str]] = {
    "en": {
        "DENT": "Dent",
        "HOLE": "Hole",
        "RUST": "Rust",
        "CRACK": "Crack",
        "SCRATCH": "Scratch",
        "BENT": "Bent Frame",
        "BROKEN_DOOR": "Broken Door",
        "MISSING_SEAL": "Missing Seal",
        "DELAMINATION": "Floor Delamination",
    },
    "vi": {
        "DENT": "Mop",
        "HOLE": "Thung",
        "RUST": "Ri set",
        "CRACK": "Nut",
        "SCRATCH": "Tray xuoc",
        "BENT": "Cong khung",
        "BROKEN_DOOR": "Hong cua",
        "MISSING_SEAL": "Mat niem phong",
        "DELAMINATION": "Bong san",
    },
}

DATE_FORMATS = {
    "en": ("%m/%d/%Y", "%m/%d/%Y, %I:%M:%S %p"),
    "vi": ("%d/%m/%Y", "%H:%M:%S %d/%m/%Y"),
}


class Localizer:
    """
    Dictionary-backed translation lookup.

    Unknown languages fall back to English and unknown keys to the key itself,
    so a missing translation never fails a document.
    """

    def __init__(
        self,
        labels: Optional[Dict[str, Dict[str, str]]] = None,
        sides: Optional[Dict[str, Dict[str, str]]] = None,
        defect_codes: Optional[Dict[str, Dict[str, str]]] = None
    ):
        self.labels = labels or LABELS
        self.sides = sides or SIDES
        self.defect_codes = defect_codes or DEFECT_CODES

    @staticmethod
    def _lookup(table: Dict[str, Dict[str, str]], lang: str, key: str) -> str:
        for candidate in (lang, DEFAULT_LANGUAGE):
            value = table.get(candidate, {}).get(key)
            if value is not None:
                return value
        return key

    def localize(self, lang: str, key: str, **params) -> str:
        text = self._lookup(self.labels, lang, key)
        return text.format(**params) if params else text

    def localize_side(self, lang: str, side: str) -> str:
        return self._lookup(self.sides, lang, side)

    def localize_defect_code(self, lang: str, code: str) -> str:
        return self._lookup(self.defect_codes, lang, code)

    def format_date(self, lang: str, value: datetime) -> str:
        date_format, _ = DATE_FORMATS.get(lang, DATE_FORMATS[DEFAULT_LANGUAGE])
        return value.strftime(date_format)

    def format_datetime(self, lang: str, value: datetime) -> str:
        _, datetime_format = DATE_FORMATS.get(lang, DATE_FORMATS[DEFAULT_LANGUAGE])
        return value.strftime(datetime_format)
