from enum import Enum


class DocumentTypeEnum(str, Enum):
    INVOICE = "INVOICE"
    QUOTE = "QUOTE"


class DiscountTypeEnum(str, Enum):
    NONE = "NONE"
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class InvoiceStatusEnum(str, Enum):
    DRAFT = "DRAFT"
    ISSUED = "ISSUED"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    ARCHIVED = "ARCHIVED"


class InvoiceActionEnum(str, Enum):
    DRAFT = "draft"
    ISSUE = "issue"
    PAY = "pay"
    OVERDUE = "overdue"
    ARCHIVE = "archive"


class QuoteStatusEnum(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    CONVERTED = "CONVERTED"
    ARCHIVED = "ARCHIVED"


class QuoteActionEnum(str, Enum):
    DRAFT = "draft"
    SEND = "send"
    ACCEPT = "accept"
    REJECT = "reject"
    EXPIRE = "expire"
    CONVERT = "convert"
    ARCHIVE = "archive"
