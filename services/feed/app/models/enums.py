import enum

from sqlalchemy import Enum as SAEnum


class ItemKind(str, enum.Enum):
    REPORT = "REPORT"                  # Citizen-submitted municipal issue
    POSITIVE_POST = "POSITIVE_POST"    # City hall achievement published by an admin


class ContentReportReason(str, enum.Enum):
    INAPPROPRIATE_CONTENT = "INAPPROPRIATE_CONTENT"
    OFFENSIVE_IMAGE = "OFFENSIVE_IMAGE"
    FALSE_INFORMATION = "FALSE_INFORMATION"
    ADULT_CONTENT = "ADULT_CONTENT"
    OTHER = "OTHER"


class ContentReportStatus(str, enum.Enum):
    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    UPHELD = "UPHELD"
    DISMISSED = "DISMISSED"
    RESOLVED = "RESOLVED"


# Named SQLAlchemy enum types (reuse across models to avoid duplicate type creation)
item_kind_enum = SAEnum(ItemKind, name="item_kind")
content_report_reason_enum = SAEnum(ContentReportReason, name="content_report_reason")
content_report_status_enum = SAEnum(ContentReportStatus, name="content_report_status")
