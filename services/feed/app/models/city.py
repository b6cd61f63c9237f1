from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base


class City(Base):
    """Tenant catalog entry. Rows are managed by the admin service; read-only here."""

    __tablename__ = "cities"

    # Slug used by clients, e.g. "sao-jose-dos-campos"
    city_id: Mapped[str] = mapped_column(String(100), primary_key=True)
    label: Mapped[str] = mapped_column(String(200), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
