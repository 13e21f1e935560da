from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text
from database import Base

class Setting(Base):
    """Operator settings kept on this side of the remote chain."""
    __tablename__ = "settings"
    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
