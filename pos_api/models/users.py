# pos_api/models/users.py

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from pos_api.database import Base

class User(Base):
    __tablename__ = "users"

    user_id = Column(String(50), primary_key=True)
    password_hash = Column(String, nullable=False)

    name = Column(String(200), nullable=False)

    # role claim in the access token ("admin", "cashier", ...)
    user_type = Column(String(50), nullable=False, default="cashier")

    email = Column(String(200), nullable=True)
    contact_no = Column(String(50), nullable=True)

    active = Column(Boolean, default=True, nullable=False)

    joining_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    rights = relationship(
        "UserRight",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class UserRight(Base):
    __tablename__ = "user_rights"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(50), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    module_name = Column(String(100), nullable=False)

    can_save = Column(Boolean, default=False, nullable=False)
    can_update = Column(Boolean, default=False, nullable=False)
    can_delete = Column(Boolean, default=False, nullable=False)
    can_view = Column(Boolean, default=False, nullable=False)

    user = relationship("User", back_populates="rights")

    __table_args__ = (
        UniqueConstraint("user_id", "module_name", name="uq_user_rights_module"),
    )
