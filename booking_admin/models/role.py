"""Role, Permission and RolePermission models."""

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from booking_admin.database import Base


class Role(Base):
    __tablename__ = "Roles"

    role_id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(100), unique=True, nullable=False)

    # Relationships
    staff = relationship("Staff", back_populates="role")
    permission_links = relationship(
        "RolePermission", back_populates="role", cascade="all, delete-orphan"
    )


class Permission(Base):
    __tablename__ = "Permissions"

    permission_id = Column(Integer, primary_key=True, autoincrement=True)
    permission_name = Column(String(100), unique=True, nullable=False)
    permission_description = Column(String(255), nullable=True)

    role_links = relationship(
        "RolePermission", back_populates="permission", cascade="all, delete-orphan"
    )


class RolePermission(Base):
    __tablename__ = "RolePermissions"
    __table_args__ = (UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    role_id = Column(Integer, ForeignKey("Roles.role_id"), nullable=False)
    permission_id = Column(Integer, ForeignKey("Permissions.permission_id"), nullable=False)

    role = relationship("Role", back_populates="permission_links")
    permission = relationship("Permission", back_populates="role_links")
