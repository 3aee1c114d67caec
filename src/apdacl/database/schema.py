from sqlalchemy import Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class UserAccount(Base):
    __tablename__ = "user_table"

    id = Column("_id", String(36), primary_key=True)
    email_id = Column(String, nullable=False)
    first_name = Column(String)
    last_name = Column(String)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())


class ResourceEntity(Base):
    __tablename__ = "resource_entity"

    id = Column("_id", String(36), primary_key=True)
    provider_id = Column(String(36), ForeignKey("user_table._id"), nullable=False)
    resource_group_id = Column(String(36))
    item_type = Column(String, nullable=False)  # RESOURCE | RESOURCE_GROUP
    resource_server_url = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())


class AccessRequest(Base):
    __tablename__ = "request"

    id = Column("_id", String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("user_table._id"), nullable=False, index=True)
    item_id = Column(String(36), ForeignKey("resource_entity._id"), nullable=False)
    owner_id = Column(String(36), ForeignKey("user_table._id"), nullable=False, index=True)
    status = Column(String, nullable=False)  # PENDING | GRANTED | REJECTED | WITHDRAWN
    expiry_at = Column(DateTime)
    constraints = Column(Text)
    additional_info = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())


async def create_all(engine: AsyncEngine) -> None:
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
