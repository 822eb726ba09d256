from typing import Optional
from datetime import datetime

from sqlmodel import Field, Column, DateTime, SQLModel
from sqlalchemy import Boolean, String


class Site(SQLModel, table=True):
    __tablename__ = "site"

    domain: str = Field(sa_column=Column(String(253), primary_key=True, nullable=False))
    title: str = Field(default="")
    ssl_grade: str = Field(default="")
    # empty string means no previous grade was recorded yet
    previous_ssl_grade: str = Field(default="")
    created_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True, index=True))
    logo: str = Field(default="")
    is_down: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    # the server list changed since the last grade computation
    servers_changed: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
