from typing import Optional

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint


class Server(SQLModel, table=True):
    __tablename__ = "server"
    __table_args__ = (UniqueConstraint("domain", "address", name="uq_server_domain_address"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    address: str = Field(nullable=False)
    ssl_grade: str = Field(default="")
    country: str = Field(default="")
    owner: str = Field(default="")
    domain: str = Field(default="", foreign_key="site.domain", index=True, nullable=False)
