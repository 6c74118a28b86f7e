"""Products: the flat, insertion-ordered collection behind the search endpoint."""

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog.database import Base


class Product(Base):
    __tablename__ = "products"

    # Autoincrement id doubles as insertion order; pagination orders by it.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text)
    price: Mapped[float | None] = mapped_column(Float)
    category: Mapped[str | None] = mapped_column(String(100))
