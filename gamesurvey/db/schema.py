"""
Database schema definitions using SQLAlchemy.

The survey data lives in a workbook: named sheets, each with a header row and an
ordered list of data rows. Row values are stored as a JSON array so a sheet can
hold any column layout, the same way a spreadsheet would.
"""

# mypy: ignore-errors

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()  # type: ignore


class Sheet(Base):
    """
    Sheet table storing one logical table of the workbook.

    Attributes:
        name: Sheet name (e.g. "Players")
        headers: Column headers as a JSON array
        created_at: Timestamp when the sheet was created
    """

    __tablename__ = "sheets"

    name = Column(String, primary_key=True)
    headers = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class SheetRow(Base):
    """
    SheetRow table storing the data rows of a sheet in append order.

    Attributes:
        id: Autoincrement row id, doubles as the append order
        sheet_name: Sheet the row belongs to
        cells: Cell values as a JSON array
        created_at: Timestamp when the row was appended
    """

    __tablename__ = "sheet_rows"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sheet_name = Column(
        String, ForeignKey("sheets.name", ondelete="CASCADE"), nullable=False, index=True
    )
    cells = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
