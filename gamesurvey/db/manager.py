"""
Workbook manager for the Game Survey backend.

This module provides a spreadsheet-like interface over SQLite: sheets are
created with a header row, rows are appended and read back in append order,
and single cells can be updated in place.
"""

import os
from typing import Any, List, Optional, Sequence

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession
from sqlalchemy.orm import sessionmaker

from gamesurvey.db.schema import Base, Sheet, SheetRow
from gamesurvey.errors import StoreError
from gamesurvey.utils.logger import get_logger

logger = get_logger(__name__)


class WorkbookManager:
    """
    Manages the sheets and rows of the survey workbook.

    Row reads return the header row followed by the data rows, so callers see
    the same shape a spreadsheet range read would give them.

    Attributes:
        db_path: Path to the SQLite database file
        engine: SQLAlchemy engine for database connections
        SessionLocal: Factory for creating database sessions
    """

    def __init__(self, db_path: str = "data/gamesurvey.db"):
        """
        Initialize the workbook manager.

        Args:
            db_path: Path to SQLite database file (created if doesn't exist)
        """
        self.db_path = db_path

        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self.engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine)

        logger.info(f"Workbook initialized at {db_path}")

    # ==================== Sheet Operations ====================

    def get_or_create_sheet(
        self, sheet_name: str, headers: Optional[Sequence[str]] = None
    ) -> List[str]:
        """
        Return a sheet's headers, creating the sheet if it doesn't exist.

        Args:
            sheet_name: Name of the sheet
            headers: Header row used when the sheet is created

        Returns:
            The sheet's header row
        """
        db: DBSession = self.SessionLocal()
        try:
            sheet = db.get(Sheet, sheet_name)
            if sheet is None:
                sheet = Sheet(name=sheet_name, headers=list(headers or []))
                db.add(sheet)
                db.commit()
                logger.info(f"Created sheet {sheet_name} with {len(sheet.headers)} columns")
            elif headers and not sheet.headers:
                sheet.headers = list(headers)
                db.commit()
            return list(sheet.headers)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to open sheet {sheet_name}: {e}", exc_info=True)
            raise StoreError(f"Failed to open sheet {sheet_name}: {e}") from e
        finally:
            db.close()

    def list_sheets(self) -> List[str]:
        """List sheet names in creation order."""
        db: DBSession = self.SessionLocal()
        try:
            sheets = db.query(Sheet).order_by(Sheet.created_at, Sheet.name).all()
            return [s.name for s in sheets]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list sheets: {e}", exc_info=True)
            raise StoreError(f"Failed to list sheets: {e}") from e
        finally:
            db.close()

    # ==================== Row Operations ====================

    def read_table(self, sheet_name: str) -> List[List[Any]]:
        """
        Read a whole sheet.

        Args:
            sheet_name: Name of the sheet

        Returns:
            Header row followed by data rows in append order. A missing sheet
            reads as a single empty header row.
        """
        db: DBSession = self.SessionLocal()
        try:
            sheet = db.get(Sheet, sheet_name)
            if sheet is None:
                return [[]]
            rows = (
                db.query(SheetRow)
                .filter(SheetRow.sheet_name == sheet_name)
                .order_by(SheetRow.id)
                .all()
            )
            logger.debug(f"Read {len(rows)} rows from {sheet_name}")
            return [list(sheet.headers)] + [list(r.cells) for r in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to read sheet {sheet_name}: {e}", exc_info=True)
            raise StoreError(f"Failed to read sheet {sheet_name}: {e}") from e
        finally:
            db.close()

    def append_row(self, sheet_name: str, row: Sequence[Any]) -> int:
        """
        Append a row to a sheet.

        Args:
            sheet_name: Name of an existing sheet
            row: Cell values (JSON-serializable)

        Returns:
            1-based data row number of the appended row
        """
        db: DBSession = self.SessionLocal()
        try:
            if db.get(Sheet, sheet_name) is None:
                db.add(Sheet(name=sheet_name, headers=[]))
            db.add(SheetRow(sheet_name=sheet_name, cells=list(row)))
            db.commit()
            count = db.query(SheetRow).filter(SheetRow.sheet_name == sheet_name).count()
            logger.debug(f"Appended row {count} to {sheet_name}")
            return count
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to append to {sheet_name}: {e}", exc_info=True)
            raise StoreError(f"Failed to append to {sheet_name}: {e}") from e
        finally:
            db.close()

    def update_cell(
        self, sheet_name: str, row_number: int, column: int, value: Any
    ) -> bool:
        """
        Set a single cell of a data row.

        Args:
            sheet_name: Name of the sheet
            row_number: 1-based data row number (header excluded)
            column: 0-based column index
            value: New cell value

        Returns:
            True if the row exists and was updated, False otherwise
        """
        if row_number < 1 or column < 0:
            return False

        db: DBSession = self.SessionLocal()
        try:
            row = (
                db.query(SheetRow)
                .filter(SheetRow.sheet_name == sheet_name)
                .order_by(SheetRow.id)
                .offset(row_number - 1)
                .first()
            )
            if row is None:
                return False
            cells = list(row.cells)
            if len(cells) <= column:
                cells.extend([""] * (column + 1 - len(cells)))
            cells[column] = value
            # JSON columns only persist on reassignment
            row.cells = cells
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update {sheet_name}: {e}", exc_info=True)
            raise StoreError(f"Failed to update {sheet_name}: {e}") from e
        finally:
            db.close()

    def clear_sheet(self, sheet_name: str) -> int:
        """
        Delete every data row of a sheet, keeping its header.

        Returns:
            Number of rows deleted
        """
        db: DBSession = self.SessionLocal()
        try:
            deleted = (
                db.query(SheetRow)
                .filter(SheetRow.sheet_name == sheet_name)
                .delete(synchronize_session=False)
            )
            db.commit()
            if deleted:
                logger.info(f"Cleared {deleted} rows from {sheet_name}")
            return deleted
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to clear {sheet_name}: {e}", exc_info=True)
            raise StoreError(f"Failed to clear {sheet_name}: {e}") from e
        finally:
            db.close()
