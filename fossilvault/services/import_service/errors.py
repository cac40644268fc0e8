"""Exceptions raised by the import service."""


class FossilImportError(Exception):
    """Base class for import failures."""


class SourceReadError(FossilImportError):
    """The spreadsheet could not be opened, decoded or parsed."""


class RowImportError(FossilImportError):
    """A single row could not be imported. The run continues."""


class ConversionError(RowImportError):
    """A draft could not be converted into a specimen record."""


class DuplicateInventoryIdError(RowImportError):
    """A record with the same inventory ID already exists."""

    def __init__(self, inventory_id: str):
        self.inventory_id = inventory_id
        super().__init__(f"Duplicate inventory ID: {inventory_id}")


class PersistenceError(RowImportError):
    """The store failed to look up or save a record."""
