"""
Bookkeeping errors.

These are raised by pure logic (see `bills/costing.py`) and mapped to
HTTP 400 responses by the service layer.
"""

from __future__ import annotations


class BookkeepingError(ValueError):
    pass


class ProductNotFoundError(BookkeepingError):
    def __init__(self, unique_id: str) -> None:
        self.unique_id = unique_id
        super().__init__(f"Product {unique_id} not found.")


class InsufficientStockError(BookkeepingError):
    def __init__(self, product_name: str, *, available: int, requested: int) -> None:
        self.product_name = product_name
        self.available = available
        self.requested = requested
        self.shortfall = requested - available
        super().__init__(
            f"Insufficient stock for {product_name}. "
            f"Available: {available}, requested: {requested} (short by {self.shortfall})."
        )


class NegativeStockError(BookkeepingError):
    def __init__(self, product_name: str, *, available: int, removing: int) -> None:
        self.product_name = product_name
        self.available = available
        self.removing = removing
        super().__init__(
            f"Cannot delete bill: Product {product_name} would have negative stock "
            f"(on hand {available}, bill added {removing})."
        )


class NegativeStockValueError(BookkeepingError):
    def __init__(self, product_name: str) -> None:
        self.product_name = product_name
        super().__init__(
            f"Cannot delete bill: Product {product_name} would have a negative stock value."
        )


class StockLimitError(BookkeepingError):
    def __init__(self, product_name: str) -> None:
        self.product_name = product_name
        super().__init__(f"Stock limit reached for {product_name}: quantity or stock value too large.")
