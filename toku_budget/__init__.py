"""Top-level package for Toku Budget.

The primary modules are:

* ``date_window`` – month / quarter / year period boundaries
* ``transactions`` – the transaction store, change events and live queries
* ``categories`` – category seeding and lookup
* ``app`` – the Streamlit app that ties everything together

To run the app from the command line you can execute:

```bash
streamlit run toku_budget/app.py
```
"""

from .date_window import DateRangeMode, DateWindow, make_window  # noqa: F401
from .errors import BudgetError, NotFoundError, PersistenceError, ValidationError  # noqa: F401
from .models import Category, Transaction, TxKind  # noqa: F401
from .transactions import LiveQuery, TransactionStore  # noqa: F401

__all__ = [
    "BudgetError",
    "Category",
    "DateRangeMode",
    "DateWindow",
    "LiveQuery",
    "NotFoundError",
    "PersistenceError",
    "Transaction",
    "TransactionStore",
    "TxKind",
    "ValidationError",
    "make_window",
]
