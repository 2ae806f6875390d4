from .statement import (
    EXPENSE_ROOT,
    MIN_INFERRED_NAME_LENGTH,
    PREFIX_ROOT,
    REVENUE_ROOT,
    ROOT_ORDER,
    ROOTS_BY_ID,
    STANDARD_CATEGORY_NAMES,
    UNMAPPED_PREFIX_ROOT,
    RootDef,
)

__all__ = [
    "EXPENSE_ROOT",
    "MIN_INFERRED_NAME_LENGTH",
    "PREFIX_ROOT",
    "REVENUE_ROOT",
    "ROOT_ORDER",
    "ROOTS_BY_ID",
    "STANDARD_CATEGORY_NAMES",
    "UNMAPPED_PREFIX_ROOT",
    "RootDef",
]
