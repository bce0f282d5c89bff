"""Built-in transaction categories available to every user"""

from typing import List
from finplanner.domain.exceptions import ProtectedCategoryError
from finplanner.domain.models import Category

DEFAULT_CATEGORIES: List[Category] = [
    Category(id="1", name="Alimentação", color="#f97316", icon="restaurant", type="expense", system=True),
    Category(id="2", name="Trabalho", color="#3b82f6", icon="work", type="income", system=True),
    Category(id="3", name="Lazer", color="#eab308", icon="movie", type="expense", system=True),
    Category(id="4", name="Transporte", color="#8b5cf6", icon="directions_car", type="expense", system=True),
    Category(id="5", name="Saúde", color="#ef4444", icon="medication", type="expense", system=True),
    Category(id="6", name="Educação", color="#14b8a6", icon="school", type="expense", system=True),
    Category(id="7", name="Moradia", color="#6366f1", icon="home", type="expense", system=True),
    Category(id="8", name="Investimentos", color="#22c55e", icon="savings", type="expense", system=True),
    Category(id="9", name="Pagamentos", color="#64748b", icon="payments", type="expense", system=True),
    Category(id="10", name="Outros", color="#94a3b8", icon="more_horiz", type="expense", system=True),
]


def merge_categories(user_categories: List[Category]) -> List[Category]:
    """Defaults first, then user categories whose name is not already taken"""
    taken = {c.name.lower() for c in DEFAULT_CATEGORIES}
    return DEFAULT_CATEGORIES + [c for c in user_categories if c.name.lower() not in taken]


def ensure_deletable(category_id: str) -> None:
    """
    Raises:
        ProtectedCategoryError: category_id belongs to a built-in category
    """
    if any(c.id == category_id for c in DEFAULT_CATEGORIES):
        raise ProtectedCategoryError(f"Category {category_id} is built in and cannot be deleted")
