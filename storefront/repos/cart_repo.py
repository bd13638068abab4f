# storefront/repos/cart_repo.py
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    """
    Dostep do pozycji koszyka. Kazde zapytanie filtruje po session_id,
    sesja nigdy nie widzi pozycji innej sesji.
    Repo nie commituje samo, transakcja nalezy do serwisu.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_items(self, session_id: str, for_update: bool = False) -> List[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.session_id == session_id)
            .order_by(CartItemModel.id)
        )
        if for_update:
            # blokujemy tylko pozycje koszyka, nie produkty z joina
            stmt = stmt.with_for_update(of=CartItemModel)
        return list(self.db.execute(stmt).unique().scalars().all())

    def get_item(self, session_id: str, item_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.id == item_id,
            CartItemModel.session_id == session_id,
        )
        return self.db.execute(stmt).unique().scalar_one_or_none()

    def find_item(self, session_id: str, product_id: int, color: str, size: str) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.session_id == session_id,
            CartItemModel.product_id == product_id,
            CartItemModel.color == color,
            CartItemModel.size == size,
        )
        return self.db.execute(stmt).unique().scalar_one_or_none()

    def insert_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        # flush zeby unique constraint wybuchl tutaj a nie przy commicie
        self.db.flush()
        return item

    def delete_item(self, item: CartItemModel):
        self.db.delete(item)
        self.db.flush()

    def delete_for_session(self, session_id: str) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.session_id == session_id)
        )
        return result.rowcount

    def delete_items(self, session_id: str, item_ids: List[int]) -> int:
        if not item_ids:
            return 0
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.session_id == session_id,
                CartItemModel.id.in_(item_ids),
            )
        )
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
