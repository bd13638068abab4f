from sqlalchemy import Column, Integer, String, Text, Numeric, Float, JSON

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    compare_price = Column(Numeric(10, 2), nullable=True)

    image_url = Column(String, nullable=True)
    image_urls = Column(JSON, nullable=False, default=list)

    category = Column(String, nullable=True, index=True)
    status = Column(String, nullable=False, default="in_stock")  # in_stock, low_stock, out_of_stock

    rating = Column(Float, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
