# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_UNSPLASH = "https://images.unsplash.com/{}?ixlib=rb-4.0.3&auto=format&fit=crop&w={}&q=80"
_WIDGET_IMAGE = "https://i.pinimg.com/564x/60/b3/b8/60b3b888914534cfa940f458c2143798.jpg"

CATEGORIES = [
    ("Electrónica", "electronica", "Productos electrónicos y gadgets", "photo-1556905055-8f358a7a47b2"),
    ("Ropa", "ropa", "Ropa y accesorios de moda", "photo-1551232864-3f0890e580d9"),
    ("Hogar", "hogar", "Productos para el hogar", "photo-1512686096451-a15c19314d59"),
    ("Deporte", "deporte", "Equipamiento deportivo", "photo-1575318634028-6a0cfcb60c59"),
]

# (nazwa, opis, cena, cena przed promocja, kategoria, obrazek, rating, liczba opinii)
PRODUCTS = [
    ("Auriculares Premium", "Auriculares inalámbricos con cancelación de ruido y audio de alta fidelidad.",
     "89.99", "112.99", "Electrónica", _UNSPLASH.format("photo-1505740420928-5e560c06d30e", 500), 4.5, 128),
    ("Cámara Instantánea", "Cámara instantánea de estilo retro con funciones modernas y calidad premium.",
     "129.99", None, "Electrónica", _UNSPLASH.format("photo-1526170375885-4d8ecf77b99f", 500), 4.0, 94),
    ("Smartwatch Pro", "Reloj inteligente con monitor de salud, GPS y batería de larga duración.",
     "199.99", None, "Electrónica", _UNSPLASH.format("photo-1546868871-7041f2a55e12", 500), 5.0, 217),
    ("Zapatillas Ultra", "Zapatillas deportivas con amortiguación avanzada y diseño moderno.",
     "84.99", "99.99", "Deporte", _UNSPLASH.format("photo-1491553895911-0055eca6402d", 500), 3.5, 156),
    # katalog widgetu czatu
    ("Laptop Pro", "Powerful laptop with high performance specs",
     "1299.99", None, "Electrónica", _WIDGET_IMAGE, 0, 0),
    ("Smartphone X", "Latest smartphone with advanced camera",
     "899.99", None, "Electrónica", _WIDGET_IMAGE, 0, 0),
    ("Wireless Headphones", "Noise-cancelling wireless headphones with long battery life",
     "199.99", None, "Electrónica", _WIDGET_IMAGE, 0, 0),
    ("Smart Watch", "Health tracking smart watch with fitness features",
     "249.99", None, "Electrónica", _WIDGET_IMAGE, 0, 0),
    ("Tablet Air", "Lightweight tablet with stunning display",
     "499.99", None, "Electrónica", _WIDGET_IMAGE, 0, 0),
]


def seed():
    db = SessionLocal()
    try:
        repo = CatalogRepo(db)
        # tylko gdy katalog jest pusty
        if repo.has_products():
            return

        for name, slug, description, photo in CATEGORIES:
            repo.add_category(
                CategoryModel(
                    name=name,
                    slug=slug,
                    description=description,
                    image_url=_UNSPLASH.format(photo, 400),
                )
            )

        for name, description, price, compare, category, image, rating, reviews in PRODUCTS:
            repo.add_product(
                ProductModel(
                    name=name,
                    description=description,
                    price=Decimal(price),
                    compare_price=Decimal(compare) if compare else None,
                    image_url=image,
                    image_urls=[image],
                    category=category,
                    status="in_stock",
                    rating=rating,
                    review_count=reviews,
                )
            )

        repo.commit()
        logger.info(f"Zaladowano katalog: {len(CATEGORIES)} kategorii, {len(PRODUCTS)} produktow")
    finally:
        db.close()


if __name__ == "__main__":
    from storefront.data.database import init_db

    init_db()
    seed()
