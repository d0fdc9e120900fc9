import pytest

from stockroom.domain.model.product import Product
from stockroom.domain.model.value_objects import Money
from stockroom.infrastructure.persistence.database import Database
from stockroom.infrastructure.persistence.sql_product_repository import SqlProductRepository


@pytest.fixture
def db():
    database = Database("sqlite://")
    database.create_tables()
    products = SqlProductRepository(database.session_factory)
    products.save(Product("A", "Apple", Money.of("2.00"), min_stock=5, category_name="Fruit"))
    products.save(Product("B", "Bread", Money.of("3.00")))
    yield database
    database.dispose()
