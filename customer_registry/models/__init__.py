# Import all models so that SQLAlchemy registers them for metadata.create_all
from customer_registry.models.customer import Customer

__all__ = [
    "Customer",
]
