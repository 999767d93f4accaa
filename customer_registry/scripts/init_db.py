from __future__ import annotations

from customer_registry.core.config import get_settings
from customer_registry.db.base import Base
from customer_registry.db.session import engine

# Import models to register with SQLAlchemy
import customer_registry.models  # noqa: F401


def main() -> int:
    settings = get_settings()
    if settings.data_store_backend.lower() != "sql":
        print(f"backend is {settings.data_store_backend!r}; tables are managed by the hosted store")
        return 0

    Base.metadata.create_all(bind=engine)
    print("DB initialized")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
