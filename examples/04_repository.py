"""
Example 04: Repository Pattern

This example demonstrates a repository bound to one domain type.
"""

import os

from pydantic import BaseModel

from doc_query import ConnectionConfig, MongoTemplate, Repository, Update, query


class Product(BaseModel):
    id: str | None = None
    name: str
    stock: int = 0


class ProductRepository(Repository[Product]):
    def out_of_stock(self) -> list[Product]:
        return self.query().find_all_by(query(stock=0))

    def restock(self, name: str, amount: int) -> None:
        self.update().apply(Update().inc("stock", amount)).first_matching(query(name=name))


def main():
    config = ConnectionConfig(
        uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        database="doc_query_examples",
    )
    template = MongoTemplate.from_config(config)
    repo = ProductRepository(template, Product, collection="products")
    repo.remove().all()

    repo.save(Product(name="lightsaber", stock=0))
    repo.save(Product(name="blaster", stock=12))

    print("=== Repository ===\n")
    print(f"out of stock: {[p.name for p in repo.out_of_stock()]}")

    repo.restock("lightsaber", 3)
    print(f"after restock: {[p.name for p in repo.out_of_stock()]}")
    print(f"total products: {repo.count()}\n")

    repo.remove().all()
    template.close()


if __name__ == "__main__":
    main()
