"""
Example 02: Fluent Update Operations

This example demonstrates updates, upserts and find-and-modify.
"""

import os
from dataclasses import dataclass

from doc_query import ConnectionConfig, FindAndModifyOptions, MongoTemplate, Update, query


@dataclass
class Account:
    id: str | None
    owner: str
    balance: int = 0


def main():
    config = ConnectionConfig(
        uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        database="doc_query_examples",
    )
    template = MongoTemplate.from_config(config)
    template.drop_collection(Account)

    template.save(Account(id="acc-1", owner="han", balance=10))
    template.save(Account(id="acc-2", owner="lando", balance=500))

    print("=== Fluent Update ===\n")

    # all_matching: update every matching document
    result = template.update(Account).apply(Update().inc("balance", 5)).all_matching(
        query(owner="han")
    )
    print(f"all_matching modified {result.modified_count} document(s)\n")

    # upsert_if_none_matching: insert when nothing matches
    result = template.update(Account).apply(Update().set("balance", 0)).upsert_if_none_matching(
        query(owner="chewie")
    )
    print(f"upsert inserted id: {result.upserted_id}\n")

    # find_and_modify_matching: return the document after the change
    account = (
        template.update(Account)
        .apply(Update().inc("balance", -100))
        .with_options(FindAndModifyOptions(return_new=True))
        .find_and_modify_matching(query(owner="lando"))
    )
    print(f"find_and_modify result: {account}\n")

    template.drop_collection(Account)
    template.close()


if __name__ == "__main__":
    main()
