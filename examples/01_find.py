"""
Example 01: Fluent Find Operations

This example demonstrates the find builder against a local MongoDB server.
Set MONGO_URI to point somewhere else.
"""

import os
from dataclasses import dataclass, field

from doc_query import ConnectionConfig, MongoTemplate, document, query


@document(collection="star-wars")
@dataclass
class Person:
    id: str
    firstname: str


@dataclass
class Jedi:
    name: str = field(metadata={"field": "firstname"})


def main():
    config = ConnectionConfig(
        uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        database="doc_query_examples",
    )
    template = MongoTemplate.from_config(config)
    template.drop_collection(Person)

    template.save(Person(id="id-1", firstname="han"))
    template.save(Person(id="id-2", firstname="luke"))

    print("=== Fluent Find ===\n")

    # find_all: every document in the domain type's collection
    people = template.query(Person).find_all()
    print(f"find_all result ({len(people)} documents):")
    for person in people:
        print(f"  - {person.firstname} ({person.id})")
    print()

    # find_by: at most one match, None if there is none
    luke = template.query(Person).find_by(query(firstname="luke"))
    print(f"find_by result: {luke}\n")

    # return_results_as: map into a projection type
    jedis = template.query(Person).return_results_as(Jedi).find_all()
    print(f"projected result: {jedis}\n")

    # in_collection: read another type's collection using this type's mapping
    found = template.query(Jedi).in_collection("star-wars").find_all_by(query(name="han"))
    print(f"in_collection result: {found}\n")

    template.drop_collection(Person)
    template.close()


if __name__ == "__main__":
    main()
