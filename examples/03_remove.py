"""
Example 03: Fluent Remove Operations and Events

This example demonstrates removes and the per-document delete events of
and_return_all_matching.
"""

import os
from dataclasses import dataclass

from doc_query import ConnectionConfig, MappingEventType, MongoTemplate, query


@dataclass
class Task:
    id: str
    title: str
    done: bool = False


def main():
    config = ConnectionConfig(
        uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        database="doc_query_examples",
    )
    template = MongoTemplate.from_config(config)
    template.drop_collection(Task)

    template.add_listener(
        lambda event: print(f"  event: {event.type.value} {event.source}"),
        MappingEventType.AFTER_DELETE,
    )

    for i, title in enumerate(["write", "review", "ship", "celebrate"], start=1):
        template.save(Task(id=f"task-{i}", title=title, done=i <= 2))

    print("=== Fluent Remove ===\n")

    # and_return_all_matching: read, then delete one by one
    print("and_return_all_matching:")
    removed = template.remove(Task).and_return_all_matching(query(done=True))
    print(f"removed: {[task.title for task in removed]}\n")

    # all: bulk delete, the collection itself is kept
    print("all:")
    result = template.remove(Task).all()
    print(f"deleted {result.deleted_count} document(s)\n")

    template.drop_collection(Task)
    template.close()


if __name__ == "__main__":
    main()
