"""Example 01: Basic Usage - sqldoc Fundamentals.

This example demonstrates the fundamental operations:
- Opening a connection and binding a document Table
- Inserting documents with and without ids
- Querying with the $path shorthand and sql() fragments
- Patching, replacing and deleting matched documents
"""

from pathlib import Path

from sqldoc import Table, connect, limit, order_by, sql


def main():
    """Run the basic usage example."""
    print("=" * 80)
    print("SQLDOC BASIC USAGE EXAMPLE")
    print("=" * 80)

    # Step 1: Open a database
    # connect() enables WAL and a busy timeout; statements autocommit.
    db_path = Path("tmp/basic_usage.db")
    db_path.parent.mkdir(parents=True, exist_ok=True)
    db_path.unlink(missing_ok=True)
    conn = connect(str(db_path))

    # Step 2: Bind a table
    # The table and its unique $id index are created on first use.
    jedi = Table(conn, "jedi")
    print(f"\n✓ Bound {jedi!r}")

    # Step 3: Insert documents
    # Documents without an id get a time-sortable UUIDv7.
    yoda = jedi.insert({"name": "yoda", "age": 900})
    print(f"✓ Inserted yoda with generated id {yoda['id']}")
    jedi.insert_many(
        [
            {"id": "luke", "name": "luke", "age": 42, "home": {"planet": "Tatooine"}},
            {"id": "leia", "name": "leia", "age": 42, "home": {"planet": "Alderaan"}},
            {"id": "rey", "name": "rey", "age": 50},
            {"id": "finn", "name": "finn", "age": 32},
        ]
    )
    print(f"✓ Table now holds {jedi.count()} documents")

    print("\n" + "=" * 80)
    print("QUERYING DATA")
    print("=" * 80)

    # $age becomes data->>'$.age'; 42 is bound, never spliced into the SQL.
    print("\n1. Older than 42:")
    for doc in jedi.all(sql("where $age > ?", 42), order_by("age")):
        print(f"   - {doc['name']}, age {doc['age']}")

    print("\n2. Nested path $home.planet:")
    luke = jedi.get(sql("where $home.planet = ?", "Tatooine"))
    print(f"   - {luke['name']} from {luke['home']['planet']}")

    print("\n3. Youngest two:")
    for doc in jedi.iter(order_by("age"), limit(2)):
        print(f"   - {doc['name']}")

    print("\n" + "=" * 80)
    print("UPDATING DATA")
    print("=" * 80)

    # patch() is an RFC 7396 merge: null removes a key.
    jedi.patch({"rank": "master", "home": None}, sql("where $id = ?", "luke"))
    print(f"\n✓ Patched luke: {jedi.get_by_id('luke')}")

    jedi.replace({"id": "finn", "name": "fn-2187"}, sql("where $id = ?", "finn"))
    print(f"✓ Replaced finn: {jedi.get_by_id('finn')}")

    jedi.delete(sql("where $age < ?", 45))
    print(f"✓ Deleted the young ones, {jedi.count()} documents left")

    # Step 4: Check the plan for an id lookup
    print("\nQuery plan for get_by_id:")
    for line in jedi.explain(sql("where $id = ?", "rey")):
        print(f"   {line}")

    conn.close()
    print("\n" + "=" * 80)
    print("EXAMPLE COMPLETE")
    print("=" * 80)
    print(f"\nDatabase file: {db_path}")


if __name__ == "__main__":
    main()
