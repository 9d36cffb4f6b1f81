"""Example 02: Typed Models and Condition Expressions.

This example demonstrates:
- Wrapping a table with ModelTable and pydantic models
- Building conditions with field() instead of raw SQL
- Secondary indexes and checking that queries use them
- Partial updates with exclude_unset semantics
"""

import sqlite3
from typing import Optional

from pydantic import BaseModel

from sqldoc import ModelTable, desc, field, order_by, where


class Address(BaseModel):
    planet: str
    city: Optional[str] = None


class Pilot(BaseModel):
    """A pilot document; id is filled in on insert."""

    id: Optional[str] = None
    name: str
    ship: str
    kills: int = 0
    home: Optional[Address] = None


class PilotUpdate(BaseModel):
    ship: Optional[str] = None
    kills: Optional[int] = None


def main():
    """Run the typed models example."""
    conn = sqlite3.connect(":memory:")
    pilots = ModelTable(conn, "pilots", Pilot)

    # Step 1: Insert typed documents
    pilots.insert_many(
        [
            Pilot(name="Poe", ship="T-70", kills=30, home=Address(planet="Yavin 4")),
            Pilot(name="Wedge", ship="X-wing", kills=25, home=Address(planet="Corellia")),
            Pilot(name="Han", ship="Falcon", kills=12, home=Address(planet="Corellia")),
            Pilot(name="Jess", ship="T-70", kills=8),
        ]
    )
    print(f"✓ Inserted {pilots.count()} pilots")

    # Step 2: Query with condition expressions
    print("\nCorellians, most kills first:")
    corellians = pilots.all(
        where(field("home")["planet"] == "Corellia"), order_by(desc("kills"))
    )
    for p in corellians:
        print(f"   - {p.name} ({p.ship}), {p.kills} kills")

    print("\nT-70 pilots with 10+ kills or no home planet:")
    cond = (field("ship") == "T-70") & ((field("kills") >= 10) | field("home").is_null())
    for p in pilots.iter(where(cond)):
        print(f"   - {p.name}")

    # Step 3: Add an index and confirm the planner uses it
    pilots.table.create_index("$ship")
    print("\nPlan for ship lookup:")
    for line in pilots.table.explain(where(field("ship") == "Falcon")):
        print(f"   {line}")

    # Step 4: Partial updates only touch fields that were set
    han = pilots.get(where(field("name") == "Han"))
    pilots.patch(PilotUpdate(kills=13), where(field("id") == han.id))
    print(f"\n✓ Han after patch: {pilots.get_by_id(han.id)}")

    conn.close()


if __name__ == "__main__":
    main()
