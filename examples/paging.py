"""
Paging through an EspoCRM-style list API

Walks an "Account" list page by page, then re-sorts and filters it.
Point BASE_URL at any API that answers GET <entity>?offset=&maxSize=&...
with {"total": int, "list": [...]}.
"""

import asyncio

from pydantic import BaseModel

from pagantic import EventEmitter, HttpxTransport, RecordSet

BASE_URL = "http://localhost:8080/api/v1/"


class Account(BaseModel):
    id: str
    name: str
    type: str | None = None


async def main() -> None:
    events = EventEmitter()
    events.on("sync", lambda rs, response: print(f"  synced {len(rs)} of {rs.total}"))

    async with HttpxTransport(BASE_URL) as transport:
        accounts = RecordSet(
            name="Account",
            model=Account,
            order_by="name",
            order="asc",
            max_size=10,
            transport=transport,
            events=events,
        )

        # First page
        await accounts.fetch()
        for account in accounts:
            print(f"  - {account.name}")

        # Walk forward while pages remain
        while accounts.has_more():
            await accounts.next_page()
            print(f"Page {accounts.page_info().page_number}")

        # Newest first, customers only
        accounts.where = [{"type": "equals", "attribute": "type", "value": "Customer"}]
        await accounts.sort("createdAt", True)

        # Back to the configured sort, without fetching
        accounts.reset_order_to_default()
        print(f"Sort restored to {accounts.order_by} {accounts.order}")


if __name__ == "__main__":
    asyncio.run(main())
