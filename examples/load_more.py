"""
"Load more" list with optimistic inserts

A locally created record is shown immediately and counted through
adjust_length() until the next full refresh confirms it.
"""

import asyncio

from pagantic import HttpxTransport, RecordSet

BASE_URL = "http://localhost:8080/api/v1/"


async def main() -> None:
    async with HttpxTransport(BASE_URL) as transport:
        tasks = RecordSet(name="Task", max_size=20, max_max_size=200, transport=transport)

        await tasks.fetch()
        print(f"Loaded {len(tasks)} of {tasks.total}")

        # Append the next window instead of replacing the current one
        if tasks.has_more():
            await tasks.fetch(more=True, remove=False)
            print(f"Loaded {len(tasks)} of {tasks.total}")

        # Optimistic insert: shown now, counted as a pending local delta
        tasks.add({"id": "local-1", "name": "Call back customer"})
        tasks.adjust_length(1)

        # A refresh requests enough records to cover everything shown
        request = tasks.fetch(reset=True)
        print(f"Refreshing with maxSize={request.params['maxSize']}")
        await request
        print(f"Pending delta after reset: {tasks.length_correction}")


if __name__ == "__main__":
    asyncio.run(main())
