# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "pasteur[fastapi]",
#     "httpx",
# ]
#
# [tool.uv.sources]
# pasteur = { path = "../", editable = true }
# ///


import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI, Request

from pasteur.fastapi import render

app = FastAPI()


@dataclass
class Item:
    id: int
    name: str
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def cache_key(self) -> str:
        return f"item-{self.id}-{int(self.updated_at.timestamp())}"

    def last_modified(self) -> datetime:
        return self.updated_at


items = [Item(1, "kettle"), Item(2, "teapot")]


@app.get("/items/")
async def read_items(request: Request):
    return render(request, items)


async def main():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        first = await client.get("/items/")
        print(f"First: status={first.status_code}, etag={first.headers['etag']}")

        second = await client.get("/items/", headers={"If-None-Match": first.headers["etag"]})
        print(f"Revalidated: status={second.status_code}, body={second.content!r}")

        items.append(Item(3, "mug"))
        third = await client.get("/items/", headers={"If-None-Match": first.headers["etag"]})
        print(f"After change: status={third.status_code}, etag={third.headers['etag']}")


if __name__ == "__main__":
    asyncio.run(main())
