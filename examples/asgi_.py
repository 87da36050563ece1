# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "pasteur",
#     "httpx",
# ]
#
# [tool.uv.sources]
# pasteur = { path = "../", editable = true }
# ///

import asyncio

import httpx

from pasteur import CacheMetadata
from pasteur.asgi import ConditionalASGIApp

documents = {
    "/readme": CacheMetadata(cache_key="readme-v3", last_modified="Wed, 03 Jan 2024 12:00:00 GMT"),
}


def resolve(scope):
    return documents[scope["path"]]


app = ConditionalASGIApp(resolve, serialize=lambda metadata: metadata.cache_key, mime_type="text/plain")


async def main():
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        response = await client.get("/readme")
        print(response.status_code, response.headers["etag"], response.text)

        response = await client.get("/readme", headers={"If-Modified-Since": response.headers["last-modified"]})
        print(response.status_code)


if __name__ == "__main__":
    asyncio.run(main())
