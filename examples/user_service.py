#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Quickstart: define a service with actions, register it, dispatch requests.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List

from actionforge import (
    ActionDispatcher,
    ActionRegistry,
    Exclusive,
    Result,
    ServiceResponse,
    action,
)


@dataclass
class PostsData:
    titles: List[str] = field(default_factory=list)


class UserService:
    """
    Demo service backed by an in-memory dict.
    """

    def __init__(self) -> None:
        self._users: Dict[int, str] = {1: "ada", 2: "grace"}
        self._visits = 0

    @action(name="get_user")
    async def get_user_by_id(self, context, params) -> Result[ServiceResponse]:
        user_id = int(params["user_id"])
        if user_id not in self._users:
            return Result.err(LookupError(f"unknown user {user_id}"))
        return Result.ok(
            ServiceResponse.success("User found", {"id": user_id, "name": self._users[user_id]})
        )

    @action
    async def get_posts(self, context, params) -> Result[PostsData]:
        return Result.ok(PostsData(titles=["hello", "world"]))

    @action
    async def record_visit(self: Exclusive["UserService"], context, params) -> int:
        self._visits += 1
        return self._visits


async def main() -> None:
    registry = ActionRegistry()
    registry.register_service(UserService)

    dispatcher = ActionDispatcher(registry)
    dispatcher.add_service("users", UserService())

    print(await dispatcher.request("users/get_user", {"user_id": 1}))
    print(await dispatcher.request("users/get_posts"))
    await asyncio.gather(*(dispatcher.request("users/record_visit") for _ in range(3)))
    print(await dispatcher.request("users/record_visit"))

    failed = await dispatcher.invoke("users/get_user", {"user_id": 99})
    print(failed.error, "<-", failed.error.__cause__)


if __name__ == "__main__":
    asyncio.run(main())
