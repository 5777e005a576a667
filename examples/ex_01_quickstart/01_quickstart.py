"""Quickstart: bindings, lifetimes and aliases.

Register recipes under string keys, choose a lifetime, and resolve them back.
Singleton recipes run once; transient recipes run on every resolve. Aliases
resolve through to their target and share its lifetime.
"""

from __future__ import annotations

import itertools

from bindwire import Container, Lifetime, TypedKey


class Database:
    def __init__(self, dsn: str) -> None:
        self.dsn = dsn


class UserRepository:
    def __init__(self, db: Database) -> None:
        self.db = db


DATABASE: TypedKey[Database] = TypedKey("app.database")


def main() -> None:
    container = Container()
    tokens = itertools.count(1)

    container.register(DATABASE, lambda c: Database("sqlite:///app.db"), Lifetime.SINGLETON)
    container.bind("app.token", lambda c: next(tokens))
    container.bind("app.users", lambda c: UserRepository(c.resolve(DATABASE)))
    container.alias("Database", DATABASE)

    db = container.resolve(DATABASE)
    print(f"dsn={db.dsn}")  # => dsn=sqlite:///app.db
    print(f"singleton_same={container.resolve(DATABASE) is db}")  # => singleton_same=True

    first_token = container.resolve("app.token")
    second_token = container.resolve("app.token")
    print(f"tokens={first_token},{second_token}")  # => tokens=1,2

    print(f"alias_same={container.resolve('Database') is db}")  # => alias_same=True

    users = container.resolve("app.users")
    print(f"users_share_db={users.db is db}")  # => users_share_db=True


if __name__ == "__main__":
    main()
