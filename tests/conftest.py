import itertools
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from socialhub.models import Viewer

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeAPIError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class FakeResponse:
    def __init__(self, data=None, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the postgrest query builder for the app's queries."""

    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.filters = []
        self.order_col = None
        self.desc = False
        self.payload = None
        self.count = None
        self.head = False
        self.single = False

    def select(self, *columns, count=None, head=None):
        self.op = "select"
        self.columns = ",".join(columns) or "*"
        self.count = count
        self.head = bool(head)
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload if isinstance(payload, list) else [payload]
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_col = column
        self.desc = desc
        return self

    def maybe_single(self):
        self.single = True
        return self

    def _matches(self, row):
        return all(row.get(col) == val for col, val in self.filters)

    def execute(self):
        self.backend.calls.append((self.table, self.op))
        failure = self.backend.failures.get((self.table, self.op))
        if failure is not None:
            raise failure

        rows = self.backend.tables.setdefault(self.table, [])
        handler = getattr(self, f"_{self.op}")
        return handler(rows)

    def _select(self, rows):
        matched = [dict(r) for r in rows if self._matches(r)]
        if self.order_col:
            matched.sort(key=lambda r: r[self.order_col], reverse=self.desc)

        if "profiles:user_id" in self.columns:
            for r in matched:
                author = self.backend.profile(r["user_id"]) or {}
                r["profiles"] = {k: author.get(k) for k in ("username", "full_name", "avatar_url")}
        elif self.columns.strip() != "*":
            wanted = [c.strip() for c in self.columns.split(",")]
            matched = [{k: r.get(k) for k in wanted} for r in matched]

        if self.single:
            if not matched:
                return None
            return FakeResponse(data=matched[0])

        count = len(matched) if self.count == "exact" else None
        return FakeResponse(data=[] if self.head else matched, count=count)

    def _insert(self, rows):
        inserted = []
        for item in self.payload:
            row = dict(item)
            if self.table == "likes":
                if any(r["post_id"] == row["post_id"] and r["user_id"] == row["user_id"] for r in rows):
                    raise FakeAPIError('duplicate key value violates unique constraint "likes_pkey"')
                self.backend.bump_likes(row["post_id"], +1)
            elif self.table == "profiles":
                if any(r["username"] == row["username"] for r in rows):
                    raise FakeAPIError('duplicate key value violates unique constraint "profiles_username_key"')
                row.setdefault("is_admin", False)
                row.setdefault("created_at", self.backend.now_iso())
            elif self.table == "posts":
                row.setdefault("id", next(self.backend.ids))
                row.setdefault("likes_count", 0)
                row.setdefault("created_at", self.backend.now_iso())
            rows.append(row)
            inserted.append(row)
        return FakeResponse(data=inserted)

    def _update(self, rows):
        updated = []
        for r in rows:
            if self._matches(r):
                r.update(self.payload)
                updated.append(dict(r))
        return FakeResponse(data=updated)

    def _delete(self, rows):
        removed = [r for r in rows if self._matches(r)]
        self.backend.tables[self.table] = [r for r in rows if not self._matches(r)]
        if self.table == "likes":
            for r in removed:
                self.backend.bump_likes(r["post_id"], -1)
        elif self.table == "posts":
            gone = {r["id"] for r in removed}
            self.backend.tables["likes"] = [
                like for like in self.backend.tables.get("likes", []) if like["post_id"] not in gone
            ]
        return FakeResponse(data=removed)


class FakeAdminAuth:
    def __init__(self, backend):
        self.backend = backend

    def list_users(self):
        failure = self.backend.failures.get(("auth", "list_users"))
        if failure is not None:
            raise failure
        return [entry["user"] for entry in self.backend.auth_users.values()]


class FakeAuth:
    def __init__(self, backend):
        self.backend = backend
        self.session = None
        self.admin = FakeAdminAuth(backend)

    def get_session(self):
        return self.session

    def sign_in_with_password(self, credentials):
        for entry in self.backend.auth_users.values():
            if entry["user"].email == credentials["email"] and entry["password"] == credentials["password"]:
                self.session = SimpleNamespace(user=entry["user"], access_token="token")
                return SimpleNamespace(user=entry["user"], session=self.session)
        raise FakeAPIError("Invalid login credentials")

    def sign_up(self, credentials):
        if any(e["user"].email == credentials["email"] for e in self.backend.auth_users.values()):
            raise FakeAPIError("User already registered")
        user = self.backend.create_auth_user(credentials["email"], credentials["password"])
        self.session = SimpleNamespace(user=user, access_token="token")
        return SimpleNamespace(user=user, session=self.session)

    def sign_out(self):
        self.session = None


class FakeSupabase:
    """In-memory stand-in for a supabase.Client."""

    def __init__(self, now=NOW):
        self.now = now
        self.tables = {"profiles": [], "posts": [], "likes": [], "comments": []}
        self.auth_users = {}
        self.failures = {}
        self.calls = []
        self.ids = itertools.count(1)
        self.auth = FakeAuth(self)

    def table(self, name):
        return FakeQuery(self, name)

    # helpers for tests
    def now_iso(self):
        return self.now.isoformat()

    def profile(self, user_id):
        for p in self.tables["profiles"]:
            if p["id"] == user_id:
                return p
        return None

    def bump_likes(self, post_id, delta):
        for p in self.tables["posts"]:
            if p["id"] == post_id:
                p["likes_count"] = (p.get("likes_count") or 0) + delta

    def create_auth_user(self, email, password):
        user = SimpleNamespace(id=str(uuid.uuid4()), email=email)
        self.auth_users[user.id] = {"user": user, "password": password}
        return user

    def add_user(self, username, full_name=None, is_admin=False, email=None, password="secret", with_profile=True):
        email = email or f"{username}@example.com"
        user = self.create_auth_user(email, password)
        if with_profile:
            self.tables["profiles"].append(
                {
                    "id": user.id,
                    "username": username,
                    "full_name": full_name or username.title(),
                    "bio": "",
                    "avatar_url": None,
                    "is_admin": is_admin,
                    "created_at": self.now_iso(),
                }
            )
        return user

    def add_post(self, user_id, content="hello", age_seconds=0, image_url=None):
        post = {
            "id": next(self.ids),
            "user_id": user_id,
            "content": content,
            "image_url": image_url,
            "likes_count": 0,
            "created_at": (self.now - timedelta(seconds=age_seconds)).isoformat(),
        }
        self.tables["posts"].append(post)
        return post

    def sign_in_as(self, user):
        self.auth.session = SimpleNamespace(user=user, access_token="token")

    def fail(self, table, op, message="backend unavailable"):
        self.failures[(table, op)] = FakeAPIError(message)


@pytest.fixture
def backend():
    return FakeSupabase()


@pytest.fixture
def alice(backend):
    return backend.add_user("alice", "Alice Liddell")


@pytest.fixture
def bob(backend):
    return backend.add_user("bob", "Bob Builder")


@pytest.fixture
def alice_viewer(alice):
    return Viewer.from_user(alice)
