"""In-memory stand-ins for the Supabase client and the auth provider."""

import copy
from typing import Any, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError

from app.modules.auth.provider import AuthResult, AuthSuccess


def api_error(code: str, message: str = "error") -> APIError:
    return APIError({"code": code, "message": message, "details": None, "hint": None})


class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", name: str):
        self._db = db
        self._name = name
        self._filters = []
        self._op = "select"
        self._payload: Any = None
        self._on_conflict = ""
        self._ignore_duplicates = False
        self._order: List[Tuple[str, bool]] = []
        self._limit: Optional[int] = None
        self._single = False
        self._maybe_single = False
        self._count = None

    # --- builders ---

    def select(self, *columns, count=None, **kwargs):
        self._count = count
        return self

    def insert(self, rows, **kwargs):
        self._op = "insert"
        self._payload = rows
        return self

    def update(self, data, **kwargs):
        self._op = "update"
        self._payload = data
        return self

    def upsert(self, rows, on_conflict: str = "", ignore_duplicates: bool = False, **kwargs):
        self._op = "upsert"
        self._payload = rows
        self._on_conflict = on_conflict
        self._ignore_duplicates = ignore_duplicates
        return self

    def delete(self, **kwargs):
        self._op = "delete"
        return self

    def eq(self, field, value):
        self._filters.append(lambda r: r.get(field) == value)
        return self

    def order(self, column, desc=False, **kwargs):
        self._order.append((column, desc))
        return self

    def limit(self, n):
        self._limit = n
        return self

    def single(self):
        self._single = True
        return self

    def maybe_single(self):
        self._maybe_single = True
        return self

    # --- execution ---

    def _rows(self) -> List[Dict[str, Any]]:
        return self._db.tables.setdefault(self._name, [])

    def _matching(self) -> List[Dict[str, Any]]:
        return [row for row in self._rows() if all(f(row) for f in self._filters)]

    def execute(self):
        self._db.calls.append((self._name, self._op, copy.deepcopy(self._payload)))
        if self._name in self._db.fail:
            raise self._db.fail[self._name]
        return getattr(self, f"_execute_{self._op}")()

    def _execute_select(self):
        rows = self._matching()
        for column, desc in reversed(self._order):
            rows = sorted(rows, key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        total = len(rows)
        if self._limit is not None:
            rows = rows[:self._limit]
        rows = copy.deepcopy(rows)
        if self._single:
            if len(rows) != 1:
                raise api_error("PGRST116", "JSON object requested, multiple (or no) rows returned")
            return FakeResult(rows[0])
        if self._maybe_single:
            if not rows:
                return None
            return FakeResult(rows[0])
        return FakeResult(rows, count=total if self._count else None)

    def _execute_insert(self):
        payload = self._payload if isinstance(self._payload, list) else [self._payload]
        inserted = []
        for row in payload:
            row = dict(row)
            unique = self._db.unique.get(self._name)
            if unique and any(all(r.get(c) == row.get(c) for c in unique) for r in self._rows()):
                raise api_error("23505", "duplicate key value violates unique constraint")
            row.setdefault("id", self._db.next_id())
            self._rows().append(row)
            inserted.append(copy.deepcopy(row))
        return FakeResult(inserted)

    def _execute_update(self):
        updated = []
        for row in self._matching():
            row.update(self._payload)
            updated.append(copy.deepcopy(row))
        return FakeResult(updated)

    def _execute_upsert(self):
        payload = self._payload if isinstance(self._payload, list) else [self._payload]
        keys = [c.strip() for c in self._on_conflict.split(",") if c.strip()] or ["id"]
        written = []
        for row in payload:
            existing = next(
                (r for r in self._rows() if all(r.get(k) == row.get(k) for k in keys)),
                None,
            )
            if existing is None:
                self._rows().append(dict(row))
                written.append(dict(row))
            elif not self._ignore_duplicates:
                existing.update(row)
                written.append(copy.deepcopy(existing))
        return FakeResult(written)

    def _execute_delete(self):
        doomed = self._matching()
        self._db.tables[self._name] = [r for r in self._rows() if r not in doomed]
        return FakeResult(copy.deepcopy(doomed))


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: Dict[str, Any]):
        self._db = db
        self._name = name
        self._params = params

    def execute(self):
        self._db.rpc_calls.append((self._name, self._params))
        if self._name in self._db.fail_rpc:
            raise self._db.fail_rpc[self._name]
        return FakeResult(None)


class FakeSupabase:
    """Tables are plain lists of dicts. `fail` maps a table to the exception its queries raise;
    `unique` maps a table to the columns whose combination must be unique on insert."""

    def __init__(self, tables=None, fail=None, fail_rpc=None, unique=None):
        self.tables: Dict[str, List[Dict[str, Any]]] = copy.deepcopy(tables or {})
        self.fail: Dict[str, Exception] = fail or {}
        self.fail_rpc: Dict[str, Exception] = fail_rpc or {}
        self.unique: Dict[str, Tuple[str, ...]] = unique or {}
        self.calls: List[Tuple[str, str, Any]] = []
        self.rpc_calls: List[Tuple[str, Dict[str, Any]]] = []
        self._id = 1000

    def next_id(self) -> int:
        self._id += 1
        return self._id

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: Dict[str, Any]) -> FakeRpc:
        return FakeRpc(self, name, params)

    def calls_to(self, table: str, op: str) -> List[Any]:
        return [payload for name, kind, payload in self.calls if name == table and kind == op]


class FakeAuthProvider:
    """Records every call; returns the configured result for each method (AuthSuccess() by default)."""

    def __init__(self, **results: AuthResult):
        self.results = results
        self.calls: List[Tuple[str, tuple]] = []
        self.gate = None  # asyncio.Event; when set, calls wait on it before returning

    async def _respond(self, method: str, *args) -> AuthResult:
        self.calls.append((method, args))
        if self.gate is not None:
            await self.gate.wait()
        return self.results.get(method, AuthSuccess())

    async def sign_up(self, email, password, metadata):
        return await self._respond("sign_up", email, password, metadata)

    async def sign_in_with_password(self, email, password):
        return await self._respond("sign_in_with_password", email, password)

    async def reset_password_for_email(self, email, redirect_to):
        return await self._respond("reset_password_for_email", email, redirect_to)

    async def update_password(self, password):
        return await self._respond("update_password", password)

    async def update_user_metadata(self, data):
        return await self._respond("update_user_metadata", data)

    async def sign_in_with_oauth(self, provider, redirect_to):
        return await self._respond("sign_in_with_oauth", provider, redirect_to)


class FakeProfiles:
    """Profile bootstrap that records users and can be made to fail."""

    def __init__(self, error: Optional[Exception] = None):
        self.ensured = []
        self.error = error

    def ensure_profile(self, user):
        self.ensured.append(user)
        if self.error:
            raise self.error
        return {"id": user.id, "username": user.username}


USER_ID = "user-1"
ADMIN_ID = "admin-1"


def profile_row(user_id=USER_ID, username="ada lovelace", **overrides):
    row = {
        "id": user_id,
        "username": username,
        "total_xp": 0,
        "total_completed": 0,
        "streak": 0,
        "last_active": "2026-01-01T00:00:00+00:00",
        "subscription_plan": "free",
        "is_pro": False,
        "is_admin": False,
    }
    row.update(overrides)
    return row
