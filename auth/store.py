"""
auth/store.py -- JSON-file persistence layer for named bearer tokens.

Pattern: Repository. TokenStore owns the name -> digest mapping and its file.
Route and dependency code never touches the file directly.

File format: one flat JSON object, {"<name>": "<bcrypt digest>", ...}.
No plaintext token is ever written.

Concurrency:
  The mapping is copy-on-write. create() and revoke() build a new dict,
  persist it, and only then swap it in, all while holding one asyncio.Lock.
  Readers (list_names, records) read whatever dict is current; it is never
  mutated in place, so they always see a fully committed state.

  A failed write leaves both memory and disk at the previous state and raises
  PersistenceError, so the caller gets a 500 instead of a false success.

Atomic writes:
  persist() writes to a temporary file in the same directory and then
  os.replace()s it over the target. A crash mid-write leaves the old file
  intact.

Load recovery:
  A missing file is created empty. An unreadable, unparsable, or wrongly
  shaped file is logged, replaced with an empty store, and re-persisted.
  load() never raises -- a broken store must not stop the identity check
  from starting.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from auth.models import TokenRecord
from auth.tokens import generate_token, hash_token
from core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError

logger = logging.getLogger("tokengate.store")


class TokenStore:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._tokens: dict[str, str] = {}
        self._write_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Load the token file, creating or repairing it as needed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Could not create token directory %s: %s", self.path.parent, exc)

        if not self.path.exists():
            logger.info("Token file not found at %s, creating a new one", self.path)
            self._reset()
            return

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.error("Could not parse token file %s (%s). Resetting to an empty store.", self.path, exc)
            self._reset()
            return

        if not _is_digest_map(data):
            logger.error("Token file %s does not contain a name -> digest object. Resetting.", self.path)
            self._reset()
            return

        self._tokens = data
        logger.info("Loaded %d token digests from %s", len(data), self.path)

    def _reset(self) -> None:
        self._tokens = {}
        try:
            self.persist(self._tokens)
        except PersistenceError:
            # Already logged. The in-memory store is empty and usable; the
            # next successful mutation rewrites the file.
            pass

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_names(self) -> list[str]:
        """Return token names only. Digests never leave the store this way."""
        return sorted(self._tokens)

    def records(self) -> list[TokenRecord]:
        """Return a snapshot of every stored record."""
        return [TokenRecord(name=n, digest=d) for n, d in self._tokens.items()]

    def __contains__(self, name: object) -> bool:
        return name in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, name: object) -> str:
        """Issue a new token for name and return the plaintext exactly once.

        Raises:
            ValidationError: name is not a string, is blank, or cannot be
                             sent back in a header or a URL path segment.
            ConflictError:   a token with this name already exists.
            PersistenceError: the new store could not be written.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError('"name" field (non-empty string) is required for the token.')
        name = name.strip()
        if not _is_valid_name(name):
            raise ValidationError(
                '"name" may only contain printable ASCII characters and must not contain "/".'
            )

        async with self._write_lock:
            if name in self._tokens:
                raise ConflictError(f"A token with the name '{name}' already exists.")
            raw = generate_token()
            digest = await hash_token(raw)
            updated = {**self._tokens, name: digest}
            await self._commit(updated)

        logger.info("Issued token for %s", name)
        return raw

    async def revoke(self, name: str) -> None:
        """Remove the token for name.

        Raises:
            NotFoundError:    no token with this name exists.
            PersistenceError: the new store could not be written.
        """
        async with self._write_lock:
            if name not in self._tokens:
                raise NotFoundError(f"Token with name '{name}' does not exist.")
            updated = {n: d for n, d in self._tokens.items() if n != name}
            await self._commit(updated)

        logger.info("Revoked token for %s", name)

    async def _commit(self, updated: dict[str, str]) -> None:
        # Caller holds _write_lock.
        await asyncio.to_thread(self.persist, updated)
        self._tokens = updated

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persist(self, tokens: dict[str, str]) -> None:
        """Atomically overwrite the token file with tokens.

        Raises PersistenceError (after logging) on any I/O failure.
        """
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(tokens, fh, indent=2)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.error("Error saving token digests to %s: %s", self.path, exc)
            raise PersistenceError("Token store could not be saved; the change was not applied.") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_name)
        logger.info("Saved %d token digests to %s", len(tokens), self.path)


def _is_valid_name(name: str) -> bool:
    # Names go out in the X-Authenticated-User header (latin-1, no control
    # characters) and come back as the {name} segment of DELETE /tokens/{name}.
    return all(" " <= ch <= "~" and ch != "/" for ch in name)


def _is_digest_map(data: object) -> bool:
    return isinstance(data, dict) and all(isinstance(k, str) and isinstance(v, str) for k, v in data.items())
