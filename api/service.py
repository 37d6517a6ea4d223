"""Table sessions: every mutation runs lock -> load -> apply -> save."""

import hashlib
import logging
import secrets
import time
from random import Random
from typing import Callable
from uuid import uuid4

from api.identity import Identity
from api.persistence import dump_table, load_table
from api.schemas import ActionRequest, CreateRequest
from api.store import KeyValueStore, get_store, table_lock
from config import GameConfig, LockConfig, config
from core.game.engine import TableMachine, new_table
from core.game.errors import CodeTakenError, NotFoundError
from core.game.table import TableState
from core.game.view import TableView, project
from core.strategy.rules import RuleSet

logger = logging.getLogger(__name__)

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 4

RngFactory = Callable[[int | None], Random]


def _seed_for(player_id: str) -> int:
    """Mix wall-clock time with the creating player's id."""
    digest = hashlib.sha256(player_id.encode()).digest()
    return time.time_ns() ^ int.from_bytes(digest[:8], "big")


def make_code() -> str:
    """Return a random join code."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


class TableService:
    """
    Entry point for creating, joining, acting on and polling tables.

    Holds no table state between calls; the store is the only source of
    truth, so any number of workers can serve the same table.
    """

    def __init__(
        self,
        store: KeyValueStore,
        game: GameConfig | None = None,
        rng_factory: RngFactory = Random,
        ttl: int | None = None,
        lock: LockConfig | None = None,
    ) -> None:
        self._store = store
        self._game = game or config.game
        self._lock = lock or config.lock
        self._rng_factory = rng_factory
        self._ttl = ttl or config.store.session_ttl

    @staticmethod
    def session_key(session_id: str) -> str:
        """Store key of a table snapshot."""
        return f"{config.store.key_prefix}session:{session_id}"

    @staticmethod
    def code_key(code: str) -> str:
        """Store key mapping a join code to its session id."""
        return f"{config.store.key_prefix}code:{code}"

    def _rules_for(self, request: CreateRequest) -> RuleSet:
        game = self._game
        return RuleSet(
            num_decks=request.decks or game.num_decks,
            min_bet=request.min_bet or game.min_bet,
            dealer_hits_soft_17=(
                game.dealer_hits_soft_17 if request.s17 is None else request.s17
            ),
            blackjack_payout=game.blackjack_payout,
            double_after_split=game.double_after_split,
            resplit_limit=game.resplit_limit,
            surrender_allowed=game.surrender_allowed,
            dealer_peeks=game.dealer_peeks,
        )

    def _machine(self, table: TableState, rng: Random | None = None) -> TableMachine:
        machine = TableMachine(table, rng=rng or self._rng_factory(None))
        machine.subscribe(lambda event: logger.debug("table %s: %s", table.id, event))
        return machine

    async def _save(self, table: TableState) -> None:
        await self._store.put(self.session_key(table.id), dump_table(table), self._ttl)
        if table.code:
            await self._store.put(self.code_key(table.code), table.id.encode(), self._ttl)

    async def _claim_code(self, table_id: str, requested: str | None) -> str:
        """
        Point a free join code at table_id.

        The claim is a single put-if-absent, so of two racing creators
        asking for the same code exactly one wins.
        """
        if requested:
            code = requested.upper()
            if not await self._store.put_if_absent(
                self.code_key(code), table_id.encode(), self._ttl
            ):
                raise CodeTakenError(f"Code {code} is in use")
            return code

        for _ in range(16):
            code = make_code()
            if await self._store.put_if_absent(
                self.code_key(code), table_id.encode(), self._ttl
            ):
                return code
        raise CodeTakenError("Could not allocate a free join code")

    async def create_table(self, identity: Identity, request: CreateRequest) -> TableView:
        """Open a table with the caller in seat 0 (plus bots when solo)."""
        rules = self._rules_for(request)
        rng = self._rng_factory(_seed_for(identity.player_id))
        table_id = str(uuid4())

        code = None
        if request.mode == "pvp":
            code = await self._claim_code(table_id, request.code)

        table = new_table(table_id, rules, rng, code=code)
        machine = self._machine(table, rng)
        machine.seat_player(identity.player_id, identity.name, self._game.starting_chips)

        if request.mode == "solo":
            bots = self._game.solo_bots if request.bots is None else request.bots
            for n in range(1, bots + 1):
                machine.seat_player(
                    f"bot-{n}", f"Bot {n}", self._game.starting_chips, is_bot=True
                )
            machine.run_bots()

        await self._save(table)
        logger.info(
            "Created %s table %s (code=%s, decks=%d)",
            request.mode,
            table.id,
            code,
            rules.num_decks,
        )
        return project(table, identity.player_id)

    async def _mutate(
        self,
        session_id: str,
        viewer_id: str,
        apply: Callable[[TableMachine], object],
    ) -> TableView:
        """
        Apply one change to a table under its lock.

        The snapshot is written back only when apply() returns normally;
        a raised error leaves the stored table untouched.
        """
        key = self.session_key(session_id)
        async with table_lock(
            self._store, key, ttl_ms=self._lock.ttl_ms, timeout_ms=self._lock.timeout_ms
        ):
            raw = await self._store.get(key)
            if raw is None:
                raise NotFoundError(f"Unknown table {session_id}")

            table = load_table(raw)
            apply(self._machine(table))
            await self._save(table)

        return project(table, viewer_id)

    async def join_table(self, identity: Identity, code: str) -> TableView:
        """Sit the caller down at the table behind a join code."""
        raw_id = await self._store.get(self.code_key(code.upper()))
        if raw_id is None:
            raise NotFoundError(f"Unknown code {code}")
        session_id = raw_id.decode() if isinstance(raw_id, bytes) else raw_id

        view = await self._mutate(
            session_id,
            identity.player_id,
            lambda machine: machine.seat_player(
                identity.player_id, identity.name, self._game.starting_chips
            ),
        )
        logger.info("Player %s joined table %s", identity.player_id, session_id)
        return view

    async def act(self, identity: Identity, request: ActionRequest) -> TableView:
        """Apply a player's intent."""
        return await self._mutate(
            request.session_id,
            identity.player_id,
            lambda machine: machine.apply(
                identity.player_id,
                request.action,
                hand_id=request.hand_id,
                amount=request.amount,
            ),
        )

    async def poll(self, identity: Identity, session_id: str) -> TableView:
        """Read the latest snapshot without taking the lock."""
        raw = await self._store.get(self.session_key(session_id))
        if raw is None:
            raise NotFoundError(f"Unknown table {session_id}")
        return project(load_table(raw), identity.player_id)


def get_table_service() -> TableService:
    """FastAPI dependency returning a service bound to the configured store."""
    return TableService(get_store())
