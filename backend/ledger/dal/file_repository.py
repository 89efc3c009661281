"""File-backed game repository storing every game record in one JSON file."""

import asyncio
import contextlib
import json
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError

from ledger.dal.game_repository import GameRepository
from ledger.logic.state import Game

logger = structlog.get_logger()

_FILE_PERMISSIONS = 0o600  # owner read/write only


class FileGameRepository(GameRepository):
    """File-backed game repository.

    Stores games as a JSON object keyed by game id. Loads into memory on
    first access, writes the whole file back on every mutation. Uses
    asyncio.Lock for write safety within a single process.

    Limitation: only one process may own the file. Concurrent writers from
    several processes would overwrite each other.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)
        self._games: dict[str, Game] = {}
        self._lock = asyncio.Lock()
        self._loaded = False

    async def _ensure_loaded(self) -> None:
        """Load games from file on first access."""
        async with self._lock:
            if self._loaded:
                return
            self._load_from_file()
            self._loaded = True

    def _load_from_file(self) -> None:
        """Load games from the JSON file into memory.

        Starts with an empty store when the file does not exist yet.
        Raises on read/parse failures for an existing file to prevent
        data loss from overwriting a file we could not read.
        """
        self._games = {}

        if not self._file_path.exists():
            return

        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, ValueError, OSError) as exc:
            msg = f"Failed to load games from {self._file_path}"
            raise OSError(msg) from exc

        if not isinstance(data, dict):
            msg = f"Expected JSON object at root in {self._file_path}"
            raise OSError(msg)

        try:
            self._games = {game_id: Game.model_validate(record) for game_id, record in data.items()}
        except ValidationError as exc:
            msg = f"Failed to parse game data from {self._file_path}"
            raise OSError(msg) from exc

        logger.info("games loaded", path=str(self._file_path), count=len(self._games))

    def _save_to_file(self) -> None:
        """Atomically write all games to the JSON file.

        Writes to a temporary file in the same directory, then renames
        into place so readers never see a partial/truncated file.
        """
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        data = {game_id: game.model_dump(mode="json") for game_id, game in self._games.items()}
        content = json.dumps(data, indent=2).encode("utf-8")

        fd, tmp_path = tempfile.mkstemp(
            dir=self._file_path.parent,
            prefix=".games_",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fchmod(f.fileno(), _FILE_PERMISSIONS)
            Path(tmp_path).replace(self._file_path)
        except BaseException:
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise

    async def get_game(self, game_id: str) -> Game | None:
        await self._ensure_loaded()
        return self._games.get(game_id)

    async def save_game(self, game: Game) -> None:
        """Insert or replace a game record. Restores the previous record if the write fails."""
        await self._ensure_loaded()
        async with self._lock:
            previous = self._games.get(game.id)
            self._games[game.id] = game
            try:
                self._save_to_file()
            except OSError:
                if previous is None:
                    del self._games[game.id]
                else:
                    self._games[game.id] = previous
                raise

    async def delete_game(self, game_id: str) -> bool:
        """Remove a game record. Returns False when no such game exists."""
        await self._ensure_loaded()
        async with self._lock:
            previous = self._games.pop(game_id, None)
            if previous is None:
                return False
            try:
                self._save_to_file()
            except OSError:
                self._games[game_id] = previous
                raise
            return True

    async def list_games(self) -> list[Game]:
        """Return all games, most recently updated first."""
        await self._ensure_loaded()
        return sorted(self._games.values(), key=lambda g: g.updated_date, reverse=True)
