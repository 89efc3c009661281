from __future__ import annotations

import contextlib
import json
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ledger.dal import FileGameRepository
from ledger.logic import actions
from ledger.logic.engine import TransactionRequest
from ledger.logic.enums import LedgerErrorCode
from ledger.logic.exceptions import GameNotFoundError, LedgerError
from ledger.logic.settings import GameSettings
from ledger.server.settings import LedgerServerSettings
from ledger.server.types import (
    AddPlayerRequest,
    CreateGameRequest,
    FreeParkingCollectAction,
    GameSummary,
    RemovePlayerRequest,
    UpdateNotesRequest,
    table_action_adapter,
)
from ledger.session.manager import SessionManager
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.logging import RequestLoggingMiddleware, setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from starlette.requests import Request

    from ledger.logic.state import Game
    from ledger.session.manager import IntentBuilder


class RequestBodyError(Exception):
    """The request body could not be read as JSON."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        super().__init__(message)


# action name -> (action model, game) -> transaction request(s)
_ACTION_BUILDERS: dict[str, Callable[[Any, Game], Any]] = {
    "pass_go": lambda a, _g: actions.pass_go(a.player_id),
    "bonus": lambda a, _g: actions.bonus(a.player_id, a.amount),
    "rent": lambda a, _g: actions.pay_rent(a.payer_id, a.receiver_id, a.amount),
    "property_purchase": lambda a, g: actions.purchase_property(g.settings, a.player_id, a.amount),
    "house_purchase": lambda a, g: actions.purchase_houses(g.settings, a.player_id, a.unit_cost, a.quantity),
    "sell_houses": lambda a, g: actions.sell_houses(g.settings, a.player_id, a.unit_cost, a.quantity),
    "mortgage": lambda a, _g: actions.mortgage(a.player_id, a.amount),
    "unmortgage": lambda a, g: actions.unmortgage(g.settings, a.player_id, a.amount),
    "jail_payment": lambda a, g: actions.pay_jail_fee(g.settings, a.player_id),
    "tax_payment": lambda a, g: actions.pay_tax(g.settings, a.player_id, a.amount),
    "auction": lambda a, _g: actions.auction(a.player_id, a.amount),
    "multiplayer_payout": lambda a, g: actions.multiplayer_payout(g, a.player_id, a.amount, a.direction),
    "other": lambda a, _g: actions.other_transaction(a.source, a.destination, a.amount),
    "free_parking_add": lambda a, _g: actions.add_to_pot(a.player_id, a.amount),
}


def _session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def _game_id(request: Request) -> str:
    return request.path_params["game_id"]


def _game_response(game: Game, status_code: int = HTTPStatus.OK) -> JSONResponse:
    return JSONResponse(game.model_dump(mode="json"), status_code=status_code)


async def _read_json(request: Request, *, allow_empty: bool = False) -> Any:  # noqa: ANN401
    settings: LedgerServerSettings = request.app.state.settings
    raw_body = await request.body()
    if len(raw_body) > settings.max_request_body_bytes:
        raise RequestBodyError(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "Request body too large")
    if allow_empty and not raw_body.strip():
        return {}
    try:
        return json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RequestBodyError(HTTPStatus.BAD_REQUEST, "Invalid JSON body") from e


T = TypeVar("T", bound=BaseModel)


async def _parse(request: Request, model: type[T], *, allow_empty: bool = False) -> T:
    return model.model_validate(await _read_json(request, allow_empty=allow_empty))


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


async def list_games(request: Request) -> JSONResponse:
    games = await _session_manager(request).list_games()
    summaries = [
        GameSummary(
            id=game.id,
            name=game.name,
            player_count=len(game.players),
            free_parking_pot=game.free_parking_pot,
            updated_date=game.updated_date,
        )
        for game in games
    ]
    return JSONResponse(TypeAdapter(list[GameSummary]).dump_python(summaries, mode="json"))


async def create_game(request: Request) -> JSONResponse:
    body = await _parse(request, CreateGameRequest)
    game = await _session_manager(request).create_game(
        body.name,
        body.players,
        body.starting_money,
        body.settings,
    )
    return _game_response(game, HTTPStatus.CREATED)


async def get_game(request: Request) -> JSONResponse:
    game = await _session_manager(request).get_game(_game_id(request))
    return _game_response(game)


async def delete_game(request: Request) -> Response:
    await _session_manager(request).delete_game(_game_id(request))
    return Response(status_code=HTTPStatus.NO_CONTENT)


async def post_transaction(request: Request) -> JSONResponse:
    game_id = _game_id(request)
    transaction = await _parse(request, TransactionRequest)
    game = await _session_manager(request).apply_transaction(game_id, transaction)
    return _game_response(game)


async def post_action(request: Request) -> JSONResponse:
    game_id = _game_id(request)
    action = table_action_adapter.validate_python(await _read_json(request))
    session_manager = _session_manager(request)

    if isinstance(action, FreeParkingCollectAction):
        game = await session_manager.collect_pot(game_id, action.player_id)
        return _game_response(game)

    build_action = _ACTION_BUILDERS[action.action]
    builder: IntentBuilder = lambda game: build_action(action, game)  # noqa: E731
    game = await session_manager.apply_intent(game_id, builder)
    return _game_response(game)


async def get_available_colors(request: Request) -> JSONResponse:
    """Colors a new player can still pick, in palette order; the first is the suggested default."""
    game = await _session_manager(request).get_game(_game_id(request))
    return JSONResponse({"available": [color.value for color in game.available_colors]})


async def add_player(request: Request) -> JSONResponse:
    game_id = _game_id(request)
    body = await _parse(request, AddPlayerRequest)
    game = await _session_manager(request).add_player(game_id, body.name, body.color, body.starting_money)
    return _game_response(game, HTTPStatus.CREATED)


async def remove_player(request: Request) -> JSONResponse:
    game_id = _game_id(request)
    player_id = request.path_params["player_id"]
    body = await _parse(request, RemovePlayerRequest, allow_empty=True)
    session_manager = _session_manager(request)
    if body.distribute_to is not None:
        game = await session_manager.remove_player_distribute(game_id, player_id, body.distribute_to)
    else:
        game = await session_manager.remove_player(game_id, player_id)
    return _game_response(game)


async def put_settings(request: Request) -> JSONResponse:
    game_id = _game_id(request)
    settings = await _parse(request, GameSettings)
    game = await _session_manager(request).update_settings(game_id, settings)
    return _game_response(game)


async def put_notes(request: Request) -> JSONResponse:
    game_id = _game_id(request)
    body = await _parse(request, UpdateNotesRequest)
    game = await _session_manager(request).update_notes(game_id, body.notes)
    return _game_response(game)


async def _request_body_error_handler(_request: Request, exc: Exception) -> Response:
    status_code = exc.status_code if isinstance(exc, RequestBodyError) else HTTPStatus.BAD_REQUEST
    return JSONResponse({"error": str(exc)}, status_code=status_code)


async def _validation_error_handler(_request: Request, exc: Exception) -> Response:
    details = []
    if isinstance(exc, ValidationError):
        details = [{"loc": list(error["loc"]), "msg": error["msg"]} for error in exc.errors()]
    return JSONResponse(
        {"error": "Invalid request body", "code": LedgerErrorCode.VALIDATION_ERROR.value, "details": details},
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
    )


async def _ledger_error_handler(request: Request, exc: Exception) -> Response:
    """Turn a refused ledger operation into a JSON error. Nothing was saved."""
    code = exc.code.value if isinstance(exc, LedgerError) else None
    status_code = HTTPStatus.NOT_FOUND if isinstance(exc, GameNotFoundError) else HTTPStatus.UNPROCESSABLE_ENTITY
    logger.info("request refused", path=request.url.path, code=code, reason=str(exc))
    return JSONResponse({"error": str(exc), "code": code}, status_code=status_code)


def create_app(
    settings: LedgerServerSettings | None = None,
    session_manager: SessionManager | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = LedgerServerSettings()

    if session_manager is None:
        session_manager = SessionManager(
            FileGameRepository(settings.games_file),
            refill_delay_seconds=settings.pot_refill_delay_seconds,
        )

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/games", list_games, methods=["GET"]),
        Route("/games", create_game, methods=["POST"]),
        Route("/games/{game_id}", get_game, methods=["GET"]),
        Route("/games/{game_id}", delete_game, methods=["DELETE"]),
        Route("/games/{game_id}/transactions", post_transaction, methods=["POST"]),
        Route("/games/{game_id}/actions", post_action, methods=["POST"]),
        Route("/games/{game_id}/colors", get_available_colors, methods=["GET"]),
        Route("/games/{game_id}/players", add_player, methods=["POST"]),
        Route("/games/{game_id}/players/{player_id}/remove", remove_player, methods=["POST"]),
        Route("/games/{game_id}/settings", put_settings, methods=["PUT"]),
        Route("/games/{game_id}/notes", put_notes, methods=["PUT"]),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        yield
        session_manager.shutdown()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={
            RequestBodyError: _request_body_error_handler,
            ValidationError: _validation_error_handler,
            LedgerError: _ledger_error_handler,
        },
    )
    app.add_middleware(RequestLoggingMiddleware)  # type: ignore[arg-type]
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.session_manager = session_manager

    logger.info("ledger server ready", games_file=settings.games_file)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    settings = LedgerServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
