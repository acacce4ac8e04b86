"""HTTP adapter: one decision per request, plus read access to the audit log."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from .advisor import Oracle, recommend
from .calculator import equity_oracle
from .config import Config, get_config
from .history import AuditLog, JsonFileAuditLog
from .inputs import DEFAULT_BANKROLL, parse_street_input
from .policy import PolicyConfig, RandomSource, StdlibRandom

Amount = int | float | str | None


class DecideRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hand: str | list[str] = ""
    community: str | list[str] = ""
    pot: Amount = None
    min_bet: Amount = Field(None, alias="minBet")
    num_players: Amount = Field(None, alias="numPlayers")
    bankroll: Amount = None
    aggressiveness: float | None = None
    bluffing_enabled: bool | None = Field(None, alias="bluffingEnabled")
    bluff_frequency: float | None = Field(None, alias="bluffFrequency")

    def policy(self, defaults: PolicyConfig) -> PolicyConfig:
        return PolicyConfig(
            aggressiveness=defaults.aggressiveness if self.aggressiveness is None else self.aggressiveness,
            bluffing_enabled=defaults.bluffing_enabled if self.bluffing_enabled is None else self.bluffing_enabled,
            bluff_frequency=defaults.bluff_frequency if self.bluff_frequency is None else self.bluff_frequency,
        )


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status)


def create_app(
    config: Config | None = None,
    *,
    oracle: Oracle | None = None,
    rng: RandomSource | None = None,
    audit_log: AuditLog | None = None,
) -> FastAPI:
    """Build the API. Collaborators default to the configured ones."""
    config = config or get_config()
    seed = config.simulation.seed
    oracle = oracle or equity_oracle(config.simulation.trials, seed)
    rng = rng or StdlibRandom(seed)

    app = FastAPI(title="Poker Advisor")

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        return _error(400, f"{field}: {first.get('msg', 'invalid value')}" if field else "Invalid JSON body")

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/decide")
    def post_decide(body: DecideRequest) -> JSONResponse:
        try:
            policy = body.policy(config.policy.to_policy())
            data = parse_street_input(
                {
                    "hand": body.hand,
                    "community": body.community,
                    "pot": body.pot,
                    "minBet": body.min_bet,
                    "numPlayers": body.num_players,
                    "bankroll": body.bankroll,
                },
                need_hand=True,
            )
            bankroll = DEFAULT_BANKROLL if data.bankroll is None else data.bankroll
            hand = data.hand or ()
            decision = recommend(
                hand,
                data.community,
                data.pot,
                data.min_bet,
                data.num_players,
                bankroll,
                policy,
                oracle=oracle,
                rng=rng,
            )
        except ValueError as exc:
            return _error(400, str(exc))

        payload: dict[str, Any] = {
            "input": {
                "hand": [c.code for c in hand],
                "community": [c.code for c in data.community],
                "pot": data.pot,
                "minBet": data.min_bet,
                "numPlayers": data.num_players,
                "bankroll": bankroll,
            },
            "decision": decision.to_dict(),
        }
        return JSONResponse(payload)

    @app.get("/api/history")
    def get_history() -> JSONResponse:
        log = audit_log if audit_log is not None else JsonFileAuditLog(config.history.path)
        return JSONResponse([r.to_dict() for r in log.sessions()])

    return app
