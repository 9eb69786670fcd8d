from fastapi import APIRouter, Depends, Request, Response
import redis
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ganhaplus.db.session import get_db


router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Liveness probe - always returns 200 if app is running."""
    return {"status": "ok"}


@router.get("/ready")
def readiness(request: Request, response: Response, db: Session = Depends(get_db)) -> dict:
    """
    Readiness probe - 503 if the database is down, or if redis is configured
    for the login limiter and does not answer a ping.
    """
    checks = {"database": "ok"}
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        response.status_code = 503
        return {"status": "not_ready", "error": str(e), "checks": {"database": "error"}}

    redis_client = request.app.state.login_limiter.client
    if redis_client is not None:
        try:
            redis_client.ping()
            checks["redis"] = "ok"
        except redis.RedisError as e:
            response.status_code = 503
            checks["redis"] = "error"
            return {"status": "not_ready", "error": str(e), "checks": checks}

    return {"status": "ready", "checks": checks}
