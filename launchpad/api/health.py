from fastapi import APIRouter, Depends, Request

from launchpad.core.database import DatabaseClient, get_database

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request, database: DatabaseClient = Depends(get_database)):
    db_healthy = database.available and database.ping()
    return {
        "status": "healthy" if db_healthy else "degraded",
        "databaseConfigured": database.available,
        "databaseHealthy": db_healthy,
        "convertKitConfigured": request.app.state.mailer.enabled,
    }
