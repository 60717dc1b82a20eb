# Main script to run the schedulr api, startup scripts, start the different routers

import logging
from contextlib import asynccontextmanager
import db_setup
import database
from fastapi import FastAPI
from middleware import AuthenticationMiddleware
from routers import users, calendars, schedules

# Initialize logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Check if the database is set up, if not, create it and the necessary tables and the admin user
    db_setup.setup_database()
    yield
    database.close_connection()

# Initialize FastAPI app
app = FastAPI(title="Schedulr-API", version="0.1.0", lifespan=lifespan)
app.add_middleware(AuthenticationMiddleware)

# Include routers
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(calendars.router, prefix="/api/calendars", tags=["calendars"])
app.include_router(schedules.router, prefix="/api/calendars/{calendar_id}/schedules", tags=["schedules"])

# Health check endpoint
@app.get("/health")
async def health():
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
