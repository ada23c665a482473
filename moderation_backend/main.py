from fastapi import FastAPI
from moderation_backend.reports.router import router as reports_router
from moderation_backend.tickets.router import router as tickets_router
from moderation_backend.moderators.router import router as moderators_router
from moderation_backend.actions.router import router as actions_router
from moderation_backend.stats.router import router as stats_router

app = FastAPI(title="Moderation & Support Backend")

app.include_router(reports_router)
app.include_router(tickets_router)
app.include_router(moderators_router)
app.include_router(actions_router)
app.include_router(stats_router)


@app.get("/")
def root():
    return {"message": "Moderation & Support API is running"}
