import logging

from fastapi import FastAPI

from consult_scheduling.api.v1.appointments import router as appointments_router
from consult_scheduling.api.v1.availability import router as availability_router
from consult_scheduling.api.v1.holds import router as holds_router
from consult_scheduling.api.v1.working_hours import router as working_hours_router
from consult_scheduling.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("consultant_id", "client_id", "hold_id", "appointment_id", "status", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="Consultation Scheduling", version="1.0.0")

app.include_router(availability_router, prefix="/api/v1", tags=["availability"])
app.include_router(working_hours_router, prefix="/api/v1", tags=["working-hours"])
app.include_router(holds_router, prefix="/api/v1", tags=["holds"])
app.include_router(appointments_router, prefix="/api/v1", tags=["appointments"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
