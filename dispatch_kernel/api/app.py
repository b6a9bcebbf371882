"""
Dispatch Kernel API — FastAPI endpoints.

Exposes the engine's functionality via a REST API for:
- Activity catalog inspection
- Dispatch, cancellation and rest
- Time advancement
- Agent status and suitability queries
- Statistics
- Save/load
"""

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from dispatch_kernel.dispatch.engine import DispatchEngine
from dispatch_kernel.models.results import DispatchError
from dispatch_kernel.persistence.adapter import SaveDataError


# --- Request/Response Models ---

class DispatchRequest(BaseModel):
    agent_id: str
    activity_type: str


class AdvanceRequest(BaseModel):
    delta_time: float = Field(ge=0)


class RestRequest(BaseModel):
    duration_seconds: float = Field(ge=0)


_ERROR_STATUS = {
    DispatchError.UNKNOWN_ACTIVITY: 404,
    DispatchError.NOT_ASSIGNED: 404,
    DispatchError.ALREADY_ASSIGNED: 409,
    DispatchError.FACILITY_UNMET: 409,
}


# --- Application Factory ---

def create_app(engine: Optional[DispatchEngine] = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Dispatch Kernel API",
        description="Task dispatch and progression engine",
        version="0.1.0",
    )

    eng = engine or DispatchEngine()
    app.state.engine = eng

    # === CATALOG ===

    @app.get("/activities")
    def list_activities():
        """All registered activities."""
        return [a.model_dump(mode="json") for a in eng.list_activities()]

    # === DISPATCH ===

    @app.post("/dispatch")
    def dispatch(req: DispatchRequest):
        """Start an agent on an activity."""
        result = eng.dispatch(req.agent_id, req.activity_type)
        if not result.success:
            raise HTTPException(
                _ERROR_STATUS[result.error],
                detail=result.model_dump(mode="json", exclude_none=True),
            )
        return result.assignment.model_dump(mode="json")

    @app.post("/agents/{agent_id}/cancel")
    def cancel(agent_id: str):
        """Abort an agent's task without reward."""
        result = eng.cancel(agent_id)
        if not result.success:
            raise HTTPException(_ERROR_STATUS[result.error], result.reason)
        return result.assignment.model_dump(mode="json")

    @app.post("/agents/{agent_id}/rest")
    def rest(agent_id: str, req: RestRequest):
        """Let an agent recover fatigue."""
        return eng.rest(agent_id, req.duration_seconds).model_dump(mode="json")

    # === PROGRESS ===

    @app.post("/advance")
    def advance(req: AdvanceRequest):
        """Advance game time; returns outcomes of tasks completed in this step."""
        outcomes = eng.advance(req.delta_time)
        return {
            "completed": [o.model_dump(mode="json") for o in outcomes],
            "in_progress": len(eng.get_all_assignments()),
        }

    # === QUERIES ===

    @app.get("/assignments")
    def list_assignments():
        return [a.model_dump(mode="json") for a in eng.get_all_assignments()]

    @app.get("/agents/{agent_id}/task")
    def get_task(agent_id: str):
        """The agent's current task."""
        task = eng.get_current_task(agent_id)
        if task is None:
            raise HTTPException(404, "Agent has no active task")
        return task.model_dump(mode="json")

    @app.get("/agents/{agent_id}/status")
    def get_status(agent_id: str):
        status = eng.get_character_status(agent_id)
        current = status["current_task"]
        return {
            **status,
            "mood_status": status["mood_status"].model_dump(),
            "fatigue_status": status["fatigue_status"].model_dump(),
            "current_task": current.model_dump(mode="json") if current else None,
            "recent_history": [e.model_dump() for e in status["recent_history"]],
        }

    @app.get("/agents/{agent_id}/suitability/{activity_type}")
    def get_suitability(agent_id: str, activity_type: str):
        return eng.is_suitable(agent_id, activity_type).model_dump()

    @app.get("/agents/{agent_id}/history")
    def get_history(agent_id: str, limit: int = 10):
        return [e.model_dump() for e in eng.get_recent_history(agent_id, limit)]

    @app.get("/statistics")
    def get_statistics():
        return eng.get_statistics().model_dump()

    # === PERSISTENCE ===

    @app.get("/save")
    def save():
        """Full engine save data."""
        return eng.get_save_data()

    @app.post("/load")
    def load(data: dict):
        """Replace engine state with the given save data."""
        try:
            eng.load_save_data(data)
        except SaveDataError as e:
            raise HTTPException(422, str(e))
        return {
            "status": "loaded",
            "assignments": len(eng.get_all_assignments()),
        }

    return app


# Default application instance
app = create_app()
