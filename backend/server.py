import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from config import CONFIG
from models import ProjectType
from session import GameSession, NoActiveCompanyError

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Command payloads

class NewGamePayload(BaseModel):
    name: str = Field("Startup", min_length=1)
    seed: Optional[int] = None


class EmployeePayload(BaseModel):
    employee_id: str


class ProjectPayload(BaseModel):
    project_id: str


class CreateProjectPayload(BaseModel):
    project_type: ProjectType


class AssignPayload(BaseModel):
    employee_id: str
    project_id: str
    allocation: float


class UnassignPayload(BaseModel):
    employee_id: str
    project_id: str


class ResolvePayload(BaseModel):
    event_id: str
    choice_id: str


class InvalidPayloadError(ValueError):
    """Raised when a command's payload is not a JSON object."""


class GameSessionManager:
    """
    Maps websocket connections to game sessions and translates commands.

    Holds no game rules; every decision is made by GameSession.
    """

    def __init__(self):
        self.sessions: Dict[int, GameSession] = {}

    def connect(self, connection_id: int) -> GameSession:
        session = GameSession(CONFIG)
        self.sessions[connection_id] = session
        return session

    def disconnect(self, connection_id: int):
        self.sessions.pop(connection_id, None)

    def state(self, session: GameSession) -> Dict[str, Any]:
        return {
            "company": session.to_dict(),
            "pending_events": [e.to_dict() for e in session.pending_events],
            "pending_hire": session.pending_hire.to_dict() if session.pending_hire else None,
            "score": session.score(),
            "runway": None if session.runway() == float("inf") else session.runway(),
            "burn_rate": session.burn_rate(),
            "culture": session.culture_description(),
            "game_over": session.game_over,
        }

    def handle(self, connection_id: int, data: Any) -> Dict[str, Any]:
        session = self.sessions.get(connection_id) or self.connect(connection_id)
        if not isinstance(data, dict):
            logger.warning(f"Rejected non-object message: {type(data).__name__}")
            return {"type": "ERROR", "success": False, "message": "Messages must be JSON objects"}
        command = data.get("command")

        try:
            return self._dispatch(connection_id, session, command, data)
        except (ValidationError, InvalidPayloadError) as e:
            logger.warning(f"Invalid payload for {command}: {e}")
            return {"type": "ERROR", "success": False, "message": f"Invalid payload for {command}"}
        except NoActiveCompanyError as e:
            return {"type": "ERROR", "success": False, "message": str(e)}

    @staticmethod
    def _payload(data: Dict[str, Any]) -> Dict[str, Any]:
        payload = data.get("payload") or {}
        if not isinstance(payload, dict):
            raise InvalidPayloadError(f"payload must be an object, got {type(payload).__name__}")
        return payload

    def _dispatch(self, connection_id: int, session: GameSession, command: str, data: Dict[str, Any]) -> Dict[str, Any]:
        if command == "NEW_GAME":
            payload = NewGamePayload(**self._payload(data))
            session = GameSession(CONFIG, seed=payload.seed)
            self.sessions[connection_id] = session
            session.new_game(payload.name)
            return self._reply("GAME_STARTED", True, "", {"state": self.state(session)})

        elif command == "STATE":
            return self._reply("STATE", True, "", {"state": self.state(session)})

        elif command == "ADVANCE":
            if session.game_over:
                return self._reply("MONTH_PROCESSED", False, "The company is bankrupt", {})
            result = session.advance_month()
            return self._reply("MONTH_PROCESSED", result.success, "\n".join(result.messages), {
                "result": result.to_dict(),
                "state": self.state(session),
            })

        elif command == "HIRE":
            candidate = session.generate_candidate()
            return self._reply("CANDIDATE", candidate is not None, session.last_error or "", {
                "candidate": candidate.to_dict() if candidate else None,
            })

        elif command == "CONFIRM_HIRE":
            employee = session.confirm_hire()
            message = f"{employee.name} joined as {employee.role}" if employee else session.last_error
            return self._reply("HIRED", employee is not None, message, {
                "employee": employee.to_dict() if employee else None,
            })

        elif command == "REJECT_HIRE":
            session.reject_hire()
            return self._reply("HIRE_REJECTED", True, "", {})

        elif command == "FIRE":
            payload = EmployeePayload(**self._payload(data))
            ok = session.fire_employee(payload.employee_id)
            return self._action_reply("FIRED", ok, session)

        elif command == "ASSIGN":
            payload = AssignPayload(**self._payload(data))
            ok = session.assign_employee_to_project(
                payload.employee_id, payload.project_id, payload.allocation
            )
            return self._action_reply("ASSIGNED", ok, session)

        elif command == "UNASSIGN":
            payload = UnassignPayload(**self._payload(data))
            ok = session.unassign_employee_from_project(payload.employee_id, payload.project_id)
            return self._action_reply("UNASSIGNED", ok, session)

        elif command == "CREATE_PROJECT":
            payload = CreateProjectPayload(**self._payload(data))
            project = session.create_project(payload.project_type)
            return self._reply("PROJECT_CREATED", True, f"New project: {project.name}", {
                "project": project.to_dict(),
            })

        elif command == "CANCEL_PROJECT":
            payload = ProjectPayload(**self._payload(data))
            ok = session.cancel_project(payload.project_id)
            return self._action_reply("PROJECT_CANCELLED", ok, session)

        elif command == "RESOLVE":
            payload = ResolvePayload(**self._payload(data))
            ok = session.resolve_event(payload.event_id, payload.choice_id)
            return self._action_reply("EVENT_RESOLVED", ok, session)

        elif command == "SCORE":
            entry = session.leaderboard_entry()
            return self._reply("SCORE", True, "", {"entry": entry.to_dict()})

        return {"type": "ERROR", "success": False, "message": f"Unknown command: {command}"}

    def _action_reply(self, reply_type: str, ok: bool, session: GameSession) -> Dict[str, Any]:
        message = "" if ok else (session.last_error or "Action failed")
        return self._reply(reply_type, ok, message, {"state": self.state(session)})

    @staticmethod
    def _reply(reply_type: str, success: bool, message: str, extra: Dict[str, Any]) -> Dict[str, Any]:
        reply = {"type": reply_type, "success": success, "message": message}
        reply.update(extra)
        return reply


manager = GameSessionManager()


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await websocket.accept()
    connection_id = id(websocket)
    manager.connect(connection_id)
    logger.info("WebSocket connected")

    try:
        while True:
            data = await websocket.receive_json()
            await websocket.send_json(manager.handle(connection_id, data))

    except WebSocketDisconnect:
        logger.info("Client disconnected")
    finally:
        manager.disconnect(connection_id)
