"""Socket.IO relay for collaborative resume editing and LaTeX document sessions.

Events are broadcast to the other members of a room as-is. There is no
ordering, deduplication or merge logic beyond what the transport provides.
"""

from __future__ import annotations

import logging
from typing import Any

import socketio
from socketio.exceptions import ConnectionRefusedError

from resume_builder.core.cors import cors_allowed_origins
from resume_builder.core.errors import ServiceError, UnauthorizedError
from resume_builder.core.security import user_from_token
from resume_builder.db import store
from resume_builder.services.resume_service import can_access, get_resume

logger = logging.getLogger(__name__)

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=cors_allowed_origins(),
    logger=False,
    engineio_logger=False,
)

# client event -> event relayed to the rest of the room
RELAYED_EVENTS = {
    "content-update": "content-updated",
    "cursor-move": "cursor-moved",
    "section-reorder": "sections-reordered",
    "template-change": "template-changed",
    "typing": "user-typing",
    "add-comment": "comment-added",
}

# document id -> user ids currently editing it
_document_sessions: dict[str, set[str]] = {}


def resume_room(resume_id: str) -> str:
    return f"resume:{resume_id}"


def document_room(document_id: str) -> str:
    return f"document:{document_id}"


def _target_id(data: Any, key: str) -> str | None:
    if isinstance(data, dict):
        data = data.get(key)
    if isinstance(data, str) and data.strip():
        return data.strip()
    return None


def _identity(session: dict[str, Any]) -> dict[str, Any]:
    return {"userId": session["user_id"], "username": session.get("username")}


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any = None) -> None:
    token = auth.get("token") if isinstance(auth, dict) else None
    if not token:
        raise ConnectionRefusedError("Authentication error")
    try:
        user = user_from_token(token)
    except UnauthorizedError as exc:
        logger.info("socket_auth_rejected sid=%s reason=%s", sid, exc)
        raise ConnectionRefusedError("Authentication error") from exc

    await sio.save_session(
        sid,
        {"user_id": user["id"], "username": user.get("username"), "resumes": [], "documents": []},
    )
    logger.info("socket_connected sid=%s user_id=%s", sid, user["id"])


@sio.on("join-resume")
async def join_resume(sid: str, data: Any) -> None:
    session = await sio.get_session(sid)
    resume_id = _target_id(data, "resumeId")
    if resume_id is None:
        await sio.emit("collaboration-error", {"message": "resumeId is required"}, to=sid)
        return

    try:
        resume = get_resume(resume_id)
    except ServiceError as exc:
        await sio.emit("collaboration-error", {"resumeId": resume_id, "message": str(exc)}, to=sid)
        return
    if not can_access(resume, session["user_id"]):
        await sio.emit(
            "collaboration-error",
            {"resumeId": resume_id, "message": "Not authorized to access this resume"},
            to=sid,
        )
        return

    room = resume_room(resume_id)
    await sio.enter_room(sid, room)
    if resume_id not in session["resumes"]:
        session["resumes"].append(resume_id)
        await sio.save_session(sid, session)
    await sio.emit("user-joined", _identity(session), room=room, skip_sid=sid)
    logger.info("resume_room_joined sid=%s resume_id=%s", sid, resume_id)


@sio.on("leave-resume")
async def leave_resume(sid: str, data: Any) -> None:
    session = await sio.get_session(sid)
    resume_id = _target_id(data, "resumeId")
    if resume_id is None or resume_id not in session["resumes"]:
        return
    room = resume_room(resume_id)
    await sio.leave_room(sid, room)
    session["resumes"].remove(resume_id)
    await sio.save_session(sid, session)
    await sio.emit("user-left", _identity(session), room=room, skip_sid=sid)


async def relay(event: str, sid: str, data: Any) -> bool:
    """Forward a client event to the other members of its resume room.

    Returns False when the sender has not joined the room named in ``data``.
    """
    session = await sio.get_session(sid)
    resume_id = _target_id(data, "resumeId")
    if resume_id is None or resume_id not in session["resumes"]:
        logger.debug("socket_event_dropped sid=%s event=%s resume_id=%s", sid, event, resume_id)
        return False

    payload = {key: value for key, value in data.items() if key != "resumeId"} if isinstance(data, dict) else {}
    await sio.emit(
        RELAYED_EVENTS[event],
        {
            **_identity(session),
            "resumeId": resume_id,
            "payload": payload,
            "timestamp": store.utc_now_iso(),
        },
        room=resume_room(resume_id),
        skip_sid=sid,
    )
    return True


def _register_relay(event: str) -> None:
    async def handler(sid: str, data: Any = None) -> None:
        await relay(event, sid, data)

    handler.__name__ = f"on_{event.replace('-', '_')}"
    sio.on(event, handler)


for _event in RELAYED_EVENTS:
    _register_relay(_event)


@sio.on("join-document")
async def join_document(sid: str, data: Any) -> None:
    session = await sio.get_session(sid)
    document_id = _target_id(data, "documentId")
    if document_id is None:
        return
    user_id = session["user_id"]
    room = document_room(document_id)
    await sio.enter_room(sid, room)
    active = _document_sessions.setdefault(document_id, set())
    active.add(user_id)
    if document_id not in session["documents"]:
        session["documents"].append(document_id)
        await sio.save_session(sid, session)
    await sio.emit(
        "user-joined",
        {"userId": user_id, "activeUsers": sorted(active)},
        room=room,
        skip_sid=sid,
    )


@sio.on("document-change")
async def document_change(sid: str, data: Any) -> None:
    session = await sio.get_session(sid)
    document_id = _target_id(data, "documentId")
    if document_id is None or document_id not in session["documents"]:
        return
    code = data.get("code", "") if isinstance(data, dict) else ""
    await sio.emit("document-change", code, room=document_room(document_id), skip_sid=sid)


def _drop_presence(document_id: str, user_id: str) -> list[str]:
    active = _document_sessions.get(document_id)
    if active is None:
        return []
    active.discard(user_id)
    if not active:
        del _document_sessions[document_id]
        return []
    return sorted(active)


@sio.on("leave-document")
async def leave_document(sid: str, data: Any) -> None:
    session = await sio.get_session(sid)
    document_id = _target_id(data, "documentId")
    if document_id is None:
        return
    room = document_room(document_id)
    await sio.leave_room(sid, room)
    if document_id in session["documents"]:
        session["documents"].remove(document_id)
        await sio.save_session(sid, session)
    remaining = _drop_presence(document_id, session["user_id"])
    await sio.emit(
        "user-left",
        {"userId": session["user_id"], "activeUsers": remaining},
        room=room,
        skip_sid=sid,
    )


@sio.event
async def disconnect(sid: str, *args: Any) -> None:
    session = await sio.get_session(sid)
    user_id = session.get("user_id")
    if not user_id:
        return
    for resume_id in session.get("resumes", []):
        await sio.emit("user-left", _identity(session), room=resume_room(resume_id), skip_sid=sid)
    for document_id in session.get("documents", []):
        remaining = _drop_presence(document_id, user_id)
        if remaining:
            await sio.emit(
                "user-left",
                {"userId": user_id, "activeUsers": remaining},
                room=document_room(document_id),
                skip_sid=sid,
            )
    logger.info("socket_disconnected sid=%s user_id=%s", sid, user_id)


async def notify_resume_update(resume_id: str, update: dict[str, Any]) -> None:
    await sio.emit("resume-updated", update, room=resume_room(resume_id))
