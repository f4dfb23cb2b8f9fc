"""Export chat sessions to Markdown and JSON formats."""

import json
from datetime import datetime

from .core import Message, Role, Session


def session_to_markdown(session: Session) -> str:
    """Export a session and its messages as clean Markdown."""
    lines = [f"# {session.title}", ""]

    lines.append(f"**Session:** {session.id}")
    lines.append(f"**Model:** {session.model}")
    if session.context:
        lines.append(f"**Context:** {session.context}")
    lines.append(f"**Created:** {session.created.isoformat()}")
    lines.append(f"**Updated:** {session.updated.isoformat()}")
    lines.append(f"**Messages:** {session.message_count}")
    lines.extend(["", "---", ""])

    for msg in session.history:
        role_label = msg.role.value.capitalize()
        ts = f" ({msg.timestamp.strftime('%Y-%m-%d %H:%M')})"
        lines.append(f"## {role_label}{ts}")
        lines.append("")
        lines.append(msg.content)
        lines.extend(["", "---", ""])

    return "\n".join(lines)


def session_to_dict(session: Session) -> dict:
    return {
        "session": {
            "id": session.id,
            "model": session.model,
            "context": session.context,
            "message_count": session.message_count,
            "created": session.created.isoformat(),
            "updated": session.updated.isoformat(),
        },
        "messages": [
            {
                "role": msg.role.value,
                "content": msg.content,
                "timestamp": msg.timestamp.isoformat(),
            }
            for msg in session.history
        ],
    }


def session_to_json(session: Session) -> str:
    """Export a session and its messages as structured JSON."""
    return json.dumps(session_to_dict(session), indent=2, ensure_ascii=False)


def session_from_json(text: str) -> Session:
    """Rebuild a session from ``session_to_json`` output."""
    data = json.loads(text)
    if not isinstance(data, dict) or not isinstance(data.get("session"), dict):
        raise ValueError("Not a session export: expected an object with a \"session\" mapping")
    if not isinstance(data.get("messages", []), list):
        raise ValueError("Not a session export: \"messages\" must be a list")
    meta = data["session"]
    history = [
        Message(
            role=Role(msg["role"]),
            content=msg["content"],
            timestamp=datetime.fromisoformat(msg["timestamp"]),
        )
        for msg in data.get("messages", [])
    ]
    return Session(
        id=meta["id"],
        model=meta["model"],
        context=meta.get("context"),
        history=history,
        created=datetime.fromisoformat(meta["created"]),
        updated=datetime.fromisoformat(meta["updated"]),
    )
