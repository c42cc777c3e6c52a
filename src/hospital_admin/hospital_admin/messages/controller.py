from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.exceptions import LoadError, NotFoundError, ValidationError, WriteError
from ..container import Container
from .model import Message
from .service import sort_newest_first

logger = logging.getLogger(__name__)


def _message_json(m: Message) -> dict:
    return {
        "id": m.message_id,
        "sender_id": m.sender_id,
        "receiver_id": m.receiver_id,
        "subject": m.subject,
        "content": m.content,
        "timestamp": m.created_at.isoformat(),
        "read": m.read,
    }


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


def register(app: Flask, container: Container) -> None:
    def messages_view(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Login required"}), 401
            try:
                return view(int(session["user_id"]), *args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except NotFoundError as e:
                return jsonify({"success": False, "message": str(e)}), 404
            except (LoadError, WriteError) as e:
                return jsonify({"success": False, "message": str(e)}), 503
            except Exception:
                logger.exception("Unexpected error in %s", view.__name__)
                return jsonify({"success": False, "message": "Internal server error"}), 500

        return wrapper

    @app.route("/api/messages", methods=["GET"], endpoint="api_messages")
    @messages_view
    def api_messages(user_id: int):
        with container.message_service.open_session(user_id) as s:
            term = request.args.get("q", "")
            messages = s.search(term) if term else s.list_inbox()
            return jsonify({
                "success": True,
                "messages": [_message_json(m) for m in messages],
                "cursor": s.subscription.cursor,
            })

    @app.route("/api/messages", methods=["POST"], endpoint="api_messages_send")
    @messages_view
    def api_messages_send(user_id: int):
        data = _payload()
        with container.message_service.open_session(user_id, preload=False) as s:
            message = s.compose(data.get("recipient_id"), data.get("subject", ""), data.get("content", ""))
        return jsonify({"success": True, "message": _message_json(message)}), 201

    @app.route("/api/messages/<int:message_id>/open", methods=["POST"], endpoint="api_messages_open")
    @messages_view
    def api_messages_open(user_id: int, message_id: int):
        with container.message_service.open_session(user_id) as s:
            message = s.open(s.find(message_id))
        return jsonify({"success": True, "message": _message_json(message)})

    @app.route("/api/messages/<int:message_id>/reply", methods=["POST"], endpoint="api_messages_reply")
    @messages_view
    def api_messages_reply(user_id: int, message_id: int):
        data = _payload()
        with container.message_service.open_session(user_id) as s:
            message = s.reply(s.find(message_id), data.get("content", ""))
        return jsonify({"success": True, "message": _message_json(message)}), 201

    @app.route("/api/messages/recipients", methods=["GET"], endpoint="api_messages_recipients")
    @messages_view
    def api_messages_recipients(user_id: int):
        groups = container.message_service.recipients()
        return jsonify({
            "success": True,
            "groups": [
                {
                    "role": role.value,
                    "label": role.value.capitalize() + "s",
                    "users": [{"id": u.user_id, "name": u.name, "email": u.email} for u in users],
                }
                for role, users in groups.items()
            ],
        })

    @app.route("/api/messages/updates", methods=["GET"], endpoint="api_messages_updates")
    @messages_view
    def api_messages_updates(user_id: int):
        after = request.args.get("after")
        if after is not None and not after.isdigit():
            raise ValidationError(f"Invalid cursor: {after}")

        after_id = int(after) if after is not None else None
        with container.message_service.open_session(user_id, after_id=after_id, preload=False) as s:
            inserted = s.pull_updates()
            return jsonify({
                "success": True,
                "messages": [_message_json(m) for m in sort_newest_first(inserted)],
                "cursor": s.subscription.cursor,
            })
