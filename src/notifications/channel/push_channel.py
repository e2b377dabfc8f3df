"""Push (in-app / device) delivery channel.

Push sends never raise: a failed single send or a failed multicast is
reported in the returned dict so that one bad token cannot stop the
others from being processed.
"""

from uuid import uuid4

import structlog

from notifications.channel.push_port import PushTransport

logger = structlog.get_logger(__name__)


def stringify(data: dict | None) -> dict[str, str] | None:
    """Push payload values must be strings."""
    if data is None:
        return None
    return {key: str(val) for key, val in data.items()}


def _build_message(title: str, body: str | None, data: dict | None, image_url: str | None) -> dict:
    notification = {"title": title, "body": body}
    if image_url:
        notification["image_url"] = image_url
    message: dict = {"notification": notification}
    if data:
        message["data"] = stringify(data)
    return message


class LoggingPushTransport(PushTransport):
    """Push transport used when no push provider is configured; logs and acknowledges."""

    async def send(self, message: dict) -> str:
        message_id = f"log-push-{uuid4().hex[:12]}"
        logger.info("Push message logged", token=message["token"], message_id=message_id)
        return message_id

    async def send_each_for_multicast(self, message: dict) -> dict:
        responses = [{"success": True, "message_id": f"log-push-{uuid4().hex[:12]}"} for _ in message["tokens"]]
        logger.info("Multicast push logged", tokens=len(message["tokens"]))
        return {"success_count": len(responses), "failure_count": 0, "responses": responses}


class PushChannel:
    def __init__(self, transport: PushTransport):
        self.transport = transport

    async def send(
        self,
        token: str,
        title: str,
        body: str | None = None,
        data: dict | None = None,
        image_url: str | None = None,
    ) -> dict:
        message = {"token": token, **_build_message(title, body, data, image_url)}
        try:
            message_id = await self.transport.send(message)
        except Exception as exc:
            logger.error("Failed to send push notification", token=token, error=str(exc))
            return {"success": False, "error": str(exc), "token": token}

        logger.info("Push notification sent", token=token, message_id=message_id)
        return {"success": True, "message_id": message_id, "token": token}

    async def send_multicast(
        self,
        tokens: list[str],
        title: str,
        body: str | None = None,
        data: dict | None = None,
        image_url: str | None = None,
    ) -> dict:
        if not tokens:
            return {"success": True, "success_count": 0, "failure_count": 0, "results": []}

        message = {"tokens": list(tokens), **_build_message(title, body, data, image_url)}
        try:
            response = await self.transport.send_each_for_multicast(message)
        except Exception as exc:
            logger.error("Failed to send multicast push notification", tokens=len(tokens), error=str(exc))
            return {
                "success": False,
                "success_count": 0,
                "failure_count": len(tokens),
                "error": str(exc),
            }

        logger.info(
            "Multicast push notification sent",
            success_count=response["success_count"],
            failure_count=response["failure_count"],
        )
        return {
            "success": True,
            "success_count": response["success_count"],
            "failure_count": response["failure_count"],
            "results": response["responses"],
        }
