import re
from uuid import uuid4

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from workbench.core import context

_LOAN_PATH = re.compile(r"/loans/(?P<loan_id>[^/]+)")


class RequestContextMiddleware:
    """Bind request_id and loan_id for logging; echo ``x-request-id`` back."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id", b"").decode() or str(uuid4())
        match = _LOAN_PATH.search(scope.get("path", ""))
        tokens = context.bind_request_context(request_id, match.group("loan_id") if match else None)

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [*message.get("headers", []), (b"x-request-id", request_id.encode())]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            context.reset_request_context(tokens)
