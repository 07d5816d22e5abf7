"""Wire models for the DingTalk robot webhook.

- OutboundMessage: request body ``{"msgtype": "text", "text": {"content": ...}}``
- WebhookResponse: error document ``{"errcode": int, "errmsg": str}``
- SelfTestPayload: options for a self-test send
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TEST_MESSAGE = "test dingtalk message"


class MessageText(BaseModel):
    """Text body of a DingTalk message."""

    model_config = ConfigDict(frozen=True)

    content: str


class OutboundMessage(BaseModel):
    """Request body sent to the DingTalk robot endpoint.

    Example:
        >>> OutboundMessage.text_message("hello").model_dump_json()
        '{"msgtype":"text","text":{"content":"hello"}}'
    """

    model_config = ConfigDict(frozen=True)

    msgtype: Literal["text"] = "text"
    text: MessageText

    @classmethod
    def text_message(cls, content: str) -> OutboundMessage:
        """Build a plain text message."""
        return cls(text=MessageText(content=content))


class WebhookResponse(BaseModel):
    """Error document returned by DingTalk.

    Missing fields default to their zero values, so ``{}`` parses while a
    non-object body does not. Field types are strict: ``{"errcode": "300"}``
    is not an error document.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    errcode: int = 0
    errmsg: str = ""


class SelfTestPayload(BaseModel):
    """Options for a live self-test send.

    Attributes:
        message: Message to deliver.
        access_token: Token configured when the options were built. Sends
            always use the token configured at send time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    message: str = Field(default=TEST_MESSAGE)
    access_token: str = ""


__all__ = [
    "TEST_MESSAGE",
    "MessageText",
    "OutboundMessage",
    "SelfTestPayload",
    "WebhookResponse",
]
