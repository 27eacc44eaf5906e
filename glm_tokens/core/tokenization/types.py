"""
Types cho chat template rendering.

- ChatMessage: mot message {role, content}, bat bien, so sanh theo gia tri
- RenderContext: danh sach message + co add_generation_prompt, tao moi moi lan goi
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Tuple


@dataclass(frozen=True)
class ChatMessage:
    """
    Mot message trong chat transcript.

    Role la text tu do; cac constructor system/user/assistant/tool
    chi la tien ich, khong gioi han tap role hop le.
    """

    role: str
    content: str

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls("system", content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls("user", content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls("assistant", content)

    @classmethod
    def tool(cls, content: str) -> "ChatMessage":
        return cls("tool", content)

    def to_dict(self) -> Dict[str, Any]:
        """Mapping ma chat template nhin thay (m.role, m.content)."""
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class RenderContext:
    """Input cua mot lan render chat template."""

    messages: Tuple[ChatMessage, ...] = field(default_factory=tuple)
    add_generation_prompt: bool = True

    @classmethod
    def for_chat(cls, messages: Iterable[ChatMessage]) -> "RenderContext":
        """Context cho dem token chat - luon them generation prompt."""
        return cls(messages=tuple(messages), add_generation_prompt=True)

    def as_template_vars(self) -> Dict[str, Any]:
        return {
            "messages": [m.to_dict() for m in self.messages],
            "add_generation_prompt": self.add_generation_prompt,
        }
