from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Author(str, Enum):
    USER = "user"
    MODEL = "model"


class BackendName(str, Enum):
    AZUREAI = "azureai"
    OPENAI = "openai"
    OLLAMA = "ollama"
    ECHO = "echo"

    @classmethod
    def parse(cls, value: str) -> "BackendName":
        # Raises ValueError for unknown names; the registry maps that to UnsupportedBackendError
        return cls(str(value).strip().lower())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BackendPrompt:
    text: str
    backend_context: str = ""


@dataclass(frozen=True)
class BackendResponse:
    """
    One record on the event channel.
    done=False: `text` holds a single fragment.
    done=True: `text` is empty and `context` holds the updated serialized history.
    """
    author: Author
    text: str
    done: bool
    context: Optional[str] = None


@dataclass(frozen=True)
class StreamChunk:
    text: Optional[str] = None
    done: bool = False


# ----- Wire models (OpenAI-style chat completions) -----

class MessageRequest(BaseModel):
    role: str
    content: str


class CompletionRequest(BaseModel):
    model: str
    messages: List[MessageRequest]
    stream: bool = True


class CompletionDeltaResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: Optional[str] = None


class CompletionChoiceResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    delta: CompletionDeltaResponse = Field(default_factory=CompletionDeltaResponse)


class CompletionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    choices: List[CompletionChoiceResponse] = Field(default_factory=list)
