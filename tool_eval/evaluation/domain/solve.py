"""SolveResult — one sample's conversation outcome for one model and epoch."""

from pydantic import BaseModel, Field

from tool_eval.chat.domain.transcript import Transcript


class SolveResult(BaseModel, frozen=True):
    sample_id: str
    epoch: int = Field(ge=0)
    response: str
    transcript: Transcript
    # Set only when a contained per-sample failure replaced the conversation.
    error: str | None = None
