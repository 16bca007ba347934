from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Literal

ModelStatus = Literal["success", "recoverable_error", "fatal_error"]


@dataclass
class ModelRequest:
    messages: List[Dict[str, Any]]     # role-tagged chat records, system first
    model: str
    temperature: float = 0.5
    max_tokens: Optional[int] = None
    timeout_s: Optional[float] = 60
    trace_id: Optional[str] = None


@dataclass
class ModelResponse:
    status: ModelStatus
    output: Optional[str] = None
    error_type: Optional[str] = None   # timeout | rate_limited | backend_unavailable | empty_output
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "success" and self.output is not None
