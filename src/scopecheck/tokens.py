from __future__ import annotations

from dataclasses import dataclass

from scopecheck.invariants import never
from scopecheck.schema import TokenDTO


@dataclass(frozen=True)
class ActualToken:
    """One token emitted by the tokenizer for a line of text."""

    start: int
    end: int
    scopes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        start = int(self.start)
        end = int(self.end)
        if start < 0:
            never("token start offset is negative", start=self.start, end=self.end)
        if end < start:
            never("token end offset precedes start", start=self.start, end=self.end)
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        object.__setattr__(self, "scopes", tuple(str(scope) for scope in self.scopes))

    def text(self, line_text: str) -> str:
        return line_text[self.start:self.end]

    @classmethod
    def from_dto(cls, dto: TokenDTO) -> "ActualToken":
        return cls(start=dto.startIndex, end=dto.endIndex, scopes=tuple(dto.scopes))

    def as_dict(self) -> dict[str, object]:
        return {"startIndex": self.start, "endIndex": self.end, "scopes": list(self.scopes)}
