# 📦 engine/responses.py
# ─────────────────────────────
# Append-only response log with a derived read-only lookup view

from types import MappingProxyType
from typing import Iterable, Mapping

from schemas.assessment import AssessmentResponse


class ResponseLog:
    """Immutable log of answers; the latest answer per question wins."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[AssessmentResponse] = ()):
        self._entries = tuple(entries)

    def append(self, response: AssessmentResponse) -> "ResponseLog":
        return ResponseLog(self._entries + (response,))

    def record(self, question_id, value, timestamp) -> "ResponseLog":
        return self.append(AssessmentResponse(question_id=question_id, value=value, timestamp=timestamp))

    def view(self) -> Mapping[str, AssessmentResponse]:
        latest = {}
        for entry in self._entries:
            latest[entry.question_id] = entry
        return MappingProxyType(latest)

    def latest(self):
        """Current response per question, in first-answer order."""
        return list(self.view().values())

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __contains__(self, question_id):
        return any(entry.question_id == question_id for entry in self._entries)


def as_view(responses) -> Mapping:
    """Normalize a response log, a list of responses or a mapping into a lookup view."""
    if isinstance(responses, ResponseLog):
        return responses.view()
    if isinstance(responses, Mapping):
        return responses
    return ResponseLog(responses).view()
