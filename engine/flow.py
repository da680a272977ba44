# 📦 engine/flow.py
# ─────────────────────────────
# Assessment-taking session: linear walk over sections and questions.
#
# A positive answer on the suicidal-ideation item halts forward navigation
# until the crisis support step is acknowledged, then resumes at the next
# question.

from datetime import datetime, timezone
from pathlib import Path

import structlog
import yaml

from engine.questions import ASSESSMENT_SECTIONS, SUICIDAL_IDEATION_ITEM, total_questions
from engine.responses import ResponseLog
from engine.scoring import item_score, score_assessment
from schemas.assessment import AssessmentProgress, CrisisSupport

log = structlog.get_logger()

SECONDS_PER_QUESTION = 30

crisis_config_path = Path(__file__).resolve().parent.parent / "config" / "crisis_resources.yml"


def load_crisis_support(path=crisis_config_path) -> CrisisSupport:
    with open(path, "r") as f:
        return CrisisSupport(**yaml.safe_load(f))


class AssessmentFlowError(Exception):
    """Navigation not allowed in the current session state."""


class MissingAnswerError(AssessmentFlowError):
    def __init__(self, message="Please select an answer to continue."):
        super().__init__(message)


class CrisisSupportRequired(AssessmentFlowError):
    def __init__(self, support=None):
        super().__init__("Crisis support must be acknowledged before continuing.")
        self.support = support


class AssessmentIncompleteError(AssessmentFlowError):
    pass


def _utcnow():
    return datetime.now(timezone.utc)


class AssessmentSession:
    def __init__(
        self,
        user_id,
        sections=ASSESSMENT_SECTIONS,
        crisis_support=None,
        on_start=None,
        on_suicide_risk=None,
        clock=_utcnow,
    ):
        self.user_id = user_id
        self.sections = tuple(sections)
        self.crisis_support = crisis_support
        self.on_start = on_start
        self.on_suicide_risk = on_suicide_risk
        self.clock = clock

        self.responses = ResponseLog()
        self.section_index = 0
        self.question_index = 0
        self.started_at = None
        self.support_required = False
        self.finished = False

    # ─────────────────────────────
    # State

    @property
    def current_section(self):
        if self.finished:
            return None
        return self.sections[self.section_index]

    @property
    def current_question(self):
        section = self.current_section
        if section is None:
            return None
        return section.questions[self.question_index]

    def current_answer(self):
        """Previously saved answer for the current question, if any."""
        question = self.current_question
        if question is None:
            return None
        entry = self.responses.view().get(question.id)
        return entry.value if entry else None

    @property
    def progress(self) -> AssessmentProgress:
        total = total_questions(self.sections)
        if self.finished:
            done = total
        else:
            done = sum(len(s.questions) for s in self.sections[: self.section_index]) + self.question_index
        return AssessmentProgress(
            current_section=min(self.section_index, len(self.sections) - 1),
            total_sections=len(self.sections),
            current_question=min(done + 1, total),
            total_questions=total,
            percent_complete=round(done / total * 100) if total else 100,
            estimated_time_remaining=round((total - done) * SECONDS_PER_QUESTION / 60),
        )

    # ─────────────────────────────
    # Navigation

    def start(self):
        self.started_at = self.clock()
        log.info("Assessment started", user_id=self.user_id)
        if self.on_start:
            self.on_start(self.user_id)
        return self.current_question

    def submit(self, value):
        """Save an answer for the current question and move forward."""
        if self.support_required:
            raise CrisisSupportRequired(self.crisis_support)
        question = self.current_question
        if question is None:
            raise AssessmentFlowError("Assessment already finished")
        if value is None or value == "" or value == []:
            raise MissingAnswerError()

        self.responses = self.responses.record(question.id, value, self.clock())

        if question.id == SUICIDAL_IDEATION_ITEM and item_score(self.responses, question.id) > 0:
            self.support_required = True
            log.warning("Suicide risk indicated during assessment", user_id=self.user_id, requires_followup=True)
            if self.on_suicide_risk:
                self.on_suicide_risk(self.user_id)
            return None

        return self._advance()

    def acknowledge_support(self):
        """Close the crisis support step and resume after the flagged question."""
        if not self.support_required:
            raise AssessmentFlowError("No crisis support step is pending")
        self.support_required = False
        return self._advance()

    def previous(self):
        if self.support_required:
            raise CrisisSupportRequired(self.crisis_support)
        if self.finished:
            self.finished = False
        elif self.question_index > 0:
            self.question_index -= 1
        elif self.section_index > 0:
            self.section_index -= 1
            self.question_index = len(self.sections[self.section_index].questions) - 1
        return self.current_question

    def _advance(self):
        self.question_index += 1
        if self.question_index >= len(self.sections[self.section_index].questions):
            if self.section_index < len(self.sections) - 1:
                self.section_index += 1
                self.question_index = 0
            else:
                self.question_index -= 1
                self.finished = True
        return self.current_question

    def complete(self, assessment_id=None):
        """Score the walked responses once every question has been passed."""
        if self.support_required:
            raise CrisisSupportRequired(self.crisis_support)
        if not self.finished:
            raise AssessmentIncompleteError("Assessment has unanswered questions")
        return score_assessment(
            self.responses,
            user_id=self.user_id,
            assessment_id=assessment_id,
            completed_at=self.clock(),
        )
