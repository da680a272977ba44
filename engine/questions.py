# 📦 engine/questions.py
# ─────────────────────────────
# Question bank: demographics, PHQ-9, GAD-7, PSS and WHO-5 sections
#
# PSS items 4 and 5 are reverse scored through their option tables
# (Never = 4 ... Very often = 0). Scoring sums values as given.

from schemas.assessment import (
    AssessmentOption,
    AssessmentQuestion,
    AssessmentSection,
    QuestionCategory,
    ResponseType,
)


def _options(*pairs):
    return tuple(AssessmentOption(value=v, label=l) for v, l in pairs)


FREQUENCY_OPTIONS = _options(
    (0, "Not at all"),
    (1, "Several days"),
    (2, "More than half the days"),
    (3, "Nearly every day"),
)

STRESS_OPTIONS = _options(
    (0, "Never"),
    (1, "Almost never"),
    (2, "Sometimes"),
    (3, "Fairly often"),
    (4, "Very often"),
)

STRESS_OPTIONS_REVERSED = _options(
    (4, "Never"),
    (3, "Almost never"),
    (2, "Sometimes"),
    (1, "Fairly often"),
    (0, "Very often"),
)

WELL_BEING_OPTIONS = _options(
    (0, "At no time"),
    (1, "Some of the time"),
    (2, "Less than half of the time"),
    (3, "More than half of the time"),
    (4, "Most of the time"),
    (5, "All of the time"),
)


def _choice(qid, text, *pairs):
    return AssessmentQuestion(
        id=qid,
        category=QuestionCategory.DEMOGRAPHIC,
        question=text,
        type=ResponseType.MULTIPLE_CHOICE,
        options=_options(*pairs),
    )


def _scale(qid, category, text, options, **extra):
    return AssessmentQuestion(
        id=qid,
        category=category,
        question=text,
        type=ResponseType.SCALE,
        options=options,
        **extra,
    )


_TWO_WEEKS = "Over the last 2 weeks, how often have you been bothered by "
_LAST_MONTH = "In the last month, how often have you "

PHQ9_ITEMS = [
    "little interest or pleasure in doing things?",
    "feeling down, depressed, or hopeless?",
    "trouble falling or staying asleep, or sleeping too much?",
    "feeling tired or having little energy?",
    "poor appetite or overeating?",
    "feeling bad about yourself, or that you are a failure or have let yourself or your family down?",
    "trouble concentrating on things, such as reading the newspaper or watching television?",
    "moving or speaking so slowly that other people could have noticed? Or the opposite, being so fidgety or restless that you have been moving around a lot more than usual?",
    "thoughts that you would be better off dead, or of hurting yourself in some way?",
]

GAD7_ITEMS = [
    "feeling nervous, anxious, or on edge?",
    "not being able to stop or control worrying?",
    "worrying too much about different things?",
    "trouble relaxing?",
    "being so restless that it is hard to sit still?",
    "becoming easily annoyed or irritable?",
    "feeling afraid, as if something awful might happen?",
]

WHO5_ITEMS = [
    "I have felt cheerful and in good spirits",
    "I have felt calm and relaxed",
    "I have felt active and vigorous",
    "I woke up feeling fresh and rested",
    "my daily life has been filled with things that interest me",
]

SUICIDAL_IDEATION_ITEM = "phq9_9"
SLEEP_ITEM = "phq9_3"
CONCENTRATION_ITEM = "phq9_7"
PRIMARY_CONCERN_ITEM = "primary_concern"

PHQ9_IDS = [f"phq9_{i}" for i in range(1, 10)]
GAD7_IDS = [f"gad7_{i}" for i in range(1, 8)]
PSS_IDS = [f"pss_{i}" for i in range(1, 6)]
WHO5_IDS = [f"who5_{i}" for i in range(1, 6)]


def _phq9_question(index, text):
    qid = PHQ9_IDS[index]
    extra = {}
    if index == 0:
        extra["help_text"] = "Think about activities you normally enjoy"
    if qid == SUICIDAL_IDEATION_ITEM:
        extra["clinical_context"] = "CRITICAL: Scores > 0 require immediate risk assessment and safety planning"
    return _scale(qid, QuestionCategory.DEPRESSION, _TWO_WEEKS + text, FREQUENCY_OPTIONS, **extra)


DEMOGRAPHIC_QUESTIONS = (
    _choice(
        "age_group", "What is your age?",
        ("18-25", "18-25"), ("26-35", "26-35"), ("36-45", "36-45"),
        ("46-55", "46-55"), ("56-65", "56-65"), ("66+", "66+"),
    ),
    _choice(
        "relationship_status", "What is your current relationship status?",
        ("single", "Single"), ("dating", "Dating/In a relationship"),
        ("married", "Married"), ("divorced", "Divorced"), ("widowed", "Widowed"),
        ("complicated", "It's complicated"), ("prefer_not_say", "Prefer not to say"),
    ),
    _choice(
        "therapy_experience", "Have you ever been to therapy before?",
        ("never", "No, I've never been to therapy"),
        ("past_helpful", "Yes, and it was helpful"),
        ("past_unhelpful", "Yes, but it wasn't very helpful"),
        ("currently", "I'm currently in therapy"),
    ),
    _choice(
        "therapy_preference", "Do you have a preference for your therapist's gender?",
        ("no_preference", "No preference"), ("female", "Female"),
        ("male", "Male"), ("non_binary", "Non-binary"),
    ),
    _choice(
        PRIMARY_CONCERN_ITEM, "What's the primary reason you're seeking therapy?",
        ("depression", "Depression"), ("anxiety", "Anxiety"),
        ("stress", "Stress and burnout"), ("relationships", "Relationship issues"),
        ("trauma", "Trauma and PTSD"), ("grief", "Grief and loss"),
        ("self_esteem", "Self-esteem and confidence"),
        ("life_transitions", "Major life changes"),
        ("family_issues", "Family conflicts"),
        ("work_stress", "Work and career stress"),
        ("eating_concerns", "Eating and body image"),
        ("addiction", "Substance use concerns"), ("other", "Something else"),
    ),
    _choice(
        "therapy_goals", "What do you hope to get out of therapy? (Select all that apply)",
        ("feel_better", "Feel less sad, anxious, or stressed"),
        ("coping_skills", "Learn better coping strategies"),
        ("relationships", "Improve my relationships"),
        ("self_awareness", "Better understand myself"),
        ("confidence", "Build confidence and self-esteem"),
        ("life_changes", "Navigate major life changes"),
        ("communication", "Communicate more effectively"),
        ("habits", "Change unhealthy patterns or habits"),
    ),
)

PSS_QUESTIONS = (
    _scale("pss_1", QuestionCategory.STRESS,
           _LAST_MONTH + "been upset because of something that happened unexpectedly?", STRESS_OPTIONS),
    _scale("pss_2", QuestionCategory.STRESS,
           _LAST_MONTH + "felt that you were unable to control the important things in your life?", STRESS_OPTIONS),
    _scale("pss_3", QuestionCategory.STRESS,
           _LAST_MONTH + 'felt nervous and "stressed"?', STRESS_OPTIONS),
    _scale("pss_4", QuestionCategory.STRESS,
           _LAST_MONTH + "felt confident about your ability to handle your personal problems?",
           STRESS_OPTIONS_REVERSED,
           clinical_context="Reverse scored item: higher confidence = lower stress score"),
    _scale("pss_5", QuestionCategory.STRESS,
           _LAST_MONTH + "felt that things were going your way?",
           STRESS_OPTIONS_REVERSED,
           clinical_context="Reverse scored item: things going well = lower stress score"),
)

ASSESSMENT_SECTIONS = (
    AssessmentSection(
        id="demographic",
        title="About You",
        description="Help us understand your background to provide personalized recommendations.",
        estimated_minutes=1,
        clinical_purpose="Gather demographic data for personalized treatment matching and cultural considerations",
        questions=DEMOGRAPHIC_QUESTIONS,
    ),
    AssessmentSection(
        id="phq9",
        title="How You've Been Feeling",
        description="These questions help us understand how you've been feeling emotionally over the past two weeks.",
        estimated_minutes=2,
        clinical_purpose="PHQ-9 assessment for depression severity screening with validated clinical cutoff scores",
        questions=tuple(_phq9_question(i, text) for i, text in enumerate(PHQ9_ITEMS)),
    ),
    AssessmentSection(
        id="gad7",
        title="Anxiety Assessment",
        description="These questions help us understand your experience with worry and anxiety.",
        estimated_minutes=2,
        clinical_purpose="GAD-7 assessment for anxiety disorder screening with validated cutoff scores",
        questions=tuple(
            _scale(qid, QuestionCategory.ANXIETY, _TWO_WEEKS + text, FREQUENCY_OPTIONS)
            for qid, text in zip(GAD7_IDS, GAD7_ITEMS)
        ),
    ),
    AssessmentSection(
        id="stress",
        title="Stress Assessment",
        description="These questions help us understand how you perceive and manage stress in your life.",
        estimated_minutes=2,
        clinical_purpose="Perceived Stress Scale-10 to assess stress levels and coping capacity",
        questions=PSS_QUESTIONS,
    ),
    AssessmentSection(
        id="wellbeing",
        title="Well-being Check",
        description="These final questions help us understand your overall sense of well-being.",
        estimated_minutes=1,
        clinical_purpose="WHO-5 Well-Being Index to assess general psychological well-being",
        questions=tuple(
            _scale(qid, QuestionCategory.WELL_BEING, "Over the last 2 weeks, " + text, WELL_BEING_OPTIONS)
            for qid, text in zip(WHO5_IDS, WHO5_ITEMS)
        ),
    ),
)

_QUESTION_INDEX = {q.id: q for section in ASSESSMENT_SECTIONS for q in section.questions}


def get_question(question_id):
    """Look up a question by id, or None."""
    return _QUESTION_INDEX.get(question_id)


def all_questions():
    return list(_QUESTION_INDEX.values())


def total_questions(sections=ASSESSMENT_SECTIONS):
    return sum(len(section.questions) for section in sections)
