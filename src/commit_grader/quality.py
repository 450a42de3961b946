"""Commit message quality scoring."""

from __future__ import annotations

from .config import (
    GOOD_THRESHOLD,
    MIN_SCORE,
    PERFECT_SCORE,
    RICH_RULES,
    ScoringRules,
)
from .lexicon import (
    CONVENTIONAL_TYPES,
    DEFAULT_TYPE,
    IMPERATIVE_VERBS,
    ISSUE_FIX_PATTERN,
    ISSUE_REF_PATTERN,
    SENTENCE_PATTERN,
    TYPE_KEYWORDS,
    TYPE_PREFIX_PATTERN,
    VAGUE_WORDS,
    VERB_MAP,
)
from .models import (
    CONVENTION_FOLLOWER,
    ISSUE_LINKER,
    PERFECTIONIST,
    PROFESSIONAL_STYLE,
    STORYTELLER,
    Achievement,
    AnalysisResult,
    Checklist,
    status_for,
)

SHORT_SUBJECT_LENGTH = 10
SHORT_SUBJECT_WORDS = 3


def infer_type(text: str) -> str:
    """Guess a conventional type from keywords in free text.

    Args:
        text: Usually the subject line

    Returns:
        The first type whose keywords appear in the text, else ``chore``
    """
    lower = text.lower()
    for keywords, commit_type in TYPE_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return commit_type
    return DEFAULT_TYPE


def _imperative_subject(subject: str) -> str:
    """Drop a trailing period and put the leading verb into imperative form."""
    if subject.endswith("."):
        subject = subject[:-1]
    words = subject.split(" ")
    first = words[0].lower()
    words[0] = VERB_MAP[first].lower() if first in VERB_MAP else first
    return " ".join(words)


def _short_circuit(score: int, reason: str) -> AnalysisResult:
    return AnalysisResult(score=score, feedback=[reason], status="bad")


def score_commit_message(message: str, rules: ScoringRules = RICH_RULES) -> AnalysisResult:
    """Assess the quality of a commit message.

    Runs an ordered rule chain over the subject line (type, vagueness,
    length, mood, formatting), then applies bonuses for issue references
    and a body. WIP and very short subjects return early with a fixed low
    score and no achievements.

    Args:
        message: The full commit message, subject first
        rules: Penalties, bonuses and switches to apply

    Returns:
        The analysis; never raises, whatever the input
    """
    trimmed = (message or "").strip()
    lines = trimmed.split("\n")
    subject = lines[0].rstrip("\r")
    lower_subject = subject.lower()
    has_body = any(line.strip() for line in lines[1:])

    # Fatal checks
    if rules.empty_short_circuit and not subject:
        return _short_circuit(rules.empty_score, "Message is empty.")
    if rules.wip_short_circuit and ("wip" in lower_subject or "work in progress" in lower_subject):
        return _short_circuit(
            rules.wip_score,
            "'WIP' commits should not be pushed to shared branches. "
            "Finish the work or squash commits.",
        )
    if len(subject) < rules.min_subject_length:
        return _short_circuit(rules.too_short_score, "Message is too short to be meaningful.")

    score = PERFECT_SCORE
    feedback: list[str] = []
    achievements: list[Achievement] = []
    conventional_type: str | None = None

    # Type prefix
    type_match = TYPE_PREFIX_PATTERN.match(subject)
    unknown_type = False
    if type_match:
        commit_type = type_match.group(1)
        if commit_type in CONVENTIONAL_TYPES:
            conventional_type = commit_type
            achievements.append(CONVENTION_FOLLOWER)
        else:
            unknown_type = True
            score -= rules.unknown_type_penalty
            feedback.append(
                f'"{commit_type}" is not a standard type. '
                f"Consider: {', '.join(CONVENTIONAL_TYPES[:5])}..."
            )

    is_sentence = bool(SENTENCE_PATTERN.match(subject))
    if conventional_type is None and (rules.unknown_type_counts_as_missing or not unknown_type):
        if rules.accept_sentence_style and is_sentence:
            score -= rules.sentence_style_penalty
            feedback.append(
                "Tip: Adding a type (e.g., 'feat:', 'fix:') helps with automated changelogs."
            )
        elif rules.accept_sentence_style:
            score -= rules.missing_type_penalty
            feedback.append(
                "Start with a capitalized verb or use a conventional type "
                "(e.g., 'Fix...', 'feat: ...')."
            )
        else:
            score -= rules.missing_type_penalty
            feedback.append("Missing conventional type (e.g., 'feat:', 'fix:').")

    # Vague words, unless the subject closes an issue ("Fixes #12", "fixed PROJ-3")
    vague_word = next((word for word in VAGUE_WORDS if word in lower_subject), None)
    vague_penalized = vague_word is not None and not ISSUE_FIX_PATTERN.search(subject)
    if vague_penalized:
        score -= rules.vague_penalty
        feedback.append(f'"{vague_word}" is too vague. Be specific about what changed.')

    # Length
    too_short = len(subject) < SHORT_SUBJECT_LENGTH and len(subject.split(" ")) < SHORT_SUBJECT_WORDS
    too_long = len(subject) > rules.max_subject_length
    if too_short:
        score -= rules.short_penalty
        feedback.append("Too short. Add a bit more context.")
    elif too_long:
        score -= rules.long_penalty
        feedback.append(
            f"Subject line exceeds {rules.max_subject_length} characters. Keep it concise."
        )

    # Imperative mood
    if conventional_type:
        subject_body = subject.split(":", 1)[1].strip()
    else:
        subject_body = subject
    first_word = subject_body.split(" ")[0]
    lower_first_word = first_word.lower()
    mapped_verb = VERB_MAP.get(lower_first_word)
    imperative = True
    if lower_first_word in IMPERATIVE_VERBS:
        pass
    elif mapped_verb and mapped_verb.lower() != lower_first_word:
        imperative = False
        score -= rules.mood_penalty
        feedback.append(f'Use "{mapped_verb}" instead of "{first_word}" (imperative mood).')
    elif not mapped_verb and subject_body:
        imperative = False
        score -= rules.mood_penalty
        feedback.append('Start with an imperative verb (e.g., "Add", "Fix", "Update").')

    # Bonuses
    has_issue_ref = bool(ISSUE_REF_PATTERN.search(trimmed))
    if has_issue_ref:
        score += rules.issue_bonus
        achievements.append(ISSUE_LINKER)
    if has_body:
        score += rules.body_bonus
        achievements.append(STORYTELLER)

    if score >= GOOD_THRESHOLD and conventional_type is None and is_sentence:
        achievements.append(PROFESSIONAL_STYLE)

    # Formatting
    trailing_period = subject.endswith(".")
    if trailing_period:
        score -= rules.trailing_period_penalty
        if rules.trailing_period_penalty:
            feedback.append("Remove trailing period.")
        else:
            feedback.append("Tip: No trailing period needed in subject.")

    score = max(MIN_SCORE, min(PERFECT_SCORE, score))
    if score == PERFECT_SCORE:
        achievements.append(PERFECTIONIST)

    suggestion = None
    if score < PERFECT_SCORE:
        # An unrecognized prefix is replaced rather than kept
        rest = subject.split(":", 1)[1].strip() if unknown_type else subject_body
        commit_type = conventional_type or infer_type(rest or subject)
        suggestion = f"{commit_type}: {_imperative_subject(rest or subject)}"
        if len(subject) < SHORT_SUBJECT_LENGTH or (vague_word and not has_issue_ref):
            suggestion += " <context>"
        if suggestion == subject:
            suggestion = None

    return AnalysisResult(
        score=score,
        feedback=feedback,
        status=status_for(score),
        conventional_type=conventional_type,
        achievements=achievements,
        suggestion=suggestion,
        checklist=Checklist(
            conventional=conventional_type is not None,
            length=not (too_short or too_long),
            specific=not vague_penalized,
            imperative=imperative,
            no_trailing_period=not trailing_period,
        ),
    )


def is_well_formed(message: str, min_score: int = 7, rules: ScoringRules = RICH_RULES) -> bool:
    """Check if a commit message is well-formed.

    Args:
        message: The commit message to check
        min_score: Minimum score to be considered well-formed (0-10)
        rules: Scoring rules to apply

    Returns:
        True if the message is well-formed
    """
    return score_commit_message(message, rules).score >= min_score


def needs_improvement(
    message: str, min_score: int = 7, rules: ScoringRules = RICH_RULES
) -> tuple[bool, str]:
    """Check if a commit message needs improvement.

    Args:
        message: The commit message to check
        min_score: Minimum score threshold
        rules: Scoring rules to apply

    Returns:
        Tuple of (needs_improvement, reason)
    """
    result = score_commit_message(message, rules)
    reason = "; ".join(result.feedback) if result.feedback else "no specific issues"
    return result.score < min_score, reason
