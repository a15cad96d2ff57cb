"""Prompt construction: tones, analysis methods, and the chat message list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from transcript_advisor.groq import ChatMessage


@dataclass(frozen=True)
class Tone:
    """A response voice the user can pick."""

    value: str
    name: str
    description: str
    system_prompt: str


@dataclass(frozen=True)
class AnalysisMethod:
    """A focus for the initial transcript analysis."""

    value: str
    name: str
    description: str
    instruction: str


TONES: dict[str, Tone] = {
    t.value: t
    for t in (
        Tone(
            "casual",
            "Casual",
            "Friendly, conversational, and encouraging",
            "You are a friendly and approachable career advisor. Use a casual, conversational "
            "tone. Be encouraging and supportive. Make the conversation feel like talking to a "
            "helpful friend who genuinely cares about the user's future.",
        ),
        Tone(
            "direct",
            "Direct",
            "Straightforward, no-nonsense, and factual",
            "You are a direct and efficient career advisor. Be straightforward, factual, and "
            "concise. Focus on clear information and actionable insights without unnecessary "
            "fluff.",
        ),
        Tone(
            "counsellor",
            "Counsellor",
            "Empathetic, supportive, and guidance-focused",
            "You are an empathetic career counsellor. Use a warm, supportive, and understanding "
            "tone. Help the user explore their options thoughtfully and provide gentle guidance. "
            "Show empathy and understanding for their situation.",
        ),
        Tone(
            "coach",
            "Coach",
            "Motivational, action-oriented, and goal-focused",
            "You are a motivational career coach. Use an energetic, action-oriented tone. Focus "
            "on goals, action plans, and motivation. Help the user see their potential and "
            "create a clear path forward.",
        ),
        Tone(
            "analyst",
            "Analyst",
            "Data-driven, structured, and detailed",
            "You are a data-driven career analyst. Use a structured, analytical approach. "
            "Provide detailed insights, data-backed recommendations, and comprehensive analysis. "
            "Be thorough and precise in your assessments.",
        ),
    )
}

ANALYSIS_METHODS: dict[str, AnalysisMethod] = {
    m.value: m
    for m in (
        AnalysisMethod(
            "structured",
            "Structured Analysis",
            "Extract courses, grades, and achievements in a structured format",
            "Analyze the transcript and extract:\n"
            "- All courses with their grades\n"
            "- Academic achievements and honors\n"
            "- GPA or academic standing\n"
            "- Areas of study/majors\n"
            "- Any notable patterns or trends",
        ),
        AnalysisMethod(
            "strengths",
            "Strengths & Weaknesses",
            "Identify strong, weak, and mid-performing areas",
            "Analyze the transcript to identify:\n"
            "- Strong points: Subjects/courses where performance is excellent\n"
            "- Weak points: Areas needing improvement\n"
            "- Mid points: Average or developing areas\n"
            "- Provide specific examples and actionable insights for each category",
        ),
        AnalysisMethod(
            "career",
            "Career Path Suggestions",
            "Generate career path recommendations based on transcript",
            "Based on the transcript analysis, provide:\n"
            "- Recommended career paths that align with academic strengths\n"
            "- Industry sectors that match the user's profile\n"
            "- Job roles that would be a good fit\n"
            "- Growth opportunities and career progression paths",
        ),
        AnalysisMethod(
            "resources",
            "Resources & Schools",
            "Curate learning resources and school/course recommendations",
            "Provide comprehensive recommendations:\n"
            "- Online learning resources (courses, platforms, certifications)\n"
            "- Schools and universities with relevant programs\n"
            "- Specific courses or programs that would benefit the user\n"
            "- Skill development opportunities\n"
            "- Include links or specific names when possible",
        ),
        AnalysisMethod(
            "combinations",
            "Skill Combinations",
            "Suggest optimal skill combinations based on transcript",
            "Analyze the transcript and suggest:\n"
            "- Optimal skill combinations based on academic performance\n"
            "- Complementary skills that would enhance the user's profile\n"
            "- Unique value propositions from combining different strengths\n"
            "- Strategic skill development paths",
        ),
    )
}

DEFAULT_INSTRUCTIONS = "Analyze the transcript comprehensively and provide detailed insights."

_OUTPUT_CONTRACT = """\
Please provide a comprehensive analysis and guidance based on the above information.

OUTPUT CONTRACT (STRICT, do not omit any section):

## Comprehensive Analysis and Guidance

### 1. PDF Report Summary
- Extract and summarize key information from the PDF document provided.
- Highlight important details, achievements, and relevant data points from the PDF.

### 2. Course Classification for Masters Programs
- Classify all courses from the transcript according to what one can do in Masters programs.
- Group courses by relevant Masters degree fields/disciplines.
- Identify which courses align with potential Masters specializations.

### 3. Summarized Course Table
- Provide a comprehensive table summarizing all courses from the transcript.
- Include columns for: Course Name, Grade/Score, Classification (for Masters), \
Strength Indicator (Strong/Weak/Average).
- Clearly spot and mark weak courses and strong courses.
- Calculate averages where applicable.

### 4. Highest Average Course Analysis
- Identify the course or course category with the highest average performance.
- Based on this highest performing area, provide detailed recommendations:

#### Masters-Level Course Recommendations
- List specific Masters-level courses the person can undertake based on their strongest area.
- Explain how their strong performance translates to Masters readiness.

#### Resources and Tools for Study
- Recommend specific resources (books, online courses, platforms, tools) to further develop \
their strongest area.
- Include practical learning resources and study materials.

#### University Recommendations
- List universities that best offer courses/programs in the person's strongest area.
- Separate recommendations into:
  - Universities with scholarship opportunities (include scholarship names/types if known)
  - Universities without scholarship requirements (non-scholarship options)
- Include brief rationale for each recommendation.

### 5. Key Insights from the Transcript
- Provide at least 3 concrete bullet points summarizing the student's overall performance.

### 6. Strengths
- Provide at least 2 bullets naming specific subjects/areas and why they are strengths.

### 7. Weaknesses
- Provide at least 2 bullets naming specific subjects/areas and what needs improvement.

### 8. Areas for Development
- Provide at least 2 bullets with targeted skills or knowledge gaps to improve.

### 9. Career Path Suggestions
- Provide at least 2 bullets naming potential roles/paths and the rationale from the transcript.

### 10. Recommended Resources and Educational Opportunities
- Provide at least 3 bullets. Name specific courses, platforms, schools, or programs \
(with brief reason).

### 11. Actionable Next Steps
- Provide at least 3 concise, personalized actions tied to their transcript evidence.

### 12. Conclusion
- 2-3 sentence wrap-up referencing the student's profile.

RENDERING RULES:
- Use markdown headers (##, ###) and bullet points (- ) exactly as shown.
- Use markdown tables for the course summary table (| Course | Grade | Classification | Strength |).
- NEVER leave a section blank. If a section truly has no evidence, write: \
"- Not found in transcript; recommend collecting this information." but still include at least \
one bullet.
- Prefer subject names and scores found in the transcript. If only partial info exists, state \
it clearly.
- Keep the tone aligned with the selected style; be specific and user-focused.
- For the course table, use clear indicators like "Strong", "Weak", or "Average" in the \
Strength column.
- Ensure all Masters-related recommendations are directly tied to the highest average \
course/category identified."""

_FOLLOW_UP_SYSTEM = """

IMPORTANT CONTEXT: This is a follow-up question. The user has already received their initial \
comprehensive transcript analysis with all the breakdowns, strengths, weaknesses, career paths, \
and resources.

Your role now is to have a natural, conversational dialogue. Do NOT:
- Repeat the full analysis or breakdown
- List all strengths/weaknesses again
- Provide another comprehensive overview

DO:
- Answer their specific question directly
- Reference relevant parts of the previous analysis when helpful
- Have a natural conversation matching the selected tone
- Be concise and focused on what they're asking
- ONLY ANSWER QUESTIONS RELATED TO THE TRANSCRIPT AND ADDITIONAL CONTEXT IF ANY. If a question \
is not related to the transcript or additional context, politely decline and suggest a question \
that is.
- DO NOT HALLUCINATE ANY INFORMATION. If you don't know the answer, politely decline and suggest \
a question related to the transcript.
- INSIGHTS SHOULD BE DATA DRIVEN AND BASED ON THE TRANSCRIPT AND ADDITIONAL CONTEXT IF ANY. \
Avoid personal opinions, biases or subjective judgements.
- Use the conversation history to understand context"""

_INITIAL_SYSTEM = (
    "\n\nIMPORTANT: This is the initial transcript analysis. Provide a comprehensive, "
    "well-structured breakdown with clear sections using markdown formatting. Include all key "
    "insights, strengths, weaknesses, career suggestions, and resources."
)


def build_system_prompt(tone: str = "casual") -> str:
    """Return the system prompt for a tone; unknown tones fall back to casual."""
    return TONES.get(tone.lower(), TONES["casual"]).system_prompt


def build_analysis_instructions(method: str | None) -> str:
    """Return the instructions for an analysis method, or the comprehensive default."""
    if not method:
        return DEFAULT_INSTRUCTIONS
    config = ANALYSIS_METHODS.get(method.lower())
    return config.instruction if config is not None else DEFAULT_INSTRUCTIONS


def build_initial_analysis_prompt(
    transcript_text: str,
    additional_context: str = "",
    analysis_method: str | None = None,
) -> str:
    """Build the user prompt for the first, structured analysis."""
    sections: list[str] = []
    if transcript_text.strip():
        sections.append(f"TRANSCRIPT CONTENT:\n{transcript_text.strip()}")
    if additional_context.strip():
        sections.append(f"ADDITIONAL CONTEXT:\n{additional_context.strip()}")
    if analysis_method:
        sections.append(f"ANALYSIS REQUIREMENTS:\n{build_analysis_instructions(analysis_method)}")
    sections.append(_OUTPUT_CONTRACT)
    return "\n\n".join(sections).strip()


def build_follow_up_prompt(question: str) -> str:
    """Build the conversational prompt for a follow-up question."""
    return (
        f"Based on the previous analysis of my transcript, {question.strip()}\n\n"
        "Please provide a conversational response that directly addresses my question. "
        "Reference relevant information from the previous analysis when helpful, but focus on "
        "answering my specific question in a natural, helpful way."
    )


def build_messages(
    transcript_text: str,
    additional_context: str = "",
    tone: str = "casual",
    analysis_method: str | None = None,
    history: list[ChatMessage] | None = None,
    *,
    is_follow_up: bool = False,
) -> list[ChatMessage]:
    """Assemble system prompt, prior turns, and the current user prompt."""
    history = history or []
    system_prompt = build_system_prompt(tone)
    if is_follow_up and history:
        system_prompt += _FOLLOW_UP_SYSTEM
    else:
        system_prompt += _INITIAL_SYSTEM

    messages: list[ChatMessage] = [{"role": "system", "content": system_prompt}]
    messages.extend(history)
    if is_follow_up:
        user_prompt = build_follow_up_prompt(additional_context)
    else:
        user_prompt = build_initial_analysis_prompt(
            transcript_text, additional_context, analysis_method
        )
    messages.append({"role": "user", "content": user_prompt})
    return messages


def available_tones() -> list[Tone]:
    return list(TONES.values())


def available_analysis_methods() -> list[AnalysisMethod]:
    return list(ANALYSIS_METHODS.values())
