"""Prompt templates for the extraction stages.

Templates use ``{placeholder}`` markers filled with :func:`render`. All
values are substituted in one pass, so braces inside a value are never re-expanded.
"""

from __future__ import annotations

import re

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

SUMMARY_PROMPT = """You are an expert at summarizing meetings. Analyze the transcript and produce a thorough summary.

Meeting title: {title}
Participants: {participants}
Duration: {duration}

Extract BOTH kinds of decisions:
1. Decisions already made (status: "decided")
2. PENDING decisions that still have to be made (status: "pending"), e.g. "choose a supplier", "compare prices", "settle the budget"

Extract BOTH kinds of open questions:
1. Explicit questions (type: "explicit") that were asked directly
2. IMPLICIT questions (type: "implicit") for missing information, e.g. "How many units?", "Which supplier?", "What does it cost?"

Respond with this JSON object:
{
  "overview": "2-3 sentence overview of the meeting",
  "keyPoints": ["Point 1", "Point 2"],
  "decisions": [
    {
      "text": "Decision or pending decision",
      "context": "Short context",
      "participants": ["Name1", "Name2"],
      "status": "decided" | "pending",
      "suggestedAction": "Next step (for pending decisions)",
      "assigneeName": "Responsible person or null"
    }
  ],
  "openQuestions": [
    {
      "text": "Open question (explicit or implicit)",
      "askedBy": "Name or null",
      "type": "explicit" | "implicit",
      "context": "Why it matters / what is missing",
      "assigneeName": "Person who should answer or null"
    }
  ]
}

After the JSON object, list the action items agreed in the meeting as a markdown section:
## Action Items
- [ ] Task description (Assignee: Name)

Rules:
- For orders and lists, check for missing details (quantity, unit, supplier, price, deadline)
- Missing details become implicit questions AND pending decisions
- Do not invent information
- assigneeName: set it when a person is explicitly named to do, clarify or decide something

Transcript:
{transcript}
"""

PROJECT_CONTEXT_SECTION = """

Project structure (if mentioned):
{project_files}

Detected file references:
{file_matches}

Link mentioned files and components to their real paths in the project.
"""

DECISION_PROMPT = """Analyze the meeting transcript and extract decisions.

1. Decisions already made (status: "decided"): explicit decisions, agreements, commitments, approvals of proposals.
2. PENDING decisions (status: "pending"): places where a decision still has to be made, e.g. an order without a supplier, several options mentioned, a price-relevant item without a budget, unclear ownership or an open deadline. Every pending decision needs a suggestedAction.

Respond with a JSON array only:
[
  {
    "text": "The decision",
    "status": "decided" | "pending",
    "context": "Context or rationale",
    "participants": ["Names if mentioned"],
    "suggestedAction": "Recommended next step (pending only)",
    "assigneeName": "Responsible person or null"
  }
]

Transcript:
{transcript}
"""

QUESTION_PROMPT = """Analyze the meeting transcript and extract open questions.

1. Explicit open questions: direct questions that were not answered, items marked "to be clarified", stated uncertainties.
2. IMPLICIT open questions: missing information phrased as a question, e.g. quantities without units, products without a supplier, prices not named, vague dates, unclear ownership, missing delivery details.

Respond with a JSON array only:
[
  {
    "text": "The question, clear and specific",
    "askedBy": "Name or null",
    "type": "explicit" | "implicit",
    "context": "Why this question matters / what is missing",
    "assigneeName": "Person who should answer or null"
  }
]

Transcript:
{transcript}
"""

TASK_PROMPT = """You are an expert at extracting tasks from meeting transcripts.

Only extract FUTURE tasks: work to be done AFTER the meeting. Anything already done during the meeting (a presentation that was given, a discussion that took place) is not a task.

Extract explicit tasks ("we should...", "can you...", action items, direct instructions) and implicit tasks that follow from context (an order implies "place the order with the supplier", an event implies "organize the event").

Create only ONE task per topic even if it is mentioned several times, e.g. "set up a working group" = "form the working group" = "establish a taskforce".

For each task:
{
  "title": "Action-oriented title",
  "assigneeName": "Person or null",
  "dueDate": "Deadline as text or null",
  "priority": "high" | "medium" | "low",
  "sourceText": "Original transcript excerpt",
  "confidence": 0.5-1.0,
  "type": "explicit" | "implicit",
  "linkedFile": "File path if relevant or null"
}

Rules:
- confidence 0.8-1.0 for explicit tasks, 0.5-0.8 for implicit ones
- If there are no tasks, respond with []
- Respond ONLY with the JSON array
{project_context}
Transcript:
{transcript}
"""

TASK_PROJECT_CONTEXT_SECTION = """
Project context:
Known files in the project:
{files}

File references detected in the transcript:
{matches}

When a task concerns one of these files, use the exact path in the title and set "linkedFile".
"""

FOLLOW_UP_EMAIL_PROMPT = """Write a professional follow-up email for the following meeting.

Meeting: {title}
Date: {date}
Participants: {participants}

Summary:
{overview}

Key points:
{key_points}

Decisions:
{decisions}

Tasks:
{tasks}

Open questions:
{questions}

Write a short, professional email with a subject line, greeting, brief summary, the task list with owners, next steps and a sign-off. Output the email only, without extra commentary.
"""


def render(template: str, transcript: str | None = None, **fields: str) -> str:
    """Fill ``{name}`` placeholders in *template* in a single pass.

    Unknown placeholders are left as they are.
    """
    values = dict(fields)
    if transcript is not None:
        values["transcript"] = transcript
    return _PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), m.group(0)), template)
