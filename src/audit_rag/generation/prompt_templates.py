"""All prompt templates for the audit findings assistant."""

from audit_rag.config.constants import DOMAIN_TERMS, PROJECT_TYPES, SEVERITIES, STATUSES

INTENT_RECOGNITION_PROMPT = """You are an intent recognition system for an audit findings database of a real estate company in Indonesia.

DOMAIN GLOSSARY (acronym: expansions):
{glossary}

Analyze the user's query and extract:
1. The core intent (what the user wants to know or do)
2. Filters to apply (severity, status, year, project type, department, keywords)
3. Whether the query needs analysis or reasoning rather than plain data retrieval

User Query: "{query}"

Respond in JSON format:
{{
  "intent": "brief description of what the user wants",
  "filters": {{
    "severity": [{severities}] or null,
    "status": [{statuses}] or null,
    "year": 2024 or null,
    "projectType": "Hotel" or null,
    "department": "string" or null,
    "keywords": ["word1", "word2"] or null
  }},
  "requiresAnalysis": true/false,
  "confidence": 0.0-1.0
}}

RULES FOR DOMAIN TERMS:
- When the query contains a domain acronym, put the acronym, its full Indonesian term and its English meaning in "keywords", and set requiresAnalysis=true.
- When the query contains an Indonesian real estate term you do not recognize, put it verbatim in "keywords" together with likely expansions and translations, and set requiresAnalysis=true.
- Example: "show me findings about PPJB in 2024" -> keywords: ["PPJB", "Perjanjian Pengikatan Jual Beli", "binding sale agreement", "purchase agreement"], year: 2024, requiresAnalysis: true

RULES FOR DEPARTMENTS:
- Department names (IT, HR, Finance, Accounting, Marketing, Sales, Operations, Legal, Procurement, Admin, Engineering, R&D) go in "department" in proper case.
- Never put department names in "keywords".
- Example: "HR department issues 2024" -> department: "HR", year: 2024, keywords: null

Valid severity values: {severity_values}
Valid status values: {status_values}
Valid project types: {project_types}

Recognize synonyms:
- "critical", "urgent", "severe", "highest risk" -> Critical severity
- "high priority", "important" -> High severity
- "open", "pending", "new" -> Open status
- "closed", "resolved", "completed" -> Closed status

Set requiresAnalysis=true if the query asks for recommendations, analysis, patterns, trends, comparisons, predictions, explanations, insights or summaries, asks "why", "how should" or "what should", or carries search keywords.
Set requiresAnalysis=false for plain listing, counting or filtering by year, status or severity only.

Respond ONLY with valid JSON, no other text."""

ANSWER_GENERATION_PROMPT = """You are an AI assistant analyzing audit findings data.

User Question: {question}

User Intent: {intent}

Context (Relevant Findings):
{context}

---

Based on the findings above, provide a comprehensive answer to the user's question.
Include specific references to findings when relevant.
Be accurate and complete in your response."""

SESSION_TITLE_PROMPT = """Generate a concise, descriptive title (max 6 words) for a chat session that starts with this message: "{message}"

Rules:
- Maximum 6 words
- No quotes or punctuation at the end
- Capture the main topic or intent
- Use title case

Examples:
"Show me all high priority findings" -> "High Priority Findings Review"
"Analyze project completion rates" -> "Project Completion Analysis"

Title:"""


def format_domain_glossary(terms: dict[str, list[str]] | None = None) -> str:
    """Render the acronym dictionary as one compact line per term."""
    terms = DOMAIN_TERMS if terms is None else terms
    lines = []
    for expansions in terms.values():
        head, *rest = expansions
        lines.append(f"- {head}: {', '.join(rest)}" if rest else f"- {head}")
    return "\n".join(lines)


def build_intent_prompt(query: str) -> str:
    return INTENT_RECOGNITION_PROMPT.format(
        glossary=format_domain_glossary(),
        query=query,
        severities=", ".join(f'"{s}"' for s in SEVERITIES),
        statuses=", ".join(f'"{s}"' for s in STATUSES),
        severity_values=", ".join(SEVERITIES),
        status_values=", ".join(STATUSES),
        project_types=", ".join(PROJECT_TYPES),
    )
